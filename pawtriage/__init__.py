"""
PawTriage - triage and escalation engine for citizen-reported dog incidents.
"""

__version__ = "0.1.0"
