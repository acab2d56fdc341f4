"""
Data models for incidents, responders, resources and advisory suggestions.
"""
