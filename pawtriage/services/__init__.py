"""
Services layer - triage logic lives here, routes only translate HTTP.

DESIGN PRINCIPLE:
- Services contain engine logic, NOT routes
- Every service reaches storage through the RecordStore contract
- Nothing here retries; the invoking trigger owns retry policy
"""
