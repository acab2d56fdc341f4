"""
Firestore query helpers.

Filters travel through the engine as (field, op, value) tuples; these turn
them into keyword-style FieldFilter clauses, which avoids the positional
where() deprecation warning.
"""

from google.cloud.firestore_v1.base_query import FieldFilter


def where_filter(query, field_path: str, op_string: str, value):
    """
    Usage:
        query = where_filter(collection, "status", "in", ["Reported", "Under Review"])
        query = where_filter(query, "availability", "==", "on_duty")
    """
    return query.where(filter=FieldFilter(field_path, op_string, value))


def apply_filters(query, filters):
    """Chain a list of (field, op, value) filters onto a query."""
    for field_path, op_string, value in filters:
        query = where_filter(query, field_path, op_string, value)
    return query
