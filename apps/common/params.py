"""Query-string parsing for list and statistics endpoints."""

import uuid

from django.utils.dateparse import parse_date

from .exceptions import ValidationError


def date_param(params, name):
    """Return the named YYYY-MM-DD query param as a date, or None when absent."""
    value = (params.get(name) or "").strip()
    if not value:
        return None
    try:
        day = parse_date(value)
    except ValueError:
        day = None
    if day is None:
        raise ValidationError(f"Invalid {name}: {value} (expected YYYY-MM-DD)")
    return day


def uuid_param(params, name):
    value = (params.get(name) or "").strip()
    if not value:
        return None
    try:
        return uuid.UUID(value)
    except ValueError:
        raise ValidationError(f"Invalid {name}: {value}")
