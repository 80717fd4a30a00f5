"""Uniqueness checks that surface as 409 instead of a field error."""

from .exceptions import Conflict


def ensure_unique(queryset, instance=None, **fields):
    """Raise Conflict if another row already holds any of the given values. Empty values are skipped."""
    for field, value in fields.items():
        if value in (None, ""):
            continue
        clash = queryset.filter(**{field: value})
        if instance is not None and instance.pk:
            clash = clash.exclude(pk=instance.pk)
        if clash.exists():
            label = queryset.model._meta.verbose_name.capitalize()
            raise Conflict(f"{label} with this {field.replace('_', ' ')} already exists")
