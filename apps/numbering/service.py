"""
Atomic per-year numbering.

Each call locks the (series, year) row and bumps it in the same transaction,
so two concurrent bookings can never receive the same number.
"""

import logging

from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from .models import YearlySequence

logger = logging.getLogger("kvl.numbering")


@transaction.atomic
def next_value(series: str, year: int = None) -> int:
    year = year or timezone.localdate().year
    seq, created = YearlySequence.objects.select_for_update().get_or_create(series=series, year=year)
    if created:
        logger.info("Started %s sequence for %s", series, year)
    YearlySequence.objects.filter(pk=seq.pk).update(last_value=F("last_value") + 1)
    seq.refresh_from_db(fields=["last_value"])
    return seq.last_value


def next_consignment_number(year: int = None) -> str:
    """KVL-2025-000042"""
    year = year or timezone.localdate().year
    value = next_value(YearlySequence.Series.CONSIGNMENT, year)
    return f"{settings.KVL_NUMBER_PREFIX}-{year}-{value:06d}"


def next_bill_number(year: int = None) -> str:
    """KVL202500042"""
    year = year or timezone.localdate().year
    value = next_value(YearlySequence.Series.FREIGHT_BILL, year)
    return f"{settings.KVL_NUMBER_PREFIX}{year}{value:05d}"
