"""
LoadChalan — truck-trip manifest.

Totals and balance are derived and recomputed on every save; callers never
set them. Status only moves forward.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

from apps.fleet.snapshots import VehicleSnapshot, DriverSnapshot


def _money(**kwargs):
    return models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"), **kwargs)


class LoadChalan(models.Model):

    class Status(models.TextChoices):
        CREATED    = "CREATED",    "Created"
        DISPATCHED = "DISPATCHED", "Dispatched"
        IN_TRANSIT = "IN_TRANSIT", "In Transit"
        ARRIVED    = "ARRIVED",    "Arrived"
        CLOSED     = "CLOSED",     "Closed"

    ORDER = (Status.CREATED, Status.DISPATCHED, Status.IN_TRANSIT, Status.ARRIVED, Status.CLOSED)
    DERIVED_FIELDS = ("total_lr_count", "total_packages", "total_weight", "total_freight", "balance_freight")

    id              = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    chalan_number   = models.CharField(max_length=30, unique=True)
    date            = models.DateTimeField(default=timezone.now)
    booking_branch  = models.CharField(max_length=80)
    destination_hub = models.CharField(max_length=80)
    dispatch_time   = models.CharField(max_length=20, blank=True)
    status          = models.CharField(max_length=12, choices=Status.choices, default=Status.CREATED)

    # Vehicle snapshot
    vehicle_id                  = models.UUIDField(null=True, blank=True, db_index=True)
    vehicle_number              = models.CharField(max_length=12, blank=True)
    vehicle_engine_number       = models.CharField(max_length=30, blank=True)
    vehicle_chassis_number      = models.CharField(max_length=30, blank=True)
    vehicle_insurance_policy_no = models.CharField(max_length=40, blank=True)
    vehicle_insurance_validity  = models.DateField(null=True, blank=True)

    owner_name    = models.CharField(max_length=120, blank=True)
    owner_address = models.CharField(max_length=255, blank=True)

    # Driver snapshot
    driver_id             = models.UUIDField(null=True, blank=True, db_index=True)
    driver_name           = models.CharField(max_length=120, blank=True)
    driver_mobile         = models.CharField(max_length=15, blank=True)
    driver_license_number = models.CharField(max_length=20, blank=True)
    cleaner_name          = models.CharField(max_length=120, blank=True)

    # Derived totals
    total_lr_count = models.PositiveIntegerField(default=0)
    total_packages = models.PositiveIntegerField(default=0)
    total_weight   = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    total_freight  = _money()

    # Charges / settlement
    lorry_freight     = _money()
    loading_charges   = _money()
    unloading_charges = _money()
    other_charges     = _money()
    advance_paid      = _money()
    tds_deduction     = _money()
    balance_freight   = _money()
    frt_payable_at    = models.CharField(max_length=80, blank=True)

    remarks    = models.TextField(blank=True)
    risk_note  = models.CharField(max_length=40, blank=True)
    posting_by = models.CharField(max_length=120, blank=True)

    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
                                   null=True, blank=True, related_name="+")
    updated_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
                                   null=True, blank=True, related_name="+")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date"]
        indexes  = [
            models.Index(fields=["status"], name="chalan_status_idx"),
            models.Index(fields=["date"], name="chalan_date_idx"),
            models.Index(fields=["destination_hub"], name="chalan_hub_idx"),
        ]

    def __str__(self):
        return f"{self.chalan_number} [{self.status}]"

    def save(self, *args, **kwargs):
        # A row being inserted has no lines yet
        if self._state.adding:
            self.balance_freight = Decimal(self.total_freight) - Decimal(self.advance_paid or 0) - Decimal(self.tds_deduction or 0)
        else:
            self.recalculate()
        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            kwargs["update_fields"] = set(update_fields) | set(self.DERIVED_FIELDS)
        super().save(*args, **kwargs)

    def recalculate(self):
        lines = list(self.lines.all())
        self.total_lr_count  = len(lines)
        self.total_packages  = sum(line.packages or 0 for line in lines)
        self.total_weight    = sum((line.weight or Decimal("0") for line in lines), Decimal("0"))
        self.total_freight   = sum((line.freight_amount or Decimal("0") for line in lines), Decimal("0"))
        self.balance_freight = (
            Decimal(self.total_freight) - Decimal(self.advance_paid or 0) - Decimal(self.tds_deduction or 0)
        )
        return self

    @property
    def vehicle_snapshot(self):
        return VehicleSnapshot.read(self, "vehicle")

    @property
    def driver_snapshot(self):
        return DriverSnapshot.read(self, "driver")


class LoadChalanLine(models.Model):
    """One consignment as loaded on the truck."""
    id                 = models.BigAutoField(primary_key=True)
    chalan             = models.ForeignKey(LoadChalan, on_delete=models.CASCADE, related_name="lines")
    consignment_id     = models.UUIDField(db_index=True)
    consignment_number = models.CharField(max_length=30)
    packages           = models.PositiveIntegerField(default=0)
    package_type       = models.CharField(max_length=40, blank=True)
    description        = models.CharField(max_length=255, blank=True)
    weight             = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0"))
    freight_amount     = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    destination        = models.CharField(max_length=80, blank=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return self.consignment_number
