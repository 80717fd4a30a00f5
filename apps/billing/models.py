"""
FreightBill — one customer's delivered consignments invoiced together.

Lines and the party block are frozen at creation. A consignment id appears in
at most one bill line (enforced by a unique column), so deleting a bill frees
its consignments for re-billing.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone


class FreightBill(models.Model):

    class Status(models.TextChoices):
        DRAFT          = "DRAFT",          "Draft"
        GENERATED      = "GENERATED",      "Generated"
        SENT           = "SENT",           "Sent"
        PARTIALLY_PAID = "PARTIALLY_PAID", "Partially Paid"
        PAID           = "PAID",           "Paid"
        CANCELLED      = "CANCELLED",      "Cancelled"

    # Forward-only order; CANCELLED sits outside it
    PROGRESSION = (
        Status.DRAFT, Status.GENERATED, Status.SENT, Status.PARTIALLY_PAID, Status.PAID,
    )
    TERMINAL = (Status.PAID, Status.CANCELLED)
    PENDING  = (Status.DRAFT, Status.GENERATED, Status.SENT, Status.PARTIALLY_PAID)

    id             = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    bill_number    = models.CharField(max_length=20, unique=True)
    bill_date      = models.DateTimeField(default=timezone.now)
    billing_branch = models.CharField(max_length=50)

    # Party snapshot
    party_customer   = models.ForeignKey("customers.Customer", on_delete=models.SET_NULL,
                                         null=True, blank=True, related_name="freight_bills")
    party_name       = models.CharField(max_length=120)
    party_address    = models.CharField(max_length=500)
    party_gst_number = models.CharField(max_length=15, blank=True)

    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0"))
    final_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0"))
    status       = models.CharField(max_length=15, choices=Status.choices, default=Status.GENERATED)

    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
                                   null=True, blank=True, related_name="+")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-bill_date"]
        indexes  = [
            models.Index(fields=["status"], name="freightbill_status_idx"),
            models.Index(fields=["bill_date"], name="freightbill_date_idx"),
            models.Index(fields=["party_customer"], name="freightbill_party_idx"),
        ]

    def __str__(self):
        return f"{self.bill_number} [{self.status}] ₹{self.final_amount}"

    @property
    def consignment_ids(self):
        return list(self.lines.values_list("consignment_id", flat=True))


class FreightBillLine(models.Model):
    """Snapshot of one consignment as billed."""
    id                 = models.BigAutoField(primary_key=True)
    bill               = models.ForeignKey(FreightBill, on_delete=models.CASCADE, related_name="lines")
    consignment_id     = models.UUIDField(unique=True)
    consignment_number = models.CharField(max_length=30)
    consignment_date   = models.DateTimeField()
    destination        = models.CharField(max_length=100)
    charged_weight     = models.DecimalField(max_digits=10, decimal_places=2)
    rate               = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0"))
    freight            = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    hamali             = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    st_charges         = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    door_delivery      = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    other_charges      = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    grand_total        = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))

    class Meta:
        ordering = ["consignment_date", "id"]

    def __str__(self):
        return f"{self.consignment_number} on {self.bill_id}"


class FreightBillAdjustment(models.Model):

    class Type(models.TextChoices):
        DISCOUNT       = "DISCOUNT",       "Discount"
        EXTRA_CHARGE   = "EXTRA_CHARGE",   "Extra Charge"
        FUEL_SURCHARGE = "FUEL_SURCHARGE", "Fuel Surcharge"
        OTHER          = "OTHER",          "Other"

    id              = models.BigAutoField(primary_key=True)
    bill            = models.ForeignKey(FreightBill, on_delete=models.CASCADE, related_name="adjustments")
    adjustment_type = models.CharField(max_length=15, choices=Type.choices)
    description     = models.CharField(max_length=200)
    amount          = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.adjustment_type} {self.amount}"

    @property
    def signed_amount(self) -> Decimal:
        amount = abs(self.amount)
        return -amount if self.adjustment_type == self.Type.DISCOUNT else amount
