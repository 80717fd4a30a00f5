"""
Consignment — one shipment booking.

Status moves only along TRANSITIONS; party, vehicle and driver blocks are
point-in-time snapshots, not live references. Rows are never hard-deleted.
"""

import uuid
from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone

from apps.customers.snapshots import PartySnapshot
from apps.fleet.snapshots import VehicleSnapshot, DriverSnapshot


class ConsignmentQuerySet(models.QuerySet):

    def live(self):
        return self.filter(is_deleted=False)

    def for_customer(self, customer):
        """Either party references the customer, or (legacy rows) matches on name + mobile."""
        return self.filter(
            Q(consignor_customer=customer)
            | Q(consignee_customer=customer)
            | Q(consignor_name=customer.name, consignor_mobile=customer.mobile)
            | Q(consignee_name=customer.name, consignee_mobile=customer.mobile)
        )

    def unbilled(self):
        return self.live().filter(status=Consignment.Status.DELIVERED, billed_in__isnull=True)


class Consignment(models.Model):

    class Status(models.TextChoices):
        BOOKED                = "BOOKED",                "Booked"
        ASSIGNED              = "ASSIGNED",              "Vehicle Assigned"
        SCHEDULED             = "SCHEDULED",             "Pickup Scheduled"
        IN_TRANSIT            = "IN_TRANSIT",            "In Transit"
        DELIVERED_UNCONFIRMED = "DELIVERED_UNCONFIRMED", "Delivered (unconfirmed)"
        DELIVERED             = "DELIVERED",             "Delivered"
        CANCELLED             = "CANCELLED",             "Cancelled"

    class GstPayableBy(models.TextChoices):
        CONSIGNER   = "CONSIGNER",   "Consigner"
        CONSIGNEE   = "CONSIGNEE",   "Consignee"
        TRANSPORTER = "TRANSPORTER", "Transporter"

    class Risk(models.TextChoices):
        OWNER_RISK   = "OWNER_RISK",   "Owner's Risk"
        CARRIER_RISK = "CARRIER_RISK", "Carrier's Risk"

    class ToPay(models.TextChoices):
        TO_PAY = "TO-PAY", "To Pay"
        TBB    = "TBB",    "To Be Billed"
        PAID   = "PAID",   "Paid"

    class PaymentStatus(models.TextChoices):
        UNBILLED = "UNBILLED", "Unbilled"
        BILLED   = "BILLED",   "Billed"
        PAID     = "PAID",     "Paid"

    class Handling(models.TextChoices):
        GODOWN = "GODOWN", "Godown"
        DOOR   = "DOOR",   "Door"

    TRANSITIONS = {
        Status.BOOKED:                (Status.ASSIGNED, Status.CANCELLED),
        Status.ASSIGNED:              (Status.SCHEDULED, Status.CANCELLED),
        Status.SCHEDULED:             (Status.IN_TRANSIT, Status.CANCELLED),
        Status.IN_TRANSIT:            (Status.DELIVERED_UNCONFIRMED, Status.DELIVERED, Status.CANCELLED),
        Status.DELIVERED_UNCONFIRMED: (Status.DELIVERED, Status.IN_TRANSIT),
        Status.DELIVERED:             (),
        Status.CANCELLED:             (Status.BOOKED,),
    }

    # Statuses in which a consignment holds its vehicle and driver
    ACTIVE_STATUSES = (
        Status.ASSIGNED, Status.SCHEDULED, Status.IN_TRANSIT, Status.DELIVERED_UNCONFIRMED,
    )

    CHARGE_FIELDS = (
        "freight", "hamali", "st_charges", "door_delivery",
        "other_charges", "risk_charges", "service_tax",
    )

    id                 = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    consignment_number = models.CharField(max_length=30, unique=True)
    booking_date       = models.DateTimeField(default=timezone.now)
    booking_branch     = models.CharField(max_length=80, blank=True)

    # Consignor snapshot
    consignor_customer   = models.ForeignKey("customers.Customer", on_delete=models.SET_NULL,
                                             null=True, blank=True, related_name="consignments_sent")
    consignor_name       = models.CharField(max_length=120)
    consignor_address    = models.CharField(max_length=255)
    consignor_mobile     = models.CharField(max_length=15)
    consignor_email      = models.EmailField(blank=True)
    consignor_gst_number = models.CharField(max_length=15, blank=True)

    # Consignee snapshot
    consignee_customer   = models.ForeignKey("customers.Customer", on_delete=models.SET_NULL,
                                             null=True, blank=True, related_name="consignments_received")
    consignee_name       = models.CharField(max_length=120)
    consignee_address    = models.CharField(max_length=255)
    consignee_mobile     = models.CharField(max_length=15)
    consignee_email      = models.EmailField(blank=True)
    consignee_gst_number = models.CharField(max_length=15, blank=True)

    from_city    = models.CharField(max_length=80)
    to_city      = models.CharField(max_length=80)

    # Cargo
    description    = models.CharField(max_length=255)
    packages       = models.PositiveIntegerField(default=1)
    package_type   = models.CharField(max_length=40, blank=True)
    actual_weight  = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    charged_weight = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    value          = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"),
                                         validators=[MinValueValidator(0)])
    rate           = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)

    # Charges; grand_total is always their sum
    freight       = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"), validators=[MinValueValidator(0)])
    hamali        = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"), validators=[MinValueValidator(0)])
    st_charges    = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"), validators=[MinValueValidator(0)])
    door_delivery = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"), validators=[MinValueValidator(0)])
    other_charges = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"), validators=[MinValueValidator(0)])
    risk_charges  = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"), validators=[MinValueValidator(0)])
    service_tax   = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"), validators=[MinValueValidator(0)])
    grand_total   = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))

    # Classification
    gst_payable_by   = models.CharField(max_length=12, choices=GstPayableBy.choices, default=GstPayableBy.CONSIGNER)
    risk             = models.CharField(max_length=12, choices=Risk.choices, default=Risk.OWNER_RISK)
    to_pay           = models.CharField(max_length=6, choices=ToPay.choices, default=ToPay.TO_PAY)
    insurance        = models.BooleanField(default=False)
    type_of_pickup   = models.CharField(max_length=6, choices=Handling.choices, default=Handling.GODOWN)
    type_of_delivery = models.CharField(max_length=6, choices=Handling.choices, default=Handling.GODOWN)
    pan              = models.CharField(max_length=10, blank=True)
    invoice_number   = models.CharField(max_length=40, blank=True)
    eway_bill_number = models.CharField(max_length=20, blank=True)

    # Vehicle snapshot (plain ids, no FK: the fleet record may change or vanish)
    vehicle_id                  = models.UUIDField(null=True, blank=True, db_index=True)
    vehicle_number              = models.CharField(max_length=12, blank=True)
    vehicle_engine_number       = models.CharField(max_length=30, blank=True)
    vehicle_chassis_number      = models.CharField(max_length=30, blank=True)
    vehicle_insurance_policy_no = models.CharField(max_length=40, blank=True)
    vehicle_insurance_validity  = models.DateField(null=True, blank=True)

    # Driver snapshot
    driver_id     = models.UUIDField(null=True, blank=True, db_index=True)
    driver_name   = models.CharField(max_length=120, blank=True)
    driver_mobile = models.CharField(max_length=15, blank=True)

    # Lifecycle
    status              = models.CharField(max_length=25, choices=Status.choices, default=Status.BOOKED)
    assigned_at         = models.DateTimeField(null=True, blank=True)
    pickup_date         = models.DateTimeField(null=True, blank=True)
    pickup_time         = models.CharField(max_length=10, blank=True)
    pickup_instructions = models.TextField(blank=True)
    actual_pickup_date  = models.DateTimeField(null=True, blank=True)
    actual_pickup_time  = models.CharField(max_length=10, blank=True)
    transit_notes       = models.TextField(blank=True)
    delivery_date       = models.DateTimeField(null=True, blank=True)
    delivery_time       = models.CharField(max_length=10, blank=True)
    delivered_by        = models.CharField(max_length=120, blank=True)
    proof_of_delivery   = models.TextField(blank=True)

    # Billing linkage
    billed_in            = models.ForeignKey("billing.FreightBill", on_delete=models.SET_NULL,
                                             null=True, blank=True, related_name="billed_consignments")
    billed_date          = models.DateTimeField(null=True, blank=True)
    payment_status       = models.CharField(max_length=8, choices=PaymentStatus.choices,
                                            default=PaymentStatus.UNBILLED)
    payment_receipt_status = models.BooleanField(default=False)
    payment_receipt_date   = models.DateTimeField(null=True, blank=True)

    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
                                   null=True, blank=True, related_name="+")
    updated_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
                                   null=True, blank=True, related_name="+")

    # Soft delete
    is_deleted = models.BooleanField(default=False)
    deleted_at = models.DateTimeField(null=True, blank=True)
    deleted_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
                                   null=True, blank=True, related_name="+")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ConsignmentQuerySet.as_manager()

    class Meta:
        ordering = ["-booking_date"]
        indexes  = [
            models.Index(fields=["status", "is_deleted"], name="consignment_status_idx"),
            models.Index(fields=["vehicle_id", "status"], name="consignment_vehicle_idx"),
            models.Index(fields=["driver_id", "status"], name="consignment_driver_idx"),
            models.Index(fields=["payment_status"], name="consignment_payment_idx"),
            models.Index(fields=["booking_date"], name="consignment_booked_idx"),
        ]

    def __str__(self):
        return f"{self.consignment_number} [{self.status}]"

    def save(self, *args, **kwargs):
        self.grand_total = self.compute_grand_total()
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "grand_total" not in update_fields:
            kwargs["update_fields"] = list(update_fields) + ["grand_total"]
        super().save(*args, **kwargs)

    def compute_grand_total(self) -> Decimal:
        return sum((Decimal(getattr(self, name) or 0) for name in self.CHARGE_FIELDS), Decimal("0"))

    def can_transition_to(self, status) -> bool:
        return status in self.TRANSITIONS.get(self.status, ())

    # ── Snapshot views ────────────────────────────────────────────────────────
    @property
    def consignor(self) -> PartySnapshot:
        return PartySnapshot.read(self, "consignor")

    @property
    def consignee(self) -> PartySnapshot:
        return PartySnapshot.read(self, "consignee")

    @property
    def vehicle_snapshot(self):
        return VehicleSnapshot.read(self, "vehicle")

    @property
    def driver_snapshot(self):
        return DriverSnapshot.read(self, "driver")

    @property
    def route(self) -> str:
        return f"{self.from_city} → {self.to_city}"

    @property
    def estimated_delivery(self):
        if not self.pickup_date:
            return None
        return self.pickup_date + timedelta(days=settings.KVL_ESTIMATED_TRANSIT_DAYS)
