"""
Fleet models.
Vehicle and Driver availability is a projection of the consignments they are
committed to; FleetRegistry keeps it current.
"""

import uuid
from django.core.validators import MinValueValidator, RegexValidator
from django.db import models

vehicle_number_validator = RegexValidator(
    r"^[A-Z]{2}[0-9]{1,2}[A-Z]{1,2}[0-9]{4}$", "Vehicle number must look like KA01AB1234."
)
mobile_validator  = RegexValidator(r"^[6-9]\d{9}$", "Enter a valid 10-digit mobile number.")
license_validator = RegexValidator(r"^[A-Z]{2}[0-9]{13}$", "License number must look like KA0120230001234.")


class Vehicle(models.Model):

    class Type(models.TextChoices):
        TRUCK     = "TRUCK",     "Truck"
        VAN       = "VAN",       "Van"
        TEMPO     = "TEMPO",     "Tempo"
        PICKUP    = "PICKUP",    "Pickup"
        TRAILER   = "TRAILER",   "Trailer"
        CONTAINER = "CONTAINER", "Container"

    class Status(models.TextChoices):
        AVAILABLE   = "AVAILABLE",   "Available"
        ON_TRIP     = "ON_TRIP",     "On Trip"
        MAINTENANCE = "MAINTENANCE", "Maintenance"

    class Unit(models.TextChoices):
        TON = "TON", "Ton"
        KG  = "KG",  "Kg"

    class Flooring(models.TextChoices):
        YES = "YES", "Yes"
        NO  = "NO",  "No"

    LENGTH_CHOICES = [(n, f"{n} ft") for n in (14, 19, 20, 22, 24, 32, 40)]

    id                  = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    vehicle_number      = models.CharField(max_length=12, unique=True, validators=[vehicle_number_validator])
    vehicle_type        = models.CharField(max_length=10, choices=Type.choices)
    length_feet         = models.PositiveSmallIntegerField(choices=LENGTH_CHOICES)
    flooring_type       = models.CharField(max_length=3, choices=Flooring.choices, default=Flooring.YES)
    capacity_value      = models.DecimalField(max_digits=8, decimal_places=2,
                                              validators=[MinValueValidator(0)])
    capacity_unit       = models.CharField(max_length=3, choices=Unit.choices, default=Unit.TON)
    engine_number       = models.CharField(max_length=30, blank=True)
    chassis_number      = models.CharField(max_length=30, blank=True)
    insurance_policy_no = models.CharField(max_length=40, blank=True)
    insurance_validity  = models.DateField(null=True, blank=True)
    status              = models.CharField(max_length=12, choices=Status.choices, default=Status.AVAILABLE)
    is_active           = models.BooleanField(default=True)
    created_at          = models.DateTimeField(auto_now_add=True)
    updated_at          = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["vehicle_number"]
        indexes  = [models.Index(fields=["status", "is_active"], name="vehicle_status_active_idx")]

    def __str__(self):
        return f"{self.vehicle_number} [{self.status}]"


class Driver(models.Model):

    class Status(models.TextChoices):
        AVAILABLE = "AVAILABLE", "Available"
        ON_TRIP   = "ON_TRIP",   "On Trip"

    id             = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name           = models.CharField(max_length=120)
    mobile         = models.CharField(max_length=10, unique=True, validators=[mobile_validator])
    email          = models.EmailField(unique=True, null=True, blank=True)
    license_number = models.CharField(max_length=15, unique=True, null=True, blank=True,
                                      validators=[license_validator])
    # Lookup only; the consignment owns the assignment
    current_vehicle_id = models.UUIDField(null=True, blank=True)
    status         = models.CharField(max_length=10, choices=Status.choices, default=Status.AVAILABLE)
    is_active      = models.BooleanField(default=True)
    created_at     = models.DateTimeField(auto_now_add=True)
    updated_at     = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes  = [models.Index(fields=["status", "is_active"], name="driver_status_active_idx")]

    def __str__(self):
        return f"{self.name} ({self.mobile})"

    @property
    def current_vehicle(self):
        if not self.current_vehicle_id:
            return None
        return Vehicle.objects.filter(pk=self.current_vehicle_id).first()
