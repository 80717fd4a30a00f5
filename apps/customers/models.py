"""
Customer registry.
Customers appear on consignments as consignor and/or consignee and are billed
through freight bills.
"""

import uuid
from django.core.validators import RegexValidator
from django.db import models

pincode_validator = RegexValidator(r"^[1-9][0-9]{5}$", "Pincode must be 6 digits.")
mobile_validator  = RegexValidator(r"^[6-9]\d{9}$", "Enter a valid 10-digit mobile number.")
gstin_validator   = RegexValidator(
    r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z]{1}[1-9A-Z]{1}Z[0-9A-Z]{1}$", "Enter a valid GST number."
)
pan_validator     = RegexValidator(r"^[A-Z]{5}[0-9]{4}[A-Z]{1}$", "Enter a valid PAN number.")


class Customer(models.Model):

    class Type(models.TextChoices):
        CONSIGNOR = "CONSIGNOR", "Consignor"
        CONSIGNEE = "CONSIGNEE", "Consignee"
        BOTH      = "BOTH",      "Both"

    id            = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name          = models.CharField(max_length=120)
    address       = models.CharField(max_length=255)
    city          = models.CharField(max_length=80)
    state         = models.CharField(max_length=80)
    pincode       = models.CharField(max_length=6, validators=[pincode_validator])
    mobile        = models.CharField(max_length=10, unique=True, validators=[mobile_validator])
    email         = models.EmailField(unique=True, null=True, blank=True)
    gst_number    = models.CharField(max_length=15, unique=True, null=True, blank=True,
                                     validators=[gstin_validator])
    pan_number    = models.CharField(max_length=10, blank=True, validators=[pan_validator])
    customer_type = models.CharField(max_length=10, choices=Type.choices, default=Type.BOTH)
    is_active     = models.BooleanField(default=True)
    created_at    = models.DateTimeField(auto_now_add=True)
    updated_at    = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes  = [
            models.Index(fields=["name"], name="customer_name_idx"),
            models.Index(fields=["customer_type", "is_active"], name="customer_type_active_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.mobile})"
