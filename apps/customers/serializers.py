"""Customer serializers."""

from rest_framework import serializers

from apps.common.uniqueness import ensure_unique
from .models import Customer, mobile_validator, gstin_validator


class CustomerSerializer(serializers.ModelSerializer):
    class Meta:
        model  = Customer
        fields = [
            "id", "name", "address", "city", "state", "pincode",
            "mobile", "email", "gst_number", "pan_number",
            "customer_type", "is_active", "created_at", "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
        # Duplicates are reported as 409 from validate()
        extra_kwargs = {
            "mobile":     {"validators": [mobile_validator]},
            "email":      {"validators": []},
            "gst_number": {"validators": [gstin_validator]},
        }

    def validate_gst_number(self, value):
        return value.upper() if value else None

    def validate_pan_number(self, value):
        return value.upper()

    def validate_email(self, value):
        return value.lower() if value else None

    def validate(self, data):
        ensure_unique(
            Customer.objects.all(), self.instance,
            mobile=data.get("mobile"),
            email=data.get("email"),
            gst_number=data.get("gst_number"),
        )
        return data
