"""Fleet serializers."""

from rest_framework import serializers

from apps.common.uniqueness import ensure_unique
from .models import Vehicle, Driver, vehicle_number_validator, mobile_validator, license_validator


class VehicleSerializer(serializers.ModelSerializer):
    class Meta:
        model  = Vehicle
        fields = [
            "id", "vehicle_number", "vehicle_type", "length_feet", "flooring_type",
            "capacity_value", "capacity_unit",
            "engine_number", "chassis_number", "insurance_policy_no", "insurance_validity",
            "status", "is_active", "created_at", "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
        extra_kwargs = {"vehicle_number": {"validators": [vehicle_number_validator]}}

    def to_internal_value(self, data):
        if isinstance(data, dict) and data.get("vehicle_number"):
            data = {**data, "vehicle_number": str(data["vehicle_number"]).upper().replace(" ", "")}
        return super().to_internal_value(data)

    def validate(self, data):
        ensure_unique(Vehicle.objects.all(), self.instance, vehicle_number=data.get("vehicle_number"))
        return data


class DriverSerializer(serializers.ModelSerializer):
    current_vehicle_number = serializers.SerializerMethodField()

    class Meta:
        model  = Driver
        fields = [
            "id", "name", "mobile", "email", "license_number",
            "current_vehicle_id", "current_vehicle_number",
            "status", "is_active", "created_at", "updated_at",
        ]
        read_only_fields = ["id", "current_vehicle_id", "created_at", "updated_at"]
        extra_kwargs = {
            "mobile":         {"validators": [mobile_validator]},
            "email":          {"validators": []},
            "license_number": {"validators": [license_validator]},
        }

    def get_current_vehicle_number(self, obj):
        vehicle = obj.current_vehicle
        return vehicle.vehicle_number if vehicle else None

    def validate_email(self, value):
        return value.lower() if value else None

    def validate_license_number(self, value):
        return value or None

    def validate(self, data):
        ensure_unique(
            Driver.objects.all(), self.instance,
            mobile=data.get("mobile"),
            email=data.get("email"),
            license_number=data.get("license_number"),
        )
        return data


class AttachVehicleSerializer(serializers.Serializer):
    vehicle_id = serializers.UUIDField()
