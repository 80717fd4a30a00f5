"""Load chalan serializers."""

from rest_framework import serializers

from .models import LoadChalan, LoadChalanLine

CHARGE_FIELDS = [
    "lorry_freight", "loading_charges", "unloading_charges", "other_charges",
    "advance_paid", "tds_deduction", "frt_payable_at",
]
HEADER_FIELDS = [
    "booking_branch", "destination_hub", "dispatch_time",
    "owner_name", "owner_address", "cleaner_name",
    "remarks", "risk_note", "posting_by",
]


class LoadChalanLineSerializer(serializers.ModelSerializer):
    class Meta:
        model  = LoadChalanLine
        fields = [
            "consignment_id", "consignment_number", "packages", "package_type",
            "description", "weight", "freight_amount", "destination",
        ]


class LoadChalanSerializer(serializers.ModelSerializer):
    lines = LoadChalanLineSerializer(many=True, read_only=True)

    class Meta:
        model  = LoadChalan
        fields = ["id", "chalan_number", "date", "status"] + HEADER_FIELDS + [
            "vehicle_id", "vehicle_number", "vehicle_engine_number", "vehicle_chassis_number",
            "vehicle_insurance_policy_no", "vehicle_insurance_validity",
            "driver_id", "driver_name", "driver_mobile", "driver_license_number",
            "lines", "total_lr_count", "total_packages", "total_weight", "total_freight",
        ] + CHARGE_FIELDS + ["balance_freight", "created_at", "updated_at"]
        read_only_fields = fields


class LoadChalanCreateSerializer(serializers.ModelSerializer):
    consignment_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)
    vehicle_id      = serializers.UUIDField()
    driver_id       = serializers.UUIDField(required=False, allow_null=True)

    class Meta:
        model  = LoadChalan
        fields = ["chalan_number", "date", "consignment_ids", "vehicle_id", "driver_id"] + HEADER_FIELDS + CHARGE_FIELDS
        extra_kwargs = {
            "chalan_number": {"validators": []},
            "date":          {"required": False},
        }


class LoadChalanUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model  = LoadChalan
        fields = HEADER_FIELDS + CHARGE_FIELDS


class ChalanStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=LoadChalan.Status.choices)
