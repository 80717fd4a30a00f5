"""Consignment serializers."""

from rest_framework import serializers

from .models import Consignment


class PartySerializer(serializers.Serializer):
    """Consignor / consignee block. `customer_id` pulls defaults from the customer master."""
    customer_id = serializers.UUIDField(required=False, allow_null=True)
    name        = serializers.CharField(max_length=120, required=False, allow_blank=True)
    address     = serializers.CharField(max_length=255, required=False, allow_blank=True)
    mobile      = serializers.CharField(max_length=15, required=False, allow_blank=True)
    email       = serializers.EmailField(required=False, allow_blank=True)
    gst_number  = serializers.CharField(max_length=15, required=False, allow_blank=True)

    def validate(self, data):
        if not data.get("customer_id") and not all(data.get(k) for k in ("name", "address", "mobile")):
            raise serializers.ValidationError("Provide customer_id or name, address and mobile.")
        return data


def _party_out(consignment, prefix):
    return {
        "customer_id": getattr(consignment, f"{prefix}_customer_id"),
        "name":        getattr(consignment, f"{prefix}_name"),
        "address":     getattr(consignment, f"{prefix}_address"),
        "mobile":      getattr(consignment, f"{prefix}_mobile"),
        "email":       getattr(consignment, f"{prefix}_email"),
        "gst_number":  getattr(consignment, f"{prefix}_gst_number"),
    }


BOOKING_FIELDS = [
    "consignment_number", "booking_date", "booking_branch",
    "from_city", "to_city", "description", "packages", "package_type",
    "actual_weight", "charged_weight", "value", "rate",
    "freight", "hamali", "st_charges", "door_delivery",
    "other_charges", "risk_charges", "service_tax",
    "gst_payable_by", "risk", "to_pay", "insurance",
    "type_of_pickup", "type_of_delivery", "pan", "invoice_number", "eway_bill_number",
]


class ConsignmentCreateSerializer(serializers.ModelSerializer):
    consignor  = PartySerializer()
    consignee  = PartySerializer()
    vehicle_id = serializers.UUIDField(required=False, allow_null=True)
    driver_id  = serializers.UUIDField(required=False, allow_null=True)

    class Meta:
        model  = Consignment
        fields = BOOKING_FIELDS + ["consignor", "consignee", "vehicle_id", "driver_id"]
        extra_kwargs = {
            "consignment_number": {"required": False, "allow_blank": True, "validators": []},
            "booking_date":       {"required": False},
        }


class ConsignmentUpdateSerializer(serializers.ModelSerializer):
    consignor = PartySerializer(required=False)
    consignee = PartySerializer(required=False)

    class Meta:
        model  = Consignment
        fields = [f for f in BOOKING_FIELDS if f != "consignment_number"] + ["consignor", "consignee"]


class ConsignmentDetailSerializer(serializers.ModelSerializer):
    consignor          = serializers.SerializerMethodField()
    consignee          = serializers.SerializerMethodField()
    route              = serializers.CharField(read_only=True)
    estimated_delivery = serializers.DateTimeField(read_only=True)
    billed_in_number   = serializers.CharField(source="billed_in.bill_number", read_only=True, default=None)

    class Meta:
        model  = Consignment
        fields = ["id"] + BOOKING_FIELDS + [
            "consignor", "consignee", "route", "grand_total",
            "vehicle_id", "vehicle_number", "vehicle_engine_number", "vehicle_chassis_number",
            "vehicle_insurance_policy_no", "vehicle_insurance_validity",
            "driver_id", "driver_name", "driver_mobile",
            "status", "assigned_at", "pickup_date", "pickup_time", "pickup_instructions",
            "actual_pickup_date", "actual_pickup_time", "transit_notes",
            "delivery_date", "delivery_time", "delivered_by", "proof_of_delivery",
            "estimated_delivery",
            "billed_in", "billed_in_number", "billed_date", "payment_status",
            "payment_receipt_status", "payment_receipt_date",
            "created_at", "updated_at",
        ]
        read_only_fields = fields

    def get_consignor(self, obj):
        return _party_out(obj, "consignor")

    def get_consignee(self, obj):
        return _party_out(obj, "consignee")


class AssignVehicleSerializer(serializers.Serializer):
    vehicle_id = serializers.UUIDField(required=False, allow_null=True)
    driver_id  = serializers.UUIDField(required=False, allow_null=True)


class AssignDriverSerializer(serializers.Serializer):
    driver_id = serializers.UUIDField()


class SchedulePickupSerializer(serializers.Serializer):
    pickup_date  = serializers.CharField(required=False, allow_blank=True)
    pickup_time  = serializers.CharField(required=False, allow_blank=True)
    instructions = serializers.CharField(required=False, allow_blank=True, default="")


class StatusUpdateSerializer(serializers.Serializer):
    status             = serializers.ChoiceField(choices=Consignment.Status.choices)
    expected_status    = serializers.ChoiceField(choices=Consignment.Status.choices, required=False)
    actual_pickup_date = serializers.CharField(required=False, allow_blank=True)
    actual_pickup_time = serializers.CharField(required=False, allow_blank=True)
    transit_notes      = serializers.CharField(required=False, allow_blank=True)
    proof_of_delivery  = serializers.CharField(required=False, allow_blank=True)
    delivered_by       = serializers.CharField(required=False, allow_blank=True)


class ConfirmDeliverySerializer(serializers.Serializer):
    delivered_by = serializers.CharField(required=False, allow_blank=True)


class PaymentReceiptSerializer(serializers.Serializer):
    receipt_date = serializers.CharField(required=False, allow_blank=True)


class PublicTrackingSerializer(serializers.Serializer):
    consignment_number = serializers.CharField()
    status             = serializers.CharField()
    route              = serializers.CharField()
    booking_date       = serializers.DateTimeField()
    estimated_delivery = serializers.DateTimeField(allow_null=True)
    delivery_date      = serializers.DateTimeField(allow_null=True)
