"""Freight bill serializers."""

from rest_framework import serializers

from .models import FreightBill, FreightBillLine, FreightBillAdjustment


class AdjustmentSerializer(serializers.ModelSerializer):
    type = serializers.CharField(source="adjustment_type")

    class Meta:
        model  = FreightBillAdjustment
        fields = ["type", "description", "amount"]


class AdjustmentInputSerializer(serializers.Serializer):
    # Loose on purpose: invalid entries are filtered by the service, not rejected
    type        = serializers.CharField(required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    amount      = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)


class FreightBillLineSerializer(serializers.ModelSerializer):
    class Meta:
        model  = FreightBillLine
        fields = [
            "consignment_id", "consignment_number", "consignment_date", "destination",
            "charged_weight", "rate", "freight", "hamali", "st_charges",
            "door_delivery", "other_charges", "grand_total",
        ]


class FreightBillSerializer(serializers.ModelSerializer):
    lines       = FreightBillLineSerializer(many=True, read_only=True)
    adjustments = AdjustmentSerializer(many=True, read_only=True)
    party       = serializers.SerializerMethodField()

    class Meta:
        model  = FreightBill
        fields = [
            "id", "bill_number", "bill_date", "billing_branch", "party",
            "lines", "total_amount", "adjustments", "final_amount",
            "status", "created_at", "updated_at",
        ]

    def get_party(self, obj):
        return {
            "customer_id": obj.party_customer_id,
            "name":        obj.party_name,
            "address":     obj.party_address,
            "gst_number":  obj.party_gst_number,
        }


class FreightBillCreateSerializer(serializers.Serializer):
    customer_id     = serializers.UUIDField()
    billing_branch  = serializers.CharField(min_length=2, max_length=50)
    consignment_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)
    adjustments     = AdjustmentInputSerializer(many=True, required=False)


class FreightBillUpdateSerializer(serializers.Serializer):
    adjustments = AdjustmentInputSerializer(many=True)


class BillStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=FreightBill.Status.choices)


class SendEmailSerializer(serializers.Serializer):
    email = serializers.EmailField(required=False, allow_blank=True)
