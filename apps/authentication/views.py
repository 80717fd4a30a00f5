"""Authentication: login, operator registration, profile."""

import re
from django.contrib.auth import get_user_model
from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework import serializers
from drf_spectacular.utils import extend_schema

Operator = get_user_model()

# ── Validators ────────────────────────────────────────────────────────────────
IN_MOBILE_PATTERN = re.compile(r"^[6-9]\d{9}$")


def validate_in_mobile(value):
    if value and not IN_MOBILE_PATTERN.match(value):
        raise serializers.ValidationError("Enter a valid 10-digit Indian mobile number.")


# ── Serializers ───────────────────────────────────────────────────────────────
class OperatorRegisterSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, min_length=8)
    mobile   = serializers.CharField(required=False, allow_blank=True, validators=[validate_in_mobile])

    class Meta:
        model  = Operator
        fields = ["email", "full_name", "mobile", "role", "branch", "password"]

    def create(self, validated_data):
        password = validated_data.pop("password")
        operator = Operator(**validated_data)
        operator.set_password(password)
        operator.save()
        return operator


class OperatorProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model  = Operator
        fields = ["id", "email", "full_name", "mobile", "role", "branch", "created_at"]
        read_only_fields = ["id", "email", "role", "created_at"]


# ── Views ─────────────────────────────────────────────────────────────────────
@extend_schema(tags=["Auth"])
class RegisterView(generics.CreateAPIView):
    """POST /api/auth/register/ — Admins create operator accounts."""
    queryset           = Operator.objects.all()
    serializer_class   = OperatorRegisterSerializer
    permission_classes = [IsAuthenticated]

    def create(self, request, *args, **kwargs):
        if not request.user.is_admin:
            return Response({"error": "Admin only."}, status=status.HTTP_403_FORBIDDEN)
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        operator = serializer.save()
        return Response(
            {"message": "Operator account created.", "id": str(operator.id)},
            status=status.HTTP_201_CREATED,
        )


@extend_schema(tags=["Auth"])
class ProfileView(generics.RetrieveUpdateAPIView):
    """GET/PATCH /api/auth/me/ — Retrieve or update own profile."""
    serializer_class   = OperatorProfileSerializer
    permission_classes = [IsAuthenticated]

    def get_object(self):
        return self.request.user
