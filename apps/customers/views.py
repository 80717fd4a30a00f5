"""Customer registry API."""

import logging
from rest_framework import generics, permissions
from drf_spectacular.utils import extend_schema
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework.filters import SearchFilter, OrderingFilter

from .models import Customer
from .serializers import CustomerSerializer

logger = logging.getLogger("kvl.customers")


# ── GET/POST /api/customers/ ──────────────────────────────────────────────────
@extend_schema(tags=["Customers"], summary="List or create customers")
class CustomerListCreateView(generics.ListCreateAPIView):
    queryset           = Customer.objects.all()
    serializer_class   = CustomerSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends    = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_fields   = ["customer_type", "is_active", "city", "state"]
    search_fields      = ["name", "mobile", "email", "city", "gst_number"]
    ordering_fields    = ["name", "created_at"]

    def perform_create(self, serializer):
        customer = serializer.save()
        logger.info("Customer %s created (%s)", customer.name, customer.mobile)


# ── GET/PUT/PATCH/DELETE /api/customers/{id}/ ─────────────────────────────────
@extend_schema(tags=["Customers"], summary="Retrieve, update or delete a customer")
class CustomerDetailView(generics.RetrieveUpdateDestroyAPIView):
    queryset           = Customer.objects.all()
    serializer_class   = CustomerSerializer
    permission_classes = [permissions.IsAuthenticated]

    def perform_destroy(self, instance):
        logger.info("Customer %s deleted by %s", instance.name, self.request.user.email)
        instance.delete()
