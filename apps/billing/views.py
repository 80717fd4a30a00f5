"""Freight bill API views."""

import logging
from rest_framework import generics, status, permissions
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.filters import SearchFilter, OrderingFilter
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema

from apps.common.params import date_param
from apps.consignments.serializers import ConsignmentDetailSerializer
from apps.consignments.service import ConsignmentService
from .models import FreightBill
from .service import BillingService
from . import serializers as sz

logger = logging.getLogger("kvl.billing")
billing_service = BillingService()


# ── GET|POST /api/freight-bills/ ──────────────────────────────────────────────
@extend_schema(tags=["Billing"], summary="List or create freight bills")
class FreightBillListCreateView(generics.ListAPIView):
    serializer_class   = sz.FreightBillSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends    = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_fields   = ["status", "party_customer"]
    search_fields      = ["bill_number", "party_name"]
    ordering_fields    = ["bill_date", "final_amount"]

    def get_queryset(self):
        qs = FreightBill.objects.prefetch_related("lines", "adjustments")
        start = date_param(self.request.query_params, "start_date")
        end   = date_param(self.request.query_params, "end_date")
        if start:
            qs = qs.filter(bill_date__date__gte=start)
        if end:
            qs = qs.filter(bill_date__date__lte=end)
        return qs

    @extend_schema(request=sz.FreightBillCreateSerializer, responses=sz.FreightBillSerializer)
    def post(self, request):
        ser = sz.FreightBillCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        d = ser.validated_data
        bill = billing_service.create(
            d["customer_id"], d["billing_branch"], d["consignment_ids"],
            adjustments=d.get("adjustments"), user=request.user,
        )
        return Response(sz.FreightBillSerializer(bill).data, status=status.HTTP_201_CREATED)


# ── GET|PUT|DELETE /api/freight-bills/{id}/ ───────────────────────────────────
@extend_schema(tags=["Billing"], summary="Retrieve a bill, replace its adjustments, or delete it")
class FreightBillDetailView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        return Response(sz.FreightBillSerializer(billing_service.get(pk)).data)

    @extend_schema(request=sz.FreightBillUpdateSerializer)
    def put(self, request, pk):
        ser = sz.FreightBillUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        bill = billing_service.update_adjustments(pk, ser.validated_data["adjustments"])
        return Response(sz.FreightBillSerializer(bill).data)

    def delete(self, request, pk):
        billing_service.delete(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ── PATCH /api/freight-bills/{id}/status/ ─────────────────────────────────────
@extend_schema(tags=["Billing"], summary="Move a bill forward (or cancel it)", request=sz.BillStatusSerializer)
class FreightBillStatusView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def patch(self, request, pk):
        ser = sz.BillStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        bill = billing_service.update_status(pk, ser.validated_data["status"])
        return Response(sz.FreightBillSerializer(bill).data)

    put = patch


# ── PATCH /api/freight-bills/{id}/mark-paid/ ──────────────────────────────────
@extend_schema(tags=["Billing"], summary="Mark a bill paid", request=None)
class FreightBillMarkPaidView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def patch(self, request, pk):
        return Response(sz.FreightBillSerializer(billing_service.mark_as_paid(pk)).data)

    post = patch


# ── POST /api/freight-bills/{id}/send-email/ ──────────────────────────────────
@extend_schema(tags=["Billing"], summary="Email the bill PDF to the customer", request=sz.SendEmailSerializer)
class FreightBillSendEmailView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        ser = sz.SendEmailSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        bill = billing_service.send_email(pk, ser.validated_data.get("email") or None)
        return Response({"message": "Bill sent successfully", "bill": sz.FreightBillSerializer(bill).data})


# ── GET /api/freight-bills/statistics/ ────────────────────────────────────────
@extend_schema(tags=["Billing"], summary="Bill totals, paid vs pending")
class FreightBillStatisticsView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(billing_service.statistics(
            date_param(request.query_params, "start_date"),
            date_param(request.query_params, "end_date"),
        ))


# ── GET /api/freight-bills/pending-payments/ ──────────────────────────────────
@extend_schema(tags=["Billing"], summary="Bills awaiting payment")
class PendingPaymentsView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        bills, total = billing_service.pending_payments()
        return Response({
            "count":                bills.count(),
            "total_pending_amount": total,
            "results":              sz.FreightBillSerializer(bills, many=True).data,
        })


# ── GET /api/freight-bills/customers/{id}/unbilled-consignments/ ──────────────
@extend_schema(tags=["Billing"], summary="A customer's delivered, unbilled consignments")
class CustomerUnbilledView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, customer_id):
        qs, total = ConsignmentService().unbilled(customer_id)
        return Response({
            "count":       qs.count(),
            "total_value": total,
            "results":     ConsignmentDetailSerializer(qs, many=True).data,
        })


# ── GET /api/freight-bills/{id}/pdf/ ──────────────────────────────────────────
@extend_schema(tags=["Documents"], summary="Freight bill PDF")
class FreightBillPdfView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        from apps.documents.views import pdf_response

        bill = billing_service.get(pk)
        return pdf_response(billing_service.renderer(bill), f"FreightBill-{bill.bill_number}.pdf")
