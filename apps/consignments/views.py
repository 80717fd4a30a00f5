"""Consignment API views."""

import logging
from rest_framework import generics, status, permissions
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.filters import SearchFilter, OrderingFilter
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema

from apps.common.params import date_param, uuid_param

from .models import Consignment
from .service import ConsignmentService
from . import serializers as sz

logger = logging.getLogger("kvl.consignments")
consignment_service = ConsignmentService()


def _detail(consignment, code=status.HTTP_200_OK):
    return Response(sz.ConsignmentDetailSerializer(consignment).data, status=code)


# ── GET|POST /api/consignments/ ───────────────────────────────────────────────
@extend_schema(tags=["Consignments"], summary="List or book consignments")
class ConsignmentListCreateView(generics.ListCreateAPIView):
    permission_classes = [permissions.IsAuthenticated]
    filter_backends    = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_fields   = [
        "status", "payment_status", "to_pay", "from_city", "to_city",
        "consignor_customer", "consignee_customer", "vehicle_id", "driver_id",
    ]
    search_fields      = [
        "consignment_number", "consignor_name", "consignee_name",
        "from_city", "to_city", "vehicle_number", "driver_name",
    ]
    ordering_fields    = ["booking_date", "grand_total", "consignment_number"]

    def get_serializer_class(self):
        if self.request.method == "POST":
            return sz.ConsignmentCreateSerializer
        return sz.ConsignmentDetailSerializer

    def get_queryset(self):
        qs = Consignment.objects.live().select_related("billed_in")
        start = date_param(self.request.query_params, "start_date")
        end   = date_param(self.request.query_params, "end_date")
        if start:
            qs = qs.filter(booking_date__date__gte=start)
        if end:
            qs = qs.filter(booking_date__date__lte=end)
        return qs

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        consignment = consignment_service.create(serializer.validated_data, user=request.user)
        return _detail(consignment, status.HTTP_201_CREATED)


# ── GET|PUT|PATCH|DELETE /api/consignments/{id}/ ──────────────────────────────
@extend_schema(tags=["Consignments"], summary="Retrieve, edit or soft-delete a consignment")
class ConsignmentDetailView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        return _detail(consignment_service.get(pk))

    @extend_schema(request=sz.ConsignmentUpdateSerializer)
    def put(self, request, pk):
        return self._update(request, pk, partial=False)

    @extend_schema(request=sz.ConsignmentUpdateSerializer)
    def patch(self, request, pk):
        return self._update(request, pk, partial=True)

    def _update(self, request, pk, partial):
        ser = sz.ConsignmentUpdateSerializer(data=request.data, partial=partial)
        ser.is_valid(raise_exception=True)
        consignment = consignment_service.update(pk, ser.validated_data, user=request.user)
        return _detail(consignment)

    def delete(self, request, pk):
        consignment_service.soft_delete(pk, user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ── POST /api/consignments/{id}/assign-vehicle/ ───────────────────────────────
@extend_schema(tags=["Consignments"], summary="Assign vehicle and driver", request=sz.AssignVehicleSerializer)
class AssignVehicleView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        ser = sz.AssignVehicleSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        consignment = consignment_service.assign_vehicle(
            pk,
            ser.validated_data.get("vehicle_id"),
            ser.validated_data.get("driver_id"),
            user=request.user,
        )
        return _detail(consignment)


# ── POST /api/consignments/{id}/assign-driver/ ────────────────────────────────
@extend_schema(tags=["Consignments"], summary="Assign an available driver", request=sz.AssignDriverSerializer)
class AssignDriverView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        ser = sz.AssignDriverSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        consignment = consignment_service.assign_driver(pk, ser.validated_data["driver_id"], user=request.user)
        return _detail(consignment)


# ── POST /api/consignments/{id}/schedule-pickup/ ──────────────────────────────
@extend_schema(tags=["Consignments"], summary="Schedule pickup", request=sz.SchedulePickupSerializer)
class SchedulePickupView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        ser = sz.SchedulePickupSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        d = ser.validated_data
        consignment = consignment_service.schedule_pickup(
            pk, d.get("pickup_date"), d.get("pickup_time"), d.get("instructions", ""), user=request.user,
        )
        return _detail(consignment)


# ── PUT /api/consignments/{id}/status/ ────────────────────────────────────────
@extend_schema(tags=["Consignments"], summary="Move a consignment along its lifecycle",
               request=sz.StatusUpdateSerializer)
class StatusUpdateView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def put(self, request, pk):
        ser = sz.StatusUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        d = dict(ser.validated_data)
        new_status = d.pop("status")
        consignment = consignment_service.update_status(
            pk, new_status, user=request.user, **{k: v for k, v in d.items() if v not in ("", None)}
        )
        return _detail(consignment)

    post = put


# ── POST /api/consignments/{id}/confirm-delivery/ ─────────────────────────────
@extend_schema(tags=["Consignments"], summary="Confirm delivery of an in-transit consignment",
               request=sz.ConfirmDeliverySerializer)
class ConfirmDeliveryView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        ser = sz.ConfirmDeliverySerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        consignment = consignment_service.confirm_delivery(
            pk, ser.validated_data.get("delivered_by") or None, user=request.user,
        )
        return _detail(consignment)


# ── POST /api/consignments/{id}/payment-receipt/ ──────────────────────────────
@extend_schema(tags=["Consignments"], summary="Record payment receipt", request=sz.PaymentReceiptSerializer)
class PaymentReceiptView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        ser = sz.PaymentReceiptSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        consignment = consignment_service.record_payment_receipt(
            pk, ser.validated_data.get("receipt_date") or None, user=request.user,
        )
        return _detail(consignment)


# ── GET /api/consignments/{id}/tracking/ ──────────────────────────────────────
@extend_schema(tags=["Consignments"], summary="Internal tracking timeline")
class TrackingTimelineView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        return Response(consignment_service.tracking_timeline(pk))


# ── GET /api/consignments/tracking/{number}/ ──────────────────────────────────
@extend_schema(tags=["Public"], summary="Public tracking by consignment number",
               responses=sz.PublicTrackingSerializer)
class PublicTrackingView(APIView):
    permission_classes     = [permissions.AllowAny]
    authentication_classes = []

    def get(self, request, number):
        data = consignment_service.public_tracking(number)
        return Response(sz.PublicTrackingSerializer(data).data)


# ── GET /api/consignments/unbilled/ ───────────────────────────────────────────
@extend_schema(tags=["Consignments"], summary="Delivered consignments not yet billed")
class UnbilledConsignmentsView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        qs, total = consignment_service.unbilled(uuid_param(request.query_params, "customer_id"))
        return Response({
            "count":       qs.count(),
            "total_value": total,
            "results":     sz.ConsignmentDetailSerializer(qs, many=True).data,
        })


# ── GET /api/consignments/statistics/ ─────────────────────────────────────────
@extend_schema(tags=["Consignments"], summary="Consignment counts and values by category")
class ConsignmentStatisticsView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(consignment_service.statistics())


# ── GET /api/consignments/{id}/pdf/ ───────────────────────────────────────────
@extend_schema(tags=["Documents"], summary="Consignment note PDF (three copies)")
class ConsignmentPdfView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        from apps.documents.rendering import render_consignment_note
        from apps.documents.views import pdf_response

        consignment = consignment_service.get(pk)
        return pdf_response(render_consignment_note(consignment), f"Consignment-{consignment.consignment_number}.pdf")
