"""Load chalan API views."""

import logging
from rest_framework import generics, status, permissions
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.filters import SearchFilter, OrderingFilter
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema

from apps.common.params import date_param

from .models import LoadChalan
from .service import ChalanService
from . import serializers as sz

logger = logging.getLogger("kvl.chalans")
chalan_service = ChalanService()


# ── GET|POST /api/load-chalans/ ───────────────────────────────────────────────
@extend_schema(tags=["Load Chalans"], summary="List or create load chalans")
class LoadChalanListCreateView(generics.ListAPIView):
    serializer_class   = sz.LoadChalanSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends    = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_fields   = ["status", "destination_hub", "booking_branch", "vehicle_id"]
    search_fields      = ["chalan_number", "vehicle_number", "driver_name", "destination_hub"]
    ordering_fields    = ["date", "total_freight"]

    def get_queryset(self):
        qs = LoadChalan.objects.prefetch_related("lines")
        start = date_param(self.request.query_params, "start_date")
        end   = date_param(self.request.query_params, "end_date")
        if start:
            qs = qs.filter(date__date__gte=start)
        if end:
            qs = qs.filter(date__date__lte=end)
        return qs

    @extend_schema(request=sz.LoadChalanCreateSerializer, responses=sz.LoadChalanSerializer)
    def post(self, request):
        ser = sz.LoadChalanCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        chalan = chalan_service.create(ser.validated_data, user=request.user)
        return Response(sz.LoadChalanSerializer(chalan).data, status=status.HTTP_201_CREATED)


# ── GET|PUT|PATCH|DELETE /api/load-chalans/{id}/ ──────────────────────────────
@extend_schema(tags=["Load Chalans"], summary="Retrieve, edit or delete a load chalan")
class LoadChalanDetailView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        return Response(sz.LoadChalanSerializer(chalan_service.get(pk)).data)

    @extend_schema(request=sz.LoadChalanUpdateSerializer)
    def put(self, request, pk):
        ser = sz.LoadChalanUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        chalan = chalan_service.update(pk, ser.validated_data, user=request.user)
        return Response(sz.LoadChalanSerializer(chalan).data)

    patch = put

    def delete(self, request, pk):
        chalan_service.delete(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ── PATCH /api/load-chalans/{id}/status/ ──────────────────────────────────────
@extend_schema(tags=["Load Chalans"], summary="Advance chalan status", request=sz.ChalanStatusSerializer)
class LoadChalanStatusView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def patch(self, request, pk):
        ser = sz.ChalanStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        chalan = chalan_service.update_status(pk, ser.validated_data["status"], user=request.user)
        return Response(sz.LoadChalanSerializer(chalan).data)

    put = patch


# ── GET /api/load-chalans/stats/ ──────────────────────────────────────────────
@extend_schema(tags=["Load Chalans"], summary="Chalan counts and freight by status")
class LoadChalanStatsView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(chalan_service.stats(
            date_param(request.query_params, "start_date"),
            date_param(request.query_params, "end_date"),
        ))


# ── GET /api/load-chalans/{id}/pdf/ ───────────────────────────────────────────
@extend_schema(tags=["Documents"], summary="Load chalan PDF")
class LoadChalanPdfView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        from apps.documents.rendering import render_load_chalan
        from apps.documents.views import pdf_response

        chalan = chalan_service.get(pk)
        return pdf_response(render_load_chalan(chalan), f"LoadChalan-{chalan.chalan_number}.pdf")
