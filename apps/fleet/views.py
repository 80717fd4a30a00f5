"""Vehicle and driver registry API."""

import logging
from rest_framework import generics, permissions
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.filters import SearchFilter, OrderingFilter
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema

from apps.common.exceptions import NotFound
from .models import Vehicle, Driver
from .registry import FleetRegistry
from . import serializers as sz

logger = logging.getLogger("kvl.fleet")
registry = FleetRegistry()


# ── Vehicles ──────────────────────────────────────────────────────────────────
@extend_schema(tags=["Fleet"], summary="List or register vehicles")
class VehicleListCreateView(generics.ListCreateAPIView):
    queryset           = Vehicle.objects.all()
    serializer_class   = sz.VehicleSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends    = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_fields   = ["status", "vehicle_type", "is_active"]
    search_fields      = ["vehicle_number", "engine_number", "chassis_number", "insurance_policy_no"]
    ordering_fields    = ["vehicle_number", "created_at"]


@extend_schema(tags=["Fleet"], summary="Vehicles ready for assignment")
class AvailableVehicleListView(generics.ListAPIView):
    serializer_class   = sz.VehicleSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return Vehicle.objects.filter(status=Vehicle.Status.AVAILABLE, is_active=True)


@extend_schema(tags=["Fleet"], summary="Retrieve, update or delete a vehicle")
class VehicleDetailView(generics.RetrieveUpdateDestroyAPIView):
    queryset           = Vehicle.objects.all()
    serializer_class   = sz.VehicleSerializer
    permission_classes = [permissions.IsAuthenticated]

    def perform_update(self, serializer):
        vehicle = serializer.save()
        logger.info("Vehicle %s edited by %s (status=%s)",
                    vehicle.vehicle_number, self.request.user.email, vehicle.status)


# ── Drivers ───────────────────────────────────────────────────────────────────
@extend_schema(tags=["Fleet"], summary="List or register drivers")
class DriverListCreateView(generics.ListCreateAPIView):
    queryset           = Driver.objects.all()
    serializer_class   = sz.DriverSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends    = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_fields   = ["status", "is_active"]
    search_fields      = ["name", "mobile", "email", "license_number"]
    ordering_fields    = ["name", "created_at"]


@extend_schema(tags=["Fleet"], summary="Drivers ready for assignment")
class AvailableDriverListView(generics.ListAPIView):
    serializer_class   = sz.DriverSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return Driver.objects.filter(status=Driver.Status.AVAILABLE, is_active=True)


@extend_schema(tags=["Fleet"], summary="Retrieve, update or delete a driver")
class DriverDetailView(generics.RetrieveUpdateDestroyAPIView):
    queryset           = Driver.objects.all()
    serializer_class   = sz.DriverSerializer
    permission_classes = [permissions.IsAuthenticated]


def _get_driver(pk):
    driver = Driver.objects.filter(pk=pk).first()
    if not driver:
        raise NotFound("Driver not found")
    return driver


# ── POST /api/drivers/{id}/assign-vehicle/ ────────────────────────────────────
@extend_schema(tags=["Fleet"], summary="Attach an available vehicle to a driver",
               request=sz.AttachVehicleSerializer)
class DriverAttachVehicleView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        ser = sz.AttachVehicleSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        driver  = _get_driver(pk)
        vehicle = Vehicle.objects.filter(pk=ser.validated_data["vehicle_id"]).first()
        if not vehicle:
            raise NotFound("Vehicle not found")
        driver = registry.attach_vehicle(driver, vehicle)
        return Response(sz.DriverSerializer(driver).data)


# ── POST /api/drivers/{id}/remove-vehicle/ ────────────────────────────────────
@extend_schema(tags=["Fleet"], summary="Detach the driver's current vehicle", request=None)
class DriverDetachVehicleView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        driver = registry.detach_vehicle(_get_driver(pk))
        return Response(sz.DriverSerializer(driver).data)


# ── GET /api/drivers/{id}/vehicle/ ────────────────────────────────────────────
@extend_schema(tags=["Fleet"], summary="The driver's current vehicle")
class DriverVehicleView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        vehicle = _get_driver(pk).current_vehicle
        return Response(sz.VehicleSerializer(vehicle).data if vehicle else None)
