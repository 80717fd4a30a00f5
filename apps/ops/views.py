"""
Operations views:
  - Health check (database and cache probes)
  - Prometheus-formatted business metrics
  - Dashboard summary
"""

import logging
from decimal import Decimal

from django.core.cache import cache
from django.db import connection
from django.db.models import Count, Sum
from django.http import HttpResponse
from django.utils import timezone
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from drf_spectacular.utils import extend_schema

logger = logging.getLogger("kvl.ops")


# ── GET /api/health/ ──────────────────────────────────────────────────────────
@extend_schema(tags=["Ops"], summary="Health check — database and cache")
class HealthView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        checks = {}

        try:
            with connection.cursor() as cur:
                cur.execute("SELECT 1")
            checks["database"] = "ok"
        except Exception as exc:
            logger.warning("Health check: database unreachable: %s", exc)
            checks["database"] = f"error: {exc}"

        try:
            cache.set("healthcheck", "1", 5)
            checks["cache"] = "ok" if cache.get("healthcheck") == "1" else "miss"
        except Exception as exc:
            logger.warning("Health check: cache unreachable: %s", exc)
            checks["cache"] = f"error: {exc}"

        healthy = all(v == "ok" for v in checks.values())
        return Response(
            {"status": "ok" if healthy else "degraded", "checks": checks},
            status=200 if healthy else 503,
        )


def _counts(qs, field):
    return dict(qs.values_list(field).annotate(c=Count("id")).order_by())


# ── GET /api/ops/metrics/ ─────────────────────────────────────────────────────
@extend_schema(tags=["Ops"], summary="Prometheus-formatted operational metrics")
class MetricsView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        from apps.billing.models import FreightBill
        from apps.consignments.models import Consignment
        from apps.fleet.models import Vehicle, Driver

        consignments = _counts(Consignment.objects.live(), "status")
        vehicles     = _counts(Vehicle.objects.filter(is_active=True), "status")
        drivers      = _counts(Driver.objects.filter(is_active=True), "status")
        unpaid = FreightBill.objects.filter(status__in=FreightBill.PENDING).aggregate(
            t=Sum("final_amount")
        )["t"] or Decimal("0")

        lines = [
            "# HELP kvl_consignments_total Live consignments by status",
            "# TYPE kvl_consignments_total gauge",
        ]
        for status, count in sorted(consignments.items()):
            lines.append(f'kvl_consignments_total{{status="{status}"}} {count}')
        lines += [
            "",
            "# HELP kvl_vehicles_total Active vehicles by availability",
            "# TYPE kvl_vehicles_total gauge",
        ]
        for status, count in sorted(vehicles.items()):
            lines.append(f'kvl_vehicles_total{{status="{status}"}} {count}')
        lines += [
            "",
            "# HELP kvl_drivers_total Active drivers by availability",
            "# TYPE kvl_drivers_total gauge",
        ]
        for status, count in sorted(drivers.items()):
            lines.append(f'kvl_drivers_total{{status="{status}"}} {count}')
        lines += [
            "",
            "# HELP kvl_unpaid_bills_inr Outstanding freight bill amount in INR",
            "# TYPE kvl_unpaid_bills_inr gauge",
            f"kvl_unpaid_bills_inr {unpaid}",
        ]
        return HttpResponse("\n".join(lines) + "\n", content_type="text/plain; version=0.0.4")


# ── GET /api/ops/dashboard/ ───────────────────────────────────────────────────
@extend_schema(tags=["Ops"], summary="Back-office overview for the day")
class DashboardSummaryView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        from apps.billing.models import FreightBill
        from apps.consignments.models import Consignment
        from apps.fleet.models import Vehicle, Driver

        live  = Consignment.objects.live()
        today = timezone.localdate()
        pending = FreightBill.objects.filter(status__in=FreightBill.PENDING).aggregate(
            t=Sum("final_amount")
        )["t"] or Decimal("0")

        return Response({
            "todays_bookings":        live.filter(booking_date__date=today).count(),
            "active_consignments":    live.filter(status__in=Consignment.ACTIVE_STATUSES).count(),
            "available_vehicles":     Vehicle.objects.filter(status=Vehicle.Status.AVAILABLE, is_active=True).count(),
            "available_drivers":      Driver.objects.filter(status=Driver.Status.AVAILABLE, is_active=True).count(),
            "unbilled_consignments":  Consignment.objects.unbilled().count(),
            "pending_bill_amount":    str(pending),
            "consignments_by_status": _counts(live, "status"),
        })
