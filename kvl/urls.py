"""KVL Logistics root URL configuration."""

from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    path("admin/", admin.site.urls),

    # OpenAPI / Interactive Docs
    path("api/schema/", SpectacularAPIView.as_view(),       name="schema"),
    path("api/docs/",   SpectacularSwaggerView.as_view(),   name="swagger-ui"),

    # Auth
    path("api/auth/", include("apps.authentication.urls")),

    # Masters
    path("api/customers/", include("apps.customers.urls")),
    path("api/vehicles/",  include("apps.fleet.vehicle_urls")),
    path("api/drivers/",   include("apps.fleet.driver_urls")),

    # Operations
    path("api/consignments/", include("apps.consignments.urls")),
    path("api/freight-bills/", include("apps.billing.urls")),
    path("api/load-chalans/",  include("apps.chalans.urls")),

    # Ops
    path("api/health/", include("apps.ops.health_urls")),
    path("api/ops/",    include("apps.ops.ops_urls")),

    # Prometheus exporter (request/DB metrics from django-prometheus)
    path("", include("django_prometheus.urls")),
]
