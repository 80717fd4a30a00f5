from django.urls import path
from .views import MetricsView, DashboardSummaryView

urlpatterns = [
    path("metrics/",   MetricsView.as_view(),          name="ops-metrics"),
    path("dashboard/", DashboardSummaryView.as_view(), name="ops-dashboard"),
]
