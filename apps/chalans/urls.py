from django.urls import path
from . import views

urlpatterns = [
    path("",                 views.LoadChalanListCreateView.as_view(), name="chalan-list"),
    path("stats/",           views.LoadChalanStatsView.as_view(),      name="chalan-stats"),
    path("<uuid:pk>/",       views.LoadChalanDetailView.as_view(),     name="chalan-detail"),
    path("<uuid:pk>/status/", views.LoadChalanStatusView.as_view(),    name="chalan-status"),
    path("<uuid:pk>/pdf/",   views.LoadChalanPdfView.as_view(),        name="chalan-pdf"),
]
