from django.urls import path
from .views import (
    DriverListCreateView, AvailableDriverListView, DriverDetailView,
    DriverAttachVehicleView, DriverDetachVehicleView, DriverVehicleView,
)

urlpatterns = [
    path("",                           DriverListCreateView.as_view(),    name="driver-list"),
    path("available/",                 AvailableDriverListView.as_view(), name="driver-available"),
    path("<uuid:pk>/",                 DriverDetailView.as_view(),        name="driver-detail"),
    path("<uuid:pk>/assign-vehicle/",  DriverAttachVehicleView.as_view(), name="driver-assign-vehicle"),
    path("<uuid:pk>/remove-vehicle/",  DriverDetachVehicleView.as_view(), name="driver-remove-vehicle"),
    path("<uuid:pk>/vehicle/",         DriverVehicleView.as_view(),       name="driver-vehicle"),
]
