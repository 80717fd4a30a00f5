from django.urls import path
from .views import VehicleListCreateView, AvailableVehicleListView, VehicleDetailView

urlpatterns = [
    path("",            VehicleListCreateView.as_view(),    name="vehicle-list"),
    path("available/",  AvailableVehicleListView.as_view(), name="vehicle-available"),
    path("<uuid:pk>/",  VehicleDetailView.as_view(),        name="vehicle-detail"),
]
