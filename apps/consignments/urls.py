from django.urls import path
from . import views

urlpatterns = [
    path("",                              views.ConsignmentListCreateView.as_view(), name="consignment-list"),
    path("statistics/",                   views.ConsignmentStatisticsView.as_view(), name="consignment-statistics"),
    path("unbilled/",                     views.UnbilledConsignmentsView.as_view(),  name="consignment-unbilled"),
    path("tracking/<str:number>/",        views.PublicTrackingView.as_view(),        name="consignment-public-tracking"),
    path("<uuid:pk>/",                    views.ConsignmentDetailView.as_view(),     name="consignment-detail"),
    path("<uuid:pk>/tracking/",           views.TrackingTimelineView.as_view(),      name="consignment-tracking"),
    path("<uuid:pk>/status/",             views.StatusUpdateView.as_view(),          name="consignment-status"),
    path("<uuid:pk>/assign-vehicle/",     views.AssignVehicleView.as_view(),         name="consignment-assign-vehicle"),
    path("<uuid:pk>/assign-driver/",      views.AssignDriverView.as_view(),          name="consignment-assign-driver"),
    path("<uuid:pk>/schedule-pickup/",    views.SchedulePickupView.as_view(),        name="consignment-schedule-pickup"),
    path("<uuid:pk>/confirm-delivery/",   views.ConfirmDeliveryView.as_view(),       name="consignment-confirm-delivery"),
    path("<uuid:pk>/payment-receipt/",    views.PaymentReceiptView.as_view(),        name="consignment-payment-receipt"),
    path("<uuid:pk>/pdf/",                views.ConsignmentPdfView.as_view(),        name="consignment-pdf"),
]
