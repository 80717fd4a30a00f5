from django.urls import path
from . import views

urlpatterns = [
    path("",                                                views.FreightBillListCreateView.as_view(), name="bill-list"),
    path("statistics/",                                     views.FreightBillStatisticsView.as_view(), name="bill-statistics"),
    path("pending-payments/",                               views.PendingPaymentsView.as_view(),       name="bill-pending"),
    path("customers/<uuid:customer_id>/unbilled-consignments/", views.CustomerUnbilledView.as_view(),  name="bill-customer-unbilled"),
    path("<uuid:pk>/",                                      views.FreightBillDetailView.as_view(),     name="bill-detail"),
    path("<uuid:pk>/status/",                               views.FreightBillStatusView.as_view(),     name="bill-status"),
    path("<uuid:pk>/mark-paid/",                            views.FreightBillMarkPaidView.as_view(),   name="bill-mark-paid"),
    path("<uuid:pk>/send-email/",                           views.FreightBillSendEmailView.as_view(),  name="bill-send-email"),
    path("<uuid:pk>/pdf/",                                  views.FreightBillPdfView.as_view(),        name="bill-pdf"),
]
