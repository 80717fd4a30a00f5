from django.contrib import admin
from .models import Consignment


@admin.register(Consignment)
class ConsignmentAdmin(admin.ModelAdmin):
    list_display  = ("consignment_number", "booking_date", "consignor_name", "consignee_name",
                     "from_city", "to_city", "status", "grand_total", "payment_status", "is_deleted")
    list_filter   = ("status", "payment_status", "to_pay", "is_deleted")
    search_fields = ("consignment_number", "consignor_name", "consignee_name", "vehicle_number")
    readonly_fields = ("id", "grand_total", "created_at", "updated_at")
