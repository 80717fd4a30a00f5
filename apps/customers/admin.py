from django.contrib import admin
from .models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display  = ("name", "mobile", "email", "city", "gst_number", "customer_type", "is_active")
    list_filter   = ("customer_type", "is_active", "state")
    search_fields = ("name", "mobile", "email", "gst_number")
    readonly_fields = ("id", "created_at", "updated_at")
