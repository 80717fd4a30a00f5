from django.contrib import admin
from .models import Vehicle, Driver


@admin.register(Vehicle)
class VehicleAdmin(admin.ModelAdmin):
    list_display  = ("vehicle_number", "vehicle_type", "length_feet", "capacity_value", "capacity_unit", "status", "is_active")
    list_filter   = ("status", "vehicle_type", "is_active")
    search_fields = ("vehicle_number", "engine_number", "chassis_number")
    readonly_fields = ("id", "created_at", "updated_at")


@admin.register(Driver)
class DriverAdmin(admin.ModelAdmin):
    list_display  = ("name", "mobile", "license_number", "status", "current_vehicle_id", "is_active")
    list_filter   = ("status", "is_active")
    search_fields = ("name", "mobile", "license_number")
    readonly_fields = ("id", "created_at", "updated_at")
