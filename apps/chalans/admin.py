from django.contrib import admin
from .models import LoadChalan, LoadChalanLine


class LoadChalanLineInline(admin.TabularInline):
    model = LoadChalanLine
    extra = 0


@admin.register(LoadChalan)
class LoadChalanAdmin(admin.ModelAdmin):
    list_display  = ("chalan_number", "date", "vehicle_number", "destination_hub",
                     "total_lr_count", "total_freight", "balance_freight", "status")
    list_filter   = ("status", "destination_hub")
    search_fields = ("chalan_number", "vehicle_number", "driver_name")
    readonly_fields = ("id", "total_lr_count", "total_packages", "total_weight",
                       "total_freight", "balance_freight", "created_at", "updated_at")
    inlines = [LoadChalanLineInline]
