from django.contrib import admin
from .models import FreightBill, FreightBillLine, FreightBillAdjustment


class FreightBillLineInline(admin.TabularInline):
    model = FreightBillLine
    extra = 0
    readonly_fields = ("consignment_id", "consignment_number", "grand_total")


class FreightBillAdjustmentInline(admin.TabularInline):
    model = FreightBillAdjustment
    extra = 0


@admin.register(FreightBill)
class FreightBillAdmin(admin.ModelAdmin):
    list_display  = ("bill_number", "bill_date", "party_name", "billing_branch", "final_amount", "status")
    list_filter   = ("status", "billing_branch")
    search_fields = ("bill_number", "party_name")
    readonly_fields = ("id", "total_amount", "created_at", "updated_at")
    inlines = [FreightBillLineInline, FreightBillAdjustmentInline]
