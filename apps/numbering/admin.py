from django.contrib import admin
from .models import YearlySequence


@admin.register(YearlySequence)
class YearlySequenceAdmin(admin.ModelAdmin):
    list_display = ("series", "year", "last_value", "updated_at")
    list_filter  = ("series", "year")
