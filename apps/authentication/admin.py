from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import Operator


@admin.register(Operator)
class OperatorAdmin(BaseUserAdmin):
    list_display  = ("email", "full_name", "role", "branch", "is_active", "created_at")
    list_filter   = ("role", "is_active", "branch")
    search_fields = ("email", "full_name", "mobile")
    ordering      = ("-created_at",)
    fieldsets = (
        (None,          {"fields": ("email", "password")}),
        ("Personal",    {"fields": ("full_name", "mobile", "branch")}),
        ("Role",        {"fields": ("role",)}),
        ("Permissions", {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")}),
    )
    add_fieldsets = (
        (None, {"classes": ("wide",), "fields": ("email", "full_name", "role", "password1", "password2")}),
    )
