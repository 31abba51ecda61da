from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ["username", "email", "suite_number", "role", "status", "is_active"]
    list_filter = ["role", "status", "is_active"]
    search_fields = ["username", "email", "suite_number", "first_name", "last_name"]
    fieldsets = BaseUserAdmin.fieldsets + (
        ("Forwarding", {"fields": ("role", "suite_number", "phone", "status")}),
    )
    readonly_fields = ["suite_number"]
