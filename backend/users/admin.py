from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("username", "email", "role", "city", "is_staff", "is_active")
    list_filter = BaseUserAdmin.list_filter + ("role",)
    fieldsets = BaseUserAdmin.fieldsets + (("Marketplace", {"fields": ("role", "city")}),)
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ("Marketplace", {"fields": ("role", "city")}),
    )
