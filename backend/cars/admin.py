from django.contrib import admin

from .models import Car


@admin.register(Car)
class CarAdmin(admin.ModelAdmin):
    list_display = ("brand", "model", "year", "owner", "price_per_day", "city", "is_active")
    list_filter = ("is_active", "city")
    search_fields = ("brand", "model", "owner__username")
