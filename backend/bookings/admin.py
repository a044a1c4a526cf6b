from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "car",
        "renter",
        "start_date",
        "end_date",
        "total_price",
        "status",
        "deleted_at",
    )
    list_filter = ("status",)
    search_fields = ("car__brand", "car__model", "renter__username")
    readonly_fields = ("total_price", "created_at", "updated_at", "deleted_at")

    def get_queryset(self, request):
        return Booking.all_objects.select_related("car", "renter")
