import django_filters

from .models import Booking


class BookingFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=Booking.Status.choices)
    car = django_filters.UUIDFilter(field_name="car_id")
    start_after = django_filters.DateFilter(field_name="start_date", lookup_expr="gte")
    end_before = django_filters.DateFilter(field_name="end_date", lookup_expr="lte")

    class Meta:
        model = Booking
        fields = ["status", "car", "start_after", "end_before"]
