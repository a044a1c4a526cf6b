"""Serializers for booking-related API endpoints."""

from __future__ import annotations

from typing import Any

from django.utils import timezone
from rest_framework import serializers

from .domain import DECISION_STATUSES
from .models import Booking


class BookingSerializer(serializers.ModelSerializer):
    """Read representation of a booking with car and renter display data."""

    car_id = serializers.UUIDField(read_only=True)
    car_brand = serializers.ReadOnlyField(source="car.brand")
    car_model = serializers.ReadOnlyField(source="car.model")
    renter_id = serializers.IntegerField(read_only=True)
    renter_name = serializers.ReadOnlyField(source="renter.display_name")

    class Meta:
        model = Booking
        fields = (
            "id",
            "car_id",
            "car_brand",
            "car_model",
            "renter_id",
            "renter_name",
            "start_date",
            "end_date",
            "total_price",
            "status",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class BookingWriteSerializer(serializers.Serializer):
    """Payload for creating a booking or changing its car and dates."""

    car_id = serializers.UUIDField()
    start_date = serializers.DateField()
    end_date = serializers.DateField()

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        start_date = attrs["start_date"]
        end_date = attrs["end_date"]
        if end_date < start_date:
            raise serializers.ValidationError(
                {"end_date": ["End date cannot be before start date."]}
            )
        if start_date < timezone.localdate():
            raise serializers.ValidationError(
                {"start_date": ["Start date cannot be in the past."]}
            )
        return attrs


class BookingDecisionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[str(value) for value in DECISION_STATUSES])


class AvailabilityQuerySerializer(serializers.Serializer):
    car = serializers.UUIDField()
    start_date = serializers.DateField()
    end_date = serializers.DateField()

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        if attrs["end_date"] < attrs["start_date"]:
            raise serializers.ValidationError(
                {"end_date": ["End date cannot be before start date."]}
            )
        return attrs
