from __future__ import annotations

from rest_framework import serializers

from .models import Review


class ReviewSerializer(serializers.ModelSerializer):
    booking = serializers.UUIDField(source="booking_id", read_only=True)
    car_id = serializers.UUIDField(source="booking.car_id", read_only=True)
    author_id = serializers.IntegerField(read_only=True)
    author_name = serializers.ReadOnlyField(source="author.display_name")

    class Meta:
        model = Review
        fields = (
            "id",
            "booking",
            "car_id",
            "author_id",
            "author_name",
            "rating",
            "comment",
            "created_at",
        )
        read_only_fields = fields


class ReviewCreateSerializer(serializers.Serializer):
    booking = serializers.UUIDField()
    rating = serializers.IntegerField()
    comment = serializers.CharField(required=False, allow_blank=True, default="")


class ReviewQuerySerializer(serializers.Serializer):
    booking = serializers.UUIDField(required=False)
    car = serializers.UUIDField(required=False)
