from __future__ import annotations

from rest_framework import permissions, status, viewsets
from rest_framework.response import Response

from core.context import AuthContext

from . import services
from .serializers import ReviewCreateSerializer, ReviewQuerySerializer, ReviewSerializer


class ReviewViewSet(viewsets.GenericViewSet):
    """Let renters review finished bookings; anyone signed in can read reviews."""

    serializer_class = ReviewSerializer
    permission_classes = [permissions.IsAuthenticated]
    http_method_names = ["get", "post", "head", "options"]
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        query = ReviewQuerySerializer(data=self.request.query_params)
        query.is_valid(raise_exception=True)
        return services.list_reviews(
            booking_id=query.validated_data.get("booking"),
            car_id=query.validated_data.get("car"),
        )

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return Response(serializer.data)

    def retrieve(self, request, *args, **kwargs):
        review = services.get_review(kwargs["pk"])
        return Response(self.get_serializer(review).data)

    def create(self, request, *args, **kwargs):
        payload = ReviewCreateSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        review = services.create_review(
            AuthContext.from_request(request),
            payload.validated_data["booking"],
            rating=payload.validated_data["rating"],
            comment=payload.validated_data["comment"],
        )
        review = services.get_review(review.pk)
        return Response(self.get_serializer(review).data, status=status.HTTP_201_CREATED)
