from __future__ import annotations

from rest_framework import generics, permissions

from .serializers import MeSerializer


class MeView(generics.RetrieveAPIView):
    """Return the current user's id and role for the client."""

    serializer_class = MeSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_object(self):
        return self.request.user
