from django.conf import settings
from django.contrib import admin
from django.urls import include, path

from core.health import healthz

urlpatterns = [
    path("api/healthz", healthz),
    path("api/users/", include("users.urls")),
    path("api/bookings/", include(("bookings.urls", "bookings"), namespace="bookings")),
    path("api/reviews/", include("reviews.urls")),
]

if settings.ENABLE_DJANGO_ADMIN:
    urlpatterns.insert(0, path("admin/", admin.site.urls))
