import logging

from django.db import connection
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET

logger = logging.getLogger(__name__)


@require_GET
def healthz(request):
    """Liveness probe that also verifies the database connection."""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
    except Exception:
        logger.exception("health: database check failed")
        return JsonResponse(
            {"status": "error", "database": "unavailable", "timestamp": timezone.now().isoformat()},
            status=503,
        )
    return JsonResponse(
        {"status": "ok", "database": "connected", "timestamp": timezone.now().isoformat()}
    )
