from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny
from rest_framework import status
from django.db import connections
from django.db.utils import OperationalError
from django.conf import settings
import logging
import time

logger = logging.getLogger("compete")


class HealthCheckView(APIView):
    """
    GET /api/health/

    Public uptime probe. Answers 503 while the database is unreachable.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request, *args, **kwargs):
        started = time.monotonic()

        try:
            with connections["default"].cursor() as cursor:
                cursor.execute("SELECT 1")
            db_ok = True
        except OperationalError:
            logger.warning("Health check: database unreachable")
            db_ok = False

        return Response(
            {
                "status": "ok" if db_ok else "degraded",
                "db": db_ok,
                "env": settings.ENV,
                "team_max_members": settings.TEAM_MAX_MEMBERS,
                "latency_ms": int((time.monotonic() - started) * 1000),
            },
            status=status.HTTP_200_OK if db_ok else status.HTTP_503_SERVICE_UNAVAILABLE,
        )
