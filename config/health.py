import logging

from django.db import DatabaseError, connection
from drf_spectacular.utils import extend_schema, inline_serializer
from rest_framework import serializers
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

logger = logging.getLogger("avthrift.health")


@extend_schema(
    tags=["Health Endpoint"],
    summary="Health check",
    responses={
        200: inline_serializer(
            name="Health",
            fields={"status": serializers.CharField(), "database": serializers.CharField()},
        ),
        503: inline_serializer(
            name="HealthDegraded",
            fields={"status": serializers.CharField(), "database": serializers.CharField()},
        ),
    },
)
@api_view(["GET"])
@authentication_classes([])
@permission_classes([AllowAny])
def health(request):
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
    except DatabaseError:
        logger.exception("health.database_unavailable", extra={"event": "health.database_unavailable"})
        return Response({"status": "degraded", "database": "unavailable"}, status=503)
    return Response({"status": "ok", "database": "ok"})
