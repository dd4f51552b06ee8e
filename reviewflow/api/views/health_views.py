import logging

from django.db import DatabaseError, connection
from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

logger = logging.getLogger(__name__)

COMPONENT = {'name': 'reviewflow', 'version': '0.1.0'}


def check_database():
    with connection.cursor() as cursor:
        cursor.execute('SELECT 1')
        cursor.fetchone()


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def health_check(request):
    """GET /health - Health check"""
    try:
        check_database()
    except DatabaseError as e:
        logger.error("health check failed: database: %s", e)
        return Response({
            'status': 'unhealthy',
            'component': COMPONENT,
            'checks': {'database': str(e)},
        }, status=status.HTTP_503_SERVICE_UNAVAILABLE)

    return Response({'status': 'healthy', 'component': COMPONENT, 'checks': {'database': 'ok'}})
