import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from ..auth import HasAdminToken, HasUserToken
from ..container import team_service
from ..errors import ErrorCode, ServiceError
from ..serializers import TeamSerializer
from .responses import error_response, parse_body, server_error

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([HasAdminToken])
def team_add(request):
    """POST /team/add - Создать команду с участниками"""
    try:
        serializer, error = parse_body(request, TeamSerializer)
        if error:
            return error

        team = team_service.add_team(serializer.save())

        return Response({
            'team': TeamSerializer(team).data
        }, status=status.HTTP_201_CREATED)

    except ServiceError as e:
        return error_response(e)
    except Exception:
        logger.exception("team_add failed")
        return server_error()


@api_view(['GET'])
@permission_classes([HasUserToken])
def team_get(request):
    """GET /team/get - Получить команду с участниками"""
    try:
        team_name = request.query_params.get('team_name')

        if not team_name:
            return error_response(ServiceError(ErrorCode.INVALID_BODY, 'team_name parameter is required'))

        team = team_service.get_team(team_name)

        return Response(TeamSerializer(team).data)

    except ServiceError as e:
        return error_response(e)
    except Exception:
        logger.exception("team_get failed")
        return server_error()
