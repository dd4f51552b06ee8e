import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from ..auth import HasAdminToken
from ..container import pull_request_service
from ..errors import ServiceError
from ..serializers import (
    CreatePullRequestRequestSerializer,
    MergePullRequestRequestSerializer,
    PullRequestSerializer,
    ReassignRequestSerializer,
)
from .responses import error_response, parse_body, server_error

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([HasAdminToken])
def pullrequest_create(request):
    """POST /pullRequest/create - Создать PR"""
    try:
        body, error = parse_body(request, CreatePullRequestRequestSerializer)
        if error:
            return error

        pr = pull_request_service.create_pull_request(
            body.validated_data['pull_request_id'],
            body.validated_data['pull_request_name'],
            body.validated_data['author_id'],
        )

        return Response({
            'pr': PullRequestSerializer(pr).data
        }, status=status.HTTP_201_CREATED)

    except ServiceError as e:
        return error_response(e)
    except Exception:
        logger.exception("pullrequest_create failed")
        return server_error()


@api_view(['POST'])
@permission_classes([HasAdminToken])
def pullrequest_merge(request):
    """POST /pullRequest/merge - Пометить PR как MERGED"""
    try:
        body, error = parse_body(request, MergePullRequestRequestSerializer)
        if error:
            return error

        pr = pull_request_service.merge_pull_request(body.validated_data['pull_request_id'])

        return Response({
            'pr': PullRequestSerializer(pr).data
        })

    except ServiceError as e:
        return error_response(e)
    except Exception:
        logger.exception("pullrequest_merge failed")
        return server_error()


@api_view(['POST'])
@permission_classes([HasAdminToken])
def pullrequest_reassign(request):
    """POST /pullRequest/reassign - Переназначить ревьювера"""
    try:
        body, error = parse_body(request, ReassignRequestSerializer)
        if error:
            return error

        pr, new_reviewer = pull_request_service.reassign_reviewer(
            body.validated_data['pull_request_id'],
            body.validated_data['old_user_id'],
        )

        return Response({
            'pr': PullRequestSerializer(pr).data,
            'replaced_by': new_reviewer
        })

    except ServiceError as e:
        return error_response(e)
    except Exception:
        logger.exception("pullrequest_reassign failed")
        return server_error()
