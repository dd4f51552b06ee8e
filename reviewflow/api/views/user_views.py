import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from ..auth import HasAdminToken, HasUserToken
from ..container import pull_request_service, user_service
from ..errors import ErrorCode, ServiceError
from ..serializers import SetIsActiveRequestSerializer, UserReviewsSerializer, UserSerializer
from .responses import error_response, parse_body, server_error

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([HasAdminToken])
def user_set_active(request):
    """POST /users/setIsActive - Установить флаг активности пользователя"""
    try:
        body, error = parse_body(request, SetIsActiveRequestSerializer)
        if error:
            return error

        user = user_service.set_user_is_active(
            body.validated_data['user_id'],
            body.validated_data['is_active'],
        )

        return Response({
            'user': UserSerializer(user).data
        })

    except ServiceError as e:
        return error_response(e)
    except Exception:
        logger.exception("user_set_active failed")
        return server_error()


@api_view(['GET'])
@permission_classes([HasUserToken])
def users_get_review(request):
    """GET /users/getReview - Получить PR'ы, где пользователь назначен ревьювером"""
    try:
        user_id = request.query_params.get('user_id')

        if not user_id:
            return error_response(ServiceError(ErrorCode.INVALID_BODY, 'user_id parameter is required'))

        reviews = pull_request_service.get_user_review(user_id)

        return Response(UserReviewsSerializer(reviews).data)

    except ServiceError as e:
        return error_response(e)
    except Exception:
        logger.exception("users_get_review failed")
        return server_error()
