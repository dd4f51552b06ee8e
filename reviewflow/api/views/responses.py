from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from ..errors import ErrorCode, ServiceError

STATUS_BY_CODE = {
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.TEAM_EXISTS: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_BODY: status.HTTP_400_BAD_REQUEST,
    ErrorCode.PR_EXISTS: status.HTTP_409_CONFLICT,
    ErrorCode.PR_MERGED: status.HTTP_409_CONFLICT,
    ErrorCode.NOT_ASSIGNED: status.HTTP_409_CONFLICT,
    ErrorCode.NO_CANDIDATE: status.HTTP_409_CONFLICT,
    ErrorCode.USER_INACTIVE: status.HTTP_409_CONFLICT,
    ErrorCode.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
}

# Тело не разобрано: неверный JSON или неподдерживаемый Content-Type
BODY_ERRORS = (exceptions.ParseError, exceptions.UnsupportedMediaType)


def error_response(error: ServiceError, http_status: int = None) -> Response:
    if http_status is None:
        http_status = STATUS_BY_CODE.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response({'error': error.as_dict()}, status=http_status)


def invalid_body(errors) -> Response:
    fields = ', '.join(sorted(errors)) if isinstance(errors, dict) else ''
    message = f'request validation failed: {fields}' if fields else 'invalid request body'
    return error_response(ServiceError(ErrorCode.INVALID_BODY, message))


def server_error() -> Response:
    return error_response(ServiceError(ErrorCode.UNSPECIFIED, 'internal server error'))


def api_exception_handler(exc, context):
    """
    Приводит все ошибки DRF к общему формату {"error": {...}}
    """
    if isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed,
                        exceptions.PermissionDenied)):
        response = error_response(ServiceError(ErrorCode.UNAUTHORIZED, str(exc.detail)))
        response['WWW-Authenticate'] = 'Bearer'
        return response
    if isinstance(exc, BODY_ERRORS):
        return error_response(ServiceError(ErrorCode.INVALID_BODY, 'invalid request body'))
    if isinstance(exc, exceptions.APIException):
        response = exception_handler(exc, context)
        response.data = {'error': ServiceError(ErrorCode.UNSPECIFIED, str(exc.detail)).as_dict()}
        return response
    return exception_handler(exc, context)


def parse_body(request, serializer_class):
    """
    Разбирает и валидирует тело запроса.
    Возвращает (serializer, None) или (None, ответ с INVALID_BODY)
    """
    try:
        serializer = serializer_class(data=request.data)
    except BODY_ERRORS:
        return None, error_response(ServiceError(ErrorCode.INVALID_BODY, 'invalid request body'))

    if not serializer.is_valid():
        return None, invalid_body(serializer.errors)
    return serializer, None
