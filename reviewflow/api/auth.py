"""
API-токены (JWT, HS256) и их проверка в DRF.

Токен несет тип: "user" (чтение) или "admin" (все операции).
Ищется в заголовке X-Api-Key, в cookie X-Api-Key или в Authorization: Bearer.
"""
import logging
from datetime import datetime, timedelta, timezone

import jwt
from django.conf import settings
from django.db import models
from rest_framework import authentication, exceptions, permissions

logger = logging.getLogger(__name__)

ALGORITHM = 'HS256'
API_KEY_HEADER = 'HTTP_X_API_KEY'
API_KEY_COOKIE = 'X-Api-Key'


class TokenType(models.TextChoices):
    USER = 'user', 'User'
    ADMIN = 'admin', 'Admin'


class InvalidToken(Exception):
    pass


def generate_token(token_type: str, lifetime: timedelta) -> str:
    """
    Выпускает подписанный токен.

    Args:
        token_type: "user" или "admin"
        lifetime: срок действия

    Returns:
        JWT-строка
    """
    token_type = TokenType(token_type)
    now = datetime.now(timezone.utc)
    claims = {
        'type': token_type.value,
        'iat': now,
        'exp': now + lifetime,
    }
    return jwt.encode(claims, settings.TOKEN_AUTH_SECRET, algorithm=ALGORITHM)


def verify_token(token: str) -> dict:
    """Проверяет подпись и срок действия, возвращает claims."""
    try:
        claims = jwt.decode(
            token,
            settings.TOKEN_AUTH_SECRET,
            algorithms=[ALGORITHM],
            options={'require': ['exp', 'iat']},
        )
    except jwt.ExpiredSignatureError as exc:
        raise InvalidToken('expired token') from exc
    except jwt.InvalidTokenError as exc:
        raise InvalidToken('invalid token') from exc

    if claims.get('type') not in TokenType.values:
        raise InvalidToken('invalid token type')
    return claims


class TokenPrincipal:
    """Аутентифицированный клиент API: у токена нет владельца, только тип."""
    is_authenticated = True
    is_anonymous = False

    def __init__(self, token_type: str):
        self.token_type = TokenType(token_type)

    def __str__(self):
        return f"token:{self.token_type.value}"


class ApiTokenAuthentication(authentication.BaseAuthentication):

    def authenticate(self, request):
        token = self._lookup(request)
        if not token:
            return None

        try:
            claims = verify_token(token)
        except InvalidToken as exc:
            logger.warning("unauthorized access attempt: %s", exc)
            raise exceptions.AuthenticationFailed(str(exc))

        return TokenPrincipal(claims['type']), claims

    def authenticate_header(self, request):
        return 'Bearer'

    @staticmethod
    def _lookup(request):
        token = request.META.get(API_KEY_HEADER)
        if token:
            return token

        token = request.COOKIES.get(API_KEY_COOKIE)
        if token:
            return token

        header = authentication.get_authorization_header(request).decode('latin-1')
        scheme, _, value = header.partition(' ')
        if scheme.lower() == 'bearer' and value.strip():
            return value.strip()
        return None


class _TokenTypePermission(permissions.BasePermission):
    allowed_types = ()
    message = 'token type is not allowed for this operation'

    def has_permission(self, request, view):
        principal = request.user
        if not isinstance(principal, TokenPrincipal):
            return False
        return principal.token_type in self.allowed_types


class HasUserToken(_TokenTypePermission):
    allowed_types = (TokenType.USER, TokenType.ADMIN)


class HasAdminToken(_TokenTypePermission):
    allowed_types = (TokenType.ADMIN,)
