from django.db import models


class ErrorCode(models.TextChoices):
    TEAM_EXISTS = 'TEAM_EXISTS', 'Team already exists'
    PR_EXISTS = 'PR_EXISTS', 'Pull request already exists'
    PR_MERGED = 'PR_MERGED', 'Pull request is merged'
    NOT_ASSIGNED = 'NOT_ASSIGNED', 'Reviewer is not assigned'
    NO_CANDIDATE = 'NO_CANDIDATE', 'No replacement candidate'
    NOT_FOUND = 'NOT_FOUND', 'Resource not found'
    USER_INACTIVE = 'USER_INACTIVE', 'User is inactive'
    UNSPECIFIED = 'UNSPECIFIED', 'Unspecified error'
    # только транспортный слой
    INVALID_BODY = 'INVALID_BODY', 'Invalid request body'
    UNAUTHORIZED = 'UNAUTHORIZED', 'Unauthorized'


class ServiceError(Exception):
    """
    Ошибка бизнес-операции: код из ErrorCode и сообщение для клиента
    """

    def __init__(self, code: ErrorCode, message: str):
        super().__init__(message)
        self.code = ErrorCode(code)
        self.message = message

    def as_dict(self) -> dict:
        return {'code': self.code.value, 'message': self.message}

    def __repr__(self):
        return f"ServiceError(code={self.code.value!r}, message={self.message!r})"
