from typing import Callable, TypeVar

from django.db import transaction
from django.db.utils import DEFAULT_DB_ALIAS

from .repositories import PullRequestRepository, ReviewRepository, TeamRepository, UserRepository

T = TypeVar('T')


class UnitOfWork:
    """
    Репозитории, привязанные к одной транзакции.
    Передается в функцию явно, а не через глобальное состояние.
    """

    def __init__(self, using: str):
        self.using = using
        self.teams = TeamRepository(using)
        self.users = UserRepository(using)
        self.pull_requests = PullRequestRepository(using)
        self.reviews = ReviewRepository(using)


class Transactor:
    """
    Выполняет функцию атомарно: либо все изменения фиксируются,
    либо при любом исключении транзакция откатывается.
    Вложенный вызов выполняется внутри внешней транзакции (через savepoint).
    """

    def __init__(self, using: str = DEFAULT_DB_ALIAS):
        self.using = using

    def run(self, unit: Callable[[UnitOfWork], T]) -> T:
        with transaction.atomic(using=self.using):
            return unit(UnitOfWork(self.using))
