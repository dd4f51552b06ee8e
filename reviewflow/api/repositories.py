"""
Репозитории поверх Django ORM.

Каждый репозиторий привязан к алиасу БД и возвращает экземпляры моделей.
Отсутствие записи и конфликт уникальности поднимаются как NotFound и
AlreadyExists, остальные ошибки БД (DatabaseError) пробрасываются как есть.
"""
from dataclasses import dataclass
from typing import List, Optional

from django.db import IntegrityError, transaction
from django.db.utils import DEFAULT_DB_ALIAS

from .models import PullRequest, Review, Team, User


class NotFound(Exception):
    pass


class AlreadyExists(Exception):
    pass


class InvalidTransition(Exception):
    pass


@dataclass
class UserPatch:
    """Частичное обновление пользователя: None означает "не трогать" """
    id: str
    username: Optional[str] = None
    is_active: Optional[bool] = None
    team_name: Optional[str] = None


@dataclass
class PullRequestPatch:
    id: str
    name: Optional[str] = None
    status: Optional[str] = None
    need_more_reviewers: Optional[bool] = None


class _Repository:
    def __init__(self, using: str = DEFAULT_DB_ALIAS):
        self.using = using


class TeamRepository(_Repository):

    def create(self, name: str) -> Team:
        try:
            with transaction.atomic(using=self.using):
                return Team.objects.using(self.using).create(name=name)
        except IntegrityError as exc:
            raise AlreadyExists(f"team '{name}' already exists") from exc

    def get(self, name: str) -> Team:
        try:
            return Team.objects.using(self.using).get(name=name)
        except Team.DoesNotExist:
            raise NotFound(f"team '{name}' not found")

    def get_members(self, name: str) -> List[User]:
        """Состав команды в порядке добавления: (created_at, id)"""
        return list(
            User.objects.using(self.using)
            .filter(team_id=name)
            .order_by('created_at', 'id')
        )


class UserRepository(_Repository):

    def get(self, user_id: str) -> User:
        try:
            return User.objects.using(self.using).get(id=user_id)
        except User.DoesNotExist:
            raise NotFound(f"user '{user_id}' not found")

    def get_user_team(self, user_id: str) -> List[User]:
        """
        Состав команды, в которой состоит пользователь (включая его самого).
        NotFound, если пользователя нет или он не в команде.
        """
        team_name = (
            User.objects.using(self.using)
            .filter(id=user_id)
            .values_list('team_id', flat=True)
            .first()
        )
        if team_name is None:
            raise NotFound(f"team of user '{user_id}' not found")

        members = TeamRepository(self.using).get_members(team_name)
        if not members:
            raise NotFound(f"team of user '{user_id}' not found")
        return members

    def upsert(self, user_id: str, username: str, is_active: bool, team_name: Optional[str]) -> User:
        user, _ = User.objects.using(self.using).update_or_create(
            id=user_id,
            defaults={
                'username': username,
                'is_active': is_active,
                'team_id': team_name,
            },
        )
        return user

    def patch(self, patch: UserPatch) -> User:
        try:
            user = User.objects.using(self.using).select_for_update().get(id=patch.id)
        except User.DoesNotExist:
            raise NotFound(f"user '{patch.id}' not found")

        fields = []
        if patch.username is not None:
            user.username = patch.username
            fields.append('username')
        if patch.is_active is not None:
            user.is_active = patch.is_active
            fields.append('is_active')
        if patch.team_name is not None:
            user.team_id = patch.team_name
            fields.append('team')

        if fields:
            user.save(using=self.using, update_fields=fields)
        return user


class PullRequestRepository(_Repository):

    def create(self, pr_id: str, name: str, author_id: str) -> PullRequest:
        # FK на автора в Django отложенный, поэтому проверяем его заранее
        if not User.objects.using(self.using).filter(id=author_id).exists():
            raise NotFound(f"author '{author_id}' not found")

        try:
            with transaction.atomic(using=self.using):
                return PullRequest.objects.using(self.using).create(
                    id=pr_id,
                    name=name,
                    author_id=author_id,
                    status=PullRequest.Status.OPEN,
                    need_more_reviewers=False,
                )
        except IntegrityError as exc:
            raise AlreadyExists(f"pull request '{pr_id}' already exists") from exc

    def get(self, pr_id: str, for_update: bool = False) -> PullRequest:
        queryset = PullRequest.objects.using(self.using)
        if for_update:
            queryset = queryset.select_for_update()
        try:
            return queryset.get(id=pr_id)
        except PullRequest.DoesNotExist:
            raise NotFound(f"pull request '{pr_id}' not found")

    def patch(self, patch: PullRequestPatch) -> PullRequest:
        pr = self.get(patch.id, for_update=True)

        fields = []
        if patch.name is not None:
            pr.name = patch.name
            fields.append('name')
        if patch.status is not None:
            if pr.status == PullRequest.Status.MERGED and patch.status != PullRequest.Status.MERGED:
                raise InvalidTransition(f"pull request '{patch.id}' is already merged")
            pr.status = patch.status
            fields.append('status')
        if patch.need_more_reviewers is not None:
            pr.need_more_reviewers = patch.need_more_reviewers
            fields.append('need_more_reviewers')

        if fields:
            pr.save(using=self.using, update_fields=fields)
        return pr

    def get_reviewers(self, pr_id: str) -> List[str]:
        return list(
            Review.objects.using(self.using)
            .filter(pull_request_id=pr_id)
            .order_by('id')
            .values_list('user_id', flat=True)
        )

    def get_review_prs(self, user_id: str) -> List[PullRequest]:
        return list(
            PullRequest.objects.using(self.using)
            .filter(reviews__user_id=user_id)
            .order_by('created_at', 'id')
        )


class ReviewRepository(_Repository):

    def assign(self, pr_id: str, reviewer_ids: List[str]) -> None:
        if not reviewer_ids:
            return
        Review.objects.using(self.using).bulk_create(
            [Review(pull_request_id=pr_id, user_id=reviewer_id) for reviewer_id in reviewer_ids]
        )

    def unassign(self, pr_id: str, reviewer_id: str) -> None:
        deleted, _ = (
            Review.objects.using(self.using)
            .filter(pull_request_id=pr_id, user_id=reviewer_id)
            .delete()
        )
        if deleted == 0:
            raise NotFound(f"reviewer '{reviewer_id}' is not assigned to '{pr_id}'")
