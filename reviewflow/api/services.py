import logging
from typing import Tuple

from . import domain
from .errors import ErrorCode, ServiceError
from .models import PullRequest
from .repositories import AlreadyExists, NotFound, PullRequestPatch, UserPatch
from .selection import select_replacement, select_reviewers
from .transactor import Transactor, UnitOfWork

logger = logging.getLogger(__name__)


class _TransactionalService:

    def __init__(self, transactor: Transactor):
        self.transactor = transactor

    def _run(self, unit, failure_message: str):
        """
        Выполняет unit в транзакции. Бизнес-ошибки (ServiceError) пробрасываются
        без изменений, любые другие (включая ошибки БД) превращаются в UNSPECIFIED.
        """
        try:
            return self.transactor.run(unit)
        except ServiceError:
            raise
        except Exception:
            logger.exception(failure_message)
            raise ServiceError(ErrorCode.UNSPECIFIED, failure_message)


class TeamService(_TransactionalService):
    """
    Сервис для управления командами и пользователями
    """

    def add_team(self, team: domain.Team) -> domain.Team:
        """
        Создает команду и добавляет/обновляет её участников.
        Если команда уже есть, ничего не меняется (TEAM_EXISTS).
        """
        logger.info("adding team team_name=%s members=%d", team.name, len(team.members))

        def unit(work: UnitOfWork) -> domain.Team:
            try:
                work.teams.create(team.name)
            except AlreadyExists:
                logger.warning("team already exists team_name=%s", team.name)
                raise ServiceError(ErrorCode.TEAM_EXISTS, 'team_name already exists')

            for member in team.members:
                work.users.upsert(member.user_id, member.username, member.is_active, team.name)

            return domain.Team(
                name=team.name,
                members=[
                    domain.TeamMember(user_id=m.user_id, username=m.username, is_active=m.is_active)
                    for m in team.members
                ],
            )

        result = self._run(unit, 'failed to create team')
        logger.debug("team added team_name=%s", team.name)
        return result

    def get_team(self, team_name: str) -> domain.Team:
        logger.debug("getting team team_name=%s", team_name)

        def unit(work: UnitOfWork) -> domain.Team:
            try:
                found = work.teams.get(team_name)
            except NotFound:
                logger.warning("team not found team_name=%s", team_name)
                raise ServiceError(ErrorCode.NOT_FOUND, 'team not found')

            members = work.teams.get_members(found.name)
            return domain.Team(
                name=found.name,
                members=[
                    domain.TeamMember(user_id=user.id, username=user.username, is_active=user.is_active)
                    for user in members
                ],
            )

        return self._run(unit, 'failed to get team')


class UserService(_TransactionalService):
    """
    Сервис для управления пользователями
    """

    def set_user_is_active(self, user_id: str, is_active: bool) -> domain.User:
        # Уже назначенные ревью не снимаются: активность проверяется только при выборе ревьюверов
        logger.info("setting user active status user_id=%s is_active=%s", user_id, is_active)

        def unit(work: UnitOfWork) -> domain.User:
            try:
                user = work.users.patch(UserPatch(id=user_id, is_active=is_active))
            except NotFound:
                logger.warning("user not found user_id=%s", user_id)
                raise ServiceError(ErrorCode.NOT_FOUND, 'user not found')

            return domain.User(
                user_id=user.id,
                username=user.username,
                team_name=user.team_id,
                is_active=user.is_active,
            )

        return self._run(unit, 'failed to update user')


class PullRequestService(_TransactionalService):
    """
    Сервис для управления Pull Request'ами
    """

    def __init__(self, transactor: Transactor, max_reviewers: int = 2):
        super().__init__(transactor)
        self.max_reviewers = max_reviewers

    def create_pull_request(self, pr_id: str, pr_name: str, author_id: str) -> domain.PullRequest:
        """
        Создает PR и назначает до max_reviewers активных ревьюверов из команды автора.
        """
        logger.info("creating pull request pull_request_id=%s author_id=%s", pr_id, author_id)

        def unit(work: UnitOfWork) -> domain.PullRequest:
            try:
                roster = work.users.get_user_team(author_id)
            except NotFound:
                logger.warning("author not found author_id=%s", author_id)
                raise ServiceError(ErrorCode.NOT_FOUND, 'author not found')

            author = next(member for member in roster if member.id == author_id)
            if not author.is_active:
                logger.warning("inactive user cannot create PR author_id=%s", author_id)
                raise ServiceError(ErrorCode.USER_INACTIVE, 'inactive user cannot create PR')

            try:
                pr = work.pull_requests.create(pr_id, pr_name, author_id)
            except AlreadyExists:
                logger.warning("PR already exists pull_request_id=%s", pr_id)
                raise ServiceError(ErrorCode.PR_EXISTS, 'PR id already exists')
            except NotFound:
                raise ServiceError(ErrorCode.NOT_FOUND, 'author not found')

            reviewers = select_reviewers(author_id, roster, self.max_reviewers)
            work.reviews.assign(pr.id, reviewers)

            logger.info("PR created pull_request_id=%s reviewers=%s", pr.id, reviewers)
            return _compose(pr, reviewers)

        return self._run(unit, 'failed to create PR')

    def merge_pull_request(self, pr_id: str) -> domain.PullRequest:
        """
        Переводит PR в MERGED. Повторный мерж ничего не меняет и не является ошибкой.
        """
        logger.info("merging pull request pull_request_id=%s", pr_id)

        def unit(work: UnitOfWork) -> domain.PullRequest:
            try:
                pr = work.pull_requests.patch(PullRequestPatch(id=pr_id, status=PullRequest.Status.MERGED))
            except NotFound:
                logger.warning("PR not found pull_request_id=%s", pr_id)
                raise ServiceError(ErrorCode.NOT_FOUND, 'PR not found')

            reviewers = work.pull_requests.get_reviewers(pr.id)
            logger.debug("PR merged pull_request_id=%s", pr_id)
            return _compose(pr, reviewers)

        return self._run(unit, 'failed to merge PR')

    def reassign_reviewer(self, pr_id: str, old_user_id: str) -> Tuple[domain.PullRequest, str]:
        """
        Заменяет ревьювера old_user_id на первого подходящего участника его команды.
        Возвращает обновленный PR и id нового ревьювера.
        """
        logger.info("reassigning pull request pull_request_id=%s user_id=%s", pr_id, old_user_id)

        def unit(work: UnitOfWork) -> Tuple[domain.PullRequest, str]:
            try:
                roster = work.users.get_user_team(old_user_id)
            except NotFound:
                logger.warning("user or team not found user_id=%s", old_user_id)
                raise ServiceError(ErrorCode.NOT_FOUND, 'user or team not found')

            # Блокируем строку PR: параллельные переназначения идут по очереди
            try:
                pr = work.pull_requests.get(pr_id, for_update=True)
            except NotFound:
                logger.warning("PR not found pull_request_id=%s", pr_id)
                raise ServiceError(ErrorCode.NOT_FOUND, 'PR not found')

            if pr.status == PullRequest.Status.MERGED:
                logger.warning("cannot reassign merged PR pull_request_id=%s", pr_id)
                raise ServiceError(ErrorCode.PR_MERGED, 'cannot reassign on merged PR')

            reviewers = work.pull_requests.get_reviewers(pr_id)
            if old_user_id not in reviewers:
                logger.warning("reviewer not assigned pull_request_id=%s user_id=%s", pr_id, old_user_id)
                raise ServiceError(ErrorCode.NOT_ASSIGNED, 'reviewer is not assigned to this PR')

            new_reviewer = select_replacement(pr.author_id, reviewers, roster)
            if new_reviewer is None:
                logger.warning("no replacement candidate pull_request_id=%s", pr_id)
                raise ServiceError(ErrorCode.NO_CANDIDATE, 'no active replacement candidate in team')

            try:
                work.reviews.unassign(pr_id, old_user_id)
            except NotFound:
                raise ServiceError(ErrorCode.NOT_ASSIGNED, 'reviewer is not assigned to this PR')
            work.reviews.assign(pr_id, [new_reviewer])

            logger.debug(
                "reviewer reassigned pull_request_id=%s old_reviewer=%s new_reviewer=%s",
                pr_id, old_user_id, new_reviewer,
            )
            return _compose(pr, work.pull_requests.get_reviewers(pr_id)), new_reviewer

        return self._run(unit, 'failed to reassign reviewer')

    def get_user_review(self, user_id: str) -> domain.UserReviews:
        """
        PR, на которые пользователь назначен ревьювером. Пустой список не ошибка.
        """
        logger.info("getting user reviews user_id=%s", user_id)

        def unit(work: UnitOfWork) -> domain.UserReviews:
            prs = work.pull_requests.get_review_prs(user_id)
            return domain.UserReviews(
                user_id=user_id,
                pull_requests=[
                    domain.PullRequestShort(id=pr.id, name=pr.name, author_id=pr.author_id, status=pr.status)
                    for pr in prs
                ],
            )

        return self._run(unit, 'failed to get user reviews')


def _compose(pr: PullRequest, reviewers) -> domain.PullRequest:
    return domain.PullRequest(
        id=pr.id,
        name=pr.name,
        author_id=pr.author_id,
        status=pr.status,
        reviewers=list(reviewers),
        created_at=pr.created_at,
        merged_at=pr.merged_at,
    )
