from django.conf import settings

from .services import PullRequestService, TeamService, UserService
from .transactor import Transactor

transactor = Transactor()

team_service = TeamService(transactor)
user_service = UserService(transactor)
pull_request_service = PullRequestService(
    transactor,
    max_reviewers=settings.REVIEWERS_PER_PULL_REQUEST,
)
