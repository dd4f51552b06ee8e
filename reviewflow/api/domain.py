from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class TeamMember:
    user_id: str
    username: str
    is_active: bool


@dataclass
class Team:
    name: str
    members: List[TeamMember] = field(default_factory=list)


@dataclass
class User:
    user_id: str
    username: str
    team_name: Optional[str]
    is_active: bool


@dataclass
class PullRequestShort:
    id: str
    name: str
    author_id: str
    status: str


@dataclass
class PullRequest:
    id: str
    name: str
    author_id: str
    status: str
    reviewers: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    merged_at: Optional[datetime] = None


@dataclass
class UserReviews:
    user_id: str
    pull_requests: List[PullRequestShort] = field(default_factory=list)
