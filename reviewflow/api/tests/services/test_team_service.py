from unittest.mock import patch

from django.db import DatabaseError
from django.test import TestCase

from reviewflow.api import domain
from reviewflow.api.errors import ErrorCode, ServiceError
from reviewflow.api.models import Team, User
from reviewflow.api.repositories import UserRepository
from reviewflow.api.services import TeamService
from reviewflow.api.transactor import Transactor


def make_team(name, members):
    return domain.Team(name=name, members=[domain.TeamMember(**member) for member in members])


class TeamServiceTest(TestCase):
    def setUp(self):
        self.service = TeamService(Transactor())
        self.team_name = "backend"
        self.members_data = [
            {"user_id": "u1", "username": "Alice", "is_active": True},
            {"user_id": "u2", "username": "Bob", "is_active": True},
            {"user_id": "u3", "username": "Charlie", "is_active": False},
        ]

    def test_add_team_success(self):
        """Тест успешного создания команды с пользователями"""
        team = self.service.add_team(make_team(self.team_name, self.members_data))

        self.assertEqual(team.name, self.team_name)
        self.assertEqual([m.user_id for m in team.members], ["u1", "u2", "u3"])
        self.assertEqual(User.objects.filter(team_id=self.team_name).count(), 3)

        user1 = User.objects.get(id="u1")
        self.assertEqual(user1.username, "Alice")
        self.assertTrue(user1.is_active)
        self.assertEqual(user1.team_id, self.team_name)
        self.assertFalse(User.objects.get(id="u3").is_active)

    def test_add_team_duplicate(self):
        """Повторное создание команды падает с TEAM_EXISTS и не трогает участников"""
        self.service.add_team(make_team(self.team_name, self.members_data))

        with self.assertRaises(ServiceError) as context:
            self.service.add_team(make_team(self.team_name, [
                {"user_id": "u1", "username": "Renamed", "is_active": False},
                {"user_id": "u4", "username": "Dave", "is_active": True},
            ]))

        self.assertEqual(context.exception.code, ErrorCode.TEAM_EXISTS)
        self.assertEqual(context.exception.message, 'team_name already exists')
        self.assertEqual(User.objects.get(id="u1").username, "Alice")
        self.assertTrue(User.objects.get(id="u1").is_active)
        self.assertFalse(User.objects.filter(id="u4").exists())

    def test_add_team_empty_members(self):
        """Тест создания команды без пользователей"""
        team = self.service.add_team(make_team("empty_team", []))

        self.assertEqual(team.name, "empty_team")
        self.assertEqual(team.members, [])
        self.assertTrue(Team.objects.filter(name="empty_team").exists())

    def test_add_team_moves_existing_user(self):
        """Существующий пользователь обновляется и переходит в новую команду"""
        old_team = Team.objects.create(name="old_team")
        User.objects.create(id="existing", username="Old Name", is_active=False, team=old_team)

        self.service.add_team(make_team("new_team", [
            {"user_id": "existing", "username": "New Name", "is_active": True},
        ]))

        user = User.objects.get(id="existing")
        self.assertEqual(user.username, "New Name")
        self.assertTrue(user.is_active)
        self.assertEqual(user.team_id, "new_team")

    def test_add_team_rolls_back_on_upsert_failure(self):
        """Ошибка при сохранении участника откатывает всю команду"""
        original_upsert = UserRepository.upsert
        calls = []

        def failing_upsert(repo, user_id, username, is_active, team_name):
            calls.append(user_id)
            if len(calls) == 2:
                raise DatabaseError("boom")
            return original_upsert(repo, user_id, username, is_active, team_name)

        with patch.object(UserRepository, 'upsert', autospec=True, side_effect=failing_upsert):
            with self.assertRaises(ServiceError) as context:
                self.service.add_team(make_team(self.team_name, self.members_data))

        self.assertEqual(context.exception.code, ErrorCode.UNSPECIFIED)
        self.assertFalse(Team.objects.filter(name=self.team_name).exists())
        self.assertFalse(User.objects.filter(id="u1").exists())

    def test_get_team_success(self):
        """Тест успешного получения команды с пользователями"""
        self.service.add_team(make_team(self.team_name, self.members_data))

        team = self.service.get_team(self.team_name)

        self.assertEqual(team.name, self.team_name)
        self.assertEqual(
            [(m.user_id, m.username, m.is_active) for m in team.members],
            [("u1", "Alice", True), ("u2", "Bob", True), ("u3", "Charlie", False)],
        )

    def test_get_team_without_members(self):
        Team.objects.create(name="lonely")

        team = self.service.get_team("lonely")

        self.assertEqual(team.members, [])

    def test_get_team_not_found(self):
        """Тест получения несуществующей команды"""
        with self.assertRaises(ServiceError) as context:
            self.service.get_team("nonexistent")

        self.assertEqual(context.exception.code, ErrorCode.NOT_FOUND)
