from django.test import TestCase

from reviewflow.api.errors import ErrorCode, ServiceError
from reviewflow.api.models import PullRequest, Review, Team, User
from reviewflow.api.services import UserService
from reviewflow.api.transactor import Transactor


class UserServiceTest(TestCase):
    def setUp(self):
        self.service = UserService(Transactor())
        self.team = Team.objects.create(name="backend")

        self.user1 = User.objects.create(id="u1", username="Alice", is_active=True, team=self.team)
        self.user2 = User.objects.create(id="u2", username="Bob", is_active=True, team=self.team)

        # PR, где u2 - ревьювер
        self.pr = PullRequest.objects.create(id="pr-1", name="Test PR", author=self.user1)
        Review.objects.create(pull_request=self.pr, user=self.user2)

    def test_set_user_is_active_success(self):
        """Тест успешного изменения активности пользователя"""
        user = self.service.set_user_is_active("u1", False)

        self.assertEqual(user.user_id, "u1")
        self.assertEqual(user.username, "Alice")
        self.assertEqual(user.team_name, "backend")
        self.assertFalse(user.is_active)

        user_from_db = User.objects.get(id="u1")
        self.assertFalse(user_from_db.is_active)
        self.assertEqual(user_from_db.username, "Alice")

    def test_set_user_is_active_reactivate(self):
        User.objects.filter(id="u1").update(is_active=False)

        user = self.service.set_user_is_active("u1", True)

        self.assertTrue(user.is_active)
        self.assertTrue(User.objects.get(id="u1").is_active)

    def test_set_user_is_active_not_found(self):
        """Тест изменения активности несуществующего пользователя"""
        with self.assertRaises(ServiceError) as context:
            self.service.set_user_is_active("nonexistent", True)

        self.assertEqual(context.exception.code, ErrorCode.NOT_FOUND)

    def test_deactivation_keeps_existing_assignments(self):
        """Деактивация не снимает пользователя с уже назначенных PR"""
        self.service.set_user_is_active("u2", False)

        self.assertTrue(Review.objects.filter(pull_request=self.pr, user_id="u2").exists())
