from django.test import TestCase

from reviewflow.api.models import Team
from reviewflow.api.transactor import Transactor, UnitOfWork


class Boom(Exception):
    pass


class TransactorTest(TestCase):
    def setUp(self):
        self.transactor = Transactor()

    def test_commits_and_returns_result(self):
        result = self.transactor.run(lambda work: work.teams.create("backend").name)

        self.assertEqual(result, "backend")
        self.assertTrue(Team.objects.filter(name="backend").exists())

    def test_passes_unit_of_work(self):
        def unit(work):
            self.assertIsInstance(work, UnitOfWork)
            self.assertIs(work.teams.using, work.users.using)
            return work.using

        self.assertEqual(self.transactor.run(unit), self.transactor.using)

    def test_rolls_back_on_exception(self):
        def unit(work):
            work.teams.create("backend")
            raise Boom()

        with self.assertRaises(Boom):
            self.transactor.run(unit)

        self.assertFalse(Team.objects.filter(name="backend").exists())

    def test_nested_call_runs_inside_outer_transaction(self):
        def inner(work):
            work.teams.create("inner")

        def outer(work):
            work.teams.create("outer")
            self.transactor.run(inner)
            self.assertTrue(Team.objects.filter(name="inner").exists())
            raise Boom()

        with self.assertRaises(Boom):
            self.transactor.run(outer)

        self.assertFalse(Team.objects.exists())
