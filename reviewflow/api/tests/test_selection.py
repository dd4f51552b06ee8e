from collections import namedtuple

from django.test import SimpleTestCase

from reviewflow.api.selection import select_replacement, select_reviewers

Member = namedtuple('Member', ['id', 'is_active'])


class SelectReviewersTest(SimpleTestCase):
    def setUp(self):
        self.roster = [
            Member("author", True),
            Member("a", True),
            Member("b", False),
            Member("c", True),
            Member("d", True),
        ]

    def test_takes_first_active_members_in_roster_order(self):
        self.assertEqual(select_reviewers("author", self.roster, 2), ["a", "c"])

    def test_returns_fewer_when_roster_is_short(self):
        roster = [Member("author", True), Member("a", True)]
        self.assertEqual(select_reviewers("author", roster, 2), ["a"])

    def test_empty_roster(self):
        self.assertEqual(select_reviewers("author", [], 2), [])

    def test_only_author(self):
        self.assertEqual(select_reviewers("author", [Member("author", True)], 2), [])

    def test_zero_max_count(self):
        self.assertEqual(select_reviewers("author", self.roster, 0), [])

    def test_duplicate_roster_entries_are_collected_once(self):
        roster = [Member("a", True), Member("a", True), Member("c", True)]
        self.assertEqual(select_reviewers("author", roster, 2), ["a", "c"])


class SelectReplacementTest(SimpleTestCase):
    def setUp(self):
        self.roster = [
            Member("author", True),
            Member("a", True),
            Member("b", False),
            Member("c", True),
            Member("d", True),
        ]

    def test_first_eligible_candidate(self):
        self.assertEqual(select_replacement("author", ["a", "c"], self.roster), "d")

    def test_skips_inactive_members(self):
        self.assertEqual(select_replacement("author", ["a"], self.roster), "c")

    def test_no_candidate(self):
        self.assertIsNone(select_replacement("author", ["a", "c", "d"], self.roster))

    def test_author_is_never_a_candidate(self):
        roster = [Member("author", True), Member("a", True)]
        self.assertIsNone(select_replacement("author", ["a"], roster))

    def test_same_input_same_result(self):
        results = {select_replacement("author", ["a"], self.roster) for _ in range(10)}
        self.assertEqual(results, {"c"})
