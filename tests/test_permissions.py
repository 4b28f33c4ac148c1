import unittest

from pokerleague.db.models import PlayerRole
from pokerleague.permissions import (
    ACCESS_FULL,
    ACCESS_LIMITED,
    ACCESS_READ_ONLY,
    access_level,
    accessible_features,
    can_access,
)


class PermissionTests(unittest.TestCase):
    def test_feature_matrix(self) -> None:
        cases = [
            (PlayerRole.STAFF, "winner-overrides", True),
            (PlayerRole.MEMBER, "winner-overrides", False),
            (PlayerRole.GUEST, "winner-overrides", False),
            (PlayerRole.STAFF, "eliminations", True),
            (PlayerRole.MEMBER, "eliminations", False),
            (PlayerRole.MEMBER, "profile", True),
            (PlayerRole.GUEST, "profile", False),
            (PlayerRole.GUEST, "rankings", True),
            ("Member", "winners", True),
            ("Admin", "rankings", False),
            (PlayerRole.STAFF, "unknown-feature", False),
        ]
        for role, feature, expected in cases:
            with self.subTest(role=role, feature=feature):
                self.assertEqual(can_access(role, feature), expected)

    def test_access_levels(self) -> None:
        self.assertEqual(access_level(PlayerRole.STAFF), ACCESS_FULL)
        self.assertEqual(access_level("Member"), ACCESS_LIMITED)
        self.assertEqual(access_level(PlayerRole.GUEST), ACCESS_READ_ONLY)
        self.assertEqual(access_level("Nobody"), ACCESS_READ_ONLY)

    def test_staff_reaches_every_feature(self) -> None:
        staff = accessible_features(PlayerRole.STAFF)
        guest = accessible_features(PlayerRole.GUEST)
        self.assertIn("audit-log", staff)
        self.assertTrue(set(guest) < set(staff))
        self.assertNotIn("eliminations", guest)


if __name__ == "__main__":
    unittest.main()
