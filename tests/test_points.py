import unittest

from pokerleague.domain.points import (
    MAX_PLAYERS,
    PointsTable,
    build_distribution,
    points_for_position,
    validate_distribution,
)


class DefaultCurveTests(unittest.TestCase):
    def test_distribution_table(self) -> None:
        cases = [
            (9, [15, 12, 9, 6, 5, 4, 3, 2, 1]),
            (10, [17, 14, 11, 8, 7, 6, 5, 4, 3, 1]),
            (
                20,
                [27, 24, 21, 18, 17, 16, 15, 14, 13, 11, 10, 9, 8, 7, 6, 5, 4, 3, 2, 1],
            ),
        ]
        for players, expected in cases:
            with self.subTest(players=players):
                self.assertEqual(build_distribution(players), expected)
                self.assertEqual(PointsTable().distribution(players), expected)

    def test_points_for_position_table(self) -> None:
        cases = [
            (1, 9, 15),
            (9, 9, 1),
            (1, 24, 31),
            (9, 24, 17),
            (24, 24, 1),
            (1, 25, 31),
            (25, 25, 0),
            (30, 30, 0),
            (5, 5, 5),
        ]
        for position, players, expected in cases:
            with self.subTest(position=position, players=players):
                self.assertEqual(points_for_position(position, players), expected)

    def test_points_never_increase_with_worse_position(self) -> None:
        table = PointsTable()
        for players in range(1, 31):
            points = [table.points(position, players) for position in range(1, players + 1)]
            with self.subTest(players=players):
                self.assertTrue(all(points[i] >= points[i + 1] for i in range(len(points) - 1)))
                self.assertEqual(points[0], max(points))
                self.assertTrue(all(value >= 0 for value in points))

    def test_winner_scores_more_than_last_in_supported_sizes(self) -> None:
        for players in range(9, MAX_PLAYERS + 1):
            with self.subTest(players=players):
                self.assertGreater(points_for_position(1, players), points_for_position(players, players))
                self.assertEqual(points_for_position(players, players), 1)

    def test_invalid_arguments(self) -> None:
        with self.assertRaises(ValueError):
            points_for_position(0, 9)
        with self.assertRaises(ValueError):
            points_for_position(10, 9)
        with self.assertRaises(ValueError):
            points_for_position(1, 0)
        with self.assertRaises(TypeError):
            points_for_position("1", 9)


class CustomCurveTests(unittest.TestCase):
    def test_custom_curve_replaces_only_its_size(self) -> None:
        table = PointsTable({9: [20, 15, 10, 8, 6, 4, 3, 2, 1]})
        self.assertEqual(table.custom_sizes, [9])
        self.assertEqual(table.points(1, 9), 20)
        self.assertEqual(table.points(1, 10), 17)

    def test_table_covers_supported_sizes(self) -> None:
        table = PointsTable().table()
        self.assertEqual(sorted(table), list(range(9, 25)))
        self.assertEqual(len(table[24]), 24)

    def test_rejects_invalid_curves(self) -> None:
        with self.assertRaises(ValueError):
            PointsTable({3: [1, 2, 3]})
        with self.assertRaises(ValueError):
            PointsTable({3: [3, 2]})
        with self.assertRaises(ValueError):
            PointsTable({2: [3, -1]})

    def test_validate_distribution_messages(self) -> None:
        self.assertIsNone(validate_distribution(3, [5, 3, 1]))
        self.assertIn("expected 3 positions", validate_distribution(3, [5, 3]))
        self.assertIn("negative", validate_distribution(2, [1, -1]))


if __name__ == "__main__":
    unittest.main()
