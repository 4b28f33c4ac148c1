from __future__ import annotations

from typing import Mapping, Sequence

MIN_PLAYERS = 9
MAX_PLAYERS = 24

LAST_PLACE_POINTS = 1
BOTTOM_INCREMENT = 1
BONUS_POSITION = 9
BONUS_INCREMENT = 2
MIDDLE_POSITIONS = range(4, 9)
MIDDLE_INCREMENT = 1
PODIUM_POSITIONS = range(1, 4)
PODIUM_INCREMENT = 3


def _clamp_players(total_participants: int) -> int:
    return max(MIN_PLAYERS, min(MAX_PLAYERS, total_participants))


def build_distribution(total_participants: int) -> list[int]:
    """Return the league curve for a session size, winner first.

    Sizes outside 9..24 use the curve of the nearest supported size.
    """
    players = _clamp_players(total_participants)
    # index 0 is position 1
    points = [0] * players
    points[players - 1] = LAST_PLACE_POINTS
    for position in range(players - 1, BONUS_POSITION, -1):
        points[position - 1] = points[position] + BOTTOM_INCREMENT
    if players > BONUS_POSITION:
        points[BONUS_POSITION - 1] = points[BONUS_POSITION] + BONUS_INCREMENT
    for position in reversed(MIDDLE_POSITIONS):
        points[position - 1] = points[position] + MIDDLE_INCREMENT
    for position in reversed(PODIUM_POSITIONS):
        points[position - 1] = points[position] + PODIUM_INCREMENT
    return points


def validate_distribution(total_participants: int, points: Sequence[int]) -> str | None:
    """Return a problem description, or None when the curve is usable."""
    if total_participants < 1:
        return "participant count must be positive"
    if len(points) != total_participants:
        return f"expected {total_participants} positions, got {len(points)}"
    if any(int(value) < 0 for value in points):
        return "points must not be negative"
    if any(points[0] < value for value in points[1:]):
        return "position 1 must score at least as much as any other position"
    return None


class PointsTable:
    """Points per finishing position, looked up by session size.

    Explicit curves replace the derived league curve for their participant
    count only; every other size keeps the derived one.
    """

    def __init__(self, curves: Mapping[int, Sequence[int]] | None = None) -> None:
        self._curves: dict[int, tuple[int, ...]] = {}
        for total, points in (curves or {}).items():
            problem = validate_distribution(int(total), points)
            if problem:
                raise ValueError(f"Invalid points curve for {total} players: {problem}.")
            self._curves[int(total)] = tuple(int(value) for value in points)

    @property
    def custom_sizes(self) -> list[int]:
        return sorted(self._curves)

    def points(self, position: int, total_participants: int) -> int:
        if not isinstance(position, int) or not isinstance(total_participants, int):
            raise TypeError("Position and participant count must be integers.")
        if total_participants < 1:
            raise ValueError("Participant count must be a positive integer.")
        if position < 1 or position > total_participants:
            raise ValueError(
                f"Position {position} is outside 1..{total_participants}."
            )
        curve = self._curves.get(total_participants)
        if curve is None:
            curve = tuple(build_distribution(total_participants))
        if position > len(curve):
            return 0
        return curve[position - 1]

    def distribution(self, total_participants: int) -> list[int]:
        return [
            self.points(position, total_participants)
            for position in range(1, total_participants + 1)
        ]

    def table(
        self, min_players: int = MIN_PLAYERS, max_players: int = MAX_PLAYERS
    ) -> dict[int, list[int]]:
        return {
            players: self.distribution(players)
            for players in range(min_players, max_players + 1)
        }


DEFAULT_POINTS_TABLE = PointsTable()


def points_for_position(position: int, total_participants: int) -> int:
    """Return league points for a finishing position using the default curve."""
    return DEFAULT_POINTS_TABLE.points(position, total_participants)
