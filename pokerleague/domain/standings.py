"""Tournament standings built from elimination records.

Ordering of entries, strongest first:

1. total points (higher first);
2. session wins, then second places, then third places (more first);
3. absences from counted dates (fewer first);
4. player id (lower first), so the order is total and stable.

Ranks are assigned 1..n in that order. Guests keep their session
records and points but get no entry; players missing from the players table
are ranked under a placeholder name.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from pokerleague.db.models import EliminationRecord, GameDate, Player, PlayerRole, Tournament
from pokerleague.domain.points import PointsTable

BEST_DATES_MIN_COUNTED = 6
DROPPED_DATES = 2

TREND_UP = "up"
TREND_DOWN = "down"
TREND_SAME = "same"


@dataclass
class RankingEntry:
    player_id: int
    player_name: str
    total_points: int = 0
    dates_played: int = 0
    rank: int = 0
    points_by_date: dict[int, int] = field(default_factory=dict)
    first_places: int = 0
    second_places: int = 0
    third_places: int = 0
    absences: int = 0
    worst_date: int | None = None
    second_worst_date: int | None = None
    final_score: int = 0
    trend: str = TREND_SAME
    positions_changed: int = 0

    def sort_key(self) -> tuple[int, ...]:
        return (
            -self.total_points,
            -self.first_places,
            -self.second_places,
            -self.third_places,
            self.absences,
            self.player_id,
        )

    def add_result(self, date_number: int, position: int, points: int) -> None:
        self.points_by_date[date_number] = points
        self.total_points += points
        self.dates_played += 1
        if position == 1:
            self.first_places += 1
        elif position == 2:
            self.second_places += 1
        elif position == 3:
            self.third_places += 1


@dataclass
class TournamentRanking:
    tournament_id: int
    tournament_number: int
    tournament_name: str
    counted_dates: list[int]
    entries: list[RankingEntry]

    @property
    def leader(self) -> RankingEntry | None:
        return self.entries[0] if self.entries else None

    def entry_for(self, player_id: int) -> RankingEntry | None:
        for entry in self.entries:
            if entry.player_id == player_id:
                return entry
        return None

    def podium(self) -> list[RankingEntry]:
        return [entry for entry in self.entries if entry.rank <= 3]


def inferred_survivor(
    game_date: GameDate, eliminations: Sequence[EliminationRecord]
) -> int | None:
    """Return the last player standing when the session only lacks the winner's record."""
    if any(record.position == 1 for record in eliminations):
        return None
    eliminated = {record.eliminated_player_id for record in eliminations}
    remaining = [player_id for player_id in game_date.player_ids if player_id not in eliminated]
    if len(remaining) != 1:
        return None
    return remaining[0]


def _apply_best_dates(entry: RankingEntry, counted_dates: Sequence[int]) -> None:
    if len(counted_dates) < BEST_DATES_MIN_COUNTED:
        entry.worst_date = None
        entry.second_worst_date = None
        entry.final_score = entry.total_points
        return
    scores = sorted(entry.points_by_date.get(number, 0) for number in counted_dates)
    entry.worst_date, entry.second_worst_date = scores[0], scores[1]
    entry.final_score = entry.total_points - sum(scores[:DROPPED_DATES])


def _is_guest(player_id: int, players: Mapping[int, Player]) -> bool:
    player = players.get(player_id)
    return player is not None and player.role == PlayerRole.GUEST


def _player_name(player_id: int, players: Mapping[int, Player]) -> str:
    player = players.get(player_id)
    if player is None:
        return f"Player {player_id}"
    return player.full_name


def _rank_entries(
    game_dates: Sequence[GameDate],
    eliminations_by_date: Mapping[int, Sequence[EliminationRecord]],
    players: Mapping[int, Player],
    points_table: PointsTable,
) -> tuple[list[int], list[RankingEntry]]:
    counted = [
        game_date
        for game_date in sorted(game_dates, key=lambda item: item.date_number)
        if eliminations_by_date.get(game_date.id)
    ]
    entries: dict[int, RankingEntry] = {}

    def entry_for(player_id: int) -> RankingEntry:
        if player_id not in entries:
            entries[player_id] = RankingEntry(
                player_id=player_id, player_name=_player_name(player_id, players)
            )
        return entries[player_id]

    for game_date in counted:
        eliminations = eliminations_by_date[game_date.id]
        for record in eliminations:
            if _is_guest(record.eliminated_player_id, players):
                continue
            entry_for(record.eliminated_player_id).add_result(
                game_date.date_number, record.position, record.points
            )
        survivor = inferred_survivor(game_date, eliminations)
        if survivor is not None and not _is_guest(survivor, players):
            winner_points = points_table.points(1, game_date.roster_size)
            entry_for(survivor).add_result(game_date.date_number, 1, winner_points)

    counted_numbers = [game_date.date_number for game_date in counted]
    for game_date in counted:
        roster = set(game_date.player_ids)
        for entry in entries.values():
            if entry.player_id not in roster:
                entry.absences += 1
                entry.points_by_date.setdefault(game_date.date_number, 0)

    ordered = sorted(entries.values(), key=RankingEntry.sort_key)
    for index, entry in enumerate(ordered, start=1):
        entry.rank = index
        _apply_best_dates(entry, counted_numbers)
    return counted_numbers, ordered


def _apply_trends(current: Iterable[RankingEntry], previous: Iterable[RankingEntry]) -> None:
    previous_ranks = {entry.player_id: entry.rank for entry in previous}
    for entry in current:
        before = previous_ranks.get(entry.player_id)
        if before is None or before == entry.rank:
            entry.trend = TREND_SAME
            entry.positions_changed = 0
        elif before > entry.rank:
            entry.trend = TREND_UP
            entry.positions_changed = before - entry.rank
        else:
            entry.trend = TREND_DOWN
            entry.positions_changed = entry.rank - before


def build_tournament_ranking(
    tournament: Tournament,
    game_dates: Sequence[GameDate],
    eliminations: Iterable[EliminationRecord],
    players: Mapping[int, Player],
    points_table: PointsTable,
) -> TournamentRanking:
    """Aggregate standings; an empty ``counted_dates`` means nothing was recorded."""
    own_dates = {game_date.id for game_date in game_dates}
    eliminations_by_date: dict[int, list[EliminationRecord]] = defaultdict(list)
    for record in eliminations:
        if record.game_date_id in own_dates:
            eliminations_by_date[record.game_date_id].append(record)

    counted_numbers, entries = _rank_entries(
        game_dates, eliminations_by_date, players, points_table
    )
    if len(counted_numbers) >= 2:
        latest = counted_numbers[-1]
        earlier_dates = [item for item in game_dates if item.date_number != latest]
        _, previous_entries = _rank_entries(
            earlier_dates, eliminations_by_date, players, points_table
        )
        _apply_trends(entries, previous_entries)

    return TournamentRanking(
        tournament_id=tournament.id,
        tournament_number=tournament.number,
        tournament_name=tournament.name,
        counted_dates=counted_numbers,
        entries=entries,
    )
