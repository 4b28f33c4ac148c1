"""Eliminator to eliminated pair counts within one tournament.

Only eliminations where both players are registered count: a guest on
either side, a player missing from the players table or a record without an
eliminator is skipped. A pair becomes an active relation from
``ACTIVE_RELATION_THRESHOLD`` eliminations on.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from pokerleague.db.models import ByPlayer, EliminationRecord, GameDate, Player, PlayerRole

ACTIVE_RELATION_THRESHOLD = 3


@dataclass(frozen=True)
class EliminatorStat:
    eliminator_player_id: int
    eliminated_player_id: int
    elimination_count: int
    first_date_number: int
    last_date_number: int
    first_scheduled_date: str | None = None
    last_scheduled_date: str | None = None

    @property
    def is_active_relation(self) -> bool:
        return self.elimination_count >= ACTIVE_RELATION_THRESHOLD


def _is_registered(player_id: int, players: Mapping[int, Player]) -> bool:
    player = players.get(player_id)
    return player is not None and player.role != PlayerRole.GUEST


def build_eliminator_stats(
    game_dates: Sequence[GameDate],
    eliminations: Iterable[EliminationRecord],
    players: Mapping[int, Player],
) -> list[EliminatorStat]:
    """Return one stat per pair, most frequent first, then by player ids."""
    dates_by_id = {game_date.id: game_date for game_date in game_dates}
    pairs: dict[tuple[int, int], list[GameDate]] = {}
    for record in eliminations:
        game_date = dates_by_id.get(record.game_date_id)
        if game_date is None or not isinstance(record.eliminator, ByPlayer):
            continue
        eliminator_id = record.eliminator.player_id
        eliminated_id = record.eliminated_player_id
        if not (_is_registered(eliminator_id, players) and _is_registered(eliminated_id, players)):
            continue
        pairs.setdefault((eliminator_id, eliminated_id), []).append(game_date)

    stats = []
    for (eliminator_id, eliminated_id), dates in pairs.items():
        dates.sort(key=lambda item: item.date_number)
        stats.append(
            EliminatorStat(
                eliminator_player_id=eliminator_id,
                eliminated_player_id=eliminated_id,
                elimination_count=len(dates),
                first_date_number=dates[0].date_number,
                last_date_number=dates[-1].date_number,
                first_scheduled_date=dates[0].scheduled_date,
                last_scheduled_date=dates[-1].scheduled_date,
            )
        )
    stats.sort(
        key=lambda stat: (
            -stat.elimination_count,
            stat.eliminator_player_id,
            stat.eliminated_player_id,
        )
    )
    return stats
