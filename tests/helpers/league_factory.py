from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from typing import Sequence

from pokerleague.db.models import GameDateStatus, PlayerRole, TournamentStatus
from pokerleague.db.repositories import (
    GameDateRepository,
    PlayerRepository,
    TournamentRepository,
)


@dataclass
class SeededLeague:
    tournament_id: int
    player_ids: list[int]
    game_date_ids: list[int] = field(default_factory=list)


def create_players(connection: sqlite3.Connection, count: int, prefix: str = "Player") -> list[int]:
    players = PlayerRepository(connection)
    return [
        players.create(
            {
                "first_name": f"{prefix}{index:02d}",
                "last_name": "Test",
                "role": PlayerRole.MEMBER,
            }
        )
        for index in range(1, count + 1)
    ]


def create_tournament(
    connection: sqlite3.Connection,
    number: int,
    status: TournamentStatus = TournamentStatus.ACTIVE,
) -> int:
    return TournamentRepository(connection).create(
        {"number": number, "name": f"Torneo {number}", "status": status}
    )


def create_game_date(
    connection: sqlite3.Connection,
    tournament_id: int,
    date_number: int,
    player_ids: Sequence[int],
    status: GameDateStatus = GameDateStatus.IN_PROGRESS,
) -> int:
    return GameDateRepository(connection).create(
        {
            "tournament_id": tournament_id,
            "date_number": date_number,
            "status": status,
            "player_ids": list(player_ids),
        }
    )


def seed_league(
    connection: sqlite3.Connection,
    *,
    number: int = 1,
    players: int = 9,
    dates: int = 1,
    tournament_status: TournamentStatus = TournamentStatus.ACTIVE,
    date_status: GameDateStatus = GameDateStatus.IN_PROGRESS,
) -> SeededLeague:
    """A tournament whose game dates all share one roster."""
    player_ids = create_players(connection, players, prefix=f"T{number}P")
    tournament_id = create_tournament(connection, number, tournament_status)
    league = SeededLeague(tournament_id=tournament_id, player_ids=player_ids)
    for date_number in range(1, dates + 1):
        league.game_date_ids.append(
            create_game_date(connection, tournament_id, date_number, player_ids, date_status)
        )
    return league
