"""SQLite-backed implementation of the league storage contract."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Iterator, Sequence

from pokerleague.db.database import write_transaction
from pokerleague.db.models import (
    EliminationRecord,
    GameDate,
    NewElimination,
    Player,
    Tournament,
    WinnerOverride,
)
from pokerleague.db.repositories import (
    EliminationRepository,
    GameDateRepository,
    PlayerRepository,
    TournamentRepository,
    WinnerOverrideRepository,
)


class SqliteLeagueStore:
    """Adapts the repositories of one connection to ``LeagueStore``.

    SQLite locks the whole database for writing, which is a superset of the
    per-game-date scope ``atomic`` has to guarantee. Use one store (and one
    connection) per thread.
    """

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection
        self.players = PlayerRepository(connection)
        self.tournaments = TournamentRepository(connection)
        self.game_dates = GameDateRepository(connection)
        self.eliminations = EliminationRepository(connection)
        self.winner_overrides = WinnerOverrideRepository(connection)

    def get_tournament(self, tournament_id: int) -> Tournament | None:
        return self.tournaments.get(tournament_id)

    def get_tournament_by_number(self, number: int) -> Tournament | None:
        return self.tournaments.get_by_number(number)

    def list_tournaments(self) -> list[Tournament]:
        return self.tournaments.list()

    def list_game_dates(self, tournament_id: int) -> list[GameDate]:
        return self.game_dates.list_for_tournament(tournament_id)

    def get_game_date(self, game_date_id: int) -> GameDate | None:
        return self.game_dates.get(game_date_id)

    def get_player(self, player_id: int) -> Player | None:
        return self.players.get(player_id)

    def list_players(self, player_ids: Sequence[int]) -> dict[int, Player]:
        return self.players.get_many(player_ids)

    def list_eliminations(self, game_date_id: int) -> list[EliminationRecord]:
        return self.eliminations.list_for_game_date(game_date_id)

    def list_eliminations_for_tournament(self, tournament_id: int) -> list[EliminationRecord]:
        return self.eliminations.list_for_tournament(tournament_id)

    def insert_elimination(self, elimination: NewElimination) -> EliminationRecord:
        return self.eliminations.insert(elimination)

    def get_winner_override(self, tournament_number: int) -> WinnerOverride | None:
        return self.winner_overrides.get(tournament_number)

    def list_winner_overrides(self) -> list[WinnerOverride]:
        return self.winner_overrides.list()

    @contextmanager
    def atomic(self, game_date_id: int) -> Iterator[None]:
        with write_transaction(self._connection):
            yield
