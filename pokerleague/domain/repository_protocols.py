"""Storage contract between the league core and whatever persists its data.

The recorder, the ranking aggregator and the winner resolver receive a
``LeagueStore`` explicitly; nothing in the core reaches for a global client.
``SqliteLeagueStore`` is the production implementation, tests may pass any
object with the same shape.
"""

from __future__ import annotations

from typing import ContextManager, Protocol, Sequence

from pokerleague.db.models import (
    EliminationRecord,
    GameDate,
    NewElimination,
    Player,
    Tournament,
    WinnerOverride,
)


class TournamentReader(Protocol):
    def get_tournament(self, tournament_id: int) -> Tournament | None: ...
    def get_tournament_by_number(self, number: int) -> Tournament | None: ...
    def list_tournaments(self) -> list[Tournament]: ...
    def list_game_dates(self, tournament_id: int) -> list[GameDate]: ...


class PlayerReader(Protocol):
    def get_player(self, player_id: int) -> Player | None: ...
    def list_players(self, player_ids: Sequence[int]) -> dict[int, Player]: ...


class EliminationStore(Protocol):
    def get_game_date(self, game_date_id: int) -> GameDate | None: ...
    def list_eliminations(self, game_date_id: int) -> list[EliminationRecord]: ...
    def list_eliminations_for_tournament(
        self, tournament_id: int,
    ) -> list[EliminationRecord]: ...
    def insert_elimination(self, elimination: NewElimination) -> EliminationRecord: ...

    def atomic(self, game_date_id: int) -> ContextManager[None]:
        """Serialize every read and write made inside the block for one game date.

        An exception raised inside the block must leave no trace of writes
        made inside it.
        """
        ...


class WinnerOverrideReader(Protocol):
    def get_winner_override(self, tournament_number: int) -> WinnerOverride | None: ...
    def list_winner_overrides(self) -> list[WinnerOverride]: ...


class LeagueStore(
    TournamentReader, PlayerReader, EliminationStore, WinnerOverrideReader, Protocol,
):
    """Everything the core reads or writes."""
