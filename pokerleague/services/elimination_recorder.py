"""Recording of eliminations within a live game date.

Each call validates and commits exactly one record. Validation and the insert
run inside ``store.atomic(game_date_id)``, so two scorekeepers submitting for
the same session cannot both pass the "position free" or "player still
playing" checks. The recorder never changes the session's lifecycle status and
never creates the winner's record on its own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pokerleague.db.models import (
    NO_ELIMINATOR,
    ByPlayer,
    EliminationRecord,
    Eliminator,
    GameDate,
    GameDateStatus,
    NewElimination,
    NoEliminator,
    eliminator_from_id,
    eliminator_to_id,
)
from pokerleague.domain.points import PointsTable
from pokerleague.domain.repository_protocols import EliminationStore
from pokerleague.errors import (
    EliminationError,
    GameDateNotFound,
    GameDateNotInProgress,
    InvalidEliminator,
    InvalidPosition,
    PlayerAlreadyEliminated,
    PlayerNotOnRoster,
    PositionAlreadyTaken,
)
from pokerleague.services.audit_log import (
    ELIMINATION_RECORDED,
    ELIMINATION_REJECTED,
    AuditLogService,
)
from pokerleague.services.points_loader import load_points_table_from_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionProgress:
    game_date_id: int
    status: GameDateStatus
    roster_size: int
    eliminations: list[EliminationRecord]
    remaining_player_ids: list[int]
    next_position: int | None

    @property
    def only_winner_left(self) -> bool:
        return len(self.remaining_player_ids) == 1 and self.next_position == 1


def _coerce_eliminator(eliminator: Eliminator | int | None) -> Eliminator:
    if isinstance(eliminator, (ByPlayer, NoEliminator)):
        return eliminator
    return eliminator_from_id(eliminator)


class EliminationRecorder:
    def __init__(
        self,
        store: EliminationStore,
        points_table: PointsTable | None = None,
        audit_log: AuditLogService | None = None,
    ) -> None:
        self._store = store
        self._audit_log = audit_log
        if points_table is None:
            points_table = load_points_table_from_settings().table
        self._points_table = points_table

    def record_elimination(
        self,
        game_date_id: int,
        eliminated_player_id: int,
        eliminator: Eliminator | int | None,
        position: int,
    ) -> EliminationRecord:
        eliminator = _coerce_eliminator(eliminator)
        log_context = {
            "game_date_id": game_date_id,
            "eliminated_player_id": eliminated_player_id,
            "eliminator_player_id": eliminator_to_id(eliminator),
            "position": position,
        }
        try:
            with self._store.atomic(game_date_id):
                record = self._validate_and_insert(
                    game_date_id, eliminated_player_id, eliminator, position
                )
        except EliminationError as exc:
            logger.info("Elimination rejected: %s", exc.message, extra=log_context)
            if self._audit_log is not None:
                self._audit_log.record_failure(
                    exc, ELIMINATION_REJECTED, "Elimination rejected", **log_context
                )
            raise
        logger.info(
            "Elimination recorded: player %s at position %s for %s points",
            eliminated_player_id,
            position,
            record.points,
            extra=log_context,
        )
        if self._audit_log is not None:
            self._audit_log.log_event(
                ELIMINATION_RECORDED,
                "Elimination recorded",
                f"Player {eliminated_player_id} finished at position {position} "
                f"for {record.points} points.",
                context={**log_context, "points": record.points},
            )
        return record

    def record_winner(self, game_date_id: int) -> EliminationRecord:
        """Record the single player still standing at position 1."""
        game_date = self._store.get_game_date(game_date_id)
        if game_date is None:
            raise GameDateNotFound(game_date_id)
        eliminations = self._store.list_eliminations(game_date_id)
        remaining = _remaining_players(game_date, eliminations)
        if len(remaining) != 1:
            raise InvalidPosition(
                1,
                game_date.roster_size,
                reason=(
                    f"Position 1 needs exactly one player left in game date "
                    f"{game_date_id}; {len(remaining)} remain."
                ),
            )
        return self.record_elimination(game_date_id, remaining[0], NO_ELIMINATOR, 1)

    def session_progress(self, game_date_id: int) -> SessionProgress:
        game_date = self._store.get_game_date(game_date_id)
        if game_date is None:
            raise GameDateNotFound(game_date_id)
        eliminations = self._store.list_eliminations(game_date_id)
        taken = {record.position for record in eliminations}
        free_positions = [
            position
            for position in range(1, game_date.roster_size + 1)
            if position not in taken
        ]
        return SessionProgress(
            game_date_id=game_date_id,
            status=game_date.status,
            roster_size=game_date.roster_size,
            eliminations=eliminations,
            remaining_player_ids=_remaining_players(game_date, eliminations),
            next_position=max(free_positions) if free_positions else None,
        )

    def _validate_and_insert(
        self,
        game_date_id: int,
        eliminated_player_id: int,
        eliminator: Eliminator,
        position: int,
    ) -> EliminationRecord:
        game_date = self._store.get_game_date(game_date_id)
        if game_date is None:
            raise GameDateNotFound(game_date_id)
        if game_date.status != GameDateStatus.IN_PROGRESS:
            raise GameDateNotInProgress(game_date_id, game_date.status.value)

        roster_size = game_date.roster_size
        if not isinstance(position, int) or position < 1 or position > roster_size:
            raise InvalidPosition(position, roster_size)
        if eliminated_player_id not in game_date.player_ids:
            raise PlayerNotOnRoster(eliminated_player_id, game_date_id)

        eliminations = self._store.list_eliminations(game_date_id)
        eliminated_ids = {record.eliminated_player_id for record in eliminations}
        if eliminated_player_id in eliminated_ids:
            raise PlayerAlreadyEliminated(eliminated_player_id, game_date_id)
        if any(record.position == position for record in eliminations):
            raise PositionAlreadyTaken(position, game_date_id)

        if isinstance(eliminator, ByPlayer):
            eliminator_id = eliminator.player_id
            if eliminator_id not in game_date.player_ids:
                raise InvalidEliminator(eliminator_id, "not on the game date roster")
            if eliminator_id == eliminated_player_id:
                raise InvalidEliminator(eliminator_id, "a player cannot eliminate themselves")
            if eliminator_id in eliminated_ids:
                raise InvalidEliminator(eliminator_id, "already eliminated in this game date")

        points = self._points_table.points(position, roster_size)
        return self._store.insert_elimination(
            NewElimination(
                game_date_id=game_date_id,
                eliminated_player_id=eliminated_player_id,
                eliminator=eliminator,
                position=position,
                points=points,
            )
        )


def _remaining_players(game_date: GameDate, eliminations: list[EliminationRecord]) -> list[int]:
    eliminated_ids = {record.eliminated_player_id for record in eliminations}
    return [player_id for player_id in game_date.player_ids if player_id not in eliminated_ids]
