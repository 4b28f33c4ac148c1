from __future__ import annotations

import logging
import sqlite3

from pokerleague.db.models import WinnerOverride
from pokerleague.db.repositories import PlayerRepository, WinnerOverrideRepository
from pokerleague.services.audit_log import (
    WINNER_OVERRIDE_REMOVED,
    WINNER_OVERRIDE_SET,
    AuditLogService,
)

logger = logging.getLogger(__name__)


class WinnerOverrideService:
    """Curates historical champions; an override always wins over computed standings."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection
        self._overrides = WinnerOverrideRepository(connection)
        self._players = PlayerRepository(connection)
        self._audit_log = AuditLogService(connection)

    def set_override(
        self, tournament_number: int, champion_player_id: int, note: str | None = None
    ) -> WinnerOverride:
        if tournament_number < 1:
            raise ValueError("Tournament number must be positive.")
        champion = self._players.get(champion_player_id)
        if champion is None:
            raise ValueError(f"Player {champion_player_id} not found.")

        previous = self._overrides.get(tournament_number)
        self._overrides.upsert(
            {
                "tournament_number": tournament_number,
                "champion_player_id": champion_player_id,
                "note": note,
            }
        )
        self._audit_log.log_event(
            WINNER_OVERRIDE_SET,
            "Champion override set",
            f"Tournament {tournament_number}: champion is {champion.full_name}.",
            context={
                "tournament_number": tournament_number,
                "champion_player_id": champion_player_id,
                "previous_champion_player_id": previous.champion_player_id if previous else None,
                "note": note,
            },
        )
        logger.info(
            "Champion override set",
            extra={"tournament_number": tournament_number, "player_id": champion_player_id},
        )
        return self._overrides.get(tournament_number)

    def remove_override(self, tournament_number: int) -> bool:
        removed = self._overrides.delete(tournament_number)
        if removed:
            self._audit_log.log_event(
                WINNER_OVERRIDE_REMOVED,
                "Champion override removed",
                f"Tournament {tournament_number} falls back to computed standings.",
                context={"tournament_number": tournament_number},
            )
            logger.info("Champion override removed", extra={"tournament_number": tournament_number})
        return removed

    def list_overrides(self) -> list[WinnerOverride]:
        return self._overrides.list()
