"""Typed errors raised by the league core and their response mapping.

Every validation failure has its own class so callers can branch on why an
operation failed. The core never recovers locally; a transport adapter calls
``error_response`` to turn any exception into a status code and a JSON body.
"""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


class LeagueError(Exception):
    """Base class for domain errors raised by the core."""

    code = "LEAGUE_ERROR"
    http_status = 500

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = {key: value for key, value in context.items() if value is not None}

    def to_response(self) -> dict[str, Any]:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "context": dict(self.context),
            }
        }


# Elimination recording (400)


class EliminationError(LeagueError):
    http_status = 400


class GameDateNotInProgress(EliminationError):
    code = "GAME_DATE_NOT_IN_PROGRESS"

    def __init__(self, game_date_id: int, status: str | None) -> None:
        super().__init__(
            f"Game date {game_date_id} is not in progress (status: {status}).",
            game_date_id=game_date_id,
            status=status,
        )
        self.game_date_id = game_date_id
        self.status = status


class GameDateNotFound(GameDateNotInProgress):
    """A game date that does not exist cannot be in progress either."""

    code = "GAME_DATE_NOT_FOUND"

    def __init__(self, game_date_id: int) -> None:
        LeagueError.__init__(
            self,
            f"Game date {game_date_id} not found.",
            game_date_id=game_date_id,
        )
        self.game_date_id = game_date_id
        self.status = None


class InvalidPosition(EliminationError):
    code = "INVALID_POSITION"

    def __init__(self, position: int, roster_size: int, reason: str | None = None) -> None:
        message = reason or f"Position {position} is outside 1..{roster_size}."
        super().__init__(message, position=position, roster_size=roster_size)
        self.position = position
        self.roster_size = roster_size


class PlayerAlreadyEliminated(EliminationError):
    code = "PLAYER_ALREADY_ELIMINATED"

    def __init__(self, player_id: int, game_date_id: int) -> None:
        super().__init__(
            f"Player {player_id} is already eliminated in game date {game_date_id}.",
            eliminated_player_id=player_id,
            game_date_id=game_date_id,
        )
        self.player_id = player_id


class PlayerNotOnRoster(PlayerAlreadyEliminated):
    """A player who never sat down in the session is not still playing either."""

    code = "PLAYER_NOT_ON_ROSTER"

    def __init__(self, player_id: int, game_date_id: int) -> None:
        LeagueError.__init__(
            self,
            f"Player {player_id} is not on the roster of game date {game_date_id}.",
            eliminated_player_id=player_id,
            game_date_id=game_date_id,
        )
        self.player_id = player_id


class PositionAlreadyTaken(EliminationError):
    code = "POSITION_ALREADY_TAKEN"

    def __init__(self, position: int, game_date_id: int) -> None:
        super().__init__(
            f"Position {position} is already taken in game date {game_date_id}.",
            position=position,
            game_date_id=game_date_id,
        )
        self.position = position


class InvalidEliminator(EliminationError):
    code = "INVALID_ELIMINATOR"

    def __init__(self, eliminator_id: int, reason: str) -> None:
        super().__init__(
            f"Player {eliminator_id} cannot be the eliminator: {reason}.",
            eliminator_player_id=eliminator_id,
        )
        self.eliminator_id = eliminator_id
        self.reason = reason


# Ranking and winner resolution


class RankingError(LeagueError):
    http_status = 400


class TournamentNotFound(RankingError):
    code = "TOURNAMENT_NOT_FOUND"
    http_status = 404

    def __init__(
        self, tournament_id: int | None = None, tournament_number: int | None = None
    ) -> None:
        if tournament_number is not None:
            message = f"Tournament number {tournament_number} not found."
        else:
            message = f"Tournament {tournament_id} not found."
        super().__init__(
            message,
            tournament_id=tournament_id,
            tournament_number=tournament_number,
        )


class NoCompletedDatesError(RankingError):
    code = "NO_COMPLETED_DATES"

    def __init__(self, tournament_id: int) -> None:
        super().__init__(
            f"Tournament {tournament_id} has no game dates with recorded eliminations.",
            tournament_id=tournament_id,
        )
        self.tournament_id = tournament_id


class PlayerNotInRanking(RankingError):
    code = "PLAYER_NOT_IN_RANKING"
    http_status = 404

    def __init__(self, tournament_number: int, reason: str = "standings are empty") -> None:
        super().__init__(
            f"No champion can be resolved for tournament number {tournament_number}: {reason}.",
            tournament_number=tournament_number,
        )
        self.tournament_number = tournament_number


def error_response(
    exc: BaseException, audit_log: Any = None, **context: Any
) -> tuple[int, dict[str, Any]]:
    """Map an exception to ``(status_code, body)`` and log it with context.

    When an ``AuditLogService`` is passed the failure is also stored in the
    audit trail.
    """
    if audit_log is not None:
        audit_log.record_failure(exc, **context)
    if isinstance(exc, LeagueError):
        extra = {**exc.context, **context, "error_code": exc.code}
        if exc.http_status >= 500:
            logger.error("League error: %s", exc.message, extra=extra)
        else:
            logger.warning("Rejected request: %s", exc.message, extra=extra)
        return exc.http_status, exc.to_response()

    logger.error(
        "Unhandled exception: %s",
        exc,
        exc_info=(type(exc), exc, exc.__traceback__),
        extra={**context, "error_code": "INTERNAL_ERROR"},
    )
    return 500, {
        "error": {
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred",
            "context": {},
        }
    }
