"""Trail of league writes and failures.

Every recorded or rejected elimination, every champion override change and
every export leaves one row. Game date, tournament number and error code get
their own columns so a session's history can be read back without parsing
the JSON context.
"""

from __future__ import annotations

import json
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pokerleague.errors import LeagueError

ELIMINATION_RECORDED = "ELIMINATION_RECORDED"
ELIMINATION_REJECTED = "ELIMINATION_REJECTED"
WINNER_OVERRIDE_SET = "WINNER_OVERRIDE_SET"
WINNER_OVERRIDE_REMOVED = "WINNER_OVERRIDE_REMOVED"
RANKING_EXPORTED = "RANKING_EXPORTED"
ERROR = "ERROR"

EVENT_TYPES = [
    ELIMINATION_RECORDED,
    ELIMINATION_REJECTED,
    WINNER_OVERRIDE_SET,
    WINNER_OVERRIDE_REMOVED,
    RANKING_EXPORTED,
    ERROR,
]

# context keys promoted to columns
_INDEXED_KEYS = ("game_date_id", "tournament_number", "error_code")


@dataclass(frozen=True)
class AuditEvent:
    id: int
    event_type: str
    title: str
    details: str
    level: str
    game_date_id: int | None
    tournament_number: int | None
    error_code: str | None
    context: dict[str, object]
    created_at: str

    def as_line(self) -> str:
        code = f" [{self.error_code}]" if self.error_code else ""
        return (
            f"[{self.created_at}] {self.level.upper()} {self.event_type}{code}"
            f" | {self.title} | {self.details}"
        )


class AuditLogService:
    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection

    def log_event(
        self,
        event_type: str,
        title: str,
        details: str,
        level: str = "info",
        context: dict[str, Any] | None = None,
    ) -> int:
        if event_type not in EVENT_TYPES:
            raise ValueError(f"Unknown audit event type: {event_type}")
        payload = {key: value for key, value in (context or {}).items() if value is not None}
        indexed = [payload.pop(key, None) for key in _INDEXED_KEYS]
        with self._connection:
            cursor = self._connection.execute(
                """
                INSERT INTO audit_log (
                    event_type, title, details, level,
                    game_date_id, tournament_number, error_code, context_json
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    event_type,
                    title,
                    details,
                    level,
                    *indexed,
                    json.dumps(payload, ensure_ascii=False),
                ),
            )
        return int(cursor.lastrowid)

    def record_failure(
        self,
        exc: BaseException,
        event_type: str = ERROR,
        title: str | None = None,
        **context: Any,
    ) -> int:
        """Store a failure; league errors contribute their code and context.

        Anything that is not a ``LeagueError`` is stored under a generic code
        with its message kept out of the details.
        """
        if isinstance(exc, LeagueError):
            payload = {**exc.context, **context, "error_code": exc.code}
            details = exc.message
            level = "warning" if exc.http_status < 500 else "error"
        else:
            payload = {**context, "error_code": "INTERNAL_ERROR", "exception": type(exc).__name__}
            details = "An unexpected error occurred"
            level = "error"
        return self.log_event(
            event_type, title or type(exc).__name__, details, level=level, context=payload
        )

    def list_events(
        self,
        event_type: str | None = None,
        query: str = "",
        game_date_id: int | None = None,
        tournament_number: int | None = None,
    ) -> list[AuditEvent]:
        clauses: list[str] = []
        params: list[object] = []

        if event_type:
            clauses.append("event_type = ?")
            params.append(event_type)
        if game_date_id is not None:
            clauses.append("game_date_id = ?")
            params.append(game_date_id)
        if tournament_number is not None:
            clauses.append("tournament_number = ?")
            params.append(tournament_number)
        if query.strip():
            clauses.append("(title LIKE ? OR details LIKE ?)")
            like = f"%{query.strip()}%"
            params.extend([like, like])

        where_sql = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        rows = self._connection.execute(
            f"SELECT * FROM audit_log {where_sql} ORDER BY id DESC",
            params,
        ).fetchall()
        return [_row_to_event(row) for row in rows]

    def session_trail(self, game_date_id: int) -> list[AuditEvent]:
        """Accepted and rejected eliminations of one game date, oldest first."""
        return list(reversed(self.list_events(game_date_id=game_date_id)))

    def export_txt(self, path: str | Path, **filters: Any) -> Path:
        output_path = Path(path)
        events = self.list_events(**filters)
        output_path.write_text("\n".join(event.as_line() for event in events), encoding="utf-8")
        return output_path


def _row_to_event(row: sqlite3.Row) -> AuditEvent:
    try:
        context = json.loads(row["context_json"] or "{}")
    except json.JSONDecodeError:
        context = {}
    if not isinstance(context, dict):
        context = {}
    return AuditEvent(
        id=int(row["id"]),
        event_type=str(row["event_type"]),
        title=str(row["title"]),
        details=str(row["details"] or ""),
        level=str(row["level"] or "info"),
        game_date_id=row["game_date_id"],
        tournament_number=row["tournament_number"],
        error_code=row["error_code"],
        context=context,
        created_at=str(row["created_at"]),
    )
