"""SQLite repositories for league entities."""

from __future__ import annotations

import sqlite3
from typing import Any, Iterable, Sequence

from pokerleague.db.models import (
    EliminationRecord,
    GameDate,
    GameDateStatus,
    NewElimination,
    Player,
    PlayerRole,
    Tournament,
    TournamentStatus,
    WinnerOverride,
    eliminator_from_id,
    eliminator_to_id,
)


def _row_to_player(row: sqlite3.Row | None) -> Player | None:
    if row is None:
        return None
    return Player(
        id=int(row["id"]),
        first_name=str(row["first_name"]),
        last_name=str(row["last_name"]),
        role=PlayerRole(row["role"]),
        is_active=bool(row["is_active"]),
    )


def _row_to_tournament(row: sqlite3.Row | None) -> Tournament | None:
    if row is None:
        return None
    return Tournament(
        id=int(row["id"]),
        number=int(row["number"]),
        name=str(row["name"]),
        status=TournamentStatus(row["status"]),
    )


def _row_to_elimination(row: sqlite3.Row) -> EliminationRecord:
    return EliminationRecord(
        id=int(row["id"]),
        game_date_id=int(row["game_date_id"]),
        eliminated_player_id=int(row["eliminated_player_id"]),
        eliminator=eliminator_from_id(row["eliminator_player_id"]),
        position=int(row["position"]),
        points=int(row["points"]),
        created_at=row["created_at"],
    )


def _row_to_override(row: sqlite3.Row | None) -> WinnerOverride | None:
    if row is None:
        return None
    return WinnerOverride(
        tournament_number=int(row["tournament_number"]),
        champion_player_id=int(row["champion_player_id"]),
        note=row["note"],
        created_at=row["created_at"],
    )


class PlayerRepository:
    """Repository for player data access."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection

    def create(self, data: dict[str, Any]) -> int:
        role = data.get("role") or PlayerRole.MEMBER
        cursor = self._connection.execute(
            """
            INSERT INTO players (first_name, last_name, role, is_active)
            VALUES (?, ?, ?, ?)
            """,
            (
                data.get("first_name"),
                data.get("last_name"),
                PlayerRole(role).value,
                1 if data.get("is_active", True) else 0,
            ),
        )
        self._connection.commit()
        return int(cursor.lastrowid)

    def get(self, player_id: int) -> Player | None:
        row = self._connection.execute(
            "SELECT * FROM players WHERE id = ?", (player_id,)
        ).fetchone()
        return _row_to_player(row)

    def list(self, *, active_only: bool = False) -> list[Player]:
        where_sql = "WHERE is_active = 1" if active_only else ""
        rows = self._connection.execute(
            f"SELECT * FROM players {where_sql} ORDER BY last_name, first_name, id"
        ).fetchall()
        return [_row_to_player(row) for row in rows]

    def get_many(self, player_ids: Iterable[int]) -> dict[int, Player]:
        ids = sorted(set(player_ids))
        if not ids:
            return {}
        placeholders = ", ".join("?" for _ in ids)
        rows = self._connection.execute(
            f"SELECT * FROM players WHERE id IN ({placeholders})", ids
        ).fetchall()
        players = (_row_to_player(row) for row in rows)
        return {player.id: player for player in players}

    def set_active(self, player_id: int, is_active: bool) -> None:
        self._connection.execute(
            "UPDATE players SET is_active = ? WHERE id = ?",
            (1 if is_active else 0, player_id),
        )
        self._connection.commit()


class TournamentRepository:
    """Repository for tournament data access."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection

    def create(self, data: dict[str, Any]) -> int:
        status = data.get("status") or TournamentStatus.UPCOMING
        cursor = self._connection.execute(
            """
            INSERT INTO tournaments (number, name, status)
            VALUES (?, ?, ?)
            """,
            (
                data.get("number"),
                data.get("name") or f"Torneo {data.get('number')}",
                TournamentStatus(status).value,
            ),
        )
        self._connection.commit()
        return int(cursor.lastrowid)

    def get(self, tournament_id: int) -> Tournament | None:
        row = self._connection.execute(
            "SELECT * FROM tournaments WHERE id = ?", (tournament_id,)
        ).fetchone()
        return _row_to_tournament(row)

    def get_by_number(self, number: int) -> Tournament | None:
        row = self._connection.execute(
            "SELECT * FROM tournaments WHERE number = ?", (number,)
        ).fetchone()
        return _row_to_tournament(row)

    def list(self, status: TournamentStatus | None = None) -> list[Tournament]:
        if status is None:
            rows = self._connection.execute(
                "SELECT * FROM tournaments ORDER BY number"
            ).fetchall()
        else:
            rows = self._connection.execute(
                "SELECT * FROM tournaments WHERE status = ? ORDER BY number",
                (TournamentStatus(status).value,),
            ).fetchall()
        return [_row_to_tournament(row) for row in rows]

    def update_status(self, tournament_id: int, status: TournamentStatus) -> None:
        self._connection.execute(
            """
            UPDATE tournaments
            SET status = ?,
                updated_at = CURRENT_TIMESTAMP
            WHERE id = ?
            """,
            (TournamentStatus(status).value, tournament_id),
        )
        self._connection.commit()


class GameDateRepository:
    """Repository for game dates and their rosters.

    Status and roster writes belong to the lifecycle authority; the core only
    reads them.
    """

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection

    def create(self, data: dict[str, Any]) -> int:
        status = data.get("status") or GameDateStatus.PENDING
        with self._connection:
            cursor = self._connection.execute(
                """
                INSERT INTO game_dates (tournament_id, date_number, status, scheduled_date)
                VALUES (?, ?, ?, ?)
                """,
                (
                    data.get("tournament_id"),
                    data.get("date_number"),
                    GameDateStatus(status).value,
                    data.get("scheduled_date"),
                ),
            )
            game_date_id = int(cursor.lastrowid)
            self._insert_roster(game_date_id, data.get("player_ids") or [])
        return game_date_id

    def get(self, game_date_id: int) -> GameDate | None:
        row = self._connection.execute(
            "SELECT * FROM game_dates WHERE id = ?", (game_date_id,)
        ).fetchone()
        if row is None:
            return None
        return self._row_to_game_date(row)

    def list_for_tournament(self, tournament_id: int) -> list[GameDate]:
        rows = self._connection.execute(
            "SELECT * FROM game_dates WHERE tournament_id = ? ORDER BY date_number",
            (tournament_id,),
        ).fetchall()
        return [self._row_to_game_date(row) for row in rows]

    def update_status(self, game_date_id: int, status: GameDateStatus) -> None:
        self._connection.execute(
            """
            UPDATE game_dates
            SET status = ?,
                updated_at = CURRENT_TIMESTAMP
            WHERE id = ?
            """,
            (GameDateStatus(status).value, game_date_id),
        )
        self._connection.commit()

    def set_roster(self, game_date_id: int, player_ids: Sequence[int]) -> None:
        with self._connection:
            self._connection.execute(
                "DELETE FROM game_date_players WHERE game_date_id = ?", (game_date_id,)
            )
            self._insert_roster(game_date_id, player_ids)

    def _insert_roster(self, game_date_id: int, player_ids: Iterable[int]) -> None:
        self._connection.executemany(
            "INSERT INTO game_date_players (game_date_id, player_id) VALUES (?, ?)",
            [(game_date_id, int(player_id)) for player_id in dict.fromkeys(player_ids)],
        )

    def _row_to_game_date(self, row: sqlite3.Row) -> GameDate:
        roster_rows = self._connection.execute(
            "SELECT player_id FROM game_date_players WHERE game_date_id = ? ORDER BY player_id",
            (row["id"],),
        ).fetchall()
        return GameDate(
            id=int(row["id"]),
            tournament_id=int(row["tournament_id"]),
            date_number=int(row["date_number"]),
            status=GameDateStatus(row["status"]),
            player_ids=tuple(int(item[0]) for item in roster_rows),
            scheduled_date=row["scheduled_date"],
        )


class EliminationRepository:
    """Repository for elimination records.

    ``insert`` does not commit: it is always called inside the write
    transaction that validated the record.
    """

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection

    def insert(self, elimination: NewElimination) -> EliminationRecord:
        cursor = self._connection.execute(
            """
            INSERT INTO eliminations (
                game_date_id,
                eliminated_player_id,
                eliminator_player_id,
                position,
                points
            )
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                elimination.game_date_id,
                elimination.eliminated_player_id,
                eliminator_to_id(elimination.eliminator),
                elimination.position,
                elimination.points,
            ),
        )
        return self.get(int(cursor.lastrowid))

    def get(self, elimination_id: int) -> EliminationRecord | None:
        row = self._connection.execute(
            "SELECT * FROM eliminations WHERE id = ?", (elimination_id,)
        ).fetchone()
        if row is None:
            return None
        return _row_to_elimination(row)

    def list_for_game_date(self, game_date_id: int) -> list[EliminationRecord]:
        rows = self._connection.execute(
            "SELECT * FROM eliminations WHERE game_date_id = ? ORDER BY position DESC",
            (game_date_id,),
        ).fetchall()
        return [_row_to_elimination(row) for row in rows]

    def list_for_tournament(self, tournament_id: int) -> list[EliminationRecord]:
        rows = self._connection.execute(
            """
            SELECT eliminations.*
            FROM eliminations
            JOIN game_dates ON game_dates.id = eliminations.game_date_id
            WHERE game_dates.tournament_id = ?
            ORDER BY game_dates.date_number, eliminations.position DESC
            """,
            (tournament_id,),
        ).fetchall()
        return [_row_to_elimination(row) for row in rows]

    def count_for_game_date(self, game_date_id: int) -> int:
        row = self._connection.execute(
            "SELECT COUNT(*) FROM eliminations WHERE game_date_id = ?",
            (game_date_id,),
        ).fetchone()
        return int(row[0]) if row else 0


class WinnerOverrideRepository:
    """Repository for curated tournament champions."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection

    def upsert(self, data: dict[str, Any]) -> None:
        self._connection.execute(
            """
            INSERT INTO winner_overrides (tournament_number, champion_player_id, note)
            VALUES (?, ?, ?)
            ON CONFLICT (tournament_number) DO UPDATE SET
                champion_player_id = excluded.champion_player_id,
                note = excluded.note,
                created_at = CURRENT_TIMESTAMP
            """,
            (
                data.get("tournament_number"),
                data.get("champion_player_id"),
                data.get("note"),
            ),
        )
        self._connection.commit()

    def get(self, tournament_number: int) -> WinnerOverride | None:
        row = self._connection.execute(
            "SELECT * FROM winner_overrides WHERE tournament_number = ?",
            (tournament_number,),
        ).fetchone()
        return _row_to_override(row)

    def list(self) -> list[WinnerOverride]:
        rows = self._connection.execute(
            "SELECT * FROM winner_overrides ORDER BY tournament_number"
        ).fetchall()
        return [_row_to_override(row) for row in rows]

    def delete(self, tournament_number: int) -> bool:
        cursor = self._connection.execute(
            "DELETE FROM winner_overrides WHERE tournament_number = ?",
            (tournament_number,),
        )
        self._connection.commit()
        return cursor.rowcount > 0
