"""Database schema definitions."""

from __future__ import annotations

import sqlite3

PLAYER_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS players (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    first_name TEXT NOT NULL,
    last_name TEXT NOT NULL,
    role TEXT NOT NULL DEFAULT 'Member',
    is_active INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
    CHECK (role IN ('Staff', 'Member', 'Guest'))
);
"""

TOURNAMENT_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS tournaments (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    number INTEGER NOT NULL UNIQUE,
    name TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'upcoming',
    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
    CHECK (status IN ('upcoming', 'active', 'finished'))
);
"""

GAME_DATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS game_dates (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    tournament_id INTEGER NOT NULL,
    date_number INTEGER NOT NULL,
    status TEXT NOT NULL DEFAULT 'pending',
    scheduled_date TEXT,
    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
    UNIQUE (tournament_id, date_number),
    CHECK (date_number >= 1),
    CHECK (status IN ('pending', 'configured', 'in_progress', 'completed')),
    FOREIGN KEY (tournament_id) REFERENCES tournaments(id) ON DELETE CASCADE
);
"""

GAME_DATE_PLAYER_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS game_date_players (
    game_date_id INTEGER NOT NULL,
    player_id INTEGER NOT NULL,
    PRIMARY KEY (game_date_id, player_id),
    FOREIGN KEY (game_date_id) REFERENCES game_dates(id) ON DELETE CASCADE,
    FOREIGN KEY (player_id) REFERENCES players(id)
);
"""

ELIMINATION_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS eliminations (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    game_date_id INTEGER NOT NULL,
    eliminated_player_id INTEGER NOT NULL,
    eliminator_player_id INTEGER,
    position INTEGER NOT NULL,
    points INTEGER NOT NULL,
    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
    UNIQUE (game_date_id, position),
    UNIQUE (game_date_id, eliminated_player_id),
    CHECK (position >= 1),
    CHECK (points >= 0),
    CHECK (eliminator_player_id IS NULL OR eliminator_player_id != eliminated_player_id),
    FOREIGN KEY (game_date_id) REFERENCES game_dates(id) ON DELETE CASCADE,
    FOREIGN KEY (eliminated_player_id) REFERENCES players(id),
    FOREIGN KEY (eliminator_player_id) REFERENCES players(id)
);
"""

WINNER_OVERRIDE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS winner_overrides (
    tournament_number INTEGER PRIMARY KEY,
    champion_player_id INTEGER NOT NULL,
    note TEXT,
    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (champion_player_id) REFERENCES players(id)
);
"""

AUDIT_LOG_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS audit_log (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    event_type TEXT NOT NULL,
    title TEXT NOT NULL,
    details TEXT,
    level TEXT NOT NULL DEFAULT 'info',
    game_date_id INTEGER,
    tournament_number INTEGER,
    error_code TEXT,
    context_json TEXT,
    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
);
"""

INDEXES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_players_name ON players (last_name, first_name);",
    "CREATE INDEX IF NOT EXISTS idx_game_dates_tournament ON game_dates (tournament_id);",
    "CREATE INDEX IF NOT EXISTS idx_eliminations_game_date ON eliminations (game_date_id);",
    "CREATE INDEX IF NOT EXISTS idx_eliminations_player ON eliminations (eliminated_player_id);",
    "CREATE INDEX IF NOT EXISTS idx_audit_log_type ON audit_log (event_type);",
    "CREATE INDEX IF NOT EXISTS idx_audit_log_game_date ON audit_log (game_date_id);",
]


SCHEMA_SQL = [
    PLAYER_TABLE_SQL,
    TOURNAMENT_TABLE_SQL,
    GAME_DATE_TABLE_SQL,
    GAME_DATE_PLAYER_TABLE_SQL,
    ELIMINATION_TABLE_SQL,
    WINNER_OVERRIDE_TABLE_SQL,
    AUDIT_LOG_TABLE_SQL,
    *INDEXES_SQL,
]


def initialize_schema(connection: sqlite3.Connection) -> None:
    """Initialize database schema if needed."""
    with connection:
        for statement in SCHEMA_SQL:
            connection.execute(statement)
