from __future__ import annotations

import json
import os
from pathlib import Path

APP_DIR_NAME = "PokerLeague"
DB_FILENAME = "league.db"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "json"


def get_app_dir() -> Path:
    """Return the per-user data directory, creating it if needed."""
    if os.name == "nt":
        base_dir = os.environ.get("APPDATA") or os.environ.get("LOCALAPPDATA")
        root = Path(base_dir) if base_dir else Path.home() / "AppData" / "Roaming"
    else:
        root = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))
    app_dir = root / APP_DIR_NAME
    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


def _get_app_settings_path() -> Path:
    return get_app_dir() / "settings.json"


def _read_settings() -> dict[str, object]:
    path = _get_app_settings_path()
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}
    if isinstance(data, dict):
        return data
    return {}


def _write_settings(data: dict[str, object]) -> None:
    path = _get_app_settings_path()
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")


def _lookup(env_name: str, key: str) -> str | None:
    env_value = os.environ.get(env_name)
    if env_value:
        return env_value
    value = _read_settings().get(key)
    if value is None or value == "":
        return None
    return str(value)


def get_points_xlsx_path() -> str | None:
    """Path of the workbook with per-session-size points curves, if configured."""
    return _lookup("POINTS_XLSX_PATH", "points_xlsx_path")


def set_points_xlsx_path(path: str | None) -> None:
    settings = _read_settings()
    if path:
        settings["points_xlsx_path"] = path
    else:
        settings.pop("points_xlsx_path", None)
    _write_settings(settings)


def get_db_path() -> Path:
    configured = _lookup("POKERLEAGUE_DB_PATH", "db_path")
    if configured:
        return Path(configured)
    return get_app_dir() / DB_FILENAME


def get_log_level() -> str:
    return (_lookup("POKERLEAGUE_LOG_LEVEL", "log_level") or DEFAULT_LOG_LEVEL).upper()


def get_log_format() -> str:
    return _lookup("POKERLEAGUE_LOG_FORMAT", "log_format") or DEFAULT_LOG_FORMAT
