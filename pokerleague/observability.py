"""Logging setup shared by every entry point of the league core."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

from pokerleague.settings import get_log_format, get_log_level

CONTEXT_FIELDS = (
    "tournament_id",
    "tournament_number",
    "game_date_id",
    "position",
    "eliminated_player_id",
    "eliminator_player_id",
    "player_id",
    "error_code",
)


class JSONFormatter(logging.Formatter):
    """Render records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log: dict[str, object] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in CONTEXT_FIELDS:
            value = record.__dict__.get(key)
            if value is not None:
                log[key] = value
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str | None = None, fmt: str | None = None) -> logging.Handler:
    """Attach a single stream handler to the root logger.

    Level and format default to the values from settings.
    """
    level = level or get_log_level()
    fmt = fmt or get_log_format()
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
