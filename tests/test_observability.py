import json
import logging

from pokerleague.observability import JSONFormatter, setup_logging


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        "pokerleague.test", logging.INFO, __file__, 1, "Elimination %s", ("recorded",), None
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_includes_context_fields() -> None:
    payload = json.loads(
        JSONFormatter().format(_record(game_date_id=4, position=9, eliminator_player_id=None))
    )

    assert payload["message"] == "Elimination recorded"
    assert payload["level"] == "INFO"
    assert payload["game_date_id"] == 4
    assert payload["position"] == 9
    assert "eliminator_player_id" not in payload


def test_setup_logging_attaches_one_handler() -> None:
    root = logging.getLogger()
    previous_level = root.level
    handler = setup_logging(level="debug", fmt="text")
    try:
        assert handler in root.handlers
        assert root.level == logging.DEBUG
        assert not isinstance(handler.formatter, JSONFormatter)
    finally:
        root.removeHandler(handler)
        root.setLevel(previous_level)
