import logging

import pytest

from pokerleague.errors import (
    GameDateNotFound,
    GameDateNotInProgress,
    InvalidEliminator,
    InvalidPosition,
    LeagueError,
    NoCompletedDatesError,
    PlayerAlreadyEliminated,
    PlayerNotInRanking,
    PlayerNotOnRoster,
    PositionAlreadyTaken,
    TournamentNotFound,
    error_response,
)


@pytest.mark.parametrize(
    ("exc", "status", "code"),
    [
        (PlayerAlreadyEliminated(3, 10), 400, "PLAYER_ALREADY_ELIMINATED"),
        (PlayerNotOnRoster(99, 10), 400, "PLAYER_NOT_ON_ROSTER"),
        (PositionAlreadyTaken(9, 10), 400, "POSITION_ALREADY_TAKEN"),
        (InvalidEliminator(4, "not on the game date roster"), 400, "INVALID_ELIMINATOR"),
        (GameDateNotInProgress(10, "completed"), 400, "GAME_DATE_NOT_IN_PROGRESS"),
        (GameDateNotFound(10), 400, "GAME_DATE_NOT_FOUND"),
        (InvalidPosition(12, 9), 400, "INVALID_POSITION"),
        (NoCompletedDatesError(1), 400, "NO_COMPLETED_DATES"),
        (TournamentNotFound(tournament_id=1), 404, "TOURNAMENT_NOT_FOUND"),
        (PlayerNotInRanking(23), 404, "PLAYER_NOT_IN_RANKING"),
    ],
)
def test_league_errors_map_to_status_and_body(exc: LeagueError, status: int, code: str) -> None:
    response_status, body = error_response(exc)

    assert response_status == status
    assert body["error"]["code"] == code
    assert body["error"]["message"] == exc.message


def test_context_drops_missing_values() -> None:
    exc = TournamentNotFound(tournament_number=23)

    assert exc.context == {"tournament_number": 23}
    assert exc.to_response()["error"]["context"] == {"tournament_number": 23}
    assert "number 23" in exc.message


def test_unexpected_errors_do_not_leak_details(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR, logger="pokerleague.errors"):
        status, body = error_response(RuntimeError("secret connection string"), game_date_id=5)

    assert status == 500
    assert body["error"]["code"] == "INTERNAL_ERROR"
    assert "secret" not in str(body)
    assert caplog.records[0].error_code == "INTERNAL_ERROR"
    assert caplog.records[0].game_date_id == 5


def test_rejections_are_logged_as_warnings(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="pokerleague.errors"):
        error_response(PositionAlreadyTaken(9, 10))

    record = caplog.records[0]
    assert record.levelno == logging.WARNING
    assert record.error_code == "POSITION_ALREADY_TAKEN"
    assert record.position == 9


def test_player_not_on_roster_is_caught_as_already_eliminated() -> None:
    exc = PlayerNotOnRoster(99, 10)

    assert isinstance(exc, PlayerAlreadyEliminated)
    assert exc.context == {"eliminated_player_id": 99, "game_date_id": 10}
    assert "not on the roster" in exc.message
