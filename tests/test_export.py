from pathlib import Path

from openpyxl import load_workbook

from pokerleague.db.database import get_connection
from pokerleague.db.models import TournamentStatus
from pokerleague.db.store import SqliteLeagueStore
from pokerleague.domain.points import PointsTable
from pokerleague.services.audit_log import RANKING_EXPORTED, AuditLogService
from pokerleague.services.elimination_recorder import EliminationRecorder
from pokerleague.services.export_ranking import RankingExportService
from pokerleague.services.winner_overrides import WinnerOverrideService
from tests.helpers.league_factory import seed_league


def _seed_played_tournament(connection, number: int = 5):
    league = seed_league(
        connection, number=number, players=9, tournament_status=TournamentStatus.FINISHED
    )
    recorder = EliminationRecorder(SqliteLeagueStore(connection), PointsTable())
    for position in range(9, 1, -1):
        recorder.record_elimination(
            league.game_date_ids[0], league.player_ids[position - 1], None, position
        )
    return league


def test_export_ranking_xlsx(tmp_path: Path) -> None:
    connection = get_connection(tmp_path / "league.db")
    league = _seed_played_tournament(connection)
    service = RankingExportService(connection, PointsTable())

    output = service.export_ranking_xlsx(league.tournament_id, tmp_path / "ranking.xlsx")

    workbook = load_workbook(output)
    sheet = workbook.active
    assert sheet.title == "Ranking"
    assert sheet["A1"].value == "Tournament 5: Torneo 5"
    header = [cell.value for cell in sheet[4]]
    assert header[:4] == ["Rank", "Player", "Total", "Final score"]
    assert header[-2:] == ["D1", "Trend"]
    first_row = [cell.value for cell in sheet[5]]
    assert first_row[:3] == [1, "T5P01 Test", 15]
    assert sheet.max_row == 4 + 9
    assert sheet.freeze_panes == "A5"

    events = AuditLogService(connection).list_events(event_type=RANKING_EXPORTED)
    assert events[0].tournament_number == 5
    connection.close()


def test_export_winners_xlsx(tmp_path: Path) -> None:
    connection = get_connection(tmp_path / "league.db")
    league = _seed_played_tournament(connection, number=1)
    WinnerOverrideService(connection).set_override(23, league.player_ids[2], note="Paper records")
    service = RankingExportService(connection, PointsTable())

    output = service.export_winners_xlsx(tmp_path / "champions.xlsx")

    sheet = load_workbook(output).active
    assert sheet.title == "Champions"
    assert [cell.value for cell in sheet[2]] == ["Tournament", "Champion", "Points", "Source", "Note"]
    assert [cell.value for cell in sheet[3]] == [1, "T1P01 Test", 15, "computed", None]
    assert [cell.value for cell in sheet[4]] == [23, "T1P03 Test", None, "override", "Paper records"]
    connection.close()
