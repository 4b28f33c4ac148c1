from __future__ import annotations

import logging
import sqlite3
from datetime import date
from pathlib import Path
from typing import Iterable, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from pokerleague.db.store import SqliteLeagueStore
from pokerleague.domain.points import PointsTable
from pokerleague.domain.standings import TournamentRanking
from pokerleague.services.audit_log import RANKING_EXPORTED, AuditLogService
from pokerleague.services.ranking_aggregator import RankingAggregator
from pokerleague.services.winner_resolver import WinnerResolver

logger = logging.getLogger(__name__)

HEADER_FILL = "1F4E78"
MAX_COLUMN_WIDTH = 60

TREND_LABELS = {"up": "▲", "down": "▼", "same": "="}


def export_dataset_xlsx(
    path: str | Path,
    header_lines: Iterable[str],
    columns: Sequence[str],
    rows: Sequence[Sequence[object]],
    sheet_title: str = "Export",
) -> None:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = sheet_title

    current_row = 1
    for line in header_lines:
        sheet.cell(row=current_row, column=1, value=line)
        current_row += 1

    header_row = current_row
    header_fill = PatternFill(start_color=HEADER_FILL, end_color=HEADER_FILL, fill_type="solid")
    for column, header_text in enumerate(columns, start=1):
        cell = sheet.cell(row=header_row, column=column, value=header_text)
        cell.font = Font(bold=True, color="FFFFFF")
        cell.alignment = Alignment(horizontal="center", vertical="center")
        cell.fill = header_fill

    current_row += 1
    alignment = Alignment(horizontal="left", vertical="top", wrap_text=True)
    for row in rows:
        for column, value in enumerate(row, start=1):
            cell = sheet.cell(row=current_row, column=column, value=value)
            cell.alignment = alignment
        current_row += 1

    sheet.freeze_panes = f"A{header_row + 1}"

    for column_index in range(1, len(columns) + 1):
        max_length = len(str(columns[column_index - 1]))
        for row_index in range(header_row + 1, current_row):
            value = sheet.cell(row=row_index, column=column_index).value
            if value is None:
                continue
            max_length = max(max_length, len(str(value)))
        width = min(max_length + 2, MAX_COLUMN_WIDTH)
        sheet.column_dimensions[get_column_letter(column_index)].width = width

    sheet.page_setup.orientation = "landscape"
    sheet.page_setup.fitToWidth = 1
    sheet.page_setup.fitToHeight = 0
    workbook.save(str(path))


def ranking_columns(ranking: TournamentRanking) -> list[str]:
    columns = ["Rank", "Player", "Total", "Final score", "Dates", "1st", "2nd", "3rd", "Absences"]
    columns.extend(f"D{number}" for number in ranking.counted_dates)
    columns.append("Trend")
    return columns


def ranking_rows(ranking: TournamentRanking) -> list[list[object]]:
    rows: list[list[object]] = []
    for entry in ranking.entries:
        row: list[object] = [
            entry.rank,
            entry.player_name,
            entry.total_points,
            entry.final_score,
            entry.dates_played,
            entry.first_places,
            entry.second_places,
            entry.third_places,
            entry.absences,
        ]
        row.extend(entry.points_by_date.get(number, 0) for number in ranking.counted_dates)
        trend = TREND_LABELS.get(entry.trend, "=")
        row.append(f"{trend} {entry.positions_changed}" if entry.positions_changed else trend)
        rows.append(row)
    return rows


class RankingExportService:
    def __init__(self, connection: sqlite3.Connection, points_table: PointsTable | None = None) -> None:
        self._store = SqliteLeagueStore(connection)
        self._aggregator = RankingAggregator(self._store, points_table)
        self._resolver = WinnerResolver(self._store, self._aggregator)
        self._audit_log = AuditLogService(connection)

    def export_ranking_xlsx(self, tournament_id: int, path: str | Path) -> Path:
        output_path = Path(path)
        ranking = self._aggregator.calculate_tournament_ranking(tournament_id)
        header_lines = [
            f"Tournament {ranking.tournament_number}: {ranking.tournament_name}",
            f"Game dates counted: {len(ranking.counted_dates)}",
            f"Exported: {date.today().strftime('%d.%m.%Y')}",
        ]
        export_dataset_xlsx(
            output_path,
            header_lines,
            ranking_columns(ranking),
            ranking_rows(ranking),
            sheet_title="Ranking",
        )
        self._audit_log.log_event(
            RANKING_EXPORTED,
            "Ranking exported",
            f"Tournament {ranking.tournament_number} standings saved to {output_path.name}.",
            context={
                "tournament_id": tournament_id,
                "tournament_number": ranking.tournament_number,
                "path": str(output_path),
                "players": len(ranking.entries),
            },
        )
        logger.info("Ranking exported to %s", output_path, extra={"tournament_id": tournament_id})
        return output_path

    def export_winners_xlsx(self, path: str | Path) -> Path:
        output_path = Path(path)
        winners = self._resolver.all_winners_with_fallback()
        rows = [
            [
                winner.tournament_number,
                winner.champion_name,
                winner.total_points,
                winner.source,
                winner.note,
            ]
            for winner in winners
        ]
        export_dataset_xlsx(
            output_path,
            [f"Champions ({len(winners)})"],
            ["Tournament", "Champion", "Points", "Source", "Note"],
            rows,
            sheet_title="Champions",
        )
        self._audit_log.log_event(
            RANKING_EXPORTED,
            "Champions exported",
            f"{len(winners)} champions saved to {output_path.name}.",
            context={"path": str(output_path), "champions": len(winners)},
        )
        logger.info("Champions exported to %s", output_path)
        return output_path
