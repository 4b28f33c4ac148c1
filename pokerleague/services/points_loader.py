from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterable

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from pokerleague.domain.points import PointsTable, validate_distribution
from pokerleague.settings import get_points_xlsx_path

logger = logging.getLogger(__name__)

HEADER_SYNONYMS = {
    "participants": ["participants", "players", "jugadores", "totalplayers", "n"],
    "position": ["position", "posicion", "posición", "place", "puesto"],
    "points": ["points", "puntos", "pts"],
}


@dataclass(frozen=True)
class PointsTableLoadResult:
    table: PointsTable
    loaded: bool
    path: str | None
    warnings: list[str] = field(default_factory=list)
    version: str | None = None
    updated_at: str | None = None


def _normalize_header(value: object) -> str:
    if value is None:
        return ""
    text = str(value).strip().lower()
    return "".join(ch for ch in text if ch.isalnum())


def _detect_header_mapping(row_values: Iterable[object]) -> dict[str, int]:
    normalized_synonyms = {
        key: {_normalize_header(item) for item in values}
        for key, values in HEADER_SYNONYMS.items()
    }
    mapping: dict[str, int] = {}
    for idx, cell_value in enumerate(row_values):
        normalized = _normalize_header(cell_value)
        if not normalized:
            continue
        for key, options in normalized_synonyms.items():
            if normalized in options and key not in mapping:
                mapping[key] = idx
                break
    return mapping


def _parse_int(value: object) -> int | None:
    if value is None:
        return None
    try:
        return int(float(str(value).strip().replace(",", ".")))
    except ValueError:
        return None


def read_points_curves(path: str | Path) -> tuple[dict[int, list[int]], list[str]]:
    """Read ``participants | position | points`` rows from the active sheet.

    Returns the usable curves and a warning per rejected curve.
    """
    workbook = load_workbook(str(path), read_only=True, data_only=True)
    try:
        sheet = workbook.active
        header_mapping: dict[str, int] = {}
        raw: dict[int, dict[int, int]] = {}
        warnings: list[str] = []

        for row in sheet.iter_rows(values_only=True):
            row_values = list(row)
            if not header_mapping:
                candidate = _detect_header_mapping(row_values)
                if set(HEADER_SYNONYMS).issubset(candidate):
                    header_mapping = candidate
                continue

            if not any(value is not None and str(value).strip() for value in row_values):
                break

            participants = _parse_int(row_values[header_mapping["participants"]])
            position = _parse_int(row_values[header_mapping["position"]])
            points = _parse_int(row_values[header_mapping["points"]])
            if participants is None or position is None or points is None:
                continue
            raw.setdefault(participants, {})[position] = points
    finally:
        workbook.close()

    if not header_mapping:
        raise ValueError("Header row with participants, position and points not found.")

    curves: dict[int, list[int]] = {}
    for participants, by_position in sorted(raw.items()):
        curve = [by_position.get(position) for position in range(1, participants + 1)]
        if any(value is None for value in curve) or len(by_position) != participants:
            warnings.append(f"{participants} players: positions must cover 1..{participants}")
            continue
        problem = validate_distribution(participants, curve)
        if problem:
            warnings.append(f"{participants} players: {problem}")
            continue
        curves[participants] = curve
    return curves, warnings


def _read_workbook_metadata(path: Path) -> tuple[str | None, str | None]:
    try:
        workbook = load_workbook(str(path), read_only=True)
        properties = workbook.properties
        version = properties.version
        updated_at = properties.modified or properties.created
        workbook.close()
    except (OSError, InvalidFileException):
        return None, None

    normalized_date = None
    if isinstance(updated_at, datetime):
        normalized_date = updated_at.strftime("%Y-%m-%d")
    return version, normalized_date


def load_points_table(path: str | Path | None) -> PointsTableLoadResult:
    """Build a points table from a workbook, falling back to the league curve."""
    if path is None:
        return PointsTableLoadResult(table=PointsTable(), loaded=False, path=None)

    workbook_path = Path(path)
    if not workbook_path.exists():
        warning = f"Points workbook {workbook_path} not found; using the default curve."
        logger.warning(warning)
        return PointsTableLoadResult(
            table=PointsTable(), loaded=False, path=str(workbook_path), warnings=[warning]
        )
    try:
        curves, warnings = read_points_curves(workbook_path)
    except Exception:  # noqa: BLE001
        warning = f"Points workbook {workbook_path} is damaged or has the wrong layout; using the default curve."
        logger.warning(warning, exc_info=True)
        return PointsTableLoadResult(
            table=PointsTable(), loaded=False, path=str(workbook_path), warnings=[warning]
        )

    for warning in warnings:
        logger.warning("Rejected points curve in %s: %s", workbook_path, warning)
    version, updated_at = _read_workbook_metadata(workbook_path)
    return PointsTableLoadResult(
        table=PointsTable(curves),
        loaded=True,
        path=str(workbook_path),
        warnings=warnings,
        version=version,
        updated_at=updated_at,
    )


def load_points_table_from_settings() -> PointsTableLoadResult:
    return load_points_table(get_points_xlsx_path())
