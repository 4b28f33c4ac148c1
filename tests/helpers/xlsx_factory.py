from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping, Sequence
from uuid import uuid4

from openpyxl import Workbook


def _next_path(tmp_path: Path, prefix: str) -> Path:
    return tmp_path / f"{prefix}_{uuid4().hex}.xlsx"


def make_single_table_xlsx(
    tmp_path: Path,
    headers: Iterable[object],
    rows: Iterable[Iterable[object]],
    title_rows: Iterable[Iterable[object]] = (),
    version: str | None = None,
) -> Path:
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = "Points"

    for row in title_rows:
        worksheet.append(list(row))
    worksheet.append(list(headers))
    for row in rows:
        worksheet.append(list(row))
    if version is not None:
        workbook.properties.version = version

    path = _next_path(tmp_path, "points")
    workbook.save(path)
    return path


def make_points_xlsx(
    tmp_path: Path,
    curves: Mapping[int, Sequence[int]],
    headers: Sequence[str] = ("Participants", "Position", "Points"),
    version: str | None = None,
) -> Path:
    """One ``participants | position | points`` row per position of every curve."""
    rows = [
        (participants, position, points)
        for participants, curve in sorted(curves.items())
        for position, points in enumerate(curve, start=1)
    ]
    return make_single_table_xlsx(tmp_path, headers, rows, version=version)
