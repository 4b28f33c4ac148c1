from pathlib import Path

import pytest

from pokerleague.services.points_loader import (
    load_points_table,
    load_points_table_from_settings,
    read_points_curves,
)
from tests.helpers.xlsx_factory import make_points_xlsx, make_single_table_xlsx

NINE_PLAYER_CURVE = [20, 15, 10, 8, 6, 4, 3, 2, 1]


def test_loads_curves_from_workbook(tmp_path: Path) -> None:
    path = make_points_xlsx(tmp_path, {9: NINE_PLAYER_CURVE}, version="2024.1")

    result = load_points_table(path)

    assert result.loaded is True
    assert result.warnings == []
    assert result.path == str(path)
    assert result.version == "2024.1"
    assert result.updated_at is not None
    assert result.table.points(1, 9) == 20
    assert result.table.points(1, 10) == 17


def test_spanish_headers_and_title_rows(tmp_path: Path) -> None:
    rows = [(9, position, points) for position, points in enumerate(NINE_PLAYER_CURVE, start=1)]
    path = make_single_table_xlsx(
        tmp_path,
        ["Jugadores", "Posición", "Puntos"],
        rows,
        title_rows=[["Tabla de puntos 2024"], []],
    )

    curves, warnings = read_points_curves(path)

    assert curves == {9: NINE_PLAYER_CURVE}
    assert warnings == []


def test_incomplete_or_invalid_curves_are_rejected(tmp_path: Path) -> None:
    rows = [
        (9, position, points) for position, points in enumerate(NINE_PLAYER_CURVE, start=1)
    ]
    rows += [(10, 1, 5), (10, 2, 4)]
    rows += [(3, 1, 1), (3, 2, 2), (3, 3, 3)]
    path = make_single_table_xlsx(tmp_path, ["participants", "position", "points"], rows)

    result = load_points_table(path)

    assert result.loaded is True
    assert result.table.custom_sizes == [9]
    assert len(result.warnings) == 2
    assert any(warning.startswith("10 players") for warning in result.warnings)
    assert any(warning.startswith("3 players") for warning in result.warnings)


def test_missing_header_raises(tmp_path: Path) -> None:
    path = make_single_table_xlsx(tmp_path, ["a", "b"], [(1, 2)])
    with pytest.raises(ValueError):
        read_points_curves(path)


def test_wrong_layout_falls_back_to_default_curve(tmp_path: Path) -> None:
    path = make_single_table_xlsx(tmp_path, ["a", "b"], [(1, 2)])

    result = load_points_table(path)

    assert result.loaded is False
    assert result.table.points(1, 9) == 15
    assert len(result.warnings) == 1


def test_missing_file_falls_back_to_default_curve(tmp_path: Path) -> None:
    result = load_points_table(tmp_path / "absent.xlsx")

    assert result.loaded is False
    assert "not found" in result.warnings[0]
    assert result.table.points(1, 9) == 15


def test_no_path_uses_default_curve() -> None:
    result = load_points_table(None)

    assert result.loaded is False
    assert result.path is None
    assert result.warnings == []


def test_path_from_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = make_points_xlsx(tmp_path, {9: NINE_PLAYER_CURVE})
    monkeypatch.setenv("POINTS_XLSX_PATH", str(path))

    result = load_points_table_from_settings()

    assert result.loaded is True
    assert result.table.points(1, 9) == 20
