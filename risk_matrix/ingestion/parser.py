"""
Risk register parser.

Turns CSV, JSON, and Excel (XLSX) risk registers, or raw table rows from a
host report, into RiskDataPoint values for the matrix engine.

Columns are matched flexibly so exports from spreadsheets, GRC tools and
hand-built registers all work without renaming.
"""

from __future__ import annotations

import csv
import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RiskDataPoint:
    """A single risk to place on the matrix."""

    title: str
    likelihood: float
    impact: float

    def to_dict(self) -> dict:
        return {"title": self.title, "likelihood": self.likelihood, "impact": self.impact}


# ──────────────────────────────────────────────
# Column name mapping: normalise variations
# ──────────────────────────────────────────────

# Maps normalised (lowercase, stripped) column names to our internal field names.
COLUMN_ALIASES: dict[str, str] = {
    # Title
    "title": "title",
    "risk": "title",
    "risk name": "title",
    "risk_name": "title",
    "risk title": "title",
    "risk_title": "title",
    "name": "title",
    "summary": "title",
    # Likelihood
    "likelihood": "likelihood",
    "probability": "likelihood",
    "prob": "likelihood",
    "likelihood score": "likelihood",
    "likelihood_score": "likelihood",
    # Impact
    "impact": "impact",
    "consequence": "impact",
    "severity": "impact",
    "impact score": "impact",
    "impact_score": "impact",
}

REQUIRED_FIELDS = {"title", "likelihood", "impact"}

SUPPORTED_EXTENSIONS = {".csv", ".json", ".xlsx"}

# Keys that may wrap the row list in a JSON export
JSON_ROW_KEYS = ("risks", "items", "rows", "data")


# ──────────────────────────────────────────────
# Public API
# ──────────────────────────────────────────────


def parse_file(filepath: str | Path) -> list[RiskDataPoint]:
    """Parse a risk register file into data points, in file order.

    Rows with an empty title or non-numeric/negative ratings are skipped and
    logged; they never abort the parse.

    Args:
        filepath: Path to a .csv, .json or .xlsx file.

    Returns:
        List of RiskDataPoint objects.

    Raises:
        FileNotFoundError: If file does not exist.
        ValueError: If the format is unsupported or required columns are missing.
    """
    path = Path(filepath)

    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    ext = path.suffix.lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise ValueError(
            f"Unsupported file format: '{ext}'. "
            f"Supported formats: {', '.join(sorted(SUPPORTED_EXTENSIONS))}"
        )

    if ext == ".csv":
        return _parse_csv(path)
    elif ext == ".json":
        return _parse_json(path)
    return _parse_xlsx(path)


def points_from_rows(rows: Iterable[Sequence[Any]]) -> list[RiskDataPoint]:
    """Build data points from positional table rows: (title, likelihood, impact, ...).

    Rows with fewer than three cells are skipped. A missing (None) rating
    counts as 0; a non-numeric or negative rating, or an empty title, skips
    the row.
    """
    points: list[RiskDataPoint] = []
    for index, row in enumerate(rows):
        if len(row) < 3:
            logger.warning("Row %d skipped: expected 3 cells, got %d", index, len(row))
            continue
        point = _make_point(row[0], row[1], row[2], index)
        if point is not None:
            points.append(point)
    return points


# ──────────────────────────────────────────────
# Format readers
# ──────────────────────────────────────────────


def _parse_csv(filepath: Path) -> list[RiskDataPoint]:
    with open(filepath, newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)

        if reader.fieldnames is None:
            raise ValueError(f"CSV file is empty or has no header row: {filepath}")

        col_map = _build_column_map(reader.fieldnames)
        _require_columns(col_map, reader.fieldnames)
        return _rows_to_points(list(reader), col_map)


def _parse_json(filepath: Path) -> list[RiskDataPoint]:
    """Parse a JSON register.

    Accepts a list of row objects, or a dict holding the list under one of
    JSON_ROW_KEYS.
    """
    with open(filepath, encoding="utf-8-sig") as f:
        data = json.load(f)

    rows = _extract_json_rows(data)
    if not rows:
        return []

    headers = list(rows[0].keys())
    col_map = _build_column_map(headers)
    _require_columns(col_map, headers)
    return _rows_to_points(rows, col_map)


def _extract_json_rows(data: Any) -> list[dict[str, Any]]:
    if isinstance(data, list):
        rows = data
    elif isinstance(data, dict):
        for key in JSON_ROW_KEYS:
            if key in data and isinstance(data[key], list):
                rows = data[key]
                break
        else:
            raise ValueError(
                f"Unrecognised JSON structure. Expected a list of rows, "
                f"or a dict with a {'/'.join(JSON_ROW_KEYS)} key. "
                f"Found keys: {', '.join(data.keys())}"
            )
    else:
        raise ValueError(f"Unrecognised JSON structure. Expected list or dict, got {type(data).__name__}")

    if not all(isinstance(r, dict) for r in rows):
        raise ValueError("Unrecognised JSON structure. Every row must be an object.")
    return rows


def _parse_xlsx(filepath: Path) -> list[RiskDataPoint]:
    """Parse the active sheet of a workbook. First row is the header."""
    try:
        import openpyxl
    except ImportError:
        raise ImportError(
            "openpyxl is required to parse Excel files. "
            "Install it with: pip install openpyxl"
        )

    wb = openpyxl.load_workbook(filepath, read_only=True, data_only=True)
    ws = wb.active

    if ws is None:
        wb.close()
        raise ValueError(f"Excel file has no active sheet: {filepath}")

    all_rows = list(ws.iter_rows(values_only=True))
    wb.close()

    if not all_rows:
        raise ValueError(f"Excel file is empty: {filepath}")

    headers = [str(h).strip() if h is not None else "" for h in all_rows[0]]
    if not any(headers):
        raise ValueError(f"Excel file has no header row: {filepath}")

    col_map = _build_column_map(headers)
    _require_columns(col_map, [h for h in headers if h])

    rows: list[dict[str, Any]] = []
    for row_tuple in all_rows[1:]:
        if all(v is None for v in row_tuple):
            continue
        rows.append({headers[i]: v for i, v in enumerate(row_tuple) if i < len(headers) and headers[i]})

    return _rows_to_points(rows, col_map)


# ──────────────────────────────────────────────
# Column mapping
# ──────────────────────────────────────────────


def _build_column_map(headers: Sequence[str]) -> dict[str, str]:
    """Map original header -> internal field name. First matching header wins per field."""
    col_map: dict[str, str] = {}
    taken: set[str] = set()
    for header in headers:
        field_name = COLUMN_ALIASES.get(str(header).strip().lower())
        if field_name and field_name not in taken:
            col_map[header] = field_name
            taken.add(field_name)
    return col_map


def _require_columns(col_map: dict[str, str], headers: Sequence[str]) -> None:
    missing = REQUIRED_FIELDS - set(col_map.values())
    if missing:
        raise ValueError(
            f"Missing required columns: {', '.join(sorted(missing))}. "
            f"Found columns: {', '.join(str(h) for h in headers)}"
        )


# ──────────────────────────────────────────────
# Row processing
# ──────────────────────────────────────────────


def _rows_to_points(rows: list[dict[str, Any]], col_map: dict[str, str]) -> list[RiskDataPoint]:
    field_to_col = {v: k for k, v in col_map.items()}
    points: list[RiskDataPoint] = []
    for index, row in enumerate(rows):
        point = _make_point(
            row.get(field_to_col["title"]),
            row.get(field_to_col["likelihood"]),
            row.get(field_to_col["impact"]),
            index,
        )
        if point is not None:
            points.append(point)
    return points


def _make_point(title: Any, likelihood: Any, impact: Any, index: int) -> RiskDataPoint | None:
    title_text = "" if title is None else str(title).strip()
    if not title_text:
        logger.warning("Row %d skipped: empty title", index)
        return None

    l_value = parse_rating(likelihood)
    i_value = parse_rating(impact)
    if l_value is None or i_value is None:
        logger.warning("Row %d (%s) skipped: non-numeric likelihood or impact", index, title_text)
        return None
    if l_value < 0 or i_value < 0:
        logger.warning("Row %d (%s) skipped: negative likelihood or impact", index, title_text)
        return None

    return RiskDataPoint(title=title_text, likelihood=l_value, impact=i_value)


def parse_rating(value: Any) -> float | None:
    """Parse a rating cell. Empty means 0; unparseable, NaN or infinite means None."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        raw = value
    else:
        raw = str(value).strip()
        if not raw:
            return 0.0
    try:
        number = float(raw)
    except (OverflowError, ValueError):
        # OverflowError: JSON integers beyond float range
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number
