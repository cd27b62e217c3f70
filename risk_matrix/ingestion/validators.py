"""
File validation for risk registers.

Checks existence, extension, structure, required columns and basic data
quality before parsing, and reports problems as a list of clear messages
instead of raising.
"""

from __future__ import annotations

import csv
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from risk_matrix.engine.mapper import clamp_level, round_half_up
from risk_matrix.ingestion.parser import (
    COLUMN_ALIASES,
    JSON_ROW_KEYS,
    REQUIRED_FIELDS,
    SUPPORTED_EXTENSIONS,
    parse_rating,
)


@dataclass
class ValidationResult:
    """Result of file validation."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    file_type: str = ""
    row_count: int = 0
    usable_rows: int = 0
    columns_found: list[str] = field(default_factory=list)
    columns_mapped: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": self.errors,
            "warnings": self.warnings,
            "file_type": self.file_type,
            "row_count": self.row_count,
            "usable_rows": self.usable_rows,
            "columns_found": self.columns_found,
            "columns_mapped": self.columns_mapped,
        }


def validate_file(filepath: str | Path, matrix_size: int | None = None) -> ValidationResult:
    """Validate a risk register before parsing.

    Checks:
    1. File exists
    2. File extension is supported
    3. File is not empty
    4. Title, likelihood and impact columns are present (alias matching)
    5. Counts rows that would be skipped for bad titles or ratings
    6. With matrix_size, warns about ratings that will be clamped to the grid

    Args:
        filepath: Path to the file to validate.
        matrix_size: Optional grid size used for the out-of-scale warning.

    Returns:
        ValidationResult with valid flag, errors, warnings, and metadata.
    """
    path = Path(filepath)
    result = ValidationResult(valid=True)

    if not path.exists():
        result.valid = False
        result.errors.append(f"File not found: {path}")
        return result

    ext = path.suffix.lower()
    if ext not in SUPPORTED_EXTENSIONS:
        result.valid = False
        result.errors.append(
            f"Unsupported file format: '{ext}'. "
            f"Supported: {', '.join(sorted(SUPPORTED_EXTENSIONS))}"
        )
        return result

    result.file_type = ext

    if path.stat().st_size == 0:
        result.valid = False
        result.errors.append("File is empty (0 bytes).")
        return result

    if ext == ".csv":
        rows = _read_csv(path, result)
    elif ext == ".json":
        rows = _read_json(path, result)
    else:
        rows = _read_xlsx(path, result)

    if rows is not None and result.valid:
        _check_rows(rows, result, matrix_size)

    return result


# ──────────────────────────────────────────────
# Format readers: return rows, or None on a structural error
# ──────────────────────────────────────────────


def _read_csv(filepath: Path, result: ValidationResult) -> list[dict[str, Any]] | None:
    try:
        with open(filepath, newline="", encoding="utf-8-sig") as f:
            reader = csv.DictReader(f)
            if reader.fieldnames is None:
                result.valid = False
                result.errors.append("CSV file has no header row.")
                return None
            _check_headers(list(reader.fieldnames), result)
            return list(reader)
    except UnicodeDecodeError:
        result.valid = False
        result.errors.append("File encoding error. Expected UTF-8 encoded CSV.")
    except csv.Error as e:
        result.valid = False
        result.errors.append(f"CSV parsing error: {e}")
    return None


def _read_json(filepath: Path, result: ValidationResult) -> list[dict[str, Any]] | None:
    try:
        with open(filepath, encoding="utf-8-sig") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        result.valid = False
        result.errors.append(f"Invalid JSON: {e}")
        return None

    rows: Any = None
    if isinstance(data, list):
        rows = data
    elif isinstance(data, dict):
        rows = next((data[k] for k in JSON_ROW_KEYS if isinstance(data.get(k), list)), None)
        if rows is None:
            result.valid = False
            result.errors.append(
                f"Unrecognised JSON structure. Expected a list of rows "
                f"or a dict with a {'/'.join(JSON_ROW_KEYS)} key."
            )
            return None
    else:
        result.valid = False
        result.errors.append(f"Expected JSON list or object, got {type(data).__name__}.")
        return None

    if not all(isinstance(r, dict) for r in rows):
        result.valid = False
        result.errors.append("Every JSON row must be an object.")
        return None

    if rows:
        _check_headers(list(rows[0].keys()), result)
    else:
        result.warnings.append("JSON contains no data rows.")
    return rows


def _read_xlsx(filepath: Path, result: ValidationResult) -> list[dict[str, Any]] | None:
    try:
        import openpyxl
    except ImportError:
        result.valid = False
        result.errors.append("openpyxl is required to validate Excel files. pip install openpyxl")
        return None

    try:
        wb = openpyxl.load_workbook(filepath, read_only=True, data_only=True)
    except Exception as e:
        result.valid = False
        result.errors.append(f"Cannot open Excel file: {e}")
        return None

    ws = wb.active
    if ws is None:
        wb.close()
        result.valid = False
        result.errors.append("Excel file has no active sheet.")
        return None

    all_rows = list(ws.iter_rows(values_only=True))
    wb.close()

    if not all_rows:
        result.valid = False
        result.errors.append("Excel file has no rows.")
        return None

    headers = [str(h).strip() if h is not None else "" for h in all_rows[0]]
    if not any(headers):
        result.valid = False
        result.errors.append("Excel file has no column headers in the first row.")
        return None

    _check_headers([h for h in headers if h], result)
    return [
        {headers[i]: v for i, v in enumerate(r) if i < len(headers) and headers[i]}
        for r in all_rows[1:]
        if not all(v is None for v in r)
    ]


# ──────────────────────────────────────────────
# Shared helpers
# ──────────────────────────────────────────────


def _check_headers(headers: list[str], result: ValidationResult) -> None:
    result.columns_found = [str(h) for h in headers]

    # internal field name -> original header, first match wins
    mapped: dict[str, str] = {}
    for header in headers:
        internal = COLUMN_ALIASES.get(str(header).strip().lower())
        if internal and internal not in mapped:
            mapped[internal] = header
    result.columns_mapped = mapped

    missing = REQUIRED_FIELDS - set(mapped)
    if missing:
        result.valid = False
        result.errors.append(
            f"Missing required columns: {', '.join(sorted(missing))}. "
            f"Required: risk title, likelihood, impact."
        )


def _check_rows(rows: list[dict[str, Any]], result: ValidationResult, matrix_size: int | None) -> None:
    result.row_count = len(rows)
    if not rows:
        if not result.warnings:
            result.warnings.append("File has headers but no data rows.")
        return

    cols = result.columns_mapped
    skipped = 0
    out_of_scale = 0
    for row in rows:
        title = row.get(cols["title"])
        likelihood = parse_rating(row.get(cols["likelihood"]))
        impact = parse_rating(row.get(cols["impact"]))
        if (
            title is None or not str(title).strip()
            or likelihood is None or impact is None
            or likelihood < 0 or impact < 0
        ):
            skipped += 1
            continue
        if matrix_size and (_is_clamped(likelihood, matrix_size) or _is_clamped(impact, matrix_size)):
            out_of_scale += 1

    result.usable_rows = result.row_count - skipped

    if skipped:
        result.warnings.append(
            f"{skipped} row(s) will be skipped: empty title or non-numeric/negative rating."
        )
    if out_of_scale:
        result.warnings.append(
            f"{out_of_scale} row(s) rate outside 1-{matrix_size} and will be drawn on the grid edge."
        )


def _is_clamped(rating: float, matrix_size: int) -> bool:
    """True when the drawn cell differs from the rounded rating."""
    return clamp_level(rating, matrix_size) != round_half_up(rating)
