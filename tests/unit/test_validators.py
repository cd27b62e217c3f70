"""Unit tests for risk register validation."""

import json
from pathlib import Path

import pytest

from risk_matrix.ingestion.validators import ValidationResult, validate_file

SAMPLE_DIR = Path(__file__).parent.parent.parent / "sample-data"
SAMPLE_CSV = SAMPLE_DIR / "risk-register-sample.csv"


# ──────────────────────────────────────────────
# File existence and extension checks
# ──────────────────────────────────────────────


class TestFileExistenceAndExtension:

    def test_missing_file(self):
        result = validate_file("/nonexistent/file.csv")
        assert result.valid is False
        assert any("not found" in e.lower() for e in result.errors)

    def test_unsupported_extension(self, tmp_path):
        f = tmp_path / "data.pdf"
        f.write_text("content")
        result = validate_file(f)
        assert result.valid is False
        assert any("unsupported" in e.lower() for e in result.errors)

    def test_empty_file(self, tmp_path):
        f = tmp_path / "empty.csv"
        f.write_text("")
        result = validate_file(f)
        assert result.valid is False
        assert any("empty" in e.lower() for e in result.errors)

    def test_returns_validation_result(self):
        assert isinstance(validate_file(SAMPLE_CSV), ValidationResult)

    def test_to_dict(self):
        d = validate_file(SAMPLE_CSV).to_dict()
        for key in ("valid", "errors", "warnings", "file_type", "row_count", "usable_rows", "columns_mapped"):
            assert key in d


# ──────────────────────────────────────────────
# CSV validation
# ──────────────────────────────────────────────


class TestCSVValidation:

    def test_sample_is_valid(self):
        result = validate_file(SAMPLE_CSV)
        assert result.valid is True
        assert result.errors == []
        assert result.file_type == ".csv"
        assert result.row_count == 8
        assert result.usable_rows == 8

    def test_columns_mapped(self):
        result = validate_file(SAMPLE_CSV)
        assert result.columns_mapped == {"title": "Risk", "likelihood": "Likelihood", "impact": "Impact"}
        assert "Owner" in result.columns_found

    def test_missing_columns(self, tmp_path):
        f = tmp_path / "r.csv"
        f.write_text("Risk,Owner\nFire,Ops\n")
        result = validate_file(f)
        assert result.valid is False
        assert any("likelihood" in e and "impact" in e for e in result.errors)

    def test_headers_only_warns(self, tmp_path):
        f = tmp_path / "r.csv"
        f.write_text("Title,Likelihood,Impact\n")
        result = validate_file(f)
        assert result.valid is True
        assert result.row_count == 0
        assert any("no data rows" in w for w in result.warnings)

    def test_skipped_rows_reported(self, tmp_path):
        f = tmp_path / "r.csv"
        f.write_text("Title,Likelihood,Impact\nGood,1,1\n,2,2\nBad,x,1\n")
        result = validate_file(f)
        assert result.valid is True
        assert result.row_count == 3
        assert result.usable_rows == 1
        assert any("2 row(s) will be skipped" in w for w in result.warnings)

    def test_out_of_scale_warning(self, tmp_path):
        f = tmp_path / "r.csv"
        f.write_text("Title,Likelihood,Impact\nA,6,1\nB,3,3\nC,0,2\n")
        result = validate_file(f, matrix_size=5)
        assert any("2 row(s) rate outside 1-5" in w for w in result.warnings)

    def test_fractional_ratings_that_round_into_range(self, tmp_path):
        f = tmp_path / "r.csv"
        f.write_text("Title,Likelihood,Impact\nA,0.6,3\nB,5.4,2\n")
        assert validate_file(f, matrix_size=5).warnings == []

    def test_fractional_rating_that_rounds_past_edge(self, tmp_path):
        f = tmp_path / "r.csv"
        f.write_text("Title,Likelihood,Impact\nA,0.6,3\nB,5.6,2\nC,2,0.4\n")
        result = validate_file(f, matrix_size=5)
        assert any("2 row(s) rate outside 1-5" in w for w in result.warnings)

    def test_no_scale_warning_without_matrix_size(self, tmp_path):
        f = tmp_path / "r.csv"
        f.write_text("Title,Likelihood,Impact\nA,60,1\n")
        assert validate_file(f).warnings == []

    def test_bad_encoding(self, tmp_path):
        f = tmp_path / "r.csv"
        f.write_bytes(b"Title,Likelihood,Impact\n\xff\xfe\xfa,1,1\n")
        result = validate_file(f)
        assert result.valid is False
        assert any("encoding" in e.lower() for e in result.errors)


# ──────────────────────────────────────────────
# JSON validation
# ──────────────────────────────────────────────


class TestJSONValidation:

    def test_valid_list(self, tmp_path):
        f = tmp_path / "r.json"
        f.write_text(json.dumps([{"Title": "A", "Likelihood": 1, "Impact": 2}]))
        result = validate_file(f)
        assert result.valid is True
        assert result.row_count == 1

    def test_wrapped(self, tmp_path):
        f = tmp_path / "r.json"
        f.write_text(json.dumps({"items": [{"Risk": "A", "Probability": 1, "Severity": 2}]}))
        assert validate_file(f).valid is True

    def test_invalid_json(self, tmp_path):
        f = tmp_path / "r.json"
        f.write_text("{oops")
        result = validate_file(f)
        assert result.valid is False
        assert any("Invalid JSON" in e for e in result.errors)

    def test_unrecognised_structure(self, tmp_path):
        f = tmp_path / "r.json"
        f.write_text(json.dumps({"foo": "bar"}))
        result = validate_file(f)
        assert result.valid is False
        assert any("Unrecognised" in e for e in result.errors)

    def test_non_object_rows(self, tmp_path):
        f = tmp_path / "r.json"
        f.write_text("[1, 2, 3]")
        assert validate_file(f).valid is False

    def test_integer_beyond_float_range_is_skipped(self, tmp_path):
        f = tmp_path / "r.json"
        f.write_text(
            '[{"title": "A", "likelihood": 1' + "0" * 400 + ', "impact": 2},'
            ' {"title": "B", "likelihood": 1, "impact": 2}]'
        )
        result = validate_file(f)
        assert result.valid is True
        assert result.row_count == 2
        assert result.usable_rows == 1
        assert any("1 row(s) will be skipped" in w for w in result.warnings)

    def test_empty_list_warns(self, tmp_path):
        f = tmp_path / "r.json"
        f.write_text("[]")
        result = validate_file(f)
        assert result.valid is True
        assert result.warnings == ["JSON contains no data rows."]


# ──────────────────────────────────────────────
# XLSX validation
# ──────────────────────────────────────────────


class TestXLSXValidation:

    def test_valid_workbook(self, tmp_path):
        import openpyxl
        f = tmp_path / "r.xlsx"
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.append(["Risk", "Likelihood", "Impact"])
        ws.append(["Fire", 2, 3])
        wb.save(f)
        wb.close()
        result = validate_file(f)
        assert result.valid is True
        assert result.row_count == 1

    def test_corrupt_workbook(self, tmp_path):
        f = tmp_path / "r.xlsx"
        f.write_bytes(b"definitely not a zip file")
        result = validate_file(f)
        assert result.valid is False
        assert any("Cannot open Excel file" in e for e in result.errors)
