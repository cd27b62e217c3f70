"""Smoke tests to validate project structure and imports."""

from pathlib import Path


def test_sample_data_exists():
    """Verify sample data files are present."""
    sample_dir = Path(__file__).parent.parent.parent / "sample-data"
    assert (sample_dir / "risk-register-sample.csv").exists()


def test_imports():
    """Verify all source modules can be imported."""
    from risk_matrix.engine import Diagnostic, Drawing, build_scene, plan_layout, to_pixel
    from risk_matrix.ingestion.parser import RiskDataPoint, parse_file
    from risk_matrix.ingestion.validators import validate_file
    from risk_matrix.settings import LayoutConfig, resolve_config
    from risk_matrix.charts import render_scene
    from risk_matrix.cli import main

    assert Drawing is not None
    assert Diagnostic is not None
    assert RiskDataPoint is not None


def test_sample_csv_has_expected_risks():
    """Verify sample CSV contains the 8 expected risks."""
    import csv

    sample_file = Path(__file__).parent.parent.parent / "sample-data" / "risk-register-sample.csv"
    with open(sample_file, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        risks = {row["Risk"] for row in reader}

    assert len(risks) == 8
    assert "Ransomware attack" in risks
