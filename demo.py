#!/usr/bin/env python3
"""
Demo script — renders the sample risk register in several styles.

Usage:
    python demo.py

Generates sample charts in ./demo-output/
"""

from pathlib import Path

from risk_matrix.charts import render_scene
from risk_matrix.engine.scene import build_scene
from risk_matrix.ingestion.parser import parse_file
from risk_matrix.settings import ColouringPolicy, resolve_config

SAMPLE_FILE = Path(__file__).parent / "sample-data" / "risk-register-sample.csv"
OUTPUT_DIR = Path("demo-output")


def main():
    OUTPUT_DIR.mkdir(exist_ok=True)
    print("=" * 60)
    print("Risk Matrix — Demo")
    print("=" * 60)

    print("\n▸ Step 1: Reading sample register...")
    points = parse_file(SAMPLE_FILE)
    print(f"  Parsed {len(points)} risks")

    print("\n▸ Step 2: Rendering variants...")
    variants = {
        "palette.png": resolve_config(),
        "risk-level.png": resolve_config(colouring=ColouringPolicy.RISK_LEVEL),
        "plain-grid.png": resolve_config(show_gradient=False, colouring="fixed"),
        "no-legend-7x7.svg": resolve_config(matrix_size=7, show_legend=False, width=640, height=640),
    }

    for filename, config in variants.items():
        scene = build_scene(points, config)
        path = render_scene(scene, OUTPUT_DIR / filename)
        print(f"  ✓ {path}")

    print("\n▸ Step 3: Empty register placeholder...")
    path = render_scene(build_scene([], resolve_config()), OUTPUT_DIR / "empty.png")
    print(f"  ✓ {path}")

    print("\n" + "=" * 60)
    print(f"Demo complete! Charts saved to ./{OUTPUT_DIR}/")
    print("=" * 60)


if __name__ == "__main__":
    main()
