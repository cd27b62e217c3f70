"""
Risk Matrix — CLI entry point.

    risk-matrix render register.csv --output matrix.png
    risk-matrix render register.xlsx --config settings.json --json
    risk-matrix validate register.csv
    risk-matrix schema
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from risk_matrix import __version__
from risk_matrix.charts import render_scene
from risk_matrix.engine.layout import Diagnostic
from risk_matrix.engine.scene import build_scene
from risk_matrix.ingestion.parser import parse_file
from risk_matrix.ingestion.validators import validate_file
from risk_matrix.settings import ColouringPolicy, load_config, resolve_config, schema_to_dict

logger = logging.getLogger(__name__)

LOG_LEVELS = ("debug", "info", "warning", "error")


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="risk-matrix",
        description="Risk Matrix — plot a risk register on a likelihood × impact grid",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default="warning", help="Logging verbosity")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # render
    render_parser = subparsers.add_parser("render", help="Render a risk register as a matrix chart")
    render_parser.add_argument("file", type=str, help="Risk register (CSV/JSON/Excel)")
    render_parser.add_argument("--config", type=str, help="JSON settings file")
    render_parser.add_argument("--output", type=str, default="risk-matrix.png", help="Output image (.png/.svg/.pdf)")
    render_parser.add_argument("--json", action="store_true", dest="json_output", help="Print the scene as JSON instead of drawing it")
    render_parser.add_argument("--width", type=float, help="Chart width in pixels")
    render_parser.add_argument("--height", type=float, help="Chart height in pixels")
    render_parser.add_argument("--matrix-size", type=int, help="Number of rows/columns")
    render_parser.add_argument("--no-legend", action="store_true", help="Hide the legend")
    render_parser.add_argument("--no-gradient", action="store_true", help="Hide the gradient background")
    render_parser.add_argument(
        "--colouring", choices=[p.value for p in ColouringPolicy], help="Point colouring policy",
    )

    # validate
    validate_parser = subparsers.add_parser("validate", help="Check a risk register without rendering")
    validate_parser.add_argument("file", type=str, help="Risk register (CSV/JSON/Excel)")
    validate_parser.add_argument("--matrix-size", type=int, help="Warn about ratings outside 1..N")

    # schema
    subparsers.add_parser("schema", help="Print the settings schema as JSON")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    try:
        if args.command == "render":
            return cmd_render(args)
        elif args.command == "validate":
            return cmd_validate(args)
        elif args.command == "schema":
            return cmd_schema(args)
    except Exception as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


# ──────────────────────────────────────────────
# Command implementations
# ──────────────────────────────────────────────


def _overrides(args) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.width is not None:
        overrides["width"] = args.width
    if args.height is not None:
        overrides["height"] = args.height
    if args.matrix_size is not None:
        overrides["matrix_size"] = args.matrix_size
    if args.no_legend:
        overrides["show_legend"] = False
    if args.no_gradient:
        overrides["show_gradient"] = False
    if args.colouring:
        overrides["colouring"] = args.colouring
    return overrides


def cmd_render(args) -> int:
    """Parse a register, build the scene, and draw or dump it."""
    overrides = _overrides(args)
    config = load_config(args.config, **overrides) if args.config else resolve_config(**overrides)

    points = parse_file(args.file)
    scene = build_scene(points, config)

    if args.json_output:
        print(json.dumps(scene.to_dict(), indent=2))
        return 0

    path = render_scene(scene, args.output)

    if isinstance(scene, Diagnostic):
        print(f"⚠ {scene.message}")
        print(f"  → placeholder written to {path}")
        return 0

    print(f"✓ Plotted {len(scene.point_markers)} risk(s) on a {scene.matrix_size}×{scene.matrix_size} matrix")
    print(f"  → {path}")
    return 0


def cmd_validate(args) -> int:
    """Print a validation report. Exit 1 when the file cannot be used."""
    result = validate_file(args.file, matrix_size=args.matrix_size)
    name = Path(args.file).name

    if result.valid:
        print(f"✓ {name}: {result.usable_rows}/{result.row_count} usable rows")
    else:
        print(f"✗ {name}: invalid")

    for error in result.errors:
        print(f"  error: {error}")
    for warning in result.warnings:
        print(f"  warning: {warning}")

    return 0 if result.valid else 1


def cmd_schema(args) -> int:
    print(json.dumps(schema_to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
