"""
Chart renderer — draws a scene with matplotlib.

The figure is sized to the scene in pixels and the axes map one data unit
to one pixel with Y pointing down, so scene coordinates are used as-is.
Output format follows the file suffix (.png, .svg, .pdf).

All functions return a Path to the generated file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from tempfile import mkdtemp

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend
import matplotlib.pyplot as plt
import matplotlib.patches as mpatches
from matplotlib.colors import is_color_like

from risk_matrix.engine.colour import BLACK
from risk_matrix.engine.layout import Diagnostic
from risk_matrix.engine.scene import (
    AxisLabel,
    AxisTitle,
    Drawing,
    GradientCell,
    GridLine,
    LegendEntry,
    LegendHeading,
    PointMarker,
)

logger = logging.getLogger(__name__)

PLACEHOLDER_SIZE = (400, 200)
PLACEHOLDER_FONT_PX = 14
PLACEHOLDER_COLOUR = "#666666"
BORDER_COLOUR = "#CCCCCC"

_ANCHORS = {"start": "left", "middle": "center", "end": "right"}

_chart_dir: str | None = None


def _get_chart_dir() -> Path:
    global _chart_dir
    if _chart_dir is None:
        _chart_dir = mkdtemp(prefix="risk_matrix_")
    return Path(_chart_dir)


def _save(fig: plt.Figure, output_path: str | Path | None, dpi: int) -> Path:
    path = Path(output_path) if output_path else _get_chart_dir() / "risk_matrix.png"
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(str(path), dpi=dpi, facecolor="white", edgecolor="none")
    plt.close(fig)
    logger.info("Chart written to %s", path)
    return path


def _pt(px: float, dpi: int) -> float:
    """Convert a pixel font size to points."""
    return px * 72.0 / dpi


def _colour(value: str) -> str:
    if is_color_like(value):
        return value
    logger.warning("Unrecognised colour %r; drawing black", value)
    return BLACK


def _pixel_axes(width: float, height: float, dpi: int) -> tuple[plt.Figure, plt.Axes]:
    fig = plt.figure(figsize=(width / dpi, height / dpi), dpi=dpi)
    ax = fig.add_axes((0, 0, 1, 1))
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)
    ax.set_axis_off()
    return fig, ax


# ──────────────────────────────────────────────
# Public API
# ──────────────────────────────────────────────


def render_scene(
    scene: Drawing | Diagnostic,
    output_path: str | Path | None = None,
    dpi: int = 100,
) -> Path:
    """Render a Drawing, or a placeholder message for a Diagnostic.

    Args:
        scene: Output of build_scene().
        output_path: Destination file. Defaults to a temp directory PNG.
        dpi: Pixels per inch; the figure keeps the scene's pixel size.

    Returns:
        Path to the written file.
    """
    if isinstance(scene, Diagnostic):
        return render_placeholder(scene.message, output_path, dpi=dpi)

    fig, ax = _pixel_axes(scene.width, scene.height, dpi)
    ax.add_patch(mpatches.Rectangle(
        (0.5, 0.5), scene.width - 1, scene.height - 1,
        fill=False, edgecolor=BORDER_COLOUR, linewidth=1,
    ))

    for element in scene.elements():
        if isinstance(element, GradientCell):
            _draw_cell(ax, element)
        elif isinstance(element, GridLine):
            _draw_grid_line(ax, element)
        elif isinstance(element, AxisLabel):
            _draw_axis_label(ax, element, dpi)
        elif isinstance(element, AxisTitle):
            _draw_axis_title(ax, element, dpi)
        elif isinstance(element, PointMarker):
            _draw_marker(ax, element)
        elif isinstance(element, LegendHeading):
            _draw_legend_heading(ax, element, dpi)
        elif isinstance(element, LegendEntry):
            _draw_legend_entry(ax, element, dpi)

    return _save(fig, output_path, dpi)


def render_placeholder(message: str, output_path: str | Path | None = None, dpi: int = 100) -> Path:
    """Centred message in place of a chart (empty data, bad dimensions, ...)."""
    width, height = PLACEHOLDER_SIZE
    fig, ax = _pixel_axes(width, height, dpi)
    ax.text(
        width / 2, height / 2, message,
        ha="center", va="center",
        fontsize=_pt(PLACEHOLDER_FONT_PX, dpi), color=PLACEHOLDER_COLOUR,
    )
    return _save(fig, output_path, dpi)


# ──────────────────────────────────────────────
# Element painters
# ──────────────────────────────────────────────


def _draw_cell(ax: plt.Axes, cell: GradientCell) -> None:
    ax.add_patch(mpatches.Rectangle(
        (cell.x, cell.y), cell.width, cell.height,
        facecolor=_colour(cell.colour), edgecolor="none",
    ))


def _draw_grid_line(ax: plt.Axes, line: GridLine) -> None:
    ax.plot(
        [line.x1, line.x2], [line.y1, line.y2],
        color=_colour(line.colour), linewidth=line.stroke_width, solid_capstyle="butt",
    )


def _draw_axis_label(ax: plt.Axes, label: AxisLabel, dpi: int) -> None:
    # X ticks sit on a baseline above the matrix; Y ticks are vertically centred
    va = "baseline" if label.axis == "x" else "center"
    ax.text(
        label.x, label.y, label.text,
        ha=_ANCHORS.get(label.anchor, "center"), va=va,
        fontsize=_pt(label.font_size, dpi), color=_colour(label.colour),
    )


def _draw_axis_title(ax: plt.Axes, title: AxisTitle, dpi: int) -> None:
    # Scene rotation is clockwise-positive screen degrees; matplotlib is counter-clockwise
    ax.text(
        title.x, title.y, title.text,
        ha="center", va="baseline" if title.rotation == 0 else "center",
        rotation=-title.rotation, rotation_mode="anchor",
        fontsize=_pt(title.font_size, dpi), fontfamily=[title.font_family, "sans-serif"],
        fontweight="bold" if title.bold else "normal", color=_colour(title.colour),
    )


def _draw_marker(ax: plt.Axes, marker: PointMarker) -> None:
    ax.add_patch(mpatches.Circle(
        (marker.x, marker.y), marker.radius,
        facecolor=_colour(marker.colour), edgecolor=_colour(marker.stroke),
        linewidth=marker.stroke_width, alpha=marker.opacity,
    ))


def _draw_legend_heading(ax: plt.Axes, heading: LegendHeading, dpi: int) -> None:
    ax.text(
        heading.x, heading.y, heading.text,
        ha="left", va="baseline", fontweight="bold",
        fontsize=_pt(heading.font_size, dpi), color=_colour(heading.colour),
    )


def _draw_legend_entry(ax: plt.Axes, entry: LegendEntry, dpi: int) -> None:
    ax.add_patch(mpatches.Circle(
        (entry.x, entry.y), entry.swatch_radius,
        facecolor=_colour(entry.colour), edgecolor=_colour(entry.stroke), linewidth=1,
    ))
    ax.text(
        entry.text_x, entry.y, entry.title,
        ha="left", va="center",
        fontsize=_pt(entry.font_size, dpi), color=_colour(entry.text_colour),
    )
    ax.text(
        entry.text_x, entry.detail_y, entry.detail,
        ha="left", va="center",
        fontsize=_pt(entry.detail_font_size, dpi), color=_colour(entry.detail_colour),
    )
