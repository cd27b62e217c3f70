"""
Scene builder — turns data points plus settings into a drawable scene.

The output is renderer-agnostic: every element carries resolved pixel
positions, sizes and colours. Elements are ordered for painting, so later
ones occlude earlier ones:

    gradient cells → grid lines → tick labels → axis titles → markers → legend

build_scene() is a pure function of its inputs. Degenerate inputs produce
a Diagnostic instead of a Drawing.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Callable, Iterator, Sequence

from risk_matrix.engine.classifier import RISK_LEVEL_COLOURS, RiskLevel, classify
from risk_matrix.engine.colour import gradient_colour, normalise_hex
from risk_matrix.engine.layout import (
    Diagnostic,
    DiagnosticReason,
    ResolvedGeometry,
    plan_layout,
)
from risk_matrix.engine.mapper import to_pixel
from risk_matrix.ingestion.parser import RiskDataPoint
from risk_matrix.settings import ColouringPolicy, LayoutConfig

logger = logging.getLogger(__name__)

# Optional observer: trace(event, details)
TraceHook = Callable[[str, dict], None]


# ──────────────────────────────────────────────
# Palette and fixed styling
# ──────────────────────────────────────────────

POINT_PALETTE = (
    "#118DFF",
    "#12239E",
    "#E66C37",
    "#6B007B",
    "#E044A7",
    "#744EC2",
    "#D9B300",
    "#D64550",
    "#197278",
    "#1AAB40",
)

GRID_COLOUR = "#DDDDDD"
TEXT_COLOUR = "#333333"
MUTED_TEXT_COLOUR = "#666666"
MARKER_STROKE = "#333333"

TICK_OFFSET = 10.0
X_TITLE_OFFSET = 25.0
Y_TITLE_X = 20.0
LEGEND_INSET = 20.0
LEGEND_ROW_HEIGHT = 25.0
LEGEND_TEXT_INDENT = 15.0
LEGEND_DETAIL_OFFSET = 12.0
MIN_FONT_SIZE = 1.0


# ──────────────────────────────────────────────
# Scene elements
# ──────────────────────────────────────────────


@dataclass(frozen=True)
class GradientCell:
    x: float
    y: float
    width: float
    height: float
    likelihood: int
    impact: int
    normalised_score: float
    colour: str


@dataclass(frozen=True)
class GridLine:
    x1: float
    y1: float
    x2: float
    y2: float
    orientation: str  # "vertical" | "horizontal"
    colour: str = GRID_COLOUR
    stroke_width: float = 1.0


@dataclass(frozen=True)
class AxisLabel:
    """Tick label for one row or column."""

    axis: str  # "x" | "y"
    text: str
    x: float
    y: float
    anchor: str  # "middle" | "end"
    font_size: float
    colour: str = TEXT_COLOUR


@dataclass(frozen=True)
class AxisTitle:
    axis: str
    text: str
    x: float
    y: float
    font_size: float
    font_family: str
    colour: str
    rotation: float = 0.0
    bold: bool = True


@dataclass(frozen=True)
class PointMarker:
    title: str
    likelihood: float
    impact: float
    clamped_likelihood: int
    clamped_impact: int
    risk_level: RiskLevel
    x: float
    y: float
    radius: float
    colour: str
    tooltip: str
    stroke: str = MARKER_STROKE
    stroke_width: float = 2.0
    opacity: float = 0.9

    def to_dict(self) -> dict:
        d = asdict(self)
        d["risk_level"] = self.risk_level.value
        return d


@dataclass(frozen=True)
class LegendHeading:
    text: str
    x: float
    y: float
    font_size: float
    colour: str = TEXT_COLOUR


@dataclass(frozen=True)
class LegendEntry:
    """Swatch at (x, y); title and detail lines to its right."""

    title: str
    detail: str
    x: float
    y: float
    swatch_radius: float
    colour: str
    risk_level: RiskLevel
    text_x: float
    detail_y: float
    font_size: float
    detail_font_size: float
    text_colour: str = TEXT_COLOUR
    detail_colour: str = MUTED_TEXT_COLOUR
    stroke: str = MARKER_STROKE

    def to_dict(self) -> dict:
        d = asdict(self)
        d["risk_level"] = self.risk_level.value
        return d


@dataclass(frozen=True)
class Drawing:
    """A fully resolved risk matrix, ready for a renderer."""

    width: float
    height: float
    matrix_size: int
    geometry: ResolvedGeometry
    gradient_cells: tuple[GradientCell, ...] = ()
    grid_lines: tuple[GridLine, ...] = ()
    axis_labels: tuple[AxisLabel, ...] = ()
    axis_titles: tuple[AxisTitle, ...] = ()
    point_markers: tuple[PointMarker, ...] = ()
    legend_heading: LegendHeading | None = None
    legend_entries: tuple[LegendEntry, ...] = ()

    def elements(self) -> Iterator[Any]:
        """Yield every element in paint order."""
        yield from self.gradient_cells
        yield from self.grid_lines
        yield from self.axis_labels
        yield from self.axis_titles
        yield from self.point_markers
        if self.legend_heading is not None:
            yield self.legend_heading
        yield from self.legend_entries

    def to_dict(self) -> dict:
        return {
            "type": "drawing",
            "width": self.width,
            "height": self.height,
            "matrix_size": self.matrix_size,
            "geometry": self.geometry.to_dict(),
            "gradient_cells": [asdict(c) for c in self.gradient_cells],
            "grid_lines": [asdict(g) for g in self.grid_lines],
            "axis_labels": [asdict(a) for a in self.axis_labels],
            "axis_titles": [asdict(t) for t in self.axis_titles],
            "point_markers": [m.to_dict() for m in self.point_markers],
            "legend_heading": asdict(self.legend_heading) if self.legend_heading else None,
            "legend_entries": [e.to_dict() for e in self.legend_entries],
        }


Scene = Drawing | Diagnostic


# ──────────────────────────────────────────────
# Public API
# ──────────────────────────────────────────────


def build_scene(
    points: Sequence[RiskDataPoint],
    config: LayoutConfig,
    trace: TraceHook | None = None,
) -> Drawing | Diagnostic:
    """Compose the full scene for a set of risks.

    Args:
        points: Risks in display order. Ratings are used as given; markers
            for out-of-range ratings are clamped to the grid edge.
        config: Resolved settings (see settings.resolve_config).
        trace: Optional callable receiving (event, details) at
            'layout_planned', 'point_mapped', 'scene_built' and 'diagnostic'.

    Returns:
        A Drawing, or a Diagnostic for invalid dimensions, an invalid matrix
        size, a matrix too small to draw, or no data points.
    """
    emit = _emitter(trace)

    geometry = plan_layout(config)
    if isinstance(geometry, Diagnostic):
        emit("diagnostic", {"reason": geometry.reason.value, "message": geometry.message})
        return geometry
    emit("layout_planned", geometry.to_dict())

    if not points:
        diagnostic = Diagnostic(DiagnosticReason.NO_DATA, "No data points to display")
        emit("diagnostic", {"reason": diagnostic.reason.value, "message": diagnostic.message})
        return diagnostic

    n = config.matrix_size
    cells = _gradient_cells(config, geometry) if config.show_gradient else ()
    markers = _point_markers(points, config, geometry, emit)

    drawing = Drawing(
        width=config.width,
        height=config.height,
        matrix_size=n,
        geometry=geometry,
        gradient_cells=cells,
        grid_lines=_grid_lines(n, geometry),
        axis_labels=_axis_labels(config, geometry),
        axis_titles=_axis_titles(config, geometry),
        point_markers=markers,
        legend_heading=_legend_heading(config, geometry) if config.show_legend else None,
        legend_entries=_legend_entries(markers, config, geometry) if config.show_legend else (),
    )

    emit("scene_built", {
        "gradient_cells": len(drawing.gradient_cells),
        "grid_lines": len(drawing.grid_lines),
        "point_markers": len(drawing.point_markers),
        "legend_entries": len(drawing.legend_entries),
    })
    return drawing


def cell_normalised_score(likelihood: int, impact: int, matrix_size: int) -> float:
    """Position of a cell's score between the lowest (1) and highest (N²) on the grid."""
    span = matrix_size * matrix_size - 1
    if span <= 0:
        return 0.0
    return max(0.0, min(1.0, (likelihood * impact - 1) / span))


def format_rating(value: float) -> str:
    """Render a rating the way users typed it: 3.0 -> '3', 2.5 -> '2.5'."""
    number = float(value)
    return str(int(number)) if number.is_integer() else str(number)


# ──────────────────────────────────────────────
# Element builders
# ──────────────────────────────────────────────


def _emitter(trace: TraceHook | None) -> TraceHook:
    def emit(event: str, details: dict) -> None:
        logger.debug("%s: %s", event, details)
        if trace is not None:
            trace(event, details)
    return emit


def _gradient_cells(config: LayoutConfig, geometry: ResolvedGeometry) -> tuple[GradientCell, ...]:
    n = config.matrix_size
    cells: list[GradientCell] = []
    for row in range(n):
        likelihood = n - row
        for col in range(n):
            impact = col + 1
            score = cell_normalised_score(likelihood, impact, n)
            cells.append(GradientCell(
                x=geometry.padding + col * geometry.cell_width,
                y=geometry.padding + row * geometry.cell_height,
                width=geometry.cell_width,
                height=geometry.cell_height,
                likelihood=likelihood,
                impact=impact,
                normalised_score=score,
                colour=gradient_colour(config.first_colour, config.middle_colour, config.last_colour, score),
            ))
    return tuple(cells)


def _grid_lines(n: int, geometry: ResolvedGeometry) -> tuple[GridLine, ...]:
    vertical = [
        GridLine(
            x1=geometry.padding + i * geometry.cell_width, y1=geometry.top,
            x2=geometry.padding + i * geometry.cell_width, y2=geometry.bottom,
            orientation="vertical",
        )
        for i in range(n + 1)
    ]
    horizontal = [
        GridLine(
            x1=geometry.left, y1=geometry.padding + i * geometry.cell_height,
            x2=geometry.right, y2=geometry.padding + i * geometry.cell_height,
            orientation="horizontal",
        )
        for i in range(n + 1)
    ]
    return tuple(vertical + horizontal)


def _axis_labels(config: LayoutConfig, geometry: ResolvedGeometry) -> tuple[AxisLabel, ...]:
    n = config.matrix_size
    size = max(MIN_FONT_SIZE, config.font_size - 2)
    x_labels = [
        AxisLabel(
            axis="x", text=str(i + 1),
            x=geometry.padding + i * geometry.cell_width + geometry.cell_width / 2,
            y=geometry.padding - TICK_OFFSET,
            anchor="middle", font_size=size,
        )
        for i in range(n)
    ]
    # Top row is the highest likelihood
    y_labels = [
        AxisLabel(
            axis="y", text=str(n - i),
            x=geometry.padding - TICK_OFFSET,
            y=geometry.padding + i * geometry.cell_height + geometry.cell_height / 2,
            anchor="end", font_size=size,
        )
        for i in range(n)
    ]
    return tuple(x_labels + y_labels)


def _axis_titles(config: LayoutConfig, geometry: ResolvedGeometry) -> tuple[AxisTitle, ...]:
    x_title = AxisTitle(
        axis="x",
        text=config.x_axis_label,
        x=geometry.padding + geometry.matrix_width / 2,
        y=geometry.padding - X_TITLE_OFFSET,
        font_size=config.x_axis_label_font_size,
        font_family=config.x_axis_label_font_family,
        colour=config.x_axis_label_colour,
    )
    y_title = AxisTitle(
        axis="y",
        text=config.y_axis_label,
        x=Y_TITLE_X,
        y=geometry.padding + geometry.matrix_height / 2,
        font_size=config.y_axis_label_font_size,
        font_family=config.y_axis_label_font_family,
        colour=config.y_axis_label_colour,
        rotation=-90.0,
    )
    return (x_title, y_title)


def _marker_colour(
    index: int,
    level: RiskLevel,
    clamped_likelihood: int,
    clamped_impact: int,
    config: LayoutConfig,
) -> str:
    policy = config.colouring
    if policy == ColouringPolicy.PALETTE:
        return POINT_PALETTE[index % len(POINT_PALETTE)]
    if policy == ColouringPolicy.RISK_LEVEL:
        return RISK_LEVEL_COLOURS[level]
    if policy == ColouringPolicy.GRADIENT:
        score = cell_normalised_score(clamped_likelihood, clamped_impact, config.matrix_size)
        return gradient_colour(config.first_colour, config.middle_colour, config.last_colour, score)
    return normalise_hex(config.default_colour)


def _point_markers(
    points: Sequence[RiskDataPoint],
    config: LayoutConfig,
    geometry: ResolvedGeometry,
    emit: TraceHook,
) -> tuple[PointMarker, ...]:
    markers: list[PointMarker] = []
    for index, point in enumerate(points):
        mapped = to_pixel(point.likelihood, point.impact, geometry, config.matrix_size)
        level = classify(point.likelihood, point.impact, config.matrix_size)
        colour = _marker_colour(index, level, mapped.clamped_likelihood, mapped.clamped_impact, config)
        markers.append(PointMarker(
            title=point.title,
            likelihood=point.likelihood,
            impact=point.impact,
            clamped_likelihood=mapped.clamped_likelihood,
            clamped_impact=mapped.clamped_impact,
            risk_level=level,
            x=mapped.x,
            y=mapped.y,
            radius=config.point_size,
            colour=colour,
            tooltip=(
                f"{point.title}\n"
                f"Likelihood: {format_rating(point.likelihood)}\n"
                f"Impact: {format_rating(point.impact)}"
            ),
        ))
        emit("point_mapped", {
            "index": index,
            "title": point.title,
            "clamped_likelihood": mapped.clamped_likelihood,
            "clamped_impact": mapped.clamped_impact,
            "x": mapped.x,
            "y": mapped.y,
            "colour": colour,
        })
    return tuple(markers)


def _legend_origin(config: LayoutConfig, geometry: ResolvedGeometry) -> tuple[float, float]:
    return config.width - geometry.legend_width + LEGEND_INSET, geometry.padding


def _legend_heading(config: LayoutConfig, geometry: ResolvedGeometry) -> LegendHeading:
    x, y = _legend_origin(config, geometry)
    return LegendHeading(text="Legend", x=x, y=y, font_size=config.font_size)


def _legend_entries(
    markers: Sequence[PointMarker],
    config: LayoutConfig,
    geometry: ResolvedGeometry,
) -> tuple[LegendEntry, ...]:
    origin_x, origin_y = _legend_origin(config, geometry)
    entries: list[LegendEntry] = []
    for index, marker in enumerate(markers):
        y = origin_y + LEGEND_ROW_HEIGHT + index * LEGEND_ROW_HEIGHT
        entries.append(LegendEntry(
            title=marker.title,
            detail=f"L: {format_rating(marker.likelihood)} | I: {format_rating(marker.impact)}",
            x=origin_x,
            y=y,
            swatch_radius=config.point_size / 2,
            colour=marker.colour,
            risk_level=marker.risk_level,
            text_x=origin_x + LEGEND_TEXT_INDENT,
            detail_y=y + LEGEND_DETAIL_OFFSET,
            font_size=max(MIN_FONT_SIZE, config.font_size - 2),
            detail_font_size=max(MIN_FONT_SIZE, config.font_size - 4),
        ))
    return tuple(entries)
