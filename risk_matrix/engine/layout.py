"""
Layout planning: padding, legend reservation and cell size.

Validates that the requested viewport can hold a matrix before anything is
placed. Failures come back as a Diagnostic value, not an exception.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from risk_matrix.settings import LayoutConfig

# Reserved on every side for tick labels and axis titles
PADDING = 60.0
LEGEND_WIDTH = 200.0


class DiagnosticReason(Enum):
    INVALID_DIMENSIONS = "InvalidDimensions"
    INVALID_MATRIX_SIZE = "InvalidMatrixSize"
    MATRIX_TOO_SMALL = "MatrixTooSmall"
    NO_DATA = "NoData"


@dataclass(frozen=True)
class Diagnostic:
    """Placeholder outcome shown instead of a chart."""

    reason: DiagnosticReason
    message: str

    def to_dict(self) -> dict:
        return {
            "type": "diagnostic",
            "reason": self.reason.value,
            "message": self.message,
        }


@dataclass(frozen=True)
class ResolvedGeometry:
    """Pixel geometry derived from a LayoutConfig."""

    padding: float
    legend_width: float
    matrix_width: float
    matrix_height: float
    cell_width: float
    cell_height: float

    @property
    def left(self) -> float:
        return self.padding

    @property
    def top(self) -> float:
        return self.padding

    @property
    def right(self) -> float:
        return self.padding + self.matrix_width

    @property
    def bottom(self) -> float:
        return self.padding + self.matrix_height

    def to_dict(self) -> dict:
        return {
            "padding": self.padding,
            "legend_width": self.legend_width,
            "matrix_width": self.matrix_width,
            "matrix_height": self.matrix_height,
            "cell_width": self.cell_width,
            "cell_height": self.cell_height,
        }


def _format_dimension(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def plan_layout(config: LayoutConfig) -> ResolvedGeometry | Diagnostic:
    """Derive the matrix geometry for a config.

    Checks, in order: positive width/height, positive matrix size, and a
    non-zero cell size once padding and the legend column are reserved.

    Args:
        config: Fully resolved layout settings.

    Returns:
        ResolvedGeometry, or a Diagnostic naming the first failed check.
    """
    if config.width <= 0 or config.height <= 0:
        return Diagnostic(
            DiagnosticReason.INVALID_DIMENSIONS,
            f"Invalid dimensions: {_format_dimension(config.width)} x {_format_dimension(config.height)}",
        )

    if config.matrix_size <= 0:
        return Diagnostic(
            DiagnosticReason.INVALID_MATRIX_SIZE,
            f"Invalid matrix size: {config.matrix_size}",
        )

    legend_width = LEGEND_WIDTH if config.show_legend else 0.0
    matrix_width = max(0.0, config.width - PADDING * 2 - legend_width)
    matrix_height = max(0.0, config.height - PADDING * 2)
    cell_width = matrix_width / config.matrix_size
    cell_height = matrix_height / config.matrix_size

    if cell_width <= 0 or cell_height <= 0:
        return Diagnostic(
            DiagnosticReason.MATRIX_TOO_SMALL,
            "Matrix too small for current dimensions",
        )

    return ResolvedGeometry(
        padding=PADDING,
        legend_width=legend_width,
        matrix_width=matrix_width,
        matrix_height=matrix_height,
        cell_width=cell_width,
        cell_height=cell_height,
    )
