"""
Maps (likelihood, impact) pairs onto cell centres.

Impact runs left → right along X. Likelihood runs bottom → top along Y,
which is inverted because screen Y grows downwards.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from risk_matrix.engine.layout import ResolvedGeometry


@dataclass(frozen=True)
class MappedPoint:
    x: float
    y: float
    clamped_likelihood: int
    clamped_impact: int


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +infinity (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def clamp_level(value: float, matrix_size: int) -> int:
    """Round a raw rating and pin it into 1..matrix_size.

    Infinite ratings pin to the matching edge; NaN pins to 1.
    """
    if math.isnan(value):
        return 1
    value = max(0.0, min(float(matrix_size), value))
    return max(1, min(matrix_size, round_half_up(value)))


def to_pixel(
    likelihood: float,
    impact: float,
    geometry: ResolvedGeometry,
    matrix_size: int,
) -> MappedPoint:
    """Return the pixel centre of the cell a point falls in.

    Out-of-range ratings are clamped to the nearest edge cell, never dropped.
    """
    clamped_likelihood = clamp_level(likelihood, matrix_size)
    clamped_impact = clamp_level(impact, matrix_size)

    x = geometry.padding + (clamped_impact - 1) * geometry.cell_width + geometry.cell_width / 2
    y = geometry.padding + (matrix_size - clamped_likelihood) * geometry.cell_height + geometry.cell_height / 2

    return MappedPoint(x=x, y=y, clamped_likelihood=clamped_likelihood, clamped_impact=clamped_impact)
