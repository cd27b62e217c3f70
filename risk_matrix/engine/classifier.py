"""
Risk scoring and High/Medium/Low banding.

Classification uses the raw likelihood and impact, before any clamping to
the visible grid, so a point reported off the scale keeps its true band.
"""

from __future__ import annotations

from enum import Enum


class RiskLevel(Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


# Fractions of the maximum score (matrix_size ** 2); inclusive lower bounds
HIGH_THRESHOLD = 0.7
MEDIUM_THRESHOLD = 0.4

RISK_LEVEL_COLOURS = {
    RiskLevel.HIGH: "#FF0000",
    RiskLevel.MEDIUM: "#FFA500",
    RiskLevel.LOW: "#FFFF00",
}


def risk_score(likelihood: float, impact: float) -> float:
    return likelihood * impact


def classify(likelihood: float, impact: float, matrix_size: int) -> RiskLevel:
    """Band a point by its score relative to the largest score on the grid.

    Ties resolve to the higher band.
    """
    score = risk_score(likelihood, impact)
    max_score = matrix_size * matrix_size

    if score >= max_score * HIGH_THRESHOLD:
        return RiskLevel.HIGH
    if score >= max_score * MEDIUM_THRESHOLD:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW
