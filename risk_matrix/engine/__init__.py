"""
Risk matrix layout and colouring engine.

    from risk_matrix.engine import build_scene
    from risk_matrix.settings import resolve_config

    scene = build_scene(points, resolve_config({"matrix_size": 5}))
"""

from risk_matrix.engine.classifier import RiskLevel, classify, risk_score
from risk_matrix.engine.colour import interpolate_colour
from risk_matrix.engine.layout import Diagnostic, DiagnosticReason, ResolvedGeometry, plan_layout
from risk_matrix.engine.mapper import MappedPoint, to_pixel
from risk_matrix.engine.scene import Drawing, Scene, build_scene

__all__ = [
    "Diagnostic",
    "DiagnosticReason",
    "Drawing",
    "MappedPoint",
    "ResolvedGeometry",
    "RiskLevel",
    "Scene",
    "build_scene",
    "classify",
    "interpolate_colour",
    "plan_layout",
    "risk_score",
    "to_pixel",
]
