"""Unit tests for layout planning."""

import pytest

from risk_matrix.engine.layout import (
    LEGEND_WIDTH,
    PADDING,
    Diagnostic,
    DiagnosticReason,
    ResolvedGeometry,
    plan_layout,
)
from risk_matrix.settings import resolve_config


class TestPlanLayoutGeometry:

    def test_default_with_legend(self):
        geometry = plan_layout(resolve_config(width=800, height=600, matrix_size=5, show_legend=True))
        assert isinstance(geometry, ResolvedGeometry)
        assert geometry.padding == PADDING == 60
        assert geometry.legend_width == LEGEND_WIDTH == 200
        assert geometry.matrix_width == 480
        assert geometry.matrix_height == 480
        assert geometry.cell_width == 96
        assert geometry.cell_height == 96

    def test_without_legend_reclaims_width(self):
        geometry = plan_layout(resolve_config(width=800, height=600, show_legend=False))
        assert geometry.legend_width == 0
        assert geometry.matrix_width == 680
        assert geometry.cell_width == 136

    def test_bounds(self):
        geometry = plan_layout(resolve_config(width=800, height=600))
        assert (geometry.left, geometry.top) == (60, 60)
        assert (geometry.right, geometry.bottom) == (540, 540)

    def test_to_dict(self):
        d = plan_layout(resolve_config()).to_dict()
        assert d["cell_width"] == 96
        assert d["legend_width"] == 200


class TestPlanLayoutDiagnostics:

    @pytest.mark.parametrize("width,height", [(0, 600), (800, 0), (-5, 600), (800, -1)])
    def test_invalid_dimensions(self, width, height):
        result = plan_layout(resolve_config(width=width, height=height))
        assert isinstance(result, Diagnostic)
        assert result.reason == DiagnosticReason.INVALID_DIMENSIONS

    def test_invalid_dimensions_wins_over_matrix_size(self):
        result = plan_layout(resolve_config(width=0, matrix_size=0))
        assert result.reason == DiagnosticReason.INVALID_DIMENSIONS

    def test_invalid_dimensions_message(self):
        result = plan_layout(resolve_config(width=0, height=600))
        assert result.message == "Invalid dimensions: 0 x 600"

    @pytest.mark.parametrize("size", [0, -3])
    def test_invalid_matrix_size(self, size):
        result = plan_layout(resolve_config(matrix_size=size))
        assert result.reason == DiagnosticReason.INVALID_MATRIX_SIZE
        assert str(size) in result.message

    def test_matrix_too_small_horizontally(self):
        # 320 - 120 padding - 200 legend = 0
        result = plan_layout(resolve_config(width=320, height=600))
        assert result.reason == DiagnosticReason.MATRIX_TOO_SMALL

    def test_matrix_too_small_vertically(self):
        result = plan_layout(resolve_config(width=800, height=100))
        assert result.reason == DiagnosticReason.MATRIX_TOO_SMALL

    def test_small_width_fits_without_legend(self):
        result = plan_layout(resolve_config(width=320, height=600, show_legend=False))
        assert isinstance(result, ResolvedGeometry)
        assert result.matrix_width == 200

    def test_diagnostic_to_dict(self):
        d = plan_layout(resolve_config(matrix_size=0)).to_dict()
        assert d == {
            "type": "diagnostic",
            "reason": "InvalidMatrixSize",
            "message": "Invalid matrix size: 0",
        }
