"""Unit tests for likelihood/impact → pixel mapping."""

import pytest

from risk_matrix.engine.layout import plan_layout
from risk_matrix.engine.mapper import clamp_level, round_half_up, to_pixel
from risk_matrix.settings import resolve_config


@pytest.fixture()
def geometry():
    # 480 × 480 matrix, 96 px cells
    return plan_layout(resolve_config(width=800, height=600, matrix_size=5))


class TestRounding:

    @pytest.mark.parametrize(
        "value,expected",
        [(2.5, 3), (2.49, 2), (3.5, 4), (-2.5, -2), (0.5, 1), (4.0, 4)],
    )
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_clamp_above(self):
        assert clamp_level(8, 5) == 5

    def test_clamp_below(self):
        assert clamp_level(0, 5) == 1
        assert clamp_level(-7.2, 5) == 1

    def test_clamp_rounds_first(self):
        assert clamp_level(4.5, 5) == 5
        assert clamp_level(1.4, 5) == 1

    def test_clamp_non_finite(self):
        assert clamp_level(float("inf"), 5) == 5
        assert clamp_level(float("-inf"), 5) == 1
        assert clamp_level(float("nan"), 5) == 1


class TestToPixel:

    def test_top_right_cell(self, geometry):
        mapped = to_pixel(5, 5, geometry, 5)
        assert (mapped.x, mapped.y) == (492, 108)

    def test_bottom_left_cell(self, geometry):
        mapped = to_pixel(1, 1, geometry, 5)
        assert (mapped.x, mapped.y) == (108, 492)

    def test_impact_moves_right(self, geometry):
        assert to_pixel(3, 2, geometry, 5).x < to_pixel(3, 3, geometry, 5).x

    def test_likelihood_moves_up(self, geometry):
        assert to_pixel(4, 3, geometry, 5).y < to_pixel(3, 3, geometry, 5).y

    def test_out_of_range_clamped_to_edge(self, geometry):
        mapped = to_pixel(8, -2, geometry, 5)
        assert mapped.clamped_likelihood == 5
        assert mapped.clamped_impact == 1
        assert mapped == to_pixel(5, 1, geometry, 5)

    def test_fractional_ratings_snap_to_cell(self, geometry):
        assert to_pixel(2.5, 3.4, geometry, 5) == to_pixel(3, 3, geometry, 5)

    def test_idempotent(self, geometry):
        assert to_pixel(3, 4, geometry, 5) == to_pixel(3, 4, geometry, 5)

    @pytest.mark.parametrize("size", [1, 2, 5, 10])
    def test_in_range_points_strictly_inside_matrix(self, size):
        geometry = plan_layout(resolve_config(width=900, height=700, matrix_size=size))
        for likelihood in range(1, size + 1):
            for impact in range(1, size + 1):
                mapped = to_pixel(likelihood, impact, geometry, size)
                assert geometry.left < mapped.x < geometry.right
                assert geometry.top < mapped.y < geometry.bottom
