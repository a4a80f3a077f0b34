"""Tests for 4-corner rectangularity classification."""

from __future__ import annotations

import math
from unittest.mock import patch

import pytest

from roof_takeoff.core.constants import METERS_PER_DEGREE_LAT
from roof_takeoff.geometry import interior_angles, is_rectangular
from roof_takeoff.models.footprint import Vertex

LAT0 = 40.0
LNG0 = -75.0


def _from_meters(points: list[tuple[float, float]]) -> list[Vertex]:
    """Convert local ``(x, y)`` metres to vertices around (LAT0, LNG0)."""
    meters_per_deg_lng = METERS_PER_DEGREE_LAT * math.cos(math.radians(LAT0))
    return [
        Vertex(lat=LAT0 + y / METERS_PER_DEGREE_LAT, lng=LNG0 + x / meters_per_deg_lng)
        for x, y in points
    ]


def _rotated_rectangle(width: float, height: float, degrees: float) -> list[Vertex]:
    theta = math.radians(degrees)
    cos_t, sin_t = math.cos(theta), math.sin(theta)
    corners = [(0.0, 0.0), (width, 0.0), (width, height), (0.0, height)]
    return _from_meters([(x * cos_t - y * sin_t, x * sin_t + y * cos_t) for x, y in corners])


class TestInteriorAngles:
    """Corner angles in the projected frame."""

    def test_rectangle_angles(self, rectangle: list[Vertex]) -> None:
        assert interior_angles(rectangle) == pytest.approx([90.0] * 4, abs=1e-6)

    def test_closing_vertex_ignored(self, rectangle: list[Vertex]) -> None:
        assert len(interior_angles([*rectangle, rectangle[0]])) == 4

    def test_parallelogram_angles(self) -> None:
        ring = _from_meters([(0, 0), (20, 0), (30, 10), (10, 10)])
        assert interior_angles(ring) == pytest.approx([45.0, 135.0, 45.0, 135.0], abs=0.01)


class TestIsRectangular:
    """Near-rectangle classification."""

    def test_axis_aligned_rectangle(self, rectangle: list[Vertex]) -> None:
        assert is_rectangular(rectangle) is True

    def test_closed_ring(self, rectangle: list[Vertex]) -> None:
        assert is_rectangular([*rectangle, rectangle[0]]) is True

    @pytest.mark.parametrize("degrees", [15.0, 30.0, 45.0, 73.0])
    def test_rotated_rectangle(self, degrees: float) -> None:
        assert is_rectangular(_rotated_rectangle(18.0, 9.0, degrees)) is True

    def test_parallelogram_rejected(self) -> None:
        ring = _from_meters([(0, 0), (20, 0), (30, 10), (10, 10)])
        assert is_rectangular(ring) is False

    def test_tolerance_boundary(self) -> None:
        # Top edge shifted 1 m east over a 10 m rise: corners ~84.3 / 95.7 degrees
        ring = _from_meters([(0, 0), (20, 0), (21, 10), (1, 10)])
        assert is_rectangular(ring, tolerance_deg=15.0) is True
        assert is_rectangular(ring, tolerance_deg=5.0) is False

    def test_triangle_short_circuits(self, rectangle: list[Vertex]) -> None:
        with patch("roof_takeoff.geometry._rectangularity.interior_angles") as angles:
            assert is_rectangular(rectangle[:3]) is False
        angles.assert_not_called()

    def test_l_shape_short_circuits(self, l_shape: list[Vertex]) -> None:
        with patch("roof_takeoff.geometry._rectangularity.interior_angles") as angles:
            assert is_rectangular(l_shape) is False
        angles.assert_not_called()

    def test_pentagon_with_right_angles_rejected(self) -> None:
        # A rectangle with an extra collinear vertex is still five corners
        ring = _from_meters([(0, 0), (10, 0), (20, 0), (20, 10), (0, 10)])
        assert is_rectangular(ring) is False

    def test_degenerate_corner_is_not_rectangular(self) -> None:
        v = Vertex(lat=LAT0, lng=LNG0)
        ring = [v, v, Vertex(lat=LAT0 + 0.0001, lng=LNG0), Vertex(lat=LAT0, lng=LNG0 + 0.0001)]
        assert any(math.isnan(angle) for angle in interior_angles(ring))
        assert is_rectangular(ring) is False
