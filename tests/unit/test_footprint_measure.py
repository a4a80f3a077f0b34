"""Tests for footprint projection and planar measurement.

Covers:
- Local projection scale and mean-latitude handling
- Shoelace area and perimeter against known rectangles
- Independence from start vertex and winding direction
- Geodesic reference area (pyproj)
- Self-intersection detection (shapely)
- ``measure_polygon`` bundling
"""

from __future__ import annotations

import pytest

from roof_takeoff.core.constants import FEET_PER_METER, SQ_FEET_PER_SQ_METER
from roof_takeoff.geometry import (
    compute_area_sqft,
    compute_geodesic_area_sqft,
    compute_perimeter_ft,
    has_self_intersection,
    measure_polygon,
    project_to_local_meters,
    validate_vertices,
)
from roof_takeoff.models.footprint import FootprintGeometry, RoofPolygon, Vertex

RECT_AREA_SQFT = 200.0 * SQ_FEET_PER_SQ_METER
RECT_PERIMETER_FT = 60.0 * FEET_PER_METER


class TestProjection:
    """Flat-earth projection around the mean latitude."""

    def test_empty_ring(self) -> None:
        assert project_to_local_meters([]) == []

    def test_one_point_per_vertex(self, rectangle: list[Vertex]) -> None:
        assert len(project_to_local_meters(rectangle)) == 4
        assert len(project_to_local_meters([*rectangle, rectangle[0]])) == 5

    def test_projected_edge_lengths(self, rectangle: list[Vertex]) -> None:
        points = project_to_local_meters(rectangle)
        assert points[1][0] - points[0][0] == pytest.approx(20.0, rel=1e-9)
        assert points[3][1] - points[0][1] == pytest.approx(10.0, rel=1e-9)

    def test_closing_vertex_does_not_shift_mean_latitude(self, rectangle: list[Vertex]) -> None:
        open_points = project_to_local_meters(rectangle)
        closed_points = project_to_local_meters([*rectangle, rectangle[0]])
        assert closed_points[:4] == open_points


class TestAreaAndPerimeter:
    """Planar area and perimeter of known shapes."""

    def test_rectangle_area(self, rectangle: list[Vertex]) -> None:
        assert compute_area_sqft(rectangle) == pytest.approx(RECT_AREA_SQFT, rel=1e-9)

    def test_rectangle_perimeter(self, rectangle: list[Vertex]) -> None:
        assert compute_perimeter_ft(rectangle) == pytest.approx(RECT_PERIMETER_FT, rel=1e-9)

    def test_closed_and_open_ring_agree(self, rectangle: list[Vertex]) -> None:
        closed = [*rectangle, rectangle[0]]
        assert compute_area_sqft(closed) == compute_area_sqft(rectangle)
        assert compute_perimeter_ft(closed) == compute_perimeter_ft(rectangle)

    def test_l_shape_area(self, l_shape: list[Vertex]) -> None:
        # 400 m² square minus a 100 m² corner
        assert compute_area_sqft(l_shape) == pytest.approx(300.0 * SQ_FEET_PER_SQ_METER, rel=1e-6)

    def test_l_shape_perimeter(self, l_shape: list[Vertex]) -> None:
        assert compute_perimeter_ft(l_shape) == pytest.approx(80.0 * FEET_PER_METER, rel=1e-6)

    @pytest.mark.parametrize("shift", [1, 2, 3, 4, 5])
    def test_start_vertex_invariance(self, l_shape: list[Vertex], shift: int) -> None:
        rotated = l_shape[shift:] + l_shape[:shift]
        assert compute_area_sqft(rotated) == pytest.approx(compute_area_sqft(l_shape), rel=1e-12)
        assert compute_perimeter_ft(rotated) == pytest.approx(
            compute_perimeter_ft(l_shape), rel=1e-12
        )

    def test_winding_invariance(self, l_shape: list[Vertex]) -> None:
        reversed_ring = list(reversed(l_shape))
        assert compute_area_sqft(reversed_ring) == pytest.approx(
            compute_area_sqft(l_shape), rel=1e-12
        )
        assert compute_perimeter_ft(reversed_ring) == pytest.approx(
            compute_perimeter_ft(l_shape), rel=1e-12
        )

    def test_fewer_than_three_corners(self) -> None:
        pair = [Vertex(lat=0.0, lng=0.0), Vertex(lat=0.0, lng=0.001)]
        assert compute_area_sqft(pair) == 0.0
        assert compute_perimeter_ft([pair[0]]) == 0.0

    def test_area_precise_far_from_origin(self, make_rectangle) -> None:
        """Large absolute coordinates do not cost precision at building scale."""
        ring = make_rectangle(15.0, 12.0, lat=64.8, lng=-147.7)
        assert compute_area_sqft(ring) == pytest.approx(180.0 * SQ_FEET_PER_SQ_METER, rel=1e-7)


class TestGeodesicArea:
    """Ellipsoidal reference area via pyproj."""

    def test_close_to_planar_at_building_scale(self, rectangle: list[Vertex]) -> None:
        assert compute_geodesic_area_sqft(rectangle) == pytest.approx(RECT_AREA_SQFT, rel=0.01)

    def test_winding_agnostic(self, rectangle: list[Vertex]) -> None:
        assert compute_geodesic_area_sqft(list(reversed(rectangle))) == pytest.approx(
            compute_geodesic_area_sqft(rectangle)
        )

    def test_degenerate_is_zero(self) -> None:
        assert compute_geodesic_area_sqft([Vertex(lat=0.0, lng=0.0)]) == 0.0


class TestSelfIntersection:
    """Bow-tie rings are flagged."""

    def test_rectangle_is_simple(self, rectangle: list[Vertex]) -> None:
        assert has_self_intersection(rectangle) is False

    def test_bowtie_detected(self, rectangle: list[Vertex]) -> None:
        sw, se, ne, nw = rectangle
        assert has_self_intersection([sw, ne, se, nw]) is True

    def test_triangle_never_self_intersects(self, rectangle: list[Vertex]) -> None:
        assert has_self_intersection(rectangle[:3]) is False


class TestMeasurePolygon:
    """Bundled FootprintGeometry for a validated ring."""

    def test_rectangle(self, rectangle: list[Vertex]) -> None:
        geometry = measure_polygon(validate_vertices(rectangle))
        assert isinstance(geometry, FootprintGeometry)
        assert geometry.available is True
        assert geometry.area_sqft == pytest.approx(RECT_AREA_SQFT, rel=1e-9)
        assert geometry.perimeter_ft == pytest.approx(RECT_PERIMETER_FT, rel=1e-9)
        assert geometry.is_rectangular is True
        assert geometry.self_intersecting is False
        assert geometry.vertex_count == 4
        assert geometry.projection_drift_pct < 2.0

    def test_l_shape_not_rectangular(self, l_shape: list[Vertex]) -> None:
        geometry = measure_polygon(validate_vertices(l_shape))
        assert geometry.is_rectangular is False
        assert geometry.vertex_count == 6

    def test_bowtie_flagged(self, rectangle: list[Vertex]) -> None:
        sw, se, ne, nw = rectangle
        geometry = measure_polygon(RoofPolygon(vertices=(sw, ne, se, nw, sw)))
        assert geometry.self_intersecting is True

    def test_tolerance_forwarded(self, rectangle: list[Vertex]) -> None:
        skewed = [*rectangle]
        skewed[2] = Vertex(lat=skewed[2].lat, lng=skewed[2].lng + 0.00002)
        polygon = validate_vertices(skewed)
        assert measure_polygon(polygon, rectangularity_tolerance_deg=15.0).is_rectangular is True
        assert measure_polygon(polygon, rectangularity_tolerance_deg=1.0).is_rectangular is False

    def test_to_dict(self, rectangle: list[Vertex]) -> None:
        data = measure_polygon(validate_vertices(rectangle)).to_dict()
        assert data["available"] is True
        assert data["vertex_count"] == 4
        assert len(data["vertices"]) == 5  # type: ignore[arg-type]


class TestUnavailableGeometry:
    """Explicit marker for an unusable footprint."""

    def test_unavailable(self) -> None:
        geometry = FootprintGeometry.unavailable("no footprint supplied")
        assert geometry.available is False
        assert geometry.area_sqft == 0.0
        assert geometry.vertex_count == 0
        assert geometry.projection_drift_pct == 0.0
        assert geometry.unavailable_reason == "no footprint supplied"
