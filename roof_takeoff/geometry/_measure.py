"""Planar area and perimeter of a footprint ring.

Responsibilities:
- Shoelace area over the projected coordinates, in square feet
- Perimeter as the sum of projected edge lengths, in feet
- Self-intersection check (shapely)
- ``measure_polygon``: the bundled ``FootprintGeometry`` for a validated ring
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from roof_takeoff.core.constants import FEET_PER_METER, SQ_FEET_PER_SQ_METER
from roof_takeoff.geometry._constants import DEFAULT_RECTANGULARITY_TOLERANCE_DEG
from roof_takeoff.geometry._projection import (
    _distinct_ring,
    compute_geodesic_area_sqft,
    project_to_local_meters,
)
from roof_takeoff.geometry._rectangularity import is_rectangular
from roof_takeoff.models.footprint import FootprintGeometry, RoofPolygon, Vertex

logger = logging.getLogger("roof_takeoff.geometry")


def compute_area_sqft(ring: Sequence[Vertex]) -> float:
    """Compute the planar footprint area in square feet.

    Shoelace formula over the projected coordinates.  Coordinates are
    shifted to their mean first; the shoelace sum is translation
    invariant and the shift keeps the products small.

    Args:
        ring: Vertices, open or closed.

    Returns:
        Absolute area in square feet (``0.0`` for fewer than 3 corners).
    """
    corners = _distinct_ring(ring)
    if len(corners) < 3:
        return 0.0

    points = project_to_local_meters(corners)
    x0 = sum(x for x, _ in points) / len(points)
    y0 = sum(y for _, y in points) / len(points)
    shifted = [(x - x0, y - y0) for x, y in points]

    twice_area = 0.0
    for i, (x1, y1) in enumerate(shifted):
        x2, y2 = shifted[(i + 1) % len(shifted)]
        twice_area += x1 * y2 - x2 * y1

    return abs(twice_area) / 2.0 * SQ_FEET_PER_SQ_METER


def compute_perimeter_ft(ring: Sequence[Vertex]) -> float:
    """Compute the planar footprint perimeter in feet.

    Args:
        ring: Vertices, open or closed; an open ring is closed implicitly.

    Returns:
        Perimeter in feet (``0.0`` for fewer than 2 corners).
    """
    corners = _distinct_ring(ring)
    if len(corners) < 2:
        return 0.0

    points = project_to_local_meters(corners)
    total_m = 0.0
    for i, (x1, y1) in enumerate(points):
        x2, y2 = points[(i + 1) % len(points)]
        total_m += math.hypot(x2 - x1, y2 - y1)

    return total_m * FEET_PER_METER


def has_self_intersection(ring: Sequence[Vertex]) -> bool:
    """Return ``True`` if the ring crosses or touches itself."""
    corners = _distinct_ring(ring)
    if len(corners) < 4:
        return False

    from shapely.geometry import LinearRing

    return not LinearRing([(v.lng, v.lat) for v in corners]).is_simple


def measure_polygon(
    polygon: RoofPolygon,
    *,
    rectangularity_tolerance_deg: float = DEFAULT_RECTANGULARITY_TOLERANCE_DEG,
) -> FootprintGeometry:
    """Measure a validated footprint.

    Args:
        polygon: A ring produced by ``validate_vertices``.
        rectangularity_tolerance_deg: Per-corner tolerance for the
            rectangularity classification.

    Returns:
        ``FootprintGeometry`` with planar area and perimeter, the
        rectangularity and self-intersection flags, and the geodesic
        reference area.
    """
    ring = polygon.vertices
    area_sqft = compute_area_sqft(ring)
    perimeter_ft = compute_perimeter_ft(ring)
    rectangular = is_rectangular(ring, tolerance_deg=rectangularity_tolerance_deg)
    self_intersecting = has_self_intersection(ring)
    geodesic_area_sqft = compute_geodesic_area_sqft(ring)

    if self_intersecting:
        logger.warning(
            "Footprint ring is self-intersecting | vertices=%d",
            polygon.vertex_count,
        )

    logger.info(
        "Footprint measured | vertices=%d | area=%.1f sqft | perimeter=%.1f ft | "
        "geodesic_area=%.1f sqft | rectangular=%s",
        polygon.vertex_count,
        area_sqft,
        perimeter_ft,
        geodesic_area_sqft,
        rectangular,
    )

    return FootprintGeometry(
        available=True,
        vertices=ring,
        area_sqft=area_sqft,
        perimeter_ft=perimeter_ft,
        geodesic_area_sqft=geodesic_area_sqft,
        is_rectangular=rectangular,
        self_intersecting=self_intersecting,
    )
