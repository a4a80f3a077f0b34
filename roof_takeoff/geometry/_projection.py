"""Local planar projection and geodesic reference area.

The planar projection is a flat-earth approximation centred on the
footprint's mean latitude.  It is accurate at building scale (tens to
low hundreds of metres) and does not handle rings that cross the
anti-meridian or span large areas.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from roof_takeoff.core.constants import METERS_PER_DEGREE_LAT, SQ_FEET_PER_SQ_METER
from roof_takeoff.models.footprint import Vertex


def _distinct_ring(ring: Sequence[Vertex]) -> Sequence[Vertex]:
    """Drop the closing duplicate, if present."""
    if len(ring) > 1 and ring[0] == ring[-1]:
        return ring[:-1]
    return ring


def project_to_local_meters(ring: Sequence[Vertex]) -> list[tuple[float, float]]:
    """Project WGS 84 vertices to planar ``(x, y)`` metres.

    ``x = lng * 111320 * cos(mean_lat)`` and ``y = lat * 111320``, where
    ``mean_lat`` is taken over the distinct vertices so the result does
    not depend on which corner the ring starts at.

    Args:
        ring: Vertices, open or closed.

    Returns:
        One ``(x, y)`` pair per input vertex, in input order.
    """
    if not ring:
        return []

    corners = _distinct_ring(ring)
    mean_lat = sum(v.lat for v in corners) / len(corners)
    meters_per_deg_lng = METERS_PER_DEGREE_LAT * math.cos(math.radians(mean_lat))

    return [(v.lng * meters_per_deg_lng, v.lat * METERS_PER_DEGREE_LAT) for v in ring]


def compute_geodesic_area_sqft(ring: Sequence[Vertex]) -> float:
    """Compute the ellipsoidal polygon area in square feet.

    Uses ``pyproj.Geod`` on the WGS 84 ellipsoid.  Winding-order
    agnostic.  Used as a reference for the planar area, never in its
    place.

    Args:
        ring: Vertices, open or closed.

    Returns:
        Area in square feet, ``0.0`` for fewer than three vertices.
    """
    corners = _distinct_ring(ring)
    if len(corners) < 3:
        return 0.0

    from pyproj import Geod

    geod = Geod(ellps="WGS84")

    lons = [v.lng for v in corners]
    lats = [v.lat for v in corners]

    # Geod.polygon_area_perimeter returns (area_m2, perimeter_m)
    area_m2, _perimeter = geod.polygon_area_perimeter(lons, lats)
    return abs(area_m2) * SQ_FEET_PER_SQ_METER
