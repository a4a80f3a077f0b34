"""Roof footprint geometry.

Validates footprint vertices, projects them to a local planar frame and
measures area, perimeter and shape.

The geometry pipeline is split into focused stages:
- **_validation**: vertex coercion, WGS 84 bounds, ring structure, minimum area
- **_projection**: local flat-earth projection, geodesic reference area (pyproj)
- **_measure**: shoelace area, perimeter, self-intersection (shapely)
- **_rectangularity**: 4-corner near-rectangle classification
- **_codec**: ``POLYGON((lng lat, ...))`` text serialisation and parsing
- **_cleanup**: optional simplification and collinear-corner removal (shapely)

Units: areas in square feet, lengths in feet, coordinates in WGS 84 degrees.
"""

from __future__ import annotations

from roof_takeoff.geometry._cleanup import (
    cleanup_polygon,
    remove_collinear_points,
    simplify_ring,
)
from roof_takeoff.geometry._codec import (
    EMPTY_POLYGON_TEXT,
    measure_footprint,
    parse_footprint_text,
    to_footprint_text,
)
from roof_takeoff.geometry._constants import (
    DEFAULT_COLLINEAR_TOLERANCE_DEG,
    DEFAULT_MIN_POLYGON_AREA_SQFT,
    DEFAULT_RECTANGULARITY_TOLERANCE_DEG,
    DEFAULT_SIMPLIFY_TOLERANCE_DEG,
    MIN_DISTINCT_VERTICES,
)
from roof_takeoff.geometry._measure import (
    compute_area_sqft,
    compute_perimeter_ft,
    has_self_intersection,
    measure_polygon,
)
from roof_takeoff.geometry._projection import (
    compute_geodesic_area_sqft,
    project_to_local_meters,
)
from roof_takeoff.geometry._rectangularity import interior_angles, is_rectangular
from roof_takeoff.geometry._validation import (
    DegeneratePolygonError,
    coerce_vertex,
    validate_coordinate,
    validate_vertices,
)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "DEFAULT_COLLINEAR_TOLERANCE_DEG",
    "DEFAULT_MIN_POLYGON_AREA_SQFT",
    "DEFAULT_RECTANGULARITY_TOLERANCE_DEG",
    "DEFAULT_SIMPLIFY_TOLERANCE_DEG",
    "EMPTY_POLYGON_TEXT",
    "MIN_DISTINCT_VERTICES",
    "DegeneratePolygonError",
    "cleanup_polygon",
    "coerce_vertex",
    "compute_area_sqft",
    "compute_geodesic_area_sqft",
    "compute_perimeter_ft",
    "has_self_intersection",
    "interior_angles",
    "is_rectangular",
    "measure_footprint",
    "measure_polygon",
    "parse_footprint_text",
    "project_to_local_meters",
    "remove_collinear_points",
    "simplify_ring",
    "to_footprint_text",
    "validate_coordinate",
    "validate_vertices",
]
