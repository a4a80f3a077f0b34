"""Vertex validation for roof footprints.

Responsibilities:
- Coercion of ``Vertex`` / ``(lat, lng)`` / ``{"lat", "lng"}`` inputs
- Coordinate bounds checking (WGS 84)
- Ring structure validation (closure, distinct corners, repeated vertices)
- Minimum area check (degenerate slivers)
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping, Sequence

from roof_takeoff.core.constants import (
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
)
from roof_takeoff.core.exceptions import ValidationError
from roof_takeoff.geometry._constants import (
    DEFAULT_MIN_POLYGON_AREA_SQFT,
    MIN_DISTINCT_VERTICES,
)
from roof_takeoff.geometry._measure import compute_area_sqft
from roof_takeoff.models.footprint import RoofPolygon, Vertex

logger = logging.getLogger("roof_takeoff.geometry")


class DegeneratePolygonError(ValidationError):
    """Raised when a footprint cannot form a usable polygon."""

    default_stage = "vertex_validation"
    default_code = "VALIDATION_ERROR"


# ---------------------------------------------------------------------------
# Coercion and coordinate validation
# ---------------------------------------------------------------------------


def coerce_vertex(raw: object, index: int = 0) -> Vertex:
    """Convert a supported vertex representation to a ``Vertex``.

    Accepts a ``Vertex``, a ``(lat, lng)`` pair or a mapping with
    ``lat`` and ``lng`` keys.

    Raises:
        DegeneratePolygonError: If *raw* is not a recognisable vertex or a
            coordinate is not numeric.
    """
    if isinstance(raw, Vertex):
        return raw
    try:
        if isinstance(raw, Mapping):
            return Vertex(lat=float(raw["lat"]), lng=float(raw["lng"]))
        if isinstance(raw, Sequence) and not isinstance(raw, str | bytes) and len(raw) == 2:
            return Vertex(lat=float(raw[0]), lng=float(raw[1]))
    except (KeyError, TypeError, ValueError) as exc:
        msg = f"Vertex {index} is malformed: {raw!r} ({exc})"
        raise DegeneratePolygonError(msg) from exc

    msg = f"Vertex {index} is malformed: {raw!r}"
    raise DegeneratePolygonError(msg)


def validate_coordinate(vertex: Vertex, index: int = 0) -> None:
    """Validate that a vertex is finite and inside WGS 84 bounds.

    Raises:
        DegeneratePolygonError: If a coordinate is non-finite or out of range.
    """
    if not (math.isfinite(vertex.lat) and math.isfinite(vertex.lng)):
        msg = f"Vertex {index} has a non-finite coordinate: ({vertex.lat}, {vertex.lng})"
        raise DegeneratePolygonError(msg)
    if not (MIN_LATITUDE <= vertex.lat <= MAX_LATITUDE):
        msg = (
            f"Vertex {index} latitude {vertex.lat} out of WGS 84 range "
            f"[{MIN_LATITUDE}, {MAX_LATITUDE}]"
        )
        raise DegeneratePolygonError(msg)
    if not (MIN_LONGITUDE <= vertex.lng <= MAX_LONGITUDE):
        msg = (
            f"Vertex {index} longitude {vertex.lng} out of WGS 84 range "
            f"[{MIN_LONGITUDE}, {MAX_LONGITUDE}]"
        )
        raise DegeneratePolygonError(msg)


# ---------------------------------------------------------------------------
# Ring validation
# ---------------------------------------------------------------------------


def validate_vertices(
    vertices: Iterable[object],
    *,
    min_area_sqft: float = DEFAULT_MIN_POLYGON_AREA_SQFT,
) -> RoofPolygon:
    """Validate a footprint vertex list and close the ring.

    Args:
        vertices: Ordered corners, open or closed.
        min_area_sqft: Smallest acceptable planar area.

    Returns:
        The closed, validated ``RoofPolygon``.

    Raises:
        DegeneratePolygonError: If a vertex is malformed or out of range,
            the ring has fewer than 3 distinct corners, two consecutive
            vertices are identical, or the area is below *min_area_sqft*.
    """
    ring = [coerce_vertex(raw, i) for i, raw in enumerate(vertices)]
    for i, vertex in enumerate(ring):
        validate_coordinate(vertex, i)

    if ring and ring[0] != ring[-1]:
        ring.append(ring[0])

    distinct = set(ring)
    if len(distinct) < MIN_DISTINCT_VERTICES:
        msg = (
            f"Polygon has {len(distinct)} distinct vertex(es), "
            f"need at least {MIN_DISTINCT_VERTICES}"
        )
        raise DegeneratePolygonError(msg)

    for i in range(len(ring) - 1):
        if ring[i] == ring[i + 1]:
            msg = (
                f"Vertices {i} and {i + 1} are identical "
                f"({ring[i].lat}, {ring[i].lng})"
            )
            raise DegeneratePolygonError(msg)

    area_sqft = compute_area_sqft(ring)
    if area_sqft < min_area_sqft:
        msg = f"Polygon area {area_sqft:.2f} sq ft is below the minimum of {min_area_sqft:g} sq ft"
        raise DegeneratePolygonError(msg)

    logger.debug(
        "Vertices validated | vertices=%d | area=%.1f sqft",
        len(ring) - 1,
        area_sqft,
    )
    return RoofPolygon(vertices=tuple(ring))
