"""Footprint cleanup for hand-digitised outlines.

Traced footprints often carry extra points: a midpoint on a straight
wall, a jitter of a few centimetres, a spike where the cursor doubled
back.  Each extra point changes the corner count, so a traced rectangle
stops classifying as one.

Two passes, both optional through ``cleanup_polygon``:
- **simplify_ring**: Douglas-Peucker with topology preserved (shapely)
- **remove_collinear_points**: drops straight-through and spike corners,
  measured in the local metre frame
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from roof_takeoff.geometry._constants import (
    DEFAULT_COLLINEAR_TOLERANCE_DEG,
    DEFAULT_SIMPLIFY_TOLERANCE_DEG,
    MIN_DISTINCT_VERTICES,
)
from roof_takeoff.geometry._projection import _distinct_ring, project_to_local_meters
from roof_takeoff.geometry._validation import validate_vertices
from roof_takeoff.models.footprint import RoofPolygon, Vertex

logger = logging.getLogger("roof_takeoff.geometry")


def simplify_ring(
    vertices: Sequence[Vertex],
    *,
    tolerance_deg: float = DEFAULT_SIMPLIFY_TOLERANCE_DEG,
) -> list[Vertex]:
    """Simplify a ring with shapely's topology-preserving simplifier.

    Args:
        vertices: Vertices, open or closed.
        tolerance_deg: Maximum offset of a removed point, in degrees.

    Returns:
        The simplified open ring.  The input (opened) is returned
        unchanged when it has fewer than four corners, is not a valid
        polygon, or would simplify below three corners.
    """
    corners = list(_distinct_ring(vertices))
    if len(corners) <= MIN_DISTINCT_VERTICES or tolerance_deg <= 0:
        return corners

    from shapely.geometry import Polygon

    shape = Polygon([(v.lng, v.lat) for v in corners])
    if not shape.is_valid:
        logger.warning("Footprint not simplified, ring is invalid | vertices=%d", len(corners))
        return corners

    simplified = shape.simplify(tolerance_deg, preserve_topology=True)
    if simplified.is_empty or simplified.geom_type != "Polygon":
        return corners

    # shapely returns a closed exterior ring
    coords = list(simplified.exterior.coords)[:-1]
    if len(coords) < MIN_DISTINCT_VERTICES:
        return corners
    return [Vertex(lat=lat, lng=lng) for lng, lat in coords]


def remove_collinear_points(
    vertices: Sequence[Vertex],
    *,
    tolerance_deg: float = DEFAULT_COLLINEAR_TOLERANCE_DEG,
) -> list[Vertex]:
    """Drop corners where the outline runs straight on or doubles back.

    The turning angle at a corner is the angle between the incoming and
    the outgoing edge.  A corner is dropped when it turns by at most
    *tolerance_deg*, or by at least ``180 - tolerance_deg``.  Neighbours
    are taken from the input ring, so a straight run of several points
    collapses in one pass.

    Returns:
        The open ring without those corners, or the input (opened) if
        fewer than three corners would remain.
    """
    corners = list(_distinct_ring(vertices))
    if len(corners) <= MIN_DISTINCT_VERTICES:
        return corners

    points = project_to_local_meters(corners)
    count = len(points)
    kept: list[Vertex] = []
    for i, (x, y) in enumerate(points):
        px, py = points[i - 1]
        nx, ny = points[(i + 1) % count]
        incoming = (x - px, y - py)
        outgoing = (nx - x, ny - y)
        turn = math.degrees(
            math.atan2(
                abs(incoming[0] * outgoing[1] - incoming[1] * outgoing[0]),
                incoming[0] * outgoing[0] + incoming[1] * outgoing[1],
            )
        )
        if tolerance_deg < turn < 180.0 - tolerance_deg:
            kept.append(corners[i])

    if len(kept) < MIN_DISTINCT_VERTICES:
        return corners
    return kept


def cleanup_polygon(
    polygon: RoofPolygon,
    *,
    simplify_tolerance_deg: float = DEFAULT_SIMPLIFY_TOLERANCE_DEG,
    remove_collinear: bool = True,
    collinear_tolerance_deg: float = DEFAULT_COLLINEAR_TOLERANCE_DEG,
    min_area_sqft: float = 0.0,
) -> RoofPolygon:
    """Simplify a validated footprint and drop collinear corners.

    The cleaned ring is validated again, so the result carries the same
    invariants as the input.

    Raises:
        DegeneratePolygonError: If the cleaned ring falls below
            *min_area_sqft*.
    """
    corners = simplify_ring(polygon.vertices, tolerance_deg=simplify_tolerance_deg)
    if remove_collinear:
        corners = remove_collinear_points(corners, tolerance_deg=collinear_tolerance_deg)

    if len(corners) == polygon.vertex_count:
        return polygon

    logger.info(
        "Footprint cleaned | vertices_before=%d | vertices_after=%d",
        polygon.vertex_count,
        len(corners),
    )
    return validate_vertices(corners, min_area_sqft=min_area_sqft)
