"""Rectangularity classification of 4-corner footprints.

Corner angles are measured between projected edge vectors, so a
rectangle that is rotated relative to north still classifies as one.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from roof_takeoff.geometry._constants import (
    DEFAULT_RECTANGULARITY_TOLERANCE_DEG,
    RECTANGLE_VERTEX_COUNT,
    RIGHT_ANGLE_DEG,
)
from roof_takeoff.geometry._projection import _distinct_ring, project_to_local_meters
from roof_takeoff.models.footprint import Vertex


def interior_angles(vertices: Sequence[Vertex]) -> list[float]:
    """Return the corner angle at each distinct vertex, in degrees.

    The angle at a corner is the angle between the vectors to its two
    neighbours.  A corner with a zero-length adjacent edge yields ``nan``.
    """
    corners = _distinct_ring(vertices)
    points = project_to_local_meters(corners)
    count = len(points)

    angles: list[float] = []
    for i, (x, y) in enumerate(points):
        px, py = points[i - 1]
        nx, ny = points[(i + 1) % count]
        v1 = (px - x, py - y)
        v2 = (nx - x, ny - y)
        norm = math.hypot(*v1) * math.hypot(*v2)
        if norm == 0.0:
            angles.append(math.nan)
            continue
        cos_angle = (v1[0] * v2[0] + v1[1] * v2[1]) / norm
        angles.append(math.degrees(math.acos(max(-1.0, min(1.0, cos_angle)))))
    return angles


def is_rectangular(
    vertices: Sequence[Vertex],
    *,
    tolerance_deg: float = DEFAULT_RECTANGULARITY_TOLERANCE_DEG,
) -> bool:
    """Classify a footprint as a near-rectangle.

    Only footprints with exactly four distinct corners qualify; any other
    count returns ``False`` without measuring angles.

    Args:
        vertices: Vertices, open or closed.
        tolerance_deg: Allowed deviation from 90 degrees per corner.

    Returns:
        ``True`` if all four corners are within *tolerance_deg* of 90 degrees.
    """
    if len(_distinct_ring(vertices)) != RECTANGLE_VERTEX_COUNT:
        return False

    # nan (degenerate corner) compares False
    return all(
        abs(angle - RIGHT_ANGLE_DEG) <= tolerance_deg for angle in interior_angles(vertices)
    )
