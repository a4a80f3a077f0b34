"""Footprint text codec.

Footprints travel as polygon text, longitude first::

    POLYGON((-97.1 32.9, -97.0999 32.9, -97.0999 32.9001, -97.1 32.9))

Malformed text parses to ``None`` (and ``measure_footprint`` returns an
"unavailable" geometry) rather than raising.  Only a well-formed but
degenerate ring raises.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Sequence

from roof_takeoff.core.config import TakeoffConfig
from roof_takeoff.geometry._cleanup import cleanup_polygon
from roof_takeoff.geometry._measure import measure_polygon
from roof_takeoff.geometry._validation import validate_vertices
from roof_takeoff.models.footprint import FootprintGeometry, Vertex

logger = logging.getLogger("roof_takeoff.geometry")

_POLYGON_RE = re.compile(r"POLYGON\s*\(\(\s*(.*?)\s*\)\)", re.IGNORECASE | re.DOTALL)

EMPTY_POLYGON_TEXT = "POLYGON EMPTY"


def to_footprint_text(vertices: Sequence[Vertex]) -> str:
    """Serialise vertices as ``POLYGON((lng lat, ...))``.

    The ring is closed if it is not already.  Coordinates are written
    with ``repr`` precision so that parsing the text back reproduces them.
    """
    if not vertices:
        return EMPTY_POLYGON_TEXT

    ring = list(vertices)
    if ring[0] != ring[-1]:
        ring.append(ring[0])
    body = ", ".join(f"{float(v.lng)!r} {float(v.lat)!r}" for v in ring)
    return f"POLYGON(({body}))"


def parse_footprint_text(text: object) -> list[Vertex] | None:
    """Parse polygon text into vertices.

    Args:
        text: Footprint text, longitude first.

    Returns:
        The vertices in text order (closing vertex included if present),
        or ``None`` if the text cannot be parsed.
    """
    if not isinstance(text, str):
        return None

    match = _POLYGON_RE.search(text)
    if match is None or not match.group(1):
        return None

    vertices: list[Vertex] = []
    for pair in match.group(1).split(","):
        tokens = pair.split()
        if len(tokens) != 2:
            return None
        try:
            lng, lat = float(tokens[0]), float(tokens[1])
        except ValueError:
            return None
        if not (math.isfinite(lng) and math.isfinite(lat)):
            return None
        vertices.append(Vertex(lat=lat, lng=lng))
    return vertices


def measure_footprint(
    text: object,
    *,
    config: TakeoffConfig | None = None,
    cleanup: bool | None = None,
) -> FootprintGeometry:
    """Parse, validate and measure footprint text.

    Args:
        text: Footprint text, longitude first.
        config: Thresholds; defaults to ``TakeoffConfig()``.
        cleanup: Simplify the ring and drop collinear corners before
            measuring.  Defaults to ``config.footprint_cleanup``.

    Returns:
        The measured ``FootprintGeometry``, or
        ``FootprintGeometry.unavailable()`` if the text cannot be parsed.

    Raises:
        DegeneratePolygonError: If the text parses but the ring is degenerate.
    """
    config = config or TakeoffConfig()
    vertices = parse_footprint_text(text)
    if vertices is None:
        preview = str(text)[:80] if text is not None else ""
        logger.warning("Footprint text unparseable, geometry unavailable | text=%r", preview)
        return FootprintGeometry.unavailable("footprint text could not be parsed")

    polygon = validate_vertices(vertices, min_area_sqft=config.min_polygon_area_sqft)
    if config.footprint_cleanup if cleanup is None else cleanup:
        polygon = cleanup_polygon(
            polygon,
            simplify_tolerance_deg=config.simplify_tolerance_deg,
            min_area_sqft=config.min_polygon_area_sqft,
        )
    return measure_polygon(
        polygon,
        rectangularity_tolerance_deg=config.rectangularity_tolerance_deg,
    )
