"""Constants for footprint geometry."""

from __future__ import annotations

MIN_DISTINCT_VERTICES = 3
"""A footprint needs at least this many distinct corners."""

RECTANGLE_VERTEX_COUNT = 4
RIGHT_ANGLE_DEG = 90.0

DEFAULT_MIN_POLYGON_AREA_SQFT = 50.0
DEFAULT_RECTANGULARITY_TOLERANCE_DEG = 15.0

DEFAULT_SIMPLIFY_TOLERANCE_DEG = 0.000005
"""Douglas-Peucker tolerance in degrees (about half a metre)."""

DEFAULT_COLLINEAR_TOLERANCE_DEG = 5.0
"""Corners turning less than this (or doubling back within it) are dropped."""
