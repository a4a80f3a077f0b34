"""Measurement consistency checks."""

from roof_takeoff.checks.perimeter_consistency import validate_perimeter_consistency

__all__ = ["validate_perimeter_consistency"]
