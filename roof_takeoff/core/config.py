"""Takeoff configuration loaded from environment variables.

All thresholds have defaults matching the documented validation rules.
Azure Functions app settings (or ``local.settings.json`` for local dev)
are the source of truth when running behind ``function_app.py``.

``from_env()`` raises ``ConfigValidationError`` if any value is out of
its valid range, so bad configuration is caught at startup rather than
in the middle of a takeoff.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from roof_takeoff.core.constants import WASTE_PERCENTAGES
from roof_takeoff.core.exceptions import TakeoffError


class ConfigValidationError(TakeoffError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class TakeoffConfig:
    """Immutable takeoff configuration.

    Attributes:
        min_polygon_area_sqft: Polygons smaller than this are degenerate.
        edge_coverage_min_pct: Lower inclusive bound of eave+rake coverage.
        edge_coverage_max_pct: Upper inclusive bound of eave+rake coverage.
        area_variance_max_pct: Largest tolerated |footprint vs reported| area
            variance, in percent.
        feature_advisory_min_area_sqft: Roofs larger than this get
            missing-ridge / missing-interior-feature advisories.
        rectangularity_tolerance_deg: Allowed deviation from 90 degrees per
            corner for a footprint to count as rectangular.
        projection_drift_max_pct: Planar vs geodesic area difference above
            which a projection advisory is raised.
        default_waste_pct: Waste applied when a measurement carries none.
        footprint_cleanup: Simplify footprints and drop collinear corners
            before measuring them.
        simplify_tolerance_deg: Douglas-Peucker tolerance for the cleanup,
            in degrees.
    """

    min_polygon_area_sqft: float = 50.0
    edge_coverage_min_pct: float = 70.0
    edge_coverage_max_pct: float = 130.0
    area_variance_max_pct: float = 15.0
    feature_advisory_min_area_sqft: float = 500.0
    rectangularity_tolerance_deg: float = 15.0
    projection_drift_max_pct: float = 2.0
    default_waste_pct: int = 10
    footprint_cleanup: bool = False
    simplify_tolerance_deg: float = 0.000005

    @classmethod
    def from_env(cls) -> TakeoffConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is out of range.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``AREA_VARIANCE_MAX_PCT=abc``).
        """
        config = cls(
            min_polygon_area_sqft=float(os.getenv("MIN_POLYGON_AREA_SQFT", "50")),
            edge_coverage_min_pct=float(os.getenv("EDGE_COVERAGE_MIN_PCT", "70")),
            edge_coverage_max_pct=float(os.getenv("EDGE_COVERAGE_MAX_PCT", "130")),
            area_variance_max_pct=float(os.getenv("AREA_VARIANCE_MAX_PCT", "15")),
            feature_advisory_min_area_sqft=float(
                os.getenv("FEATURE_ADVISORY_MIN_AREA_SQFT", "500")
            ),
            rectangularity_tolerance_deg=float(os.getenv("RECTANGULARITY_TOLERANCE_DEG", "15")),
            projection_drift_max_pct=float(os.getenv("PROJECTION_DRIFT_MAX_PCT", "2")),
            default_waste_pct=int(os.getenv("DEFAULT_WASTE_PCT", "10")),
            footprint_cleanup=os.getenv("FOOTPRINT_CLEANUP", "false").strip().lower()
            in ("1", "true", "yes"),
            simplify_tolerance_deg=float(os.getenv("SIMPLIFY_TOLERANCE_DEG", "0.000005")),
        )
        _validate(config)
        return config


def _validate(config: TakeoffConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if config.min_polygon_area_sqft < 0:
        raise ConfigValidationError(
            "MIN_POLYGON_AREA_SQFT",
            config.min_polygon_area_sqft,
            "must be >= 0 (square feet)",
        )

    if config.edge_coverage_min_pct < 0:
        raise ConfigValidationError(
            "EDGE_COVERAGE_MIN_PCT",
            config.edge_coverage_min_pct,
            "must be >= 0 (percentage)",
        )

    if config.edge_coverage_max_pct < config.edge_coverage_min_pct:
        raise ConfigValidationError(
            "EDGE_COVERAGE_MAX_PCT",
            config.edge_coverage_max_pct,
            f"must be >= EDGE_COVERAGE_MIN_PCT ({config.edge_coverage_min_pct})",
        )

    if config.area_variance_max_pct < 0:
        raise ConfigValidationError(
            "AREA_VARIANCE_MAX_PCT",
            config.area_variance_max_pct,
            "must be >= 0 (percentage)",
        )

    if config.feature_advisory_min_area_sqft < 0:
        raise ConfigValidationError(
            "FEATURE_ADVISORY_MIN_AREA_SQFT",
            config.feature_advisory_min_area_sqft,
            "must be >= 0 (square feet)",
        )

    if not 0.0 < config.rectangularity_tolerance_deg < 90.0:
        raise ConfigValidationError(
            "RECTANGULARITY_TOLERANCE_DEG",
            config.rectangularity_tolerance_deg,
            "must be between 0 and 90 (degrees, exclusive)",
        )

    if config.projection_drift_max_pct <= 0:
        raise ConfigValidationError(
            "PROJECTION_DRIFT_MAX_PCT",
            config.projection_drift_max_pct,
            "must be > 0 (percentage)",
        )

    if config.simplify_tolerance_deg < 0:
        raise ConfigValidationError(
            "SIMPLIFY_TOLERANCE_DEG",
            config.simplify_tolerance_deg,
            "must be >= 0 (degrees)",
        )

    if config.default_waste_pct not in WASTE_PERCENTAGES:
        raise ConfigValidationError(
            "DEFAULT_WASTE_PCT",
            config.default_waste_pct,
            f"must be one of {list(WASTE_PERCENTAGES)}",
        )
