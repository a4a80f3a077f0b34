"""Perimeter consistency check.

Cross-checks the independently reported linear features and area of a
``MeasurementSummary`` against the planar measurements of its footprint.

- ``edge_coverage_percent = (lf_eave + lf_rake) * 100 / perimeter_ft``
- ``area_variance_percent = (computed - reported) * 100 / reported``

The verdict is diagnostic only: material derivation proceeds regardless,
and the warnings are surfaced for manual review.  Percentages are rounded
to 6 decimals before comparison so that exact boundary values (e.g. 70%)
classify as inside the range.
"""

from __future__ import annotations

import logging

from roof_takeoff.core.config import TakeoffConfig
from roof_takeoff.models.footprint import FootprintGeometry
from roof_takeoff.models.measurement import MeasurementSummary, ValidationResult

logger = logging.getLogger("roof_takeoff.checks")

_PERCENT_DECIMALS = 6


def validate_perimeter_consistency(
    summary: MeasurementSummary,
    footprint: FootprintGeometry | None = None,
    *,
    config: TakeoffConfig | None = None,
) -> ValidationResult:
    """Validate reported measurements against the footprint geometry.

    Args:
        summary: Reported measurements.
        footprint: Measured footprint, or ``None`` / an unavailable
            geometry when no footprint is known.
        config: Thresholds; defaults to ``TakeoffConfig()``.

    Returns:
        ``ValidationResult`` with the verdict, both percentages and the
        ordered warnings.
    """
    config = config or TakeoffConfig()
    measured = footprint if footprint is not None and footprint.available else None
    available = measured is not None
    warnings: list[str] = []

    perimeter_ft = measured.perimeter_ft if measured is not None else 0.0
    computed_area = measured.area_sqft if measured is not None else 0.0

    edge_total = summary.lf_eave + summary.lf_rake
    coverage_checked = perimeter_ft > 0
    edge_coverage = 0.0
    if coverage_checked:
        edge_coverage = round(edge_total * 100.0 / perimeter_ft, _PERCENT_DECIMALS)

    area_variance = 0.0
    if computed_area > 0 and summary.area_sqft > 0:
        area_variance = round(
            (computed_area - summary.area_sqft) * 100.0 / summary.area_sqft,
            _PERCENT_DECIMALS,
        )

    coverage_low = coverage_checked and edge_coverage < config.edge_coverage_min_pct
    coverage_high = coverage_checked and edge_coverage > config.edge_coverage_max_pct
    area_mismatch = abs(area_variance) > config.area_variance_max_pct

    if coverage_low:
        warnings.append(
            f"Edge coverage {edge_coverage:.1f}% is below {config.edge_coverage_min_pct:g}% "
            "of the footprint perimeter: linear features may be incomplete"
        )
    if coverage_high:
        warnings.append(
            f"Edge coverage {edge_coverage:.1f}% exceeds {config.edge_coverage_max_pct:g}% "
            "of the footprint perimeter: possible duplicate edges"
        )
    if area_mismatch:
        warnings.append(
            f"Footprint area {computed_area:.0f} sq ft differs from reported area "
            f"{summary.area_sqft:.0f} sq ft by {area_variance:+.1f}%"
        )

    large_roof = summary.area_sqft > config.feature_advisory_min_area_sqft
    if large_roof and summary.lf_ridge == 0:
        warnings.append(
            f"No ridge detected on a {summary.area_sqft:.0f} sq ft roof"
        )
    if large_roof and summary.lf_ridge + summary.lf_hip + summary.lf_valley == 0:
        warnings.append(
            "No interior features detected: ridge, hip and valley lengths are all zero"
        )

    if measured is not None:
        warnings.extend(_footprint_advisories(measured, config))

    valid = not (coverage_low or coverage_high or area_mismatch)

    if valid:
        logger.info(
            "Perimeter consistency ok | coverage=%.2f%% | variance=%.2f%% | "
            "footprint=%s | warnings=%d",
            edge_coverage,
            area_variance,
            available,
            len(warnings),
        )
    else:
        logger.warning(
            "Perimeter consistency failed | coverage=%.2f%% | variance=%.2f%% | "
            "footprint=%s | warnings=%d",
            edge_coverage,
            area_variance,
            available,
            len(warnings),
        )

    return ValidationResult(
        valid=valid,
        edge_coverage_percent=edge_coverage,
        area_variance_percent=area_variance,
        warnings=tuple(warnings),
        footprint_available=available,
    )


def _footprint_advisories(footprint: FootprintGeometry, config: TakeoffConfig) -> list[str]:
    """Non-blocking advisories about the footprint itself."""
    advisories: list[str] = []
    if footprint.is_rectangular:
        advisories.append(
            "Footprint is a near-perfect rectangle and may be a bounding-box approximation"
        )
    if footprint.self_intersecting:
        advisories.append("Footprint ring is self-intersecting: computed area may be unreliable")
    drift = footprint.projection_drift_pct
    if drift > config.projection_drift_max_pct:
        advisories.append(
            f"Planar footprint area differs from the geodesic area by {drift:.1f}%: "
            "local projection may be inaccurate"
        )
    return advisories
