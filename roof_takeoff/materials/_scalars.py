"""Flat scalar table for document templates.

The table is built once per derivation and maps dotted keys
(``roof.squares``, ``lf.ridge``, ``waste.10pct.squares``,
``bundles.shingles.waste_10pct``, ...) to numbers.  It is the only data
the formula evaluator can see.
"""

from __future__ import annotations

import math
from collections.abc import Mapping

from roof_takeoff.core.constants import (
    DRIP_EDGE,
    ICE_WATER,
    RIDGE_CAP,
    SHINGLES,
    SQ_FEET_PER_SQUARE,
    STANDARD_PENETRATIONS,
    STARTER,
    UNDERLAYMENT,
    VALLEY,
    WASTE_PERCENTAGES,
)
from roof_takeoff.materials._pitch import parse_pitch
from roof_takeoff.models.footprint import FootprintGeometry
from roof_takeoff.models.measurement import MeasurementSummary

# Material category -> scalar key of its packaged count
PACKAGED_COUNT_KEYS: dict[str, str] = {
    SHINGLES: "bundles.shingles",
    RIDGE_CAP: "bundles.ridge_cap",
    STARTER: "bundles.starter",
    UNDERLAYMENT: "rolls.underlayment",
    ICE_WATER: "rolls.ice_water",
    VALLEY: "rolls.valley",
    DRIP_EDGE: "sticks.drip_edge",
}

# Penetration category -> scalar key of its flashing count
FLASHING_COUNT_KEYS: dict[str, str] = {
    "pipe_vent": "boots.pipe",
    "skylight": "kits.skylight",
    "chimney": "kits.chimney",
}


def ceil_units(value: float) -> int:
    """Round a packaged quantity up to whole units.

    The value is rounded to 9 decimals first so float noise
    (``10 * 1.1 == 11.000000000000002``) does not add a unit.
    """
    return math.ceil(round(value, 9))


def waste_adjusted(base: float, waste_percent: int) -> int:
    """Return ``ceil(base * (1 + waste_percent / 100))``."""
    return ceil_units(base * (1.0 + waste_percent / 100.0))


def build_scalar_table(
    summary: MeasurementSummary,
    base_quantities: Mapping[str, float],
    *,
    waste_percent: int | None = None,
    footprint: FootprintGeometry | None = None,
) -> dict[str, float]:
    """Build the scalar table for *summary*.

    Args:
        summary: The measurement summary of the derivation.
        base_quantities: Material category -> packaged quantity before
            waste, for the area/length-derived categories.
        waste_percent: Waste the derivation used; defaults to the summary's.
        footprint: Measured footprint, if one is available.

    Returns:
        Dotted key -> number.
    """
    waste = summary.waste_percent if waste_percent is None else waste_percent
    pitch = parse_pitch(summary.pitch)

    perimeter_ft = summary.perimeter_ft or 0.0
    if footprint is not None and footprint.available:
        perimeter_ft = footprint.perimeter_ft
    if not perimeter_ft:
        perimeter_ft = summary.lf_eave + summary.lf_rake

    scalars: dict[str, float] = {
        "roof.total_sqft": summary.area_sqft,
        "roof.squares": summary.squares,
        "roof.waste_pct": float(waste),
        "roof.pitch_factor": pitch.slope_factor,
        "roof.pitch_degrees": pitch.degrees,
        "roof.perimeter_ft": perimeter_ft,
        "roof.stories": float(summary.stories),
    }
    if footprint is not None and footprint.available:
        scalars["roof.is_rectangular"] = 1.0 if footprint.is_rectangular else 0.0

    for w in WASTE_PERCENTAGES:
        sqft = summary.area_sqft * (1.0 + w / 100.0)
        scalars[f"waste.{w}pct.sqft"] = sqft
        scalars[f"waste.{w}pct.squares"] = sqft / SQ_FEET_PER_SQUARE

    scalars.update(
        {
            "lf.ridge": summary.lf_ridge,
            "lf.hip": summary.lf_hip,
            "lf.valley": summary.lf_valley,
            "lf.eave": summary.lf_eave,
            "lf.rake": summary.lf_rake,
            "lf.step": summary.lf_step,
            "lf.perimeter": perimeter_ft,
            "lf.ridge_hip_total": summary.lf_ridge + summary.lf_hip,
            "lf.eave_rake_total": summary.lf_eave + summary.lf_rake,
            "lf.valley_step_total": summary.lf_valley + summary.lf_step,
        }
    )

    counts = dict.fromkeys(STANDARD_PENETRATIONS, 0)
    counts.update(summary.penetration_counts)
    scalars["pen.total"] = float(sum(counts.values()))
    for category, count in counts.items():
        scalars[f"pen.{category}"] = float(count)

    for category, key in PACKAGED_COUNT_KEYS.items():
        base = base_quantities.get(category, 0.0)
        scalars[key] = float(ceil_units(base))
        for w in WASTE_PERCENTAGES:
            scalars[f"{key}.waste_{w}pct"] = float(waste_adjusted(base, w))

    for category, key in FLASHING_COUNT_KEYS.items():
        scalars[key] = float(counts.get(category, 0))

    return scalars
