"""Shared takeoff constants.

Unit conversions, the fixed waste-percentage set, and the material
category keys used by the catalog, the quantity engine and the scalar
table.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Local projection and unit conversions
# ---------------------------------------------------------------------------

METERS_PER_DEGREE_LAT: float = 111_320.0
"""Metres per degree of latitude in the local flat-earth projection."""

SQ_FEET_PER_SQ_METER: float = 10.7639
FEET_PER_METER: float = 3.28084

SQ_FEET_PER_SQUARE: float = 100.0
"""One roofing square is 100 sq ft."""

# WGS 84 coordinate bounds
MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0

# ---------------------------------------------------------------------------
# Waste
# ---------------------------------------------------------------------------

WASTE_PERCENTAGES: tuple[int, ...] = (0, 8, 10, 12, 15, 17, 20)
"""The only waste percentages a measurement may carry."""

# ---------------------------------------------------------------------------
# Material categories
# ---------------------------------------------------------------------------

SHINGLES = "shingles"
RIDGE_CAP = "ridge_cap"
STARTER = "starter"
UNDERLAYMENT = "underlayment"
ICE_WATER = "ice_water"
VALLEY = "valley"
DRIP_EDGE = "drip_edge"

PIPE_BOOT = "pipe_boot"
SKYLIGHT_FLASHING = "skylight_flashing"
CHIMNEY_FLASHING = "chimney_flashing"
HVAC_FLASHING = "hvac_flashing"

WASTE_APPLICABLE_CATEGORIES: tuple[str, ...] = (
    SHINGLES,
    RIDGE_CAP,
    STARTER,
    UNDERLAYMENT,
    ICE_WATER,
    VALLEY,
    DRIP_EDGE,
)
"""Area/length-derived categories, in bill-of-materials order."""

# Penetration category (measurement side) -> flashing material category.
PENETRATION_MATERIALS: dict[str, str] = {
    "pipe_vent": PIPE_BOOT,
    "skylight": SKYLIGHT_FLASHING,
    "chimney": CHIMNEY_FLASHING,
    "hvac": HVAC_FLASHING,
}

STANDARD_PENETRATIONS: tuple[str, ...] = tuple(PENETRATION_MATERIALS)


def penetration_material(penetration: str) -> str:
    """Return the flashing material category for a penetration category.

    Penetrations without a dedicated entry map to ``"<name>_flashing"``.
    """
    return PENETRATION_MATERIALS.get(penetration, f"{penetration}_flashing")
