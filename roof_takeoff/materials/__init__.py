"""Material quantity engine.

Turns a measurement summary into packaged, priced material lines and the
flat scalar table used by document templates.

- **_catalog**: brand packaging catalog and brand resolution
- **_engine**: per-category packaged quantities, waste, pricing
- **_scalars**: dotted-key scalar table
- **_pitch**: ``"rise/run"`` pitch parsing and slope factor
"""

from __future__ import annotations

from roof_takeoff.materials._catalog import (
    DEFAULT_CATALOG,
    GENERIC_BRAND,
    BrandCatalog,
    get_available_brands,
)
from roof_takeoff.materials._engine import (
    DEFAULT_PACKAGING_FACTORS,
    UnsupportedWastePercentError,
    derive_materials,
)
from roof_takeoff.materials._pitch import FLAT, PitchInfo, parse_pitch
from roof_takeoff.materials._scalars import (
    build_scalar_table,
    ceil_units,
    waste_adjusted,
)

__all__ = [
    "DEFAULT_CATALOG",
    "DEFAULT_PACKAGING_FACTORS",
    "FLAT",
    "GENERIC_BRAND",
    "BrandCatalog",
    "PitchInfo",
    "UnsupportedWastePercentError",
    "build_scalar_table",
    "ceil_units",
    "derive_materials",
    "get_available_brands",
    "parse_pitch",
    "waste_adjusted",
]
