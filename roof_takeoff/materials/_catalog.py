"""Brand packaging catalog.

A ``BrandCatalog`` is a read-only lookup of ``PackagingEntry`` rows keyed
by ``(material_category, brand)``.  Brand resolution for a category:

1. the caller's selected brand, if the catalog has it;
2. the catalog's default-brand order for the category;
3. the first entry listed for the category.

``DEFAULT_CATALOG`` carries the system default packaging factors (the
``Generic`` brand) plus GAF, Owens Corning and CertainTeed product lines.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from roof_takeoff.core.constants import (
    CHIMNEY_FLASHING,
    DRIP_EDGE,
    HVAC_FLASHING,
    ICE_WATER,
    PIPE_BOOT,
    RIDGE_CAP,
    SHINGLES,
    SKYLIGHT_FLASHING,
    STARTER,
    UNDERLAYMENT,
    VALLEY,
)
from roof_takeoff.models.materials import PackagingEntry

logger = logging.getLogger("roof_takeoff.materials")

GENERIC_BRAND = "Generic"


@dataclass(frozen=True, slots=True)
class BrandCatalog:
    """Read-only packaging catalog.

    Attributes:
        entries: Catalog rows, in listing order.
        default_brands: Category -> preferred brands, most preferred first.
    """

    entries: tuple[PackagingEntry, ...]
    default_brands: dict[str, tuple[str, ...]] = field(default_factory=dict)

    def entries_for(self, material_category: str) -> list[PackagingEntry]:
        """Return every entry for *material_category*, in listing order."""
        return [e for e in self.entries if e.material_category == material_category]

    def lookup(self, material_category: str, brand: str) -> PackagingEntry | None:
        """Return the entry for ``(material_category, brand)``, if any."""
        for entry in self.entries:
            if entry.material_category == material_category and entry.brand == brand:
                return entry
        return None

    def brands_for(self, material_category: str) -> list[str]:
        """Return the distinct brands listed for *material_category*."""
        brands: list[str] = []
        for entry in self.entries_for(material_category):
            if entry.brand not in brands:
                brands.append(entry.brand)
        return brands

    @property
    def categories(self) -> list[str]:
        """Distinct categories, in listing order."""
        seen: list[str] = []
        for entry in self.entries:
            if entry.material_category not in seen:
                seen.append(entry.material_category)
        return seen

    def resolve(self, material_category: str, selected_brand: str | None = None) -> PackagingEntry | None:
        """Pick the entry to price *material_category* with.

        Returns:
            The resolved entry, or ``None`` if the category has no entries.
        """
        if selected_brand:
            entry = self.lookup(material_category, selected_brand)
            if entry is not None:
                return entry
            logger.warning(
                "Selected brand not in catalog, falling back | category=%s | brand=%s",
                material_category,
                selected_brand,
            )

        for brand in self.default_brands.get(material_category, ()):
            entry = self.lookup(material_category, brand)
            if entry is not None:
                return entry

        candidates = self.entries_for(material_category)
        return candidates[0] if candidates else None

    @classmethod
    def from_dicts(
        cls,
        rows: Iterable[Mapping[str, Any]],
        *,
        default_brands: Mapping[str, Iterable[str]] | None = None,
    ) -> BrandCatalog:
        """Build a catalog from serialised ``PackagingEntry`` dicts.

        Raises:
            ModelValidationError: If a row is invalid.
        """
        return cls(
            entries=tuple(PackagingEntry.from_dict(dict(row)) for row in rows),
            default_brands={k: tuple(v) for k, v in (default_brands or {}).items()},
        )


def get_available_brands(catalog: BrandCatalog | None = None) -> dict[str, list[str]]:
    """Return category -> brands offered by *catalog* (default catalog if omitted)."""
    catalog = catalog or DEFAULT_CATALOG
    return {category: catalog.brands_for(category) for category in catalog.categories}


def _entry(
    category: str,
    brand: str,
    product_id: str,
    name: str,
    unit: str,
    factor: float,
    cost: float,
) -> PackagingEntry:
    return PackagingEntry(
        material_category=category,
        brand=brand,
        product_id=product_id,
        product_name=name,
        unit_of_measure=unit,
        packaging_factor=factor,
        unit_cost=cost,
        item_code=product_id,
    )


DEFAULT_CATALOG = BrandCatalog(
    entries=(
        # Generic: system default packaging factors
        _entry(SHINGLES, GENERIC_BRAND, "GEN-SHINGLE", "Architectural Shingles", "bundle", 3, 38.00),
        _entry(RIDGE_CAP, GENERIC_BRAND, "GEN-RIDGE", "Hip & Ridge Cap", "bundle", 33, 48.00),
        _entry(STARTER, GENERIC_BRAND, "GEN-STARTER", "Starter Strip", "bundle", 100, 32.00),
        _entry(UNDERLAYMENT, GENERIC_BRAND, "GEN-UL", "Synthetic Underlayment", "roll", 10, 75.00),
        _entry(ICE_WATER, GENERIC_BRAND, "GEN-IWS", "Ice & Water Shield", "roll", 2, 115.00),
        _entry(VALLEY, GENERIC_BRAND, "VLY-W", "Valley Metal W-Style", "roll", 50, 22.00),
        _entry(DRIP_EDGE, GENERIC_BRAND, "DRP-EDGE", "Drip Edge", "stick", 10, 8.75),
        _entry(PIPE_BOOT, GENERIC_BRAND, "BOOT-SM", 'Pipe Boot 1-3"', "each", 1, 12.00),
        _entry(SKYLIGHT_FLASHING, GENERIC_BRAND, "SKYLIGHT-KIT", "Skylight Flashing Kit", "each", 1, 75.00),
        _entry(CHIMNEY_FLASHING, GENERIC_BRAND, "CHIMNEY-KIT", "Chimney Flashing Kit", "each", 1, 125.00),
        _entry(HVAC_FLASHING, GENERIC_BRAND, "HVAC-KIT", "HVAC Curb Flashing Kit", "each", 1, 95.00),
        # GAF Timberline HDZ system
        _entry(SHINGLES, "GAF", "GAF-THDZ", "GAF Timberline HDZ Shingles", "bundle", 3, 42.50),
        _entry(RIDGE_CAP, "GAF", "GAF-SAR", "GAF Seal-A-Ridge Ridge Cap", "bundle", 33, 52.00),
        _entry(STARTER, "GAF", "GAF-PROST", "GAF Pro-Start Starter Strip", "bundle", 120, 35.00),
        _entry(UNDERLAYMENT, "GAF", "GAF-FB10", "GAF FeltBuster Underlayment", "roll", 10, 85.00),
        _entry(ICE_WATER, "GAF", "GAF-STORM", "GAF StormGuard Ice & Water", "roll", 2, 125.00),
        # Owens Corning Duration system
        _entry(SHINGLES, "Owens Corning", "OC-DUR", "OC Duration Shingles", "bundle", 3, 44.00),
        _entry(RIDGE_CAP, "Owens Corning", "OC-DECO", "OC DecoRidge Ridge Cap", "bundle", 33, 55.00),
        _entry(STARTER, "Owens Corning", "OC-STRT", "OC Starter Shingle Roll", "roll", 65, 36.00),
        _entry(UNDERLAYMENT, "Owens Corning", "OC-DECK", "OC Deck Defense Underlayment", "roll", 10, 95.00),
        _entry(ICE_WATER, "Owens Corning", "OC-WLOCK", "OC WeatherLock Ice & Water", "roll", 2, 130.00),
        # CertainTeed Landmark system
        _entry(SHINGLES, "CertainTeed", "CT-LM", "CT Landmark Shingles", "bundle", 3, 40.00),
        _entry(RIDGE_CAP, "CertainTeed", "CT-SHAD", "CT Shadow Ridge Cap", "bundle", 33, 50.00),
        _entry(STARTER, "CertainTeed", "CT-SWFT", "CT SwiftStart Starter", "bundle", 120, 34.00),
        _entry(UNDERLAYMENT, "CertainTeed", "CT-DIAM", "CT DiamondDeck Underlayment", "roll", 10, 90.00),
        _entry(ICE_WATER, "CertainTeed", "CT-WGRD", "CT WinterGuard Ice & Water", "roll", 2, 120.00),
    ),
    default_brands={
        SHINGLES: (GENERIC_BRAND,),
        RIDGE_CAP: (GENERIC_BRAND,),
        STARTER: (GENERIC_BRAND,),
        UNDERLAYMENT: (GENERIC_BRAND,),
        ICE_WATER: (GENERIC_BRAND,),
    },
)
