"""Material quantity derivation.

Maps a ``MeasurementSummary`` to packaged, priced material lines.  All
lengths are in feet and areas in squares (100 sq ft):

- shingles: ``squares * bundles_per_square``, un-rounded (3 bundles/sq)
- ridge_cap: ``ceil((ridge + hip) / lf_per_bundle)`` (33 LF/bundle)
- starter: ``ceil((eave + rake) / lf_per_bundle)`` (100 LF/bundle)
- underlayment: ``ceil(squares / squares_per_roll)`` (10 sq/roll)
- ice_water: ``ceil((eave * 3 + valley * 3) / 100 / squares_per_roll)`` (2 sq/roll)
- valley: ``ceil(valley / lf_per_roll)`` (50 LF/roll)
- drip_edge: ``ceil((eave + rake) / lf_per_stick)`` (10 LF/stick)
- penetration flashings: ``count[category]``, 1:1

Waste applies to every area/length-derived row:
``final = ceil(base * (1 + waste / 100))``.  Penetration counts pass
through unchanged for every waste percentage.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

from roof_takeoff.core.constants import (
    DRIP_EDGE,
    ICE_WATER,
    RIDGE_CAP,
    SHINGLES,
    STANDARD_PENETRATIONS,
    STARTER,
    UNDERLAYMENT,
    VALLEY,
    WASTE_APPLICABLE_CATEGORIES,
    WASTE_PERCENTAGES,
    penetration_material,
)
from roof_takeoff.core.exceptions import ValidationError
from roof_takeoff.materials._catalog import DEFAULT_CATALOG, BrandCatalog
from roof_takeoff.materials._scalars import build_scalar_table, ceil_units, waste_adjusted
from roof_takeoff.models.footprint import FootprintGeometry
from roof_takeoff.models.materials import MaterialDerivation, MaterialLine, PackagingEntry
from roof_takeoff.models.measurement import MeasurementSummary

logger = logging.getLogger("roof_takeoff.materials")

# Eave and valley membrane strips are 3 ft wide
ICE_WATER_STRIP_WIDTH_FT = 3.0

DEFAULT_PACKAGING_FACTORS: dict[str, float] = {
    SHINGLES: 3.0,
    RIDGE_CAP: 33.0,
    STARTER: 100.0,
    UNDERLAYMENT: 10.0,
    ICE_WATER: 2.0,
    VALLEY: 50.0,
    DRIP_EDGE: 10.0,
}


class UnsupportedWastePercentError(ValidationError):
    """Raised when a waste percentage outside the fixed set is requested."""

    default_stage = "material_derivation"
    default_code = "UNSUPPORTED_WASTE_PERCENT"


# ---------------------------------------------------------------------------
# Per-category base quantities: (base, calculation basis)
# ---------------------------------------------------------------------------

_BaseRule = Callable[[MeasurementSummary, float], tuple[float, str]]


def _shingles(summary: MeasurementSummary, factor: float) -> tuple[float, str]:
    base = summary.squares * factor
    return base, f"{summary.squares:.2f} squares x {factor:g} bundles/sq = {base:.2f} bundles"


def _ridge_cap(summary: MeasurementSummary, factor: float) -> tuple[float, str]:
    total = summary.lf_ridge + summary.lf_hip
    base = ceil_units(total / factor)
    return base, f"{total:.0f} LF / {factor:g} LF/bundle = {base} bundles"


def _starter(summary: MeasurementSummary, factor: float) -> tuple[float, str]:
    total = summary.lf_eave + summary.lf_rake
    base = ceil_units(total / factor)
    return base, f"{total:.0f} LF / {factor:g} LF/bundle = {base} bundles"


def _underlayment(summary: MeasurementSummary, factor: float) -> tuple[float, str]:
    base = ceil_units(summary.squares / factor)
    return base, f"{summary.squares:.2f} squares / {factor:g} sq/roll = {base} rolls"


def _ice_water(summary: MeasurementSummary, factor: float) -> tuple[float, str]:
    eave_area = summary.lf_eave * ICE_WATER_STRIP_WIDTH_FT / 100.0
    valley_area = summary.lf_valley * ICE_WATER_STRIP_WIDTH_FT / 100.0
    total = eave_area + valley_area
    base = ceil_units(total / factor)
    return base, (
        f"Eaves ({summary.lf_eave:g} LF x 3 ft) + Valleys ({summary.lf_valley:g} LF x 3 ft) "
        f"= {total:.2f} sq / {factor:g} sq/roll = {base} rolls"
    )


def _valley(summary: MeasurementSummary, factor: float) -> tuple[float, str]:
    base = ceil_units(summary.lf_valley / factor)
    return base, f"{summary.lf_valley:.0f} LF / {factor:g} LF/roll = {base} rolls"


def _drip_edge(summary: MeasurementSummary, factor: float) -> tuple[float, str]:
    total = summary.lf_eave + summary.lf_rake
    base = ceil_units(total / factor)
    return base, f"{total:.0f} LF / {factor:g} LF/stick = {base} sticks"


_BASE_RULES: dict[str, _BaseRule] = {
    SHINGLES: _shingles,
    RIDGE_CAP: _ridge_cap,
    STARTER: _starter,
    UNDERLAYMENT: _underlayment,
    ICE_WATER: _ice_water,
    VALLEY: _valley,
    DRIP_EDGE: _drip_edge,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def derive_materials(
    summary: MeasurementSummary,
    catalog: BrandCatalog | None = None,
    *,
    selected_brands: Mapping[str, str] | None = None,
    waste_percent: int | None = None,
    footprint: FootprintGeometry | None = None,
) -> MaterialDerivation:
    """Derive the priced bill of materials for *summary*.

    Args:
        summary: Validated measurement summary (not modified).
        catalog: Packaging catalog; ``DEFAULT_CATALOG`` if omitted.
        selected_brands: Material category -> preferred brand.
        waste_percent: Overrides ``summary.waste_percent``.
        footprint: Measured footprint, used only for the scalar table.

    Returns:
        ``MaterialDerivation`` with lines in bill-of-materials order,
        the scalar table and cost totals.

    Raises:
        UnsupportedWastePercentError: If the waste percentage is not in
            ``WASTE_PERCENTAGES``.
    """
    catalog = catalog or DEFAULT_CATALOG
    brands = dict(selected_brands or {})
    waste = summary.waste_percent if waste_percent is None else waste_percent
    if waste not in WASTE_PERCENTAGES:
        msg = f"Waste percentage {waste!r} is not one of {list(WASTE_PERCENTAGES)}"
        raise UnsupportedWastePercentError(msg)

    lines: list[MaterialLine] = []
    skipped: list[str] = []
    base_quantities: dict[str, float] = {}

    for category in WASTE_APPLICABLE_CATEGORIES:
        entry = catalog.resolve(category, brands.get(category))
        factor = entry.packaging_factor if entry is not None else DEFAULT_PACKAGING_FACTORS[category]
        base, basis = _BASE_RULES[category](summary, factor)
        base_quantities[category] = base
        if base <= 0:
            continue
        if entry is None:
            logger.warning("No catalog entry, material skipped | category=%s", category)
            skipped.append(category)
            continue
        final = waste_adjusted(base, waste)
        lines.append(
            _line(
                entry,
                base=base,
                final=final,
                waste_applied=True,
                basis=f"{basis} + {waste}% waste = {final}",
            )
        )

    for penetration, count in _ordered_penetrations(summary.penetration_counts):
        if count <= 0:
            continue
        category = penetration_material(penetration)
        entry = catalog.resolve(category, brands.get(category))
        if entry is None:
            logger.warning(
                "No catalog entry, material skipped | category=%s | penetration=%s",
                category,
                penetration,
            )
            skipped.append(category)
            continue
        lines.append(
            _line(
                entry,
                base=float(count),
                final=count,
                waste_applied=False,
                basis=f"{count} {penetration.replace('_', ' ')}(s)",
            )
        )

    scalars = build_scalar_table(
        summary,
        base_quantities,
        waste_percent=waste,
        footprint=footprint,
    )

    total_base_cost = round(sum(line.base_cost for line in lines), 2)
    total_cost = round(sum(line.total_cost for line in lines), 2)

    logger.info(
        "Materials derived | lines=%d | waste=%d%% | base_cost=%.2f | total_cost=%.2f | skipped=%s",
        len(lines),
        waste,
        total_base_cost,
        total_cost,
        ",".join(skipped) or "-",
    )

    return MaterialDerivation(
        lines=tuple(lines),
        scalars=scalars,
        waste_percent=waste,
        total_base_cost=total_base_cost,
        total_waste_adjusted_cost=total_cost,
        skipped_categories=tuple(skipped),
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _ordered_penetrations(counts: Mapping[str, int]) -> list[tuple[str, int]]:
    """Standard penetration categories first, then any others in input order."""
    ordered = [(name, counts[name]) for name in STANDARD_PENETRATIONS if name in counts]
    ordered.extend((name, count) for name, count in counts.items() if name not in STANDARD_PENETRATIONS)
    return ordered


def _line(
    entry: PackagingEntry,
    *,
    base: float,
    final: int,
    waste_applied: bool,
    basis: str,
) -> MaterialLine:
    return MaterialLine(
        material_category=entry.material_category,
        brand=entry.brand,
        product_id=entry.product_id,
        product_name=entry.product_name,
        unit_of_measure=entry.unit_of_measure,
        quantity_base=base,
        quantity_waste_adjusted=final,
        unit_cost=entry.unit_cost,
        total_cost=round(final * entry.unit_cost, 2),
        base_cost=round(ceil_units(base) * entry.unit_cost, 2),
        item_code=entry.item_code,
        waste_applied=waste_applied,
        calculation_basis=basis,
    )
