"""Material catalog and bill-of-materials models.

- ``PackagingEntry``: one brand's packaging factor and price for a
  material category (read-only catalog data).
- ``MaterialLine``: one priced line of a derived bill of materials.
- ``MaterialDerivation``: the full result of a derivation pass (lines,
  scalar table and cost totals).

Units:
    ``packaging_factor`` is expressed per packaged unit and depends on the
    category: bundles per square for shingles, linear feet per bundle /
    roll / stick for length-driven materials, squares per roll for
    underlayment and ice & water shield, and ``1`` for counted items.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from roof_takeoff.models._validation import (
    ModelValidationError,
    _check_min,
    _check_non_empty,
)


@dataclass(frozen=True, slots=True)
class PackagingEntry:
    """Brand packaging factor and unit price for a material category.

    Attributes:
        material_category: Category key (e.g. ``"ridge_cap"``).
        brand: Brand name (e.g. ``"GAF"``).
        product_id: Catalog product identifier.
        product_name: Display name of the product.
        unit_of_measure: Packaged unit (``"bundle"``, ``"roll"``, ...).
        packaging_factor: Quantity covered by one packaged unit.
        unit_cost: Price per packaged unit in dollars.
        item_code: Supplier SKU, if known.
    """

    material_category: str
    brand: str
    product_id: str
    product_name: str
    unit_of_measure: str
    packaging_factor: float
    unit_cost: float
    item_code: str = ""

    def __post_init__(self) -> None:
        _check_non_empty("PackagingEntry", "material_category", self.material_category)
        _check_non_empty("PackagingEntry", "brand", self.brand)
        _check_non_empty("PackagingEntry", "product_id", self.product_id)
        if not math.isfinite(self.packaging_factor) or self.packaging_factor <= 0:
            raise ModelValidationError(
                "PackagingEntry",
                "packaging_factor",
                self.packaging_factor,
                "must be a positive number",
            )
        _check_min("PackagingEntry", "unit_cost", self.unit_cost, 0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "material_category": self.material_category,
            "brand": self.brand,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "unit_of_measure": self.unit_of_measure,
            "packaging_factor": self.packaging_factor,
            "unit_cost": self.unit_cost,
            "item_code": self.item_code,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PackagingEntry:
        """Deserialise from a plain dict.

        Raises:
            ModelValidationError: If a field is missing or invalid.
        """
        try:
            return cls(
                material_category=str(data["material_category"]),
                brand=str(data["brand"]),
                product_id=str(data.get("product_id") or f"{data['brand']}-{data['material_category']}"),
                product_name=str(data.get("product_name", "")),
                unit_of_measure=str(data.get("unit_of_measure", "each")),
                packaging_factor=float(data.get("packaging_factor", 1.0)),
                unit_cost=float(data.get("unit_cost", 0.0)),
                item_code=str(data.get("item_code", "") or ""),
            )
        except KeyError as exc:
            raise ModelValidationError(
                "PackagingEntry", str(exc.args[0]), None, "is required"
            ) from exc
        except (TypeError, ValueError) as exc:
            if isinstance(exc, ModelValidationError):
                raise
            raise ModelValidationError(
                "PackagingEntry", "payload", data, f"non-numeric value: {exc}"
            ) from exc


@dataclass(frozen=True, slots=True)
class MaterialLine:
    """One priced line of a derived bill of materials.

    ``quantity`` (the ordered quantity) is the waste-adjusted packaged
    count; ``quantity_base`` is the packaged count before waste and is
    left un-rounded for shingles.

    Attributes:
        material_category: Category key.
        brand: Brand the line was priced with.
        product_id: Catalog product identifier.
        product_name: Display name of the product.
        item_code: Supplier SKU.
        unit_of_measure: Packaged unit.
        quantity_base: Packaged quantity before waste.
        quantity_waste_adjusted: Packaged quantity after waste.
        unit_cost: Price per packaged unit.
        total_cost: ``quantity_waste_adjusted * unit_cost``.
        base_cost: Cost of the whole-unit base quantity.
        waste_applied: Whether the waste percentage applies to this line.
        calculation_basis: Human-readable derivation of the quantity.
    """

    material_category: str
    brand: str
    product_id: str
    product_name: str
    unit_of_measure: str
    quantity_base: float
    quantity_waste_adjusted: int
    unit_cost: float
    total_cost: float
    base_cost: float = 0.0
    item_code: str = ""
    waste_applied: bool = False
    calculation_basis: str = ""

    def __post_init__(self) -> None:
        _check_min("MaterialLine", "quantity_base", self.quantity_base, 0)
        _check_min("MaterialLine", "quantity_waste_adjusted", self.quantity_waste_adjusted, 0)
        _check_min("MaterialLine", "unit_cost", self.unit_cost, 0)

    @property
    def quantity(self) -> int:
        """The quantity to order (waste-adjusted packaged count)."""
        return self.quantity_waste_adjusted

    def to_dict(self) -> dict[str, Any]:
        """Serialise for JSON transport (both naming conventions)."""
        return {
            "material_category": self.material_category,
            "brand": self.brand,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "item_code": self.item_code,
            "unit_of_measure": self.unit_of_measure,
            "quantity": self.quantity,
            "quantity_base": self.quantity_base,
            "quantity_waste_adjusted": self.quantity_waste_adjusted,
            "unit_cost": self.unit_cost,
            "base_cost": self.base_cost,
            "total_cost": self.total_cost,
            "waste_applied": self.waste_applied,
            "calculation_basis": self.calculation_basis,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MaterialLine:
        return cls(
            material_category=str(data["material_category"]),
            brand=str(data["brand"]),
            product_id=str(data["product_id"]),
            product_name=str(data.get("product_name", "")),
            unit_of_measure=str(data.get("unit_of_measure", "")),
            quantity_base=float(data["quantity_base"]),
            quantity_waste_adjusted=int(data.get("quantity_waste_adjusted", data.get("quantity", 0))),
            unit_cost=float(data.get("unit_cost", 0.0)),
            total_cost=float(data.get("total_cost", 0.0)),
            base_cost=float(data.get("base_cost", 0.0)),
            item_code=str(data.get("item_code", "")),
            waste_applied=bool(data.get("waste_applied", False)),
            calculation_basis=str(data.get("calculation_basis", "")),
        )


@dataclass(frozen=True, slots=True)
class MaterialDerivation:
    """Result of one material derivation pass.

    Attributes:
        lines: Material lines in bill-of-materials order.
        scalars: Flat scalar table for the formula evaluator.
        waste_percent: Waste percentage the lines were derived with.
        total_base_cost: Sum of ``base_cost`` over all lines.
        total_waste_adjusted_cost: Sum of ``total_cost`` over all lines.
        skipped_categories: Categories with no catalog entry.
    """

    lines: tuple[MaterialLine, ...]
    scalars: dict[str, float] = field(default_factory=dict)
    waste_percent: int = 0
    total_base_cost: float = 0.0
    total_waste_adjusted_cost: float = 0.0
    skipped_categories: tuple[str, ...] = ()

    def line_for(self, material_category: str) -> MaterialLine | None:
        """Return the line for *material_category*, if one was derived."""
        for line in self.lines:
            if line.material_category == material_category:
                return line
        return None

    @property
    def quantities(self) -> dict[str, int]:
        """Ordered quantity per material category."""
        return {line.material_category: line.quantity for line in self.lines}

    def to_dict(self) -> dict[str, Any]:
        return {
            "lines": [line.to_dict() for line in self.lines],
            "scalars": dict(self.scalars),
            "waste_percent": self.waste_percent,
            "total_base_cost": self.total_base_cost,
            "total_waste_adjusted_cost": self.total_waste_adjusted_cost,
            "skipped_categories": list(self.skipped_categories),
        }
