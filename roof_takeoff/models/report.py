"""Pydantic takeoff report model.

The report is the JSON document callers persist for each processed
measurement: what was measured, how it cross-checked against the
footprint, and the priced bill of materials derived from it.

The schema is split into three nested sections:
- **geometry**: Footprint vertices, planar and geodesic area, perimeter
- **validation**: Perimeter consistency verdict and warnings
- **materials**: Material lines, scalar table and cost totals
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

# Schema version for forward compatibility
SCHEMA_VERSION = "roof-takeoff-v1"


class GeometrySection(BaseModel):
    """Geometry section of the takeoff report.

    All coordinates are WGS 84 ``[lng, lat]`` pairs; areas are square
    feet and lengths are feet.
    """

    available: bool = False
    footprint_text: str = ""
    coordinates: list[list[float]] = Field(default_factory=list)
    vertex_count: int = 0
    area_sqft: float = 0.0
    perimeter_ft: float = 0.0
    geodesic_area_sqft: float = 0.0
    is_rectangular: bool = False
    self_intersecting: bool = False


class ValidationSection(BaseModel):
    """Validation section of the takeoff report."""

    valid: bool = True
    edge_coverage_percent: float = 0.0
    area_variance_percent: float = 0.0
    warnings: list[str] = Field(default_factory=list)


class MaterialsSection(BaseModel):
    """Materials section of the takeoff report.

    Attributes:
        waste_percent: Waste percentage applied to area/length lines.
        lines: Serialised material lines (see ``MaterialLine.to_dict``).
        scalars: Flat scalar table used by document templates.
        total_base_cost: Cost before waste, in dollars.
        total_waste_adjusted_cost: Cost after waste, in dollars.
        skipped_categories: Categories with no catalog entry.
    """

    waste_percent: int = 0
    lines: list[dict[str, Any]] = Field(default_factory=list)
    scalars: dict[str, float] = Field(default_factory=dict)
    total_base_cost: float = 0.0
    total_waste_adjusted_cost: float = 0.0
    skipped_categories: list[str] = Field(default_factory=list)


class TakeoffReport(BaseModel):
    """Top-level takeoff report.

    Attributes:
        schema_version: Schema identifier for forward compatibility.
        processing_id: Caller-supplied identifier for traceability.
        timestamp: Report creation time (ISO 8601).
        measurement: The measurement summary the report was derived from.
        geometry: Footprint geometry and derived measurements.
        validation: Perimeter consistency verdict.
        materials: Priced bill of materials.
    """

    schema_version: str = Field(default=SCHEMA_VERSION, alias="$schema")
    processing_id: str = ""
    timestamp: str = ""
    measurement: dict[str, Any] = Field(default_factory=dict)
    geometry: GeometrySection = Field(default_factory=GeometrySection)
    validation: ValidationSection = Field(default_factory=ValidationSection)
    materials: MaterialsSection = Field(default_factory=MaterialsSection)

    model_config = {"populate_by_name": True}

    @classmethod
    def from_result(
        cls,
        result: object,
        *,
        processing_id: str = "",
        timestamp: str = "",
    ) -> TakeoffReport:
        """Construct a report from a ``TakeoffResult``.

        Args:
            result: A ``TakeoffResult`` (from ``roof_takeoff.orchestrators.takeoff``).
            processing_id: Caller-supplied identifier.
            timestamp: Report timestamp (ISO 8601).  If empty, uses the
                current UTC time.

        Returns:
            A fully populated ``TakeoffReport``.
        """
        from roof_takeoff.geometry import to_footprint_text
        from roof_takeoff.orchestrators.takeoff import TakeoffResult

        if not isinstance(result, TakeoffResult):
            msg = f"Expected TakeoffResult instance, got {type(result).__name__}"
            raise TypeError(msg)

        if not timestamp:
            timestamp = datetime.now(UTC).isoformat()

        footprint = result.footprint
        geometry = GeometrySection(
            available=footprint.available,
            footprint_text=to_footprint_text(footprint.vertices) if footprint.vertices else "",
            coordinates=[[v.lng, v.lat] for v in footprint.vertices],
            vertex_count=footprint.vertex_count,
            area_sqft=footprint.area_sqft,
            perimeter_ft=footprint.perimeter_ft,
            geodesic_area_sqft=footprint.geodesic_area_sqft,
            is_rectangular=footprint.is_rectangular,
            self_intersecting=footprint.self_intersecting,
        )

        validation = result.validation
        derivation = result.derivation
        return cls(
            processing_id=processing_id,
            timestamp=timestamp,
            measurement=result.summary.to_dict(),
            geometry=geometry,
            validation=ValidationSection(
                valid=validation.valid,
                edge_coverage_percent=validation.edge_coverage_percent,
                area_variance_percent=validation.area_variance_percent,
                warnings=list(validation.warnings),
            ),
            materials=MaterialsSection(
                waste_percent=derivation.waste_percent,
                lines=[line.to_dict() for line in derivation.lines],
                scalars=dict(derivation.scalars),
                total_base_cost=derivation.total_base_cost,
                total_waste_adjusted_cost=derivation.total_waste_adjusted_cost,
                skipped_categories=list(derivation.skipped_categories),
            ),
        )

    def to_json(self, *, indent: int = 2) -> str:
        """Serialise to a JSON string.

        Uses the ``$schema`` alias for the schema version field.
        """
        return self.model_dump_json(indent=indent, by_alias=True)

    def to_dict(self) -> dict[str, object]:
        """Serialise to a plain dict (for the HTTP response body)."""
        return self.model_dump(by_alias=True)  # type: ignore[return-value]
