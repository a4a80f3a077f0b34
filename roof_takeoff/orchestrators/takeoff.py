"""Takeoff orchestration and request handlers.

``run_takeoff`` runs the full pipeline for one measurement:

1. **Footprint**: validate and measure vertices, or parse footprint text.
2. **Consistency**: cross-check reported features against the footprint.
3. **Derivation**: packaged, priced materials and the scalar table.

The consistency verdict never blocks derivation; it is carried in the
result for manual review routing.

The ``handle_*`` functions are the request boundary used by
``function_app.py``: each takes a decoded JSON dict, validates the
payload contract and returns a JSON-serialisable dict.
"""

from __future__ import annotations

import dataclasses
import logging
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from roof_takeoff.checks import validate_perimeter_consistency
from roof_takeoff.core.config import TakeoffConfig
from roof_takeoff.core.exceptions import ContractError
from roof_takeoff.formulas import render_template
from roof_takeoff.geometry import (
    cleanup_polygon,
    measure_footprint,
    measure_polygon,
    validate_vertices,
)
from roof_takeoff.materials import BrandCatalog, derive_materials
from roof_takeoff.models.footprint import FootprintGeometry
from roof_takeoff.models.materials import MaterialDerivation
from roof_takeoff.models.measurement import MeasurementSummary, ValidationResult
from roof_takeoff.models.payloads import (
    DeriveMaterialsInput,
    RenderTemplateInput,
    ValidateMeasurementInput,
    validate_payload,
)
from roof_takeoff.models.report import TakeoffReport

logger = logging.getLogger("roof_takeoff.orchestrators.takeoff")


@dataclass(frozen=True, slots=True)
class TakeoffResult:
    """Outcome of one takeoff run.

    Attributes:
        summary: The measurement summary the materials were derived from
            (``perimeter_ft`` filled from the footprint when it was unset).
        footprint: Measured footprint, or the unavailable marker.
        validation: Perimeter consistency verdict.
        derivation: Priced bill of materials and scalar table.
    """

    summary: MeasurementSummary
    footprint: FootprintGeometry
    validation: ValidationResult
    derivation: MaterialDerivation

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "footprint": self.footprint.to_dict(),
            "validation": self.validation.to_dict(),
            "derivation": self.derivation.to_dict(),
        }


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


def resolve_footprint(
    *,
    vertices: Iterable[object] | None = None,
    footprint_text: str | None = None,
    config: TakeoffConfig | None = None,
    cleanup: bool | None = None,
) -> FootprintGeometry:
    """Measure the footprint from vertices (preferred) or footprint text.

    *cleanup* simplifies the ring and drops collinear corners before
    measuring; it defaults to ``config.footprint_cleanup``.

    Returns:
        The measured footprint, or ``FootprintGeometry.unavailable()`` when
        neither source is given or the text cannot be parsed.

    Raises:
        DegeneratePolygonError: If the supplied ring is degenerate.
    """
    config = config or TakeoffConfig()
    if vertices is not None:
        polygon = validate_vertices(vertices, min_area_sqft=config.min_polygon_area_sqft)
        if config.footprint_cleanup if cleanup is None else cleanup:
            polygon = cleanup_polygon(
                polygon,
                simplify_tolerance_deg=config.simplify_tolerance_deg,
                min_area_sqft=config.min_polygon_area_sqft,
            )
        return measure_polygon(
            polygon,
            rectangularity_tolerance_deg=config.rectangularity_tolerance_deg,
        )
    if footprint_text:
        return measure_footprint(footprint_text, config=config, cleanup=cleanup)
    return FootprintGeometry.unavailable("no footprint supplied")


def run_takeoff(
    summary: MeasurementSummary,
    *,
    vertices: Iterable[object] | None = None,
    footprint_text: str | None = None,
    catalog: BrandCatalog | None = None,
    selected_brands: Mapping[str, str] | None = None,
    waste_percent: int | None = None,
    config: TakeoffConfig | None = None,
    cleanup_footprint: bool | None = None,
) -> TakeoffResult:
    """Validate, cross-check and derive materials for one measurement.

    Args:
        summary: Reported measurements.
        vertices: Footprint corners; takes precedence over *footprint_text*.
        footprint_text: ``POLYGON((lng lat, ...))`` footprint.
        catalog: Packaging catalog; the default catalog if omitted.
        selected_brands: Material category -> preferred brand.
        waste_percent: Overrides ``summary.waste_percent``.
        config: Thresholds; defaults to ``TakeoffConfig()``.
        cleanup_footprint: Clean the footprint before measuring; defaults
            to ``config.footprint_cleanup``.

    Raises:
        DegeneratePolygonError: If the supplied footprint is degenerate.
        UnsupportedWastePercentError: If the waste percentage is unsupported.
    """
    config = config or TakeoffConfig()

    footprint = resolve_footprint(
        vertices=vertices,
        footprint_text=footprint_text,
        config=config,
        cleanup=cleanup_footprint,
    )
    if footprint.available and summary.perimeter_ft is None:
        summary = dataclasses.replace(summary, perimeter_ft=footprint.perimeter_ft)

    validation = validate_perimeter_consistency(summary, footprint, config=config)
    derivation = derive_materials(
        summary,
        catalog,
        selected_brands=selected_brands,
        waste_percent=waste_percent,
        footprint=footprint,
    )

    logger.info(
        "Takeoff complete | area=%.1f sqft | footprint=%s | valid=%s | warnings=%d | "
        "lines=%d | total_cost=%.2f",
        summary.area_sqft,
        footprint.available,
        validation.valid,
        len(validation.warnings),
        len(derivation.lines),
        derivation.total_waste_adjusted_cost,
    )

    return TakeoffResult(
        summary=summary,
        footprint=footprint,
        validation=validation,
        derivation=derivation,
    )


# ---------------------------------------------------------------------------
# Request handlers
# ---------------------------------------------------------------------------


def handle_validate_measurement(
    payload: dict[str, Any],
    *,
    config: TakeoffConfig | None = None,
) -> dict[str, Any]:
    """Validate a measurement against its footprint.

    Input: see ``ValidateMeasurementInput``.

    Returns:
        Dict with ``footprint``, ``validation`` and ``correlation_id``.
    """
    validate_payload(payload, ValidateMeasurementInput, handler="validate_measurement")
    config = config or TakeoffConfig()
    correlation_id = str(payload.get("correlation_id", ""))

    summary = _summary_from_payload(payload, config, handler="validate_measurement")
    footprint = resolve_footprint(
        vertices=_vertices_from_payload(payload, handler="validate_measurement"),
        footprint_text=_optional_str(payload, "footprint_text", handler="validate_measurement"),
        config=config,
        cleanup=_optional_bool(payload, "cleanup_footprint", handler="validate_measurement"),
    )
    validation = validate_perimeter_consistency(summary, footprint, config=config)

    return {
        "footprint": footprint.to_dict(),
        "validation": validation.to_dict(),
        "correlation_id": correlation_id,
    }


def handle_derive_materials(
    payload: dict[str, Any],
    *,
    config: TakeoffConfig | None = None,
) -> dict[str, object]:
    """Run a full takeoff and return the serialised report.

    Input: see ``DeriveMaterialsInput``.

    Returns:
        ``TakeoffReport.to_dict()``.
    """
    validate_payload(payload, DeriveMaterialsInput, handler="derive_materials")
    config = config or TakeoffConfig()

    summary = _summary_from_payload(payload, config, handler="derive_materials")
    result = run_takeoff(
        summary,
        vertices=_vertices_from_payload(payload, handler="derive_materials"),
        footprint_text=_optional_str(payload, "footprint_text", handler="derive_materials"),
        catalog=_catalog_from_payload(payload, handler="derive_materials"),
        selected_brands=_brands_from_payload(payload, handler="derive_materials"),
        waste_percent=_waste_from_payload(payload, handler="derive_materials"),
        config=config,
        cleanup_footprint=_optional_bool(payload, "cleanup_footprint", handler="derive_materials"),
    )

    processing_id = str(payload.get("processing_id") or payload.get("correlation_id") or "")
    if not processing_id:
        processing_id = uuid.uuid4().hex
    return TakeoffReport.from_result(result, processing_id=processing_id).to_dict()


def handle_render_template(
    payload: dict[str, Any],
    *,
    config: TakeoffConfig | None = None,
) -> dict[str, Any]:
    """Render a document template against a scalar table.

    The scalar table is taken from ``scalars`` when supplied, otherwise
    derived from ``measurement``.

    Input: see ``RenderTemplateInput``.

    Returns:
        Dict with ``rendered`` and ``correlation_id``.
    """
    validate_payload(payload, RenderTemplateInput, handler="render_template")
    config = config or TakeoffConfig()
    correlation_id = str(payload.get("correlation_id", ""))

    template = payload["template"]
    if not isinstance(template, str):
        msg = f"render_template: template must be a string, got {type(template).__name__}"
        raise ContractError(msg, stage="render_template", code="INVALID_INPUT_TYPE")

    precision = payload.get("precision", 2)
    if isinstance(precision, bool) or not isinstance(precision, int):
        msg = f"render_template: precision must be an integer, got {precision!r}"
        raise ContractError(msg, stage="render_template", code="INVALID_INPUT_TYPE")

    if "scalars" in payload:
        scalars = _scalars_from_payload(payload["scalars"])
    elif "measurement" in payload:
        summary = _summary_from_payload(payload, config, handler="render_template")
        scalars = derive_materials(
            summary,
            selected_brands=_brands_from_payload(payload, handler="render_template"),
        ).scalars
    else:
        msg = "render_template: one of 'scalars' or 'measurement' is required"
        raise ContractError(msg, stage="render_template", code="PAYLOAD_MISSING_KEYS")

    rendered = render_template(template, scalars, precision=precision)
    logger.info(
        "Template rendered | placeholders=%d | correlation_id=%s",
        template.count("{{"),
        correlation_id,
    )
    return {"rendered": rendered, "correlation_id": correlation_id}


# ---------------------------------------------------------------------------
# Payload helpers
# ---------------------------------------------------------------------------


def _summary_from_payload(
    payload: Mapping[str, Any],
    config: TakeoffConfig,
    *,
    handler: str,
) -> MeasurementSummary:
    data = payload.get("measurement")
    if not isinstance(data, dict):
        msg = f"{handler}: measurement must be an object, got {type(data).__name__}"
        raise ContractError(msg, stage=handler, code="INVALID_INPUT_TYPE")
    if "waste_percent" not in data and "waste_percentage" not in data:
        data = {**data, "waste_percent": config.default_waste_pct}
    return MeasurementSummary.from_dict(data)


def _vertices_from_payload(payload: Mapping[str, Any], *, handler: str) -> list[Any] | None:
    vertices = payload.get("vertices")
    if vertices is None:
        return None
    if not isinstance(vertices, list):
        msg = f"{handler}: vertices must be an array, got {type(vertices).__name__}"
        raise ContractError(msg, stage=handler, code="INVALID_INPUT_TYPE")
    return vertices


def _optional_str(payload: Mapping[str, Any], key: str, *, handler: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        msg = f"{handler}: {key} must be a string, got {type(value).__name__}"
        raise ContractError(msg, stage=handler, code="INVALID_INPUT_TYPE")
    return value


def _brands_from_payload(payload: Mapping[str, Any], *, handler: str) -> dict[str, str]:
    brands = payload.get("selected_brands") or {}
    if not isinstance(brands, dict):
        msg = f"{handler}: selected_brands must be an object, got {type(brands).__name__}"
        raise ContractError(msg, stage=handler, code="INVALID_INPUT_TYPE")
    return {str(k): str(v) for k, v in brands.items()}


def _catalog_from_payload(payload: Mapping[str, Any], *, handler: str) -> BrandCatalog | None:
    rows = payload.get("catalog")
    if rows is None:
        return None
    if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
        msg = f"{handler}: catalog must be an array of objects"
        raise ContractError(msg, stage=handler, code="INVALID_INPUT_TYPE")
    return BrandCatalog.from_dicts(rows)


def _scalars_from_payload(raw: object) -> dict[str, float]:
    if not isinstance(raw, dict):
        msg = f"render_template: scalars must be an object, got {type(raw).__name__}"
        raise ContractError(msg, stage="render_template", code="INVALID_INPUT_TYPE")
    scalars: dict[str, float] = {}
    for key, value in raw.items():
        if isinstance(value, bool) or not isinstance(value, int | float):
            msg = f"render_template: scalar {key!r} must be a number, got {value!r}"
            raise ContractError(msg, stage="render_template", code="INVALID_INPUT_TYPE")
        scalars[str(key)] = float(value)
    return scalars


def _optional_bool(payload: Mapping[str, Any], key: str, *, handler: str) -> bool | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, bool):
        msg = f"{handler}: {key} must be a boolean, got {type(value).__name__}"
        raise ContractError(msg, stage=handler, code="INVALID_INPUT_TYPE")
    return value


def _waste_from_payload(payload: Mapping[str, Any], *, handler: str) -> int | None:
    value = payload.get("waste_percent")
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"{handler}: waste_percent must be an integer, got {value!r}"
        raise ContractError(msg, stage=handler, code="INVALID_INPUT_TYPE")
    return value
