"""Typed payload schemas for the HTTP request handlers.

Every handler receives and returns a JSON-serialisable dict.  These
``TypedDict`` definitions make the contracts explicit so that pyright
catches key mismatches at analysis time and ``validate_payload`` catches
them at runtime.

Usage::

    from roof_takeoff.models.payloads import DeriveMaterialsInput, validate_payload

    def handle_derive_materials(raw: dict) -> dict:
        validate_payload(raw, DeriveMaterialsInput, handler="derive_materials")
        # raw is now known to contain all required keys
"""

from __future__ import annotations

from typing import Any, NotRequired, TypedDict

from roof_takeoff.core.exceptions import ContractError

# ---------------------------------------------------------------------------
# Validate measurement
# ---------------------------------------------------------------------------


class ValidateMeasurementInput(TypedDict):
    """Caller → ``validate_measurement`` handler."""

    measurement: dict[str, Any]
    vertices: NotRequired[list[Any]]
    footprint_text: NotRequired[str]
    cleanup_footprint: NotRequired[bool]
    correlation_id: NotRequired[str]


class ValidateMeasurementOutput(TypedDict):
    """``validate_measurement`` handler → caller."""

    footprint: dict[str, Any]
    validation: dict[str, Any]
    correlation_id: str


# ---------------------------------------------------------------------------
# Derive materials
# ---------------------------------------------------------------------------


class DeriveMaterialsInput(TypedDict):
    """Caller → ``derive_materials`` handler."""

    measurement: dict[str, Any]
    vertices: NotRequired[list[Any]]
    footprint_text: NotRequired[str]
    cleanup_footprint: NotRequired[bool]
    selected_brands: NotRequired[dict[str, str]]
    waste_percent: NotRequired[int]
    catalog: NotRequired[list[dict[str, Any]]]
    processing_id: NotRequired[str]
    correlation_id: NotRequired[str]


# Output is a serialised takeoff report (see TakeoffReport.to_dict()).

# ---------------------------------------------------------------------------
# Render template
# ---------------------------------------------------------------------------


class RenderTemplateInput(TypedDict):
    """Caller → ``render_template`` handler.

    Exactly one scalar source is expected: a prebuilt ``scalars`` mapping,
    or a ``measurement`` from which the scalar table is derived.
    """

    template: str
    scalars: NotRequired[dict[str, float]]
    measurement: NotRequired[dict[str, Any]]
    selected_brands: NotRequired[dict[str, str]]
    precision: NotRequired[int]
    correlation_id: NotRequired[str]


class RenderTemplateOutput(TypedDict):
    """``render_template`` handler → caller."""

    rendered: str
    correlation_id: str


# ---------------------------------------------------------------------------
# Required-key registrations (used by validate_payload)
# ---------------------------------------------------------------------------

_REQUIRED_KEYS: dict[type, frozenset[str]] = {
    ValidateMeasurementInput: frozenset({"measurement"}),
    DeriveMaterialsInput: frozenset({"measurement"}),
    RenderTemplateInput: frozenset({"template"}),
}


# ---------------------------------------------------------------------------
# Runtime validation
# ---------------------------------------------------------------------------


def validate_payload(
    raw: dict[str, Any],
    schema: type,
    *,
    handler: str,
) -> None:
    """Validate that *raw* contains the required keys for *schema*.

    Raises:
        ContractError: If required keys are missing from the payload.
    """
    required = _REQUIRED_KEYS.get(schema)
    if required is None:
        return

    missing = required - raw.keys()
    if missing:
        msg = f"{handler}: missing required payload key(s): {', '.join(sorted(missing))}"
        raise ContractError(msg, stage=handler, code="PAYLOAD_MISSING_KEYS")
