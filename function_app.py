"""Azure Functions entry point for the Roof Takeoff Engine.

This module registers the HTTP functions using the Python v2 programming
model.

All business logic lives in the roof_takeoff package. This file is purely
the wiring layer between Azure Functions bindings and application code.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

import azure.functions as func

from roof_takeoff.core.config import TakeoffConfig
from roof_takeoff.core.exceptions import TakeoffError
from roof_takeoff.core.ingress import deserialize_request_body, error_body, status_for_error

app = func.FunctionApp(http_auth_level=func.AuthLevel.FUNCTION)

logger = logging.getLogger("roof_takeoff.function_app")

_config: TakeoffConfig | None = None


def _get_config() -> TakeoffConfig:
    """Load configuration from app settings once per worker."""
    global _config  # noqa: PLW0603
    if _config is None:
        _config = TakeoffConfig.from_env()
    return _config


def _json_response(body: object, status_code: int = 200) -> func.HttpResponse:
    return func.HttpResponse(
        json.dumps(body),
        status_code=status_code,
        mimetype="application/json",
    )


def _dispatch(
    req: func.HttpRequest,
    handler: Callable[..., dict[str, Any]],
    *,
    name: str,
) -> func.HttpResponse:
    """Decode the request body, run *handler* and map errors to statuses."""
    correlation_id = req.headers.get("x-correlation-id", "")
    try:
        payload = deserialize_request_body(req.get_body())
        correlation_id = str(payload.get("correlation_id") or correlation_id)
        if correlation_id:
            payload.setdefault("correlation_id", correlation_id)

        logger.info("%s request started | correlation_id=%s", name, correlation_id)
        result = handler(payload, config=_get_config())
    except TakeoffError as exc:
        return _json_response(
            error_body(exc, correlation_id=correlation_id),
            status_code=status_for_error(exc),
        )

    logger.info("%s request completed | correlation_id=%s", name, correlation_id)
    return _json_response(result)


# ---------------------------------------------------------------------------
# HTTP functions
# ---------------------------------------------------------------------------


@app.function_name("validate_measurement")
@app.route(route="measurements/validate", methods=["POST"])
def validate_measurement(req: func.HttpRequest) -> func.HttpResponse:
    """Cross-check a measurement summary against its roof footprint.

    Input:
        JSON object containing:
        - ``measurement``: Measurement summary fields
        - ``vertices`` or ``footprint_text``: Optional roof footprint

    Returns:
        200 with ``footprint`` and ``validation``; 400 on a malformed body;
        422 on a degenerate footprint or invalid measurement.
    """
    from roof_takeoff.orchestrators.takeoff import handle_validate_measurement

    return _dispatch(req, handle_validate_measurement, name="validate_measurement")


@app.function_name("derive_materials")
@app.route(route="materials/derive", methods=["POST"])
def derive_materials(req: func.HttpRequest) -> func.HttpResponse:
    """Run a full takeoff and return the takeoff report.

    Input:
        JSON object containing:
        - ``measurement``: Measurement summary fields
        - ``vertices`` or ``footprint_text``: Optional roof footprint
        - ``selected_brands``: Optional category -> brand preferences
        - ``waste_percent``: Optional waste override (0, 8, 10, 12, 15, 17, 20)
        - ``catalog``: Optional packaging catalog rows

    Returns:
        200 with the serialised ``TakeoffReport``.
    """
    from roof_takeoff.orchestrators.takeoff import handle_derive_materials

    return _dispatch(req, handle_derive_materials, name="derive_materials")


@app.function_name("render_template")
@app.route(route="templates/render", methods=["POST"])
def render_template(req: func.HttpRequest) -> func.HttpResponse:
    """Render ``{{ expression }}`` placeholders in a document template.

    Input:
        JSON object containing:
        - ``template``: Template text
        - ``scalars`` or ``measurement``: The scalar table source

    Returns:
        200 with ``rendered``; 422 if any placeholder fails to evaluate.
    """
    from roof_takeoff.orchestrators.takeoff import handle_render_template

    return _dispatch(req, handle_render_template, name="render_template")


@app.function_name("available_brands")
@app.route(route="materials/brands", methods=["GET"])
def available_brands(req: func.HttpRequest) -> func.HttpResponse:
    """Return the brands offered per material category in the default catalog."""
    from roof_takeoff.materials import get_available_brands

    return _json_response(get_available_brands())
