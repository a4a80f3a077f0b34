"""Thin ingress boundary helpers for the HTTP entrypoints.

Centralises the transport concerns so that ``function_app.py`` contains
only route bindings and handoff:

- **deserialize_request_body**: normalises a raw request body (bytes,
  JSON string, or an already-decoded dict) into a plain dict.
- **status_for_error**: maps a ``TakeoffError`` category to an HTTP
  status code.
- **error_body**: the JSON body returned for a failed request.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from roof_takeoff.core.exceptions import ContractError, TakeoffError

logger = logging.getLogger("roof_takeoff.core.ingress")

_STATUS_BY_CATEGORY: dict[str, int] = {
    "contract": 400,
    "validation": 422,
    "permanent": 422,
}


def deserialize_request_body(raw: bytes | str | dict[str, Any] | object) -> dict[str, Any]:
    """Normalise a request body to a plain dict.

    Args:
        raw: The raw body (``req.get_body()``), a JSON string, or a dict.

    Returns:
        Parsed dict payload.

    Raises:
        ContractError: If *raw* is not valid JSON or not a JSON object.
    """
    if isinstance(raw, bytes | bytearray):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            msg = f"Request body is not valid UTF-8: {exc}"
            raise ContractError(msg, stage="ingress", code="INVALID_ENCODING") from exc
    if isinstance(raw, str):
        if not raw.strip():
            msg = "Request body is empty"
            raise ContractError(msg, stage="ingress", code="EMPTY_BODY")
        try:
            parsed = json.loads(raw)
        except (json.JSONDecodeError, ValueError) as exc:
            msg = f"Request body is not valid JSON: {exc}"
            raise ContractError(msg, stage="ingress", code="INVALID_JSON") from exc
        if not isinstance(parsed, dict):
            msg = f"Request body JSON must be an object, got {type(parsed).__name__}"
            raise ContractError(msg, stage="ingress", code="INVALID_INPUT_TYPE")
        return parsed
    if isinstance(raw, dict):
        return raw
    msg = f"Unexpected request body type: {type(raw).__name__}"
    raise ContractError(msg, stage="ingress", code="INVALID_INPUT_TYPE")


def status_for_error(exc: TakeoffError) -> int:
    """Return the HTTP status code for a takeoff error."""
    return _STATUS_BY_CATEGORY.get(exc.category, 500)


def error_body(exc: TakeoffError, *, correlation_id: str = "") -> dict[str, object]:
    """Build the JSON error body for *exc*, stamping the correlation id."""
    if correlation_id and not exc.correlation_id:
        exc.correlation_id = correlation_id
    body = {"error": exc.to_error_dict()}
    logger.warning(
        "Request failed | category=%s | code=%s | stage=%s | correlation_id=%s | %s",
        exc.category,
        exc.code,
        exc.stage,
        exc.correlation_id,
        exc.message,
    )
    return body
