"""Measurement summary and validation result models.

- ``MeasurementSummary``: reported roof area, per-category linear
  lengths, penetration counts, pitch, stories and waste percentage, as
  supplied by an upstream measurement provider or manual digitising.
- ``ValidationResult``: diagnostic verdict of the perimeter consistency
  check.  It annotates a summary and never blocks material derivation.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any

from roof_takeoff.core.constants import SQ_FEET_PER_SQUARE, WASTE_PERCENTAGES
from roof_takeoff.models._validation import ModelValidationError, _check_min

_LINEAR_FIELDS: tuple[str, ...] = (
    "lf_ridge",
    "lf_hip",
    "lf_valley",
    "lf_eave",
    "lf_rake",
    "lf_step",
)


@dataclass(frozen=True, slots=True)
class MeasurementSummary:
    """Reported roof measurements for a single structure.

    Immutable: an explicit user adjustment of pitch, waste or stories
    produces a new instance via ``with_adjustments``.

    Attributes:
        area_sqft: Reported roof area in square feet.
        perimeter_ft: Footprint perimeter in feet, when a polygon is known.
        lf_ridge: Ridge length in linear feet.
        lf_hip: Hip length in linear feet.
        lf_valley: Valley length in linear feet.
        lf_eave: Eave length in linear feet.
        lf_rake: Rake length in linear feet.
        lf_step: Step-flashing length in linear feet.
        penetration_counts: Penetration category -> count
            (e.g. ``{"pipe_vent": 3, "skylight": 1}``).
        pitch: Predominant pitch as ``"rise/12"`` (empty when unknown).
        stories: Number of stories.
        waste_percent: Waste percentage, one of ``WASTE_PERCENTAGES``.
    """

    area_sqft: float
    perimeter_ft: float | None = None
    lf_ridge: float = 0.0
    lf_hip: float = 0.0
    lf_valley: float = 0.0
    lf_eave: float = 0.0
    lf_rake: float = 0.0
    lf_step: float = 0.0
    penetration_counts: dict[str, int] = field(default_factory=dict)
    pitch: str = ""
    stories: int = 1
    waste_percent: int = 10

    def __post_init__(self) -> None:
        _check_min("MeasurementSummary", "area_sqft", self.area_sqft, 0)
        if self.perimeter_ft is not None:
            _check_min("MeasurementSummary", "perimeter_ft", self.perimeter_ft, 0)
        for name in _LINEAR_FIELDS:
            _check_min("MeasurementSummary", name, getattr(self, name), 0)
        for category, count in self.penetration_counts.items():
            if not isinstance(count, int) or isinstance(count, bool) or count < 0:
                raise ModelValidationError(
                    "MeasurementSummary",
                    f"penetration_counts[{category!r}]",
                    count,
                    "must be a non-negative integer",
                )
        _check_min("MeasurementSummary", "stories", self.stories, 1)
        if self.waste_percent not in WASTE_PERCENTAGES:
            raise ModelValidationError(
                "MeasurementSummary",
                "waste_percent",
                self.waste_percent,
                f"must be one of {list(WASTE_PERCENTAGES)}",
            )

    @property
    def squares(self) -> float:
        """Reported area in roofing squares (100 sq ft)."""
        return self.area_sqft / SQ_FEET_PER_SQUARE

    @property
    def penetration_total(self) -> int:
        return sum(self.penetration_counts.values())

    def with_adjustments(
        self,
        *,
        pitch: str | None = None,
        waste_percent: int | None = None,
        stories: int | None = None,
    ) -> MeasurementSummary:
        """Return a copy with the user-adjustable fields replaced."""
        changes: dict[str, Any] = {}
        if pitch is not None:
            changes["pitch"] = pitch
        if waste_percent is not None:
            changes["waste_percent"] = waste_percent
        if stories is not None:
            changes["stories"] = stories
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Serialise for JSON transport."""
        return {
            "area_sqft": self.area_sqft,
            "perimeter_ft": self.perimeter_ft,
            "lf_ridge": self.lf_ridge,
            "lf_hip": self.lf_hip,
            "lf_valley": self.lf_valley,
            "lf_eave": self.lf_eave,
            "lf_rake": self.lf_rake,
            "lf_step": self.lf_step,
            "penetration_counts": dict(self.penetration_counts),
            "pitch": self.pitch,
            "stories": self.stories,
            "waste_percent": self.waste_percent,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MeasurementSummary:
        """Deserialise from a plain dict.

        Accepts the provider field names as well as the canonical ones:
        ``total_area_sqft`` for ``area_sqft`` (falling back to
        ``total_squares * 100``) and ``waste_percentage`` for
        ``waste_percent``.

        Raises:
            ModelValidationError: If a value violates a model invariant or
                the area is missing.
        """
        area = data.get("area_sqft", data.get("total_area_sqft"))
        if area is None and data.get("total_squares") is not None:
            area = float(data["total_squares"]) * SQ_FEET_PER_SQUARE
        if area is None:
            raise ModelValidationError(
                "MeasurementSummary", "area_sqft", None, "is required"
            )

        waste = data.get("waste_percent", data.get("waste_percentage", 10))
        perimeter = data.get("perimeter_ft")
        counts = data.get("penetration_counts") or {}
        stories = data.get("stories")

        try:
            return cls(
                area_sqft=float(area),
                perimeter_ft=float(perimeter) if perimeter is not None else None,
                lf_ridge=float(data.get("lf_ridge", 0.0) or 0.0),
                lf_hip=float(data.get("lf_hip", 0.0) or 0.0),
                lf_valley=float(data.get("lf_valley", 0.0) or 0.0),
                lf_eave=float(data.get("lf_eave", 0.0) or 0.0),
                lf_rake=float(data.get("lf_rake", 0.0) or 0.0),
                lf_step=float(data.get("lf_step", 0.0) or 0.0),
                penetration_counts={
                    str(k): _as_int(f"penetration_counts[{k!r}]", v) for k, v in counts.items()
                },
                pitch=str(data.get("pitch", "") or ""),
                stories=_as_int("stories", 1 if stories is None else stories),
                waste_percent=_as_int("waste_percent", waste),
            )
        except (TypeError, ValueError) as exc:
            if isinstance(exc, ModelValidationError):
                raise
            raise ModelValidationError(
                "MeasurementSummary", "payload", data, f"non-numeric value: {exc}"
            ) from exc


def _as_int(field_name: str, value: object) -> int:
    """Coerce an integral value (``3``, ``3.0`` or ``"3"``) to ``int``."""
    if isinstance(value, str):
        value = value.strip()
        if value.lstrip("-").isdigit():
            return int(value)
    elif isinstance(value, float) and value.is_integer():
        return int(value)
    elif isinstance(value, int) and not isinstance(value, bool):
        return value
    raise ModelValidationError("MeasurementSummary", field_name, value, "must be an integer")


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Verdict of the perimeter consistency check.

    Attributes:
        valid: ``False`` when edge coverage or area variance is out of range.
        edge_coverage_percent: ``(eave + rake) / perimeter * 100``.
        area_variance_percent: ``(computed - reported) / reported * 100``.
        warnings: Human-readable warnings, in a stable order.
        footprint_available: Whether a footprint took part in the check.
    """

    valid: bool
    edge_coverage_percent: float = 0.0
    area_variance_percent: float = 0.0
    warnings: tuple[str, ...] = ()
    footprint_available: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "edge_coverage_percent": self.edge_coverage_percent,
            "area_variance_percent": self.area_variance_percent,
            "warnings": list(self.warnings),
            "footprint_available": self.footprint_available,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ValidationResult:
        return cls(
            valid=bool(data["valid"]),
            edge_coverage_percent=float(data.get("edge_coverage_percent", 0.0)),
            area_variance_percent=float(data.get("area_variance_percent", 0.0)),
            warnings=tuple(data.get("warnings", ())),
            footprint_available=bool(data.get("footprint_available", False)),
        )
