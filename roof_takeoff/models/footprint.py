"""Data models for roof footprint geometry.

- ``Vertex``: a single WGS 84 ``(lat, lng)`` coordinate in degrees.
- ``RoofPolygon``: a validated, closed vertex ring (output of the vertex
  validator, immutable once built).
- ``FootprintGeometry``: planar measurements of a footprint, or an explicit
  "unavailable" marker when the footprint could not be parsed.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Vertex:
    """A WGS 84 coordinate in decimal degrees.

    Attributes:
        lat: Latitude in degrees.
        lng: Longitude in degrees.
    """

    lat: float
    lng: float

    def to_dict(self) -> dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> Vertex:
        """Deserialise from ``{"lat": ..., "lng": ...}``.

        Raises:
            KeyError: If ``lat`` or ``lng`` is missing.
            TypeError, ValueError: If a value is not numeric.
        """
        return cls(lat=float(data["lat"]), lng=float(data["lng"]))  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class RoofPolygon:
    """A validated, closed roof footprint ring.

    Only ``roof_takeoff.geometry.validate_vertices`` should build one;
    the invariants (closed, >= 3 distinct vertices, no repeated adjacent
    vertex, minimum area) are enforced there.

    Attributes:
        vertices: Closed ring, first vertex repeated at the end.
    """

    vertices: tuple[Vertex, ...]

    @property
    def open_ring(self) -> tuple[Vertex, ...]:
        """The ring without its closing duplicate."""
        return self.vertices[:-1]

    @property
    def vertex_count(self) -> int:
        """Number of distinct corners (closing duplicate excluded)."""
        return len(self.vertices) - 1

    def to_dict(self) -> dict[str, object]:
        return {"vertices": [v.to_dict() for v in self.vertices]}


@dataclass(frozen=True, slots=True)
class FootprintGeometry:
    """Planar measurements of a roof footprint.

    When ``available`` is ``False`` the footprint could not be parsed and
    every measurement is zero; consumers must skip checks that need it.

    Attributes:
        available: Whether a usable footprint was supplied.
        vertices: Closed ring the measurements were taken from.
        area_sqft: Planar (projected) area in square feet.
        perimeter_ft: Planar perimeter in feet.
        geodesic_area_sqft: Ellipsoidal reference area in square feet.
        is_rectangular: Whether the footprint is a 4-corner near-rectangle.
        self_intersecting: Whether the ring crosses itself.
        unavailable_reason: Why the footprint is unavailable, if it is.
    """

    available: bool = True
    vertices: tuple[Vertex, ...] = field(default_factory=tuple)
    area_sqft: float = 0.0
    perimeter_ft: float = 0.0
    geodesic_area_sqft: float = 0.0
    is_rectangular: bool = False
    self_intersecting: bool = False
    unavailable_reason: str = ""

    @classmethod
    def unavailable(cls, reason: str = "") -> FootprintGeometry:
        """Return the explicit "geometry unavailable" result."""
        return cls(available=False, unavailable_reason=reason)

    @property
    def vertex_count(self) -> int:
        """Number of distinct corners (closing duplicate excluded)."""
        return max(len(self.vertices) - 1, 0)

    @property
    def projection_drift_pct(self) -> float:
        """Relative difference between planar and geodesic area, in percent."""
        if not self.available or self.geodesic_area_sqft <= 0:
            return 0.0
        return abs(self.area_sqft - self.geodesic_area_sqft) * 100.0 / self.geodesic_area_sqft

    def to_dict(self) -> dict[str, object]:
        """Serialise for JSON transport."""
        return {
            "available": self.available,
            "vertices": [v.to_dict() for v in self.vertices],
            "vertex_count": self.vertex_count,
            "area_sqft": self.area_sqft,
            "perimeter_ft": self.perimeter_ft,
            "geodesic_area_sqft": self.geodesic_area_sqft,
            "is_rectangular": self.is_rectangular,
            "self_intersecting": self.self_intersecting,
            "unavailable_reason": self.unavailable_reason,
        }
