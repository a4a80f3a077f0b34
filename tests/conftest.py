"""Shared pytest fixtures for the roof takeoff test suite."""

from __future__ import annotations

import math

import pytest

from roof_takeoff.core.config import TakeoffConfig
from roof_takeoff.core.constants import METERS_PER_DEGREE_LAT
from roof_takeoff.models.footprint import FootprintGeometry, Vertex
from roof_takeoff.models.measurement import MeasurementSummary

# ---------------------------------------------------------------------------
# Footprint fixtures
# ---------------------------------------------------------------------------

ORIGIN_LAT = 32.9
ORIGIN_LNG = -97.1


def rectangle_vertices(
    width_m: float,
    height_m: float,
    *,
    lat: float = ORIGIN_LAT,
    lng: float = ORIGIN_LNG,
) -> list[Vertex]:
    """Open ring of an axis-aligned rectangle, counter-clockwise from SW.

    Longitude spacing uses the rectangle's own mean latitude so the
    projected width is exactly *width_m*.
    """
    dlat = height_m / METERS_PER_DEGREE_LAT
    mean_lat = lat + dlat / 2
    dlng = width_m / (METERS_PER_DEGREE_LAT * math.cos(math.radians(mean_lat)))
    return [
        Vertex(lat=lat, lng=lng),
        Vertex(lat=lat, lng=lng + dlng),
        Vertex(lat=lat + dlat, lng=lng + dlng),
        Vertex(lat=lat + dlat, lng=lng),
    ]


@pytest.fixture()
def make_rectangle():
    """Factory fixture wrapping ``rectangle_vertices``."""
    return rectangle_vertices


@pytest.fixture()
def rectangle() -> list[Vertex]:
    """A 20 m x 10 m rectangle (200 m², ~2153 sq ft, ~197 ft perimeter)."""
    return rectangle_vertices(20.0, 10.0)


@pytest.fixture()
def traced_rectangle(rectangle: list[Vertex]) -> list[Vertex]:
    """The 20 m x 10 m rectangle with an extra point halfway along its south wall."""
    sw, se = rectangle[0], rectangle[1]
    midpoint = Vertex(lat=sw.lat, lng=(sw.lng + se.lng) / 2)
    return [sw, midpoint, *rectangle[1:]]


@pytest.fixture()
def l_shape() -> list[Vertex]:
    """A six-corner L-shaped footprint (20 m x 20 m minus a 10 m x 10 m corner)."""
    dlat = 10.0 / METERS_PER_DEGREE_LAT
    mean_lat = ORIGIN_LAT + dlat
    dlng = 10.0 / (METERS_PER_DEGREE_LAT * math.cos(math.radians(mean_lat)))
    return [
        Vertex(lat=ORIGIN_LAT, lng=ORIGIN_LNG),
        Vertex(lat=ORIGIN_LAT, lng=ORIGIN_LNG + 2 * dlng),
        Vertex(lat=ORIGIN_LAT + dlat, lng=ORIGIN_LNG + 2 * dlng),
        Vertex(lat=ORIGIN_LAT + dlat, lng=ORIGIN_LNG + dlng),
        Vertex(lat=ORIGIN_LAT + 2 * dlat, lng=ORIGIN_LNG + dlng),
        Vertex(lat=ORIGIN_LAT + 2 * dlat, lng=ORIGIN_LNG),
    ]


@pytest.fixture()
def measured_footprint() -> FootprintGeometry:
    """A measured footprint with round numbers for consistency checks."""
    return FootprintGeometry(
        available=True,
        area_sqft=2000.0,
        perimeter_ft=200.0,
        geodesic_area_sqft=2000.0,
    )


# ---------------------------------------------------------------------------
# Measurement fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def summary() -> MeasurementSummary:
    """A 20-square gable/hip roof with valleys and two penetration types."""
    return MeasurementSummary(
        area_sqft=2000.0,
        lf_ridge=40.0,
        lf_hip=20.0,
        lf_valley=30.0,
        lf_eave=100.0,
        lf_rake=60.0,
        penetration_counts={"pipe_vent": 3, "skylight": 1},
        pitch="6/12",
        waste_percent=10,
    )


@pytest.fixture()
def summary_payload() -> dict[str, object]:
    """The ``summary`` fixture as a request payload ``measurement`` object."""
    return {
        "total_area_sqft": 2000,
        "lf_ridge": 40,
        "lf_hip": 20,
        "lf_valley": 30,
        "lf_eave": 100,
        "lf_rake": 60,
        "penetration_counts": {"pipe_vent": 3, "skylight": 1},
        "pitch": "6/12",
        "waste_percentage": 10,
    }


@pytest.fixture()
def config() -> TakeoffConfig:
    """Default takeoff configuration."""
    return TakeoffConfig()
