"""Tests for the brand catalog, the scalar table and pitch parsing."""

from __future__ import annotations

import math

import pytest

from roof_takeoff.core.constants import (
    DRIP_EDGE,
    PIPE_BOOT,
    RIDGE_CAP,
    SHINGLES,
    STARTER,
    VALLEY,
    WASTE_PERCENTAGES,
)
from roof_takeoff.materials import (
    DEFAULT_CATALOG,
    DEFAULT_PACKAGING_FACTORS,
    FLAT,
    GENERIC_BRAND,
    BrandCatalog,
    build_scalar_table,
    ceil_units,
    get_available_brands,
    parse_pitch,
    waste_adjusted,
)
from roof_takeoff.models.footprint import FootprintGeometry
from roof_takeoff.models.measurement import MeasurementSummary

# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class TestDefaultCatalog:
    """System default packaging factors and brand lines."""

    def test_generic_factors_match_defaults(self) -> None:
        for category, factor in DEFAULT_PACKAGING_FACTORS.items():
            entry = DEFAULT_CATALOG.lookup(category, GENERIC_BRAND)
            assert entry is not None, category
            assert entry.packaging_factor == factor

    def test_valley_and_drip_edge_are_generic_only(self) -> None:
        assert DEFAULT_CATALOG.brands_for(VALLEY) == [GENERIC_BRAND]
        assert DEFAULT_CATALOG.brands_for(DRIP_EDGE) == [GENERIC_BRAND]

    def test_available_brands(self) -> None:
        brands = get_available_brands()
        assert brands[SHINGLES] == [GENERIC_BRAND, "GAF", "Owens Corning", "CertainTeed"]
        assert PIPE_BOOT in brands

    def test_owens_corning_starter_roll(self) -> None:
        entry = DEFAULT_CATALOG.lookup(STARTER, "Owens Corning")
        assert entry is not None
        assert entry.packaging_factor == 65
        assert entry.unit_of_measure == "roll"


class TestBrandResolution:
    """selected brand → default-brand order → first listed."""

    def _catalog(self) -> BrandCatalog:
        return BrandCatalog.from_dicts(
            [
                {"material_category": RIDGE_CAP, "brand": "Alpha", "packaging_factor": 20},
                {"material_category": RIDGE_CAP, "brand": "Beta", "packaging_factor": 25},
                {"material_category": RIDGE_CAP, "brand": "Gamma", "packaging_factor": 30},
            ],
            default_brands={RIDGE_CAP: ["Gamma"]},
        )

    def test_selected(self) -> None:
        entry = self._catalog().resolve(RIDGE_CAP, "Beta")
        assert entry is not None and entry.brand == "Beta"

    def test_default_brand_order(self) -> None:
        entry = self._catalog().resolve(RIDGE_CAP)
        assert entry is not None and entry.brand == "Gamma"

    def test_unknown_selection_uses_default(self) -> None:
        entry = self._catalog().resolve(RIDGE_CAP, "Omega")
        assert entry is not None and entry.brand == "Gamma"

    def test_first_listed_without_defaults(self) -> None:
        catalog = BrandCatalog(entries=self._catalog().entries)
        entry = catalog.resolve(RIDGE_CAP)
        assert entry is not None and entry.brand == "Alpha"

    def test_unknown_category(self) -> None:
        assert self._catalog().resolve(SHINGLES) is None

    def test_categories_in_listing_order(self) -> None:
        assert DEFAULT_CATALOG.categories[:2] == [SHINGLES, RIDGE_CAP]


# ---------------------------------------------------------------------------
# Packaged rounding helpers
# ---------------------------------------------------------------------------


class TestRounding:
    """Whole-unit rounding with float-noise guard."""

    def test_ceil_units_noise(self) -> None:
        assert ceil_units(10 * 1.1) == 11
        assert ceil_units(11.0000001) == 12

    def test_waste_adjusted(self) -> None:
        assert waste_adjusted(60.0, 10) == 66
        assert waste_adjusted(16, 12) == 18
        assert waste_adjusted(1, 0) == 1


# ---------------------------------------------------------------------------
# Scalar table
# ---------------------------------------------------------------------------


class TestBuildScalarTable:
    """Dotted-key scalar table."""

    @pytest.fixture()
    def base_quantities(self) -> dict[str, float]:
        return {SHINGLES: 60.0, RIDGE_CAP: 2, STARTER: 2, DRIP_EDGE: 16}

    def test_roof_keys(
        self, summary: MeasurementSummary, base_quantities: dict[str, float]
    ) -> None:
        scalars = build_scalar_table(summary, base_quantities)
        assert scalars["roof.total_sqft"] == 2000.0
        assert scalars["roof.squares"] == 20.0
        assert scalars["roof.waste_pct"] == 10.0
        assert scalars["roof.stories"] == 1.0
        assert scalars["roof.pitch_factor"] == pytest.approx(math.sqrt(1.25))
        assert "roof.is_rectangular" not in scalars

    def test_waste_area_keys(
        self, summary: MeasurementSummary, base_quantities: dict[str, float]
    ) -> None:
        scalars = build_scalar_table(summary, base_quantities)
        for w in WASTE_PERCENTAGES:
            assert scalars[f"waste.{w}pct.sqft"] == pytest.approx(2000.0 * (1 + w / 100))
        assert scalars["waste.10pct.squares"] == pytest.approx(22.0)

    def test_linear_keys(
        self, summary: MeasurementSummary, base_quantities: dict[str, float]
    ) -> None:
        scalars = build_scalar_table(summary, base_quantities)
        assert scalars["lf.ridge"] == 40.0
        assert scalars["lf.ridge_hip_total"] == 60.0
        assert scalars["lf.eave_rake_total"] == 160.0
        assert scalars["lf.valley_step_total"] == 30.0

    def test_penetration_keys_always_present(self) -> None:
        scalars = build_scalar_table(MeasurementSummary(area_sqft=1000.0), {})
        for key in ("pen.pipe_vent", "pen.skylight", "pen.chimney", "pen.hvac", "pen.total"):
            assert scalars[key] == 0.0
        assert scalars["boots.pipe"] == 0.0

    def test_custom_penetration_included(self) -> None:
        summary = MeasurementSummary(area_sqft=1000.0, penetration_counts={"solar_mount": 6})
        scalars = build_scalar_table(summary, {})
        assert scalars["pen.solar_mount"] == 6.0
        assert scalars["pen.total"] == 6.0

    def test_packaged_count_keys(
        self, summary: MeasurementSummary, base_quantities: dict[str, float]
    ) -> None:
        scalars = build_scalar_table(summary, base_quantities)
        assert scalars["bundles.shingles"] == 60.0
        assert scalars["bundles.shingles.waste_10pct"] == 66.0
        assert scalars["bundles.shingles.waste_0pct"] == 60.0
        assert scalars["sticks.drip_edge.waste_20pct"] == 20.0
        assert scalars["rolls.valley"] == 0.0
        assert scalars["boots.pipe"] == 3.0
        assert scalars["kits.skylight"] == 1.0

    def test_perimeter_fallback_to_edges(
        self, summary: MeasurementSummary, base_quantities: dict[str, float]
    ) -> None:
        scalars = build_scalar_table(summary, base_quantities)
        assert scalars["roof.perimeter_ft"] == 160.0
        assert scalars["lf.perimeter"] == 160.0

    def test_perimeter_from_summary(self, base_quantities: dict[str, float]) -> None:
        summary = MeasurementSummary(area_sqft=1000.0, perimeter_ft=150.0, lf_eave=10.0)
        assert build_scalar_table(summary, base_quantities)["roof.perimeter_ft"] == 150.0

    def test_footprint_perimeter_preferred(
        self, summary: MeasurementSummary, base_quantities: dict[str, float]
    ) -> None:
        footprint = FootprintGeometry(area_sqft=2000.0, perimeter_ft=188.5)
        scalars = build_scalar_table(summary, base_quantities, footprint=footprint)
        assert scalars["roof.perimeter_ft"] == 188.5
        assert scalars["roof.is_rectangular"] == 0.0

    def test_unavailable_footprint_ignored(
        self, summary: MeasurementSummary, base_quantities: dict[str, float]
    ) -> None:
        scalars = build_scalar_table(
            summary, base_quantities, footprint=FootprintGeometry.unavailable()
        )
        assert scalars["roof.perimeter_ft"] == 160.0
        assert "roof.is_rectangular" not in scalars

    def test_waste_override(
        self, summary: MeasurementSummary, base_quantities: dict[str, float]
    ) -> None:
        assert build_scalar_table(summary, base_quantities, waste_percent=17)["roof.waste_pct"] == 17.0


# ---------------------------------------------------------------------------
# Pitch
# ---------------------------------------------------------------------------


class TestParsePitch:
    """``rise/run`` parsing."""

    def test_six_twelve(self) -> None:
        pitch = parse_pitch("6/12")
        assert (pitch.rise, pitch.run) == (6.0, 12.0)
        assert pitch.slope_factor == pytest.approx(1.118034, rel=1e-6)
        assert pitch.degrees == pytest.approx(26.565051, rel=1e-6)

    def test_whitespace_and_suffix(self) -> None:
        assert parse_pitch(" 8 / 12 pitch").pitch == "8/12"

    def test_decimal_rise(self) -> None:
        assert parse_pitch("4.5/12").rise == 4.5

    @pytest.mark.parametrize("value", ["", None, "steep", "12"])
    def test_unparseable_is_flat(self, value: str | None) -> None:
        assert parse_pitch(value) is FLAT

    def test_zero_run_uses_twelve(self) -> None:
        assert parse_pitch("6/0").run == 12.0
