"""Tests for region area, planting density and timelines."""

import math

import pytest

from forestsim.models.catalog import get_species
from forestsim.models.schemas import RegionBounds, SpacingClass, SpeciesMixEntry
from forestsim.services import planting


def _entry(species_id, percentage=None):
    return SpeciesMixEntry(species=get_species(species_id), percentage=percentage)


def _bounds(north, south, east, west):
    return RegionBounds(north=north, south=south, east=east, west=west)


class TestRegionArea:
    def test_one_degree_square_at_equator(self):
        area = planting.region_area(_bounds(1, 0, 1, 0))
        assert area > 0
        assert area == pytest.approx(111_000 ** 2 * math.cos(math.radians(0.5)) / 10_000)

    def test_scales_with_extent_near_equator(self):
        small = planting.region_area(_bounds(0.1, 0, 0.1, 0))
        large = planting.region_area(_bounds(0.2, 0, 0.2, 0))
        assert large == pytest.approx(small * 4, rel=1e-3)

    def test_shrinks_with_latitude(self):
        equator = planting.region_area(_bounds(0.5, -0.5, 1, 0))
        north = planting.region_area(_bounds(60.5, 59.5, 1, 0))
        assert north < equator

    def test_reversed_longitudes_floor_at_zero(self):
        assert planting.region_area(_bounds(1, 0, 0, 1)) == 0.0


class TestSpacing:
    def test_density(self):
        assert planting.planting_density(2.5) == pytest.approx(1600)
        assert planting.planting_density(3.0) == pytest.approx(1111.11, abs=0.01)

    @pytest.mark.parametrize("name,expected", [
        ("Eucalyptus", SpacingClass.DENSE),
        ("Douglas Fir", SpacingClass.VERY_WIDE),
        ("Sugar Maple", SpacingClass.WIDE),
        ("Olive", SpacingClass.DENSE),
        ("Mystery Tree", SpacingClass.STANDARD),
    ])
    def test_recommended_spacing(self, name, expected):
        assert planting.recommended_spacing(name) == expected

    def test_average_spacing_is_weighted(self):
        # oak 4.0m, birch 2.5m
        assert planting.average_spacing([_entry("oak", 50), _entry("birch", 50)]) == pytest.approx(3.25)

    def test_mix_spacing_tolerates_small_drift(self):
        spacing = planting.mix_spacing([_entry("oak", 50), _entry("birch", 47)])
        assert spacing == pytest.approx((4.0 * 50 + 2.5 * 47) / 97)

    def test_mix_spacing_falls_back_to_standard(self):
        assert planting.mix_spacing([_entry("oak", 60), _entry("birch", 30)]) == 3.0


class TestPlanPlanting:
    def test_single_species_uses_its_spacing_class(self):
        plan = planting.plan_planting(_bounds(0.01, 0, 0.01, 0), [_entry("oak")])
        assert plan.spacing == 4.0
        assert plan.density == 625
        assert plan.total_trees == math.floor(plan.area_hectares * 625)

    def test_custom_spacing(self):
        plan = planting.plan_planting(_bounds(0.01, 0, 0.01, 0), [_entry("oak")], custom_spacing=5.0)
        assert plan.density == pytest.approx(400)

    def test_mixed_species(self):
        plan = planting.plan_planting(
            _bounds(0.01, 0, 0.01, 0), [_entry("oak", 50), _entry("birch", 50)]
        )
        assert plan.spacing == pytest.approx(3.25)
        assert plan.density == pytest.approx(10_000 / 3.25 ** 2)


class TestPlantingTimeline:
    def test_small_project(self):
        timeline = planting.planting_timeline(500)
        assert timeline.project_scale.startswith("Small-scale")
        assert timeline.trees_per_year == 3000
        assert timeline.years_to_complete == 1
        assert timeline.trees_per_season == 500

    def test_medium_project(self):
        timeline = planting.planting_timeline(5000)
        assert timeline.project_scale.startswith("Medium-scale")
        assert timeline.trees_per_year == 60_000
        assert timeline.years_to_complete == 1

    def test_massive_project(self):
        timeline = planting.planting_timeline(2_000_000)
        assert timeline.project_scale.startswith("Massive-scale")
        assert timeline.trees_per_year == 7_500_000
        assert timeline.years_to_complete == 12
        assert timeline.trees_per_season == math.ceil(2_000_000 / 12)

    def test_zero_trees_still_one_year(self):
        assert planting.planting_timeline(0).years_to_complete == 1


class TestRecommendations:
    def test_tiny_area(self):
        recs = planting.planting_recommendations(0.05)
        assert len(recs) == 1
        assert "container" in recs[0]

    def test_very_large_area(self):
        recs = planting.planting_recommendations(20)
        assert len(recs) == 3
        assert recs[-1] == "Consider phased planting over multiple years"

    @pytest.mark.parametrize("area,label", [
        (0.5, "5000 m²"), (50, "50.00 hectares"), (250, "2.50 km²"),
    ])
    def test_format_area(self, area, label):
        assert planting.format_area(area) == label
