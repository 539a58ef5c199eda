"""Region area, planting density, and planting timeline estimates.

Area uses an equirectangular approximation (1° latitude ≈ 111 km), which is
adequate for the small rectangular regions users draw on a map.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

from forestsim.config import settings
from forestsim.models.schemas import (
    PlantingPlan, PlantingTimeline, RegionBounds, SpacingClass, SpeciesMixEntry,
)

METERS_PER_DEGREE = 111_000
SQ_METERS_PER_HECTARE = 10_000


# ── Spacing classes ──────────────────────────────────────────────────

SPACING_CONFIGS = {
    SpacingClass.DENSE: {
        "spacing": 2.5,
        "density": 1600,
        "description": "Dense planting (2.5m spacing, 6.25m² per tree)",
    },
    SpacingClass.STANDARD: {
        "spacing": 3.0,
        "density": 1111,
        "description": "Standard spacing (3m spacing, 9m² per tree)",
    },
    SpacingClass.WIDE: {
        "spacing": 4.0,
        "density": 625,
        "description": "Wide spacing (4m spacing, 16m² per tree)",
    },
    SpacingClass.VERY_WIDE: {
        "spacing": 6.0,
        "density": 278,
        "description": "Very wide spacing (6m spacing, 36m² per tree)",
    },
}

MIN_MIX_SPACING = SPACING_CONFIGS[SpacingClass.DENSE]["spacing"]
MAX_MIX_SPACING = SPACING_CONFIGS[SpacingClass.VERY_WIDE]["spacing"]

# Name fragments for species outside the catalog
_SPACING_KEYWORDS = (
    (SpacingClass.DENSE, ("eucalyptus", "willow", "poplar", "birch", "bamboo", "sycamore")),
    (SpacingClass.VERY_WIDE, ("sequoia", "redwood", "cedar", "baobab", "douglas fir", "monkey puzzle")),
    (SpacingClass.WIDE, ("oak", "maple", "pine", "spruce", "fir", "mahogany", "teak", "beech",
                         "ash", "hickory", "walnut", "linden")),
    (SpacingClass.DENSE, ("juniper", "rowan", "olive", "fig", "pomegranate", "almond", "carob",
                          "cherry", "avocado", "mango", "cashew", "marula", "shea",
                          "sandalwood", "neem", "camphor")),
)


# ── Project scale classes ────────────────────────────────────────────
# (upper tree count, scale, trees/person/day, crew, planting days/year, approach)

SCALE_CLASSES = (
    (1_000, "Small-scale (Community/Backyard)", 50, 2, 30,
     "Manual planting with volunteers or small crew"),
    (10_000, "Medium-scale (Local Restoration)", 200, 5, 60,
     "Semi-mechanized planting with professional crew"),
    (100_000, "Large-scale (Commercial Forestry)", 500, 10, 90,
     "Professional forestry crew with mechanized assistance"),
    (1_000_000, "Very Large-scale (Regional Restoration)", 800, 25, 120,
     "Multiple crews with specialized planting equipment"),
    (math.inf, "Massive-scale (National/International)", 1000, 50, 150,
     "Industrial-scale operations with advanced mechanization and multiple teams"),
)

# (upper tree count, daily cap, planting window days) for completion time
COMPLETION_WINDOWS = (
    (100, 200, 30),
    (10_000, 1000, 60),
    (math.inf, 2000, 90),
)


def region_area(bounds: RegionBounds) -> float:
    """Area of a lat/lon rectangle in hectares (never negative)."""
    lat_meters = (bounds.north - bounds.south) * METERS_PER_DEGREE
    avg_lat_rad = math.radians((bounds.north + bounds.south) / 2)
    lng_meters = (bounds.east - bounds.west) * METERS_PER_DEGREE * math.cos(avg_lat_rad)
    return max(0.0, lat_meters * lng_meters / SQ_METERS_PER_HECTARE)


def planting_density(spacing: float) -> float:
    """Trees per hectare for a square grid at ``spacing`` meters."""
    return SQ_METERS_PER_HECTARE / (spacing * spacing)


def recommended_spacing(species_name: str) -> SpacingClass:
    name = species_name.lower()
    for spacing_class, keywords in _SPACING_KEYWORDS:
        if any(k in name for k in keywords):
            return spacing_class
    return SpacingClass.STANDARD


def average_spacing(mix: Sequence[SpeciesMixEntry]) -> float:
    """Percentage-weighted spacing of a mix in meters."""
    total = sum(e.percentage or 0.0 for e in mix)
    if not mix or total <= 0:
        return SPACING_CONFIGS[SpacingClass.STANDARD]["spacing"]
    weighted = sum(
        SPACING_CONFIGS[e.species.spacing]["spacing"] * (e.percentage or 0.0) for e in mix
    )
    return weighted / total


def mix_spacing(mix: Sequence[SpeciesMixEntry]) -> float:
    """Spacing used to plant a multi-species mix.

    Falls back to standard spacing when percentages are far from 100.
    """
    total = sum(e.percentage or 0.0 for e in mix)
    if abs(total - 100) > settings.spacing_percentage_tolerance:
        return SPACING_CONFIGS[SpacingClass.STANDARD]["spacing"]
    return max(MIN_MIX_SPACING, min(MAX_MIX_SPACING, average_spacing(mix)))


def plan_planting(
    bounds: RegionBounds,
    mix: Sequence[SpeciesMixEntry],
    custom_spacing: Optional[float] = None,
) -> PlantingPlan:
    area = region_area(bounds)

    if custom_spacing:
        spacing = custom_spacing
        density = planting_density(spacing)
    elif len(mix) > 1:
        spacing = mix_spacing(mix)
        density = planting_density(spacing)
    else:
        spacing_class = mix[0].species.spacing if mix else SpacingClass.STANDARD
        spacing = SPACING_CONFIGS[spacing_class]["spacing"]
        density = SPACING_CONFIGS[spacing_class]["density"]

    return PlantingPlan(
        spacing=spacing,
        density=density,
        area_hectares=area,
        total_trees=math.floor(area * density),
    )


def planting_timeline(total_trees: int) -> PlantingTimeline:
    for upper, scale, per_person, crew, days, approach in SCALE_CLASSES:
        if total_trees < upper:
            break

    trees_per_year = per_person * crew * days

    for upper, daily_cap, window in COMPLETION_WINDOWS:
        if total_trees < upper:
            break
    trees_per_day = min(per_person * crew, daily_cap)
    days_to_complete = math.ceil(total_trees / trees_per_day)
    years_to_complete = max(1, math.ceil(days_to_complete / window))

    return PlantingTimeline(
        project_scale=scale,
        recommended_approach=approach,
        trees_per_year=trees_per_year,
        years_to_complete=years_to_complete,
        trees_per_season=math.ceil(total_trees / years_to_complete),
    )


def planting_recommendations(area_hectares: float) -> list[str]:
    recommendations = []
    if area_hectares < 0.1:
        recommendations.append("Small area - consider container planting or urban forestry")
    elif area_hectares < 1:
        recommendations.append("Medium area - suitable for community gardens or small woodlots")
    elif area_hectares < 10:
        recommendations.append("Large area - suitable for commercial forestry or restoration")
    else:
        recommendations.append("Very large area - consider mixed-species planting for biodiversity")
        recommendations.append("Plan for fire breaks and access roads")

    if area_hectares > 5:
        recommendations.append("Consider phased planting over multiple years")
    return recommendations


def format_area(area_hectares: float) -> str:
    if area_hectares < 1:
        return f"{area_hectares * 10_000:.0f} m²"
    if area_hectares < 100:
        return f"{area_hectares:.2f} hectares"
    return f"{area_hectares / 100:.2f} km²"
