"""Impact calculator: folds growth and climate factors over blended base rates.

Planting and clear-cutting differ only in the trajectory policy picked at the
start of a call. Planting grows seedlings and improves air, water and land;
clear-cutting removes an established stand, so the same metrics degrade.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from functools import partial
from typing import Callable, Optional, Sequence

from forestsim.config import settings
from forestsim.models.schemas import (
    EnvironmentalObservation, ImpactResult, LandUseImpact, Point, SimulationMode,
    SpeciesMixEntry, YearlyImpact,
)
from forestsim.services import climate
from forestsim.services.growth import (
    GrowthTrack, age_growth_factor, annual_carbon_with_growth, growth_factor,
)
from forestsim.services.species_mix import aggregate
from forestsim.services.validation import (
    validate_point, validate_tree_age, validate_years,
)

logger = logging.getLogger(__name__)

MAX_SCORE = 5.0
MAX_PERCENT = 95.0


@dataclass(frozen=True)
class TrajectoryPolicy:
    mode: SimulationMode
    # Carbon fraction by tree age
    carbon_curve: Callable[[int], float]
    # True when the stand already exists and its age drives the carbon curve
    established_stand: bool

    # (upper area in ha, starting value); first band with area < upper wins
    air_quality_start: tuple[tuple[float, float], ...]
    air_quality_slope: float
    air_quality_bounds: tuple[float, float]
    water_slope: float

    # +1 for gains, -1 for losses
    sign: int
    social_base: float
    social_diversity: float
    social_time: float
    social_area: float

    land_use_cap: float
    erosion_area: float
    soil_time: float
    habitat_area: float
    water_quality_time: float


PLANTING = TrajectoryPolicy(
    mode=SimulationMode.PLANTING,
    carbon_curve=partial(growth_factor, GrowthTrack.CARBON),
    established_stand=False,
    air_quality_start=((math.inf, 60.0),),
    air_quality_slope=0.7,
    air_quality_bounds=(0.0, MAX_PERCENT),
    water_slope=0.3,
    sign=1,
    social_base=3.5,
    social_diversity=0.2,
    social_time=0.02,
    social_area=0.1,
    land_use_cap=95.0,
    erosion_area=0.5,
    soil_time=1.5,
    habitat_area=2.0,
    water_quality_time=1.2,
)

CLEAR_CUTTING = TrajectoryPolicy(
    mode=SimulationMode.CLEAR_CUTTING,
    carbon_curve=age_growth_factor,
    established_stand=True,
    air_quality_start=((10.0, -10.0), (100.0, -20.0), (math.inf, -30.0)),
    air_quality_slope=-1.0,
    air_quality_bounds=(-80.0, 0.0),
    water_slope=-0.5,
    sign=-1,
    social_base=2.0,
    social_diversity=0.1,
    social_time=0.01,
    social_area=0.05,
    land_use_cap=80.0,
    erosion_area=0.8,
    soil_time=2.0,
    habitat_area=3.0,
    water_quality_time=1.8,
)

POLICIES = {p.mode: p for p in (PLANTING, CLEAR_CUTTING)}


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def water_retention_base(latitude: float, precipitation: Optional[float]) -> float:
    abs_lat = abs(latitude)
    base = 85.0 if abs_lat < 30 else 75.0 if abs_lat < 60 else 70.0
    if precipitation:
        base += precipitation / 100
    return base


def water_retention(
    latitude: float, precipitation: Optional[float], years: int, policy: TrajectoryPolicy = PLANTING
) -> float:
    value = water_retention_base(latitude, precipitation) + years * policy.water_slope
    return _clamp(value, 0.0, MAX_PERCENT)


def air_quality(years: int, area_hectares: Optional[float], policy: TrajectoryPolicy = PLANTING) -> float:
    area = area_hectares or 0.0
    start = next(value for upper, value in policy.air_quality_start if area < upper)
    low, high = policy.air_quality_bounds
    return _clamp(start + years * policy.air_quality_slope, low, high)


def social_impact(
    species_count: int, years: int, area_hectares: Optional[float], policy: TrajectoryPolicy = PLANTING
) -> float:
    """Community benefit score on a 1-5 scale."""
    adjustment = (
        min(species_count * policy.social_diversity, 1.0)
        + min(years * policy.social_time, 1.0)
        + min((area_hectares or 0.0) * policy.social_area, 1.0)
    )
    return _clamp(policy.social_base + policy.sign * adjustment, 1.0, MAX_SCORE)


def land_use_impact(
    years: int, area_hectares: Optional[float], policy: TrajectoryPolicy = PLANTING
) -> LandUseImpact:
    area = area_hectares or 0.0
    cap = policy.land_use_cap

    def scaled(amount: float) -> float:
        return policy.sign * min(cap, amount)

    return LandUseImpact(
        erosion=scaled(area * policy.erosion_area),
        soil_quality=scaled(years * policy.soil_time),
        habitat=scaled(area * policy.habitat_area),
        water_quality=scaled(years * policy.water_quality_time),
    )


def _stand_age(policy: TrajectoryPolicy, year: int, tree_age: int) -> int:
    if not policy.established_stand:
        return year
    return min(tree_age + year - 1, settings.max_tree_age)


def compute_impact(
    location: Point,
    mix: Sequence[SpeciesMixEntry],
    observation: Optional[EnvironmentalObservation],
    years: int,
    mode: SimulationMode = SimulationMode.PLANTING,
    tree_age: int = 20,
    area_hectares: Optional[float] = None,
) -> ImpactResult:
    """Year-by-year and cumulative impact of a species mix at a location.

    Raises InvalidParametersError for out-of-range coordinates, years or
    tree age. Missing observation fields fall back to regional defaults.
    """
    validate_point(location)
    validate_years(years)
    validate_tree_age(tree_age)
    policy = POLICIES[SimulationMode(mode)]

    blended = aggregate(mix)
    carbon_base = blended.carbon_base
    biodiversity_base = blended.biodiversity_base
    resilience_base = blended.resilience_base

    soil_carbon = observation.soil_carbon if observation else None
    precipitation = observation.precipitation if observation else None
    if soil_carbon:
        carbon_base += soil_carbon / 10
    if precipitation:
        resilience_base += precipitation / 1000

    carbon_base = max(0.0, carbon_base)
    biodiversity_base = _clamp(biodiversity_base, 0.0, MAX_SCORE)
    resilience_base = _clamp(resilience_base, 0.0, MAX_SCORE)

    current_temp, current_precip, used_regional = climate.current_conditions(
        observation, location.lat
    )
    if used_regional:
        logger.info("Using regional climate estimates for lat %.2f", location.lat)
    trend = climate.estimate_trend(observation)

    yearly = []
    total_carbon = total_biodiversity = total_resilience = 0.0
    for year in range(1, years + 1):
        prediction = climate.predict_climate(current_temp, current_precip, trend, year)
        modifier = prediction.growth_modifier

        carbon = carbon_base * policy.carbon_curve(_stand_age(policy, year, tree_age)) * modifier
        biodiversity = biodiversity_base * growth_factor(GrowthTrack.BIODIVERSITY, year) * modifier
        resilience = resilience_base * growth_factor(GrowthTrack.RESILIENCE, year) * modifier

        total_carbon += carbon
        total_biodiversity += biodiversity
        total_resilience += resilience
        yearly.append(YearlyImpact(
            year=year,
            carbon=carbon,
            cumulative_carbon=total_carbon,
            biodiversity=biodiversity,
            resilience=resilience,
            climate_modifier=modifier,
            predicted_temperature=prediction.temperature,
            predicted_precipitation=prediction.precipitation,
        ))

    immediate_release = 0.0
    if policy.established_stand:
        # Carbon accumulated by the stand up to its current age
        immediate_release = sum(
            carbon_base * age_growth_factor(age) for age in range(1, tree_age + 1)
        )

    horizon_age = _stand_age(policy, years, tree_age)

    return ImpactResult(
        mode=policy.mode,
        years=years,
        carbon_base=carbon_base,
        annual_carbon=max(0.0, yearly[0].carbon),
        annual_carbon_at_horizon=max(0.0, annual_carbon_with_growth(carbon_base, horizon_age)),
        total_carbon=max(0.0, total_carbon + immediate_release),
        immediate_carbon_release=immediate_release,
        biodiversity_impact=biodiversity_base,
        forest_resilience=resilience_base,
        average_biodiversity=_clamp(total_biodiversity / years, 0.0, MAX_SCORE),
        average_resilience=_clamp(total_resilience / years, 0.0, MAX_SCORE),
        water_retention=water_retention(location.lat, precipitation, years, policy),
        air_quality_improvement=air_quality(years, area_hectares, policy),
        social_impact=social_impact(len(mix), years, area_hectares, policy),
        land_use=land_use_impact(years, area_hectares, policy),
        temperature_trend=trend.temperature_slope,
        precipitation_trend=trend.precipitation_slope,
        used_regional_climate=used_regional,
        yearly=yearly,
    )
