"""Orchestrates a full simulation: location, observation, impact, planting plan."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from forestsim.models.schemas import (
    GeocodeResult, Point, RegionBounds, SimulationMode, SimulationRequest, SimulationResponse,
)
from forestsim.services import comparisons, planting
from forestsim.services.environment import EnvironmentalDataProvider
from forestsim.services.geocoder import place_to_location
from forestsim.services.impact import compute_impact
from forestsim.services.species_mix import mix_warning, resolve_mix
from forestsim.services.validation import (
    InvalidParametersError, validate_point, validate_region, validate_tree_age, validate_years,
)

logger = logging.getLogger(__name__)


def resolve_location(
    request: SimulationRequest,
    geocode: Callable[[str], Optional[GeocodeResult]] = place_to_location,
) -> tuple[Point, Optional[RegionBounds]]:
    """Reduce the request to an analysis point; regions use their centroid."""
    if request.region:
        region = validate_region(request.region)
        return region.centroid, region
    if request.point:
        return validate_point(request.point), None
    if request.place_name:
        result = geocode(request.place_name)
        if result is None:
            raise InvalidParametersError(f"Could not geocode place: {request.place_name}")
        if result.region:
            region = validate_region(result.region)
            return region.centroid, region
        return validate_point(result.location), None
    raise InvalidParametersError("Provide a point, a region or a place name")


async def run_simulation(
    request: SimulationRequest,
    provider: EnvironmentalDataProvider,
    geocode: Callable[[str], Optional[GeocodeResult]] = place_to_location,
) -> SimulationResponse:
    """Validate, gather observations, and compute every output for one request.

    Raises InvalidParametersError before any fetch or computation when the
    request is out of range.
    """
    validate_years(request.years)
    validate_tree_age(request.tree_age)
    location, region = resolve_location(request, geocode)
    mix = resolve_mix(request.species)

    observation = request.observation
    if observation is None:
        observation = await provider.fetch(location.lat, location.lon)

    area = planting.region_area(region) if region else None
    logger.info(
        "Simulating %s of %d species at %.4f, %.4f for %d years",
        request.mode.value, len(mix), location.lat, location.lon, request.years,
    )
    impact = compute_impact(
        location, mix, observation, request.years,
        mode=request.mode, tree_age=request.tree_age, area_hectares=area,
    )

    plan = timeline = None
    recommendations = []
    if region and mix:
        plan = planting.plan_planting(region, mix, request.spacing)
        if request.mode == SimulationMode.PLANTING:
            timeline = planting.planting_timeline(plan.total_trees)
            recommendations = planting.planting_recommendations(plan.area_hectares)

    carbon_comparisons = comparisons.compare(impact.total_carbon)
    narrative = comparisons.summarize(
        impact, carbon_comparisons, location.lat, location.lon,
        total_trees=plan.total_trees if plan else None,
    )

    warning = mix_warning(mix)
    if warning:
        logger.info(warning.message)

    return SimulationResponse(
        location=location,
        region=region,
        calculation_mode=request.calculation_mode,
        impact=impact,
        planting=plan,
        timeline=timeline,
        recommendations=recommendations,
        comparisons=carbon_comparisons,
        narrative=narrative,
        observation=observation,
        warnings=[warning] if warning else [],
    )
