from fastapi import APIRouter, Depends, HTTPException

from forestsim.models.schemas import (
    GeocodeResult, PlantingRequest, PlantingResponse, SimulationRequest, SimulationResponse,
)
from forestsim.services import planting
from forestsim.services.environment import EnvironmentalDataProvider
from forestsim.services.geocoder import place_to_location
from forestsim.services.simulator import run_simulation
from forestsim.services.species_mix import UnknownSpeciesError, resolve_mix
from forestsim.services.validation import InvalidParametersError, validate_region

router = APIRouter(tags=["simulation"])

_provider = EnvironmentalDataProvider()


def get_provider() -> EnvironmentalDataProvider:
    return _provider


@router.post("/api/simulate", response_model=SimulationResponse)
async def simulate(
    request: SimulationRequest,
    provider: EnvironmentalDataProvider = Depends(get_provider),
):
    try:
        return await run_simulation(request, provider)
    except UnknownSpeciesError as e:
        raise HTTPException(404, str(e))
    except InvalidParametersError as e:
        raise HTTPException(400, str(e))


@router.post("/api/planting", response_model=PlantingResponse)
async def plan_planting(request: PlantingRequest):
    try:
        region = validate_region(request.region)
        mix = resolve_mix(request.species)
    except UnknownSpeciesError as e:
        raise HTTPException(404, str(e))
    except InvalidParametersError as e:
        raise HTTPException(400, str(e))

    plan = planting.plan_planting(region, mix, request.spacing)
    return PlantingResponse(
        plan=plan,
        timeline=planting.planting_timeline(plan.total_trees),
        area_label=planting.format_area(plan.area_hectares),
        recommendations=planting.planting_recommendations(plan.area_hectares),
    )


@router.get("/api/geocode", response_model=GeocodeResult)
async def geocode(q: str):
    result = place_to_location(q)
    if not result:
        raise HTTPException(404, "Place not found")
    return result
