from typing import Optional

from fastapi import APIRouter, HTTPException

from forestsim.models import catalog
from forestsim.models.schemas import SpeciesCategory, TreeSpecies
from forestsim.services import species_mix
from forestsim.services.validation import InvalidParametersError, validate_latitude

router = APIRouter(tags=["species"])


@router.get("/api/species", response_model=list[TreeSpecies])
async def list_species(category: Optional[SpeciesCategory] = None, lat: Optional[float] = None):
    if lat is not None:
        try:
            validate_latitude(lat)
        except InvalidParametersError as e:
            raise HTTPException(400, str(e))
        species = catalog.species_for_latitude(lat)
        if category is not None:
            species = [s for s in species if s.category == category]
        return species
    return catalog.list_species(category)


@router.get("/api/species/{species_id}", response_model=TreeSpecies)
async def get_species(species_id: str):
    species = catalog.get_species(species_id)
    if not species:
        raise HTTPException(404, "Species not found")
    return species


@router.get("/api/mixes")
async def list_mixes(lat: Optional[float] = None):
    """Ecological mix presets, with the one recommended for ``lat`` flagged."""
    recommended = species_mix.recommended_preset(lat) if lat is not None else None
    mixes = []
    for key, preset in catalog.ECOLOGICAL_MIXES.items():
        entries = species_mix.preset_mix(key)
        mixes.append({
            "key": key,
            "name": preset["name"],
            "description": preset["description"],
            "items": [
                {"species_id": e.species.id, "name": e.species.name, "percentage": e.percentage}
                for e in entries
            ],
            "diversity_score": species_mix.diversity_score(len(entries)),
            "recommended": key == recommended,
        })
    return mixes
