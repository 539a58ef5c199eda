"""Static tree species catalog and ecological mix presets, loaded once."""

from __future__ import annotations

from typing import Optional

from forestsim.models.schemas import SpeciesCategory, TreeSpecies
from forestsim.services.planting import recommended_spacing


def _species(id, name, scientific_name, category, carbon, biodiversity, resilience, zones):
    return TreeSpecies(
        id=id,
        name=name,
        scientific_name=scientific_name,
        category=category,
        carbon_sequestration=carbon,
        biodiversity_value=biodiversity,
        resilience_score=resilience,
        climate_zones=zones,
        spacing=recommended_spacing(name),
    )


_C = SpeciesCategory

_SPECIES = [
    _species("oak", "Oak", "Quercus robur", _C.DECIDUOUS, 22.0, 5, 4, ("temperate",)),
    _species("maple", "Maple", "Acer saccharum", _C.DECIDUOUS, 18.0, 4, 4, ("temperate",)),
    _species("birch", "Birch", "Betula pendula", _C.DECIDUOUS, 12.0, 3, 3, ("temperate", "boreal")),
    _species("willow", "Willow", "Salix alba", _C.DECIDUOUS, 14.0, 4, 3, ("temperate",)),
    _species("beech", "Beech", "Fagus sylvatica", _C.DECIDUOUS, 20.0, 4, 4, ("temperate",)),
    _species("pine", "Pine", "Pinus sylvestris", _C.CONIFEROUS, 15.0, 3, 4, ("temperate", "boreal")),
    _species("spruce", "Spruce", "Picea abies", _C.CONIFEROUS, 16.0, 3, 3, ("boreal", "temperate")),
    _species("cedar", "Cedar", "Cedrus libani", _C.CONIFEROUS, 19.0, 3, 5, ("temperate", "mediterranean")),
    _species("sequoia", "Giant Sequoia", "Sequoiadendron giganteum", _C.CONIFEROUS, 45.0, 3, 5, ("temperate",)),
    _species("larch", "Larch", "Larix decidua", _C.BOREAL, 13.0, 3, 4, ("boreal",)),
    _species("eucalyptus", "Eucalyptus", "Eucalyptus globulus", _C.TROPICAL, 25.0, 2, 3, ("tropical", "subtropical")),
    _species("mangrove", "Red Mangrove", "Rhizophora mangle", _C.TROPICAL, 30.0, 5, 4, ("tropical",)),
    _species("mahogany", "Mahogany", "Swietenia macrophylla", _C.TROPICAL, 28.0, 4, 4, ("tropical",)),
    _species("teak", "Teak", "Tectona grandis", _C.TROPICAL, 24.0, 3, 4, ("tropical",)),
    _species("olive", "Olive", "Olea europaea", _C.MEDITERRANEAN, 11.0, 3, 5, ("mediterranean",)),
    _species("cork-oak", "Cork Oak", "Quercus suber", _C.MEDITERRANEAN, 17.0, 5, 5, ("mediterranean",)),
    _species("acacia", "Umbrella Thorn Acacia", "Vachellia tortilis", _C.ARID, 9.0, 3, 5, ("arid", "tropical")),
    _species("baobab", "Baobab", "Adansonia digitata", _C.ARID, 20.0, 4, 5, ("arid", "tropical")),
    _species("camphor", "Camphor Tree", "Cinnamomum camphora", _C.SUBTROPICAL, 16.0, 3, 4, ("subtropical",)),
]

CATALOG: dict[str, TreeSpecies] = {s.id: s for s in _SPECIES}


ECOLOGICAL_MIXES = {
    "temperate": {
        "name": "Temperate Forest Mix",
        "description": "Classic temperate forest with high biodiversity",
        "items": [("oak", 40), ("maple", 30), ("birch", 20), ("pine", 10)],
    },
    "boreal": {
        "name": "Boreal Forest Mix",
        "description": "Northern forest adapted to cold climates",
        "items": [("spruce", 60), ("pine", 25), ("birch", 15)],
    },
    "tropical": {
        "name": "Tropical Forest Mix",
        "description": "Diverse tropical species for maximum biodiversity",
        "items": [("eucalyptus", 50), ("mangrove", 30), ("cedar", 20)],
    },
    "urban": {
        "name": "Urban Forest Mix",
        "description": "City-adapted species with aesthetic appeal",
        "items": [("maple", 40), ("oak", 30), ("willow", 20), ("pine", 10)],
    },
    "carbon": {
        "name": "Carbon Focus Mix",
        "description": "Optimized for maximum carbon sequestration",
        "items": [("eucalyptus", 60), ("sequoia", 25), ("oak", 15)],
    },
    "biodiversity": {
        "name": "Biodiversity Focus Mix",
        "description": "Maximum species diversity for ecosystem health",
        "items": [("oak", 25), ("maple", 25), ("birch", 20), ("willow", 15), ("pine", 15)],
    },
}


def get_species(species_id: str) -> Optional[TreeSpecies]:
    return CATALOG.get(species_id)


def list_species(category: Optional[SpeciesCategory] = None) -> list[TreeSpecies]:
    if category is None:
        return list(CATALOG.values())
    return [s for s in CATALOG.values() if s.category == category]


def species_for_latitude(latitude: float) -> list[TreeSpecies]:
    """Species whose climate zones suit the latitude band."""
    abs_lat = abs(latitude)
    if abs_lat < 23.5:
        zones = {"tropical"}
    elif abs_lat < 45:
        zones = {"temperate", "mediterranean"}
    else:
        zones = {"boreal", "temperate"}
    return [s for s in CATALOG.values() if zones.intersection(s.climate_zones)]
