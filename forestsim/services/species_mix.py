"""Blend per-species base rates into one set of mix-level rates."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from forestsim.config import settings
from forestsim.models import catalog
from forestsim.models.schemas import MixWarning, MixWeighting, SpeciesMixEntry, SpeciesMixItem
from forestsim.services.validation import InvalidParametersError

logger = logging.getLogger(__name__)


class UnknownSpeciesError(InvalidParametersError):
    pass


@dataclass(frozen=True)
class MixAggregate:
    carbon_base: float
    biodiversity_base: float
    resilience_base: float
    weighting: MixWeighting
    total_percentage: float


@dataclass(frozen=True)
class MixValidation:
    total_percentage: float
    is_valid: bool
    uses_fallback: bool


def resolve_mix(items: Sequence[SpeciesMixItem]) -> list[SpeciesMixEntry]:
    """Look up catalog species for request items, preserving order."""
    entries = []
    for item in items:
        species = catalog.get_species(item.species_id)
        if species is None:
            raise UnknownSpeciesError(f"Unknown species: {item.species_id}")
        entries.append(SpeciesMixEntry(species=species, percentage=item.percentage))
    return entries


def total_percentage(mix: Sequence[SpeciesMixEntry]) -> float:
    return sum(e.percentage or 0.0 for e in mix)


def _sums_to_hundred(total: float) -> bool:
    return abs(total - 100.0) <= settings.mix_percentage_tolerance


def validate_mix(mix: Sequence[SpeciesMixEntry]) -> MixValidation:
    total = total_percentage(mix)
    is_valid = len(mix) > 0 and _sums_to_hundred(total)
    return MixValidation(
        total_percentage=total,
        is_valid=is_valid,
        uses_fallback=len(mix) > 1 and not _sums_to_hundred(total),
    )


def mix_warning(mix: Sequence[SpeciesMixEntry]) -> Optional[MixWarning]:
    """Warning for callers when a multi-species mix falls back to equal weights."""
    validation = validate_mix(mix)
    if not validation.uses_fallback:
        return None
    return MixWarning(
        total_percentage=validation.total_percentage,
        message=(
            f"Species percentages sum to {validation.total_percentage:g}%, not 100%; "
            f"using an equal distribution across {len(mix)} species"
        ),
    )


def aggregate(mix: Sequence[SpeciesMixEntry]) -> MixAggregate:
    """Blended carbon, biodiversity and resilience base rates for a mix.

    One species uses its own rates. Several species are weighted by their
    percentages when those sum to 100, otherwise averaged equally.
    """
    total = total_percentage(mix)

    if not mix:
        return MixAggregate(0.0, 0.0, 0.0, MixWeighting.EMPTY, total)

    if len(mix) == 1:
        s = mix[0].species
        return MixAggregate(
            s.carbon_sequestration, s.biodiversity_value, s.resilience_score,
            MixWeighting.SINGLE, total,
        )

    if _sums_to_hundred(total):
        carbon = biodiversity = resilience = 0.0
        for entry in mix:
            weight = (entry.percentage or 0.0) / 100
            carbon += entry.species.carbon_sequestration * weight
            biodiversity += entry.species.biodiversity_value * weight
            resilience += entry.species.resilience_score * weight
        return MixAggregate(carbon, biodiversity, resilience, MixWeighting.WEIGHTED, total)

    logger.info("Mix percentages sum to %.2f, using equal weights for %d species", total, len(mix))
    n = len(mix)
    return MixAggregate(
        sum(e.species.carbon_sequestration for e in mix) / n,
        sum(e.species.biodiversity_value for e in mix) / n,
        sum(e.species.resilience_score for e in mix) / n,
        MixWeighting.EQUAL,
        total,
    )


def diversity_score(species_count: int) -> int:
    """1 for a monoculture up to 5 for five or more species."""
    return max(1, min(5, species_count))


def preset_mix(preset_key: str) -> list[SpeciesMixEntry]:
    preset = catalog.ECOLOGICAL_MIXES.get(preset_key)
    if preset is None:
        raise InvalidParametersError(f"Unknown mix preset: {preset_key}")
    return resolve_mix(
        [SpeciesMixItem(species_id=sid, percentage=pct) for sid, pct in preset["items"]]
    )


def recommended_preset(latitude: Optional[float] = None, climate: Optional[str] = None) -> str:
    if latitude is None and not climate:
        return "temperate"
    abs_lat = abs(latitude or 0.0)
    if abs_lat > 60:
        return "boreal"
    if abs_lat < 23.5:
        return "tropical"
    if climate and "urban" in climate.lower():
        return "urban"
    return "temperate"
