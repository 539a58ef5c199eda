"""Tree growth curves: fraction of the mature annual rate reached by elapsed year."""

from __future__ import annotations

from enum import Enum

from forestsim.config import settings
from forestsim.services.validation import InvalidParametersError


class GrowthTrack(str, Enum):
    CARBON = "carbon"
    BIODIVERSITY = "biodiversity"
    # Resilience follows the biodiversity curve
    RESILIENCE = "resilience"


PLATEAU = 0.95

# Years 1-6; year 7 onward sits on the plateau
CARBON_CURVE = (0.05, 0.15, 0.30, 0.50, 0.70, 0.85)
BIODIVERSITY_CURVE = (0.10, 0.25, 0.45, 0.65, 0.80, 0.90)

_CURVES = {
    GrowthTrack.CARBON: CARBON_CURVE,
    GrowthTrack.BIODIVERSITY: BIODIVERSITY_CURVE,
    GrowthTrack.RESILIENCE: BIODIVERSITY_CURVE,
}

# Age bands for standing forests (clear-cutting): (upper age, factor)
AGE_BANDS = (
    (20, 0.95),   # mature
    (50, 0.90),   # older mature
)
VERY_OLD_FACTOR = 0.85


def growth_factor(track: GrowthTrack, year: int) -> float:
    """Fraction of mature rate achieved in elapsed ``year`` (1-based)."""
    if year <= 0:
        raise InvalidParametersError(f"Growth year must be >= 1, got {year}")
    curve = _CURVES[GrowthTrack(track)]
    if year <= len(curve):
        return curve[year - 1]
    return PLATEAU


def age_growth_factor(age: int) -> float:
    """Relative sequestration efficiency of a tree of the given age.

    Young trees follow the carbon curve; efficiency declines slightly once
    trees pass 20 and again past 50 as they senesce.
    """
    if not 1 <= age <= settings.max_tree_age:
        raise InvalidParametersError(
            f"Tree age must be between 1 and {settings.max_tree_age}, got {age}"
        )
    if age <= len(CARBON_CURVE):
        return CARBON_CURVE[age - 1]
    for upper, factor in AGE_BANDS:
        if age <= upper:
            return factor
    return VERY_OLD_FACTOR


def annual_carbon_with_growth(mature_rate: float, year: int) -> float:
    """Carbon sequestered in ``year`` under the four-phase maturation curve.

    Establishment (1-3): 5/10/15%. Rapid growth (4-10): 15% -> 80%.
    Maturation (11-20): 80% -> 95%. Mature (20+): 95% -> 100%.
    """
    if year <= 0:
        raise InvalidParametersError(f"Growth year must be >= 1, got {year}")
    if year <= 3:
        fraction = 0.05 + (year - 1) * 0.05
    elif year <= 10:
        fraction = 0.15 + (year - 3) / 7 * 0.65
    elif year <= 20:
        fraction = 0.80 + (year - 10) / 10 * 0.15
    else:
        fraction = 0.95 + min((year - 20) / 10, 0.05)
    return mature_rate * fraction
