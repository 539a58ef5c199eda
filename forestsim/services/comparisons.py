"""Relatable carbon equivalents and a short narrative for a simulation.

Produces ready-to-paste text for reports and social media.
"""

from __future__ import annotations

from typing import Optional

from forestsim.models.schemas import ImpactResult, SimulationMode

CAR_KG_PER_YEAR = 4600.0          # average passenger car
FLIGHT_NY_LONDON_KG = 986.0       # one round trip
HOUSEHOLD_KG_PER_YEAR = 7500.0    # average US household electricity

MIN_RATIO = 0.1

# (kg CO2 per unit, singular template, plural template)
COMPARISONS = (
    (CAR_KG_PER_YEAR, "{} year of average car emissions", "{} years of average car emissions"),
    (FLIGHT_NY_LONDON_KG, "{} round-trip flight (NY-London)", "{} round-trip flights (NY-London)"),
    (HOUSEHOLD_KG_PER_YEAR, "{} year of average household electricity",
     "{} years of average household electricity"),
)


def compare(total_carbon_kg: float) -> list[str]:
    """Express a carbon mass as cars, flights and households, in that order."""
    results = []
    for unit_kg, singular, plural in COMPARISONS:
        ratio = total_carbon_kg / unit_kg
        if ratio < MIN_RATIO:
            continue
        value = f"{ratio:.1f}"
        results.append((singular if value == "1.0" else plural).format(value))
    return results


def _format_carbon(kg: float) -> str:
    if kg >= 1000:
        return f"{kg / 1000:.1f} tonnes"
    return f"{kg:.0f} kg"


def _years(n: int) -> str:
    return f"{n} year" if n == 1 else f"{n} years"


def summarize(
    impact: ImpactResult,
    comparisons: list[str],
    latitude: float,
    longitude: float,
    total_trees: Optional[int] = None,
) -> str:
    """Single-paragraph summary suitable for reports and social posts."""
    lat_dir = "S" if latitude < 0 else "N"
    lon_dir = "W" if longitude < 0 else "E"
    location = f"{abs(latitude):.1f}°{lat_dir}, {abs(longitude):.1f}°{lon_dir}"
    carbon = _format_carbon(impact.total_carbon)
    trees = f"{total_trees:,} trees" if total_trees else "a forest"

    if impact.mode == SimulationMode.CLEAR_CUTTING:
        parts = [
            f"Clearing {trees} near {location} would release or forgo approximately "
            f"{carbon} of CO₂ over {_years(impact.years)}.",
            f"Air quality would fall by {abs(impact.air_quality_improvement):.0f}% "
            f"and water retention would drop to {impact.water_retention:.0f}%.",
        ]
    else:
        parts = [
            f"Planting {trees} near {location} could sequester approximately "
            f"{carbon} of CO₂ over {_years(impact.years)}.",
            f"Biodiversity averages {impact.average_biodiversity:.1f}/5 and resilience "
            f"{impact.average_resilience:.1f}/5 over the period.",
        ]

    if comparisons:
        parts.append(f"This equals {' or '.join(comparisons[:2])}.")
    return " ".join(parts)
