"""Climate trend extrapolation and the growth modifier derived from it.

Trends are ordinary-least-squares slopes over yearly means. With fewer than
MIN_HISTORY_YEARS of history a fixed warming/wetting trend is used instead and
growth is left unmodified.
"""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from forestsim.models.schemas import EnvironmentalObservation
from forestsim.services.validation import InvalidParametersError


MIN_HISTORY_YEARS = 3

# Fallback trends when history is insufficient
FALLBACK_TEMP_TREND = 0.02      # °C per year
FALLBACK_PRECIP_TREND = 0.01    # compounding fraction per year

TEMP_SENSITIVITY = 0.02         # growth change per °C
PRECIP_SENSITIVITY = 0.5        # share of relative precipitation change

MODIFIER_MIN = 0.5
MODIFIER_MAX = 2.0


@dataclass(frozen=True)
class RegionalClimate:
    zone: str
    temperature: float
    precipitation: float


# (upper |lat|, zone, °C, mm)
CLIMATE_BANDS = (
    (23.5, "tropical", 25.0, 1500.0),
    (45.0, "temperate", 15.0, 800.0),
    (66.5, "boreal", 5.0, 400.0),
)
ARCTIC = RegionalClimate("arctic", -5.0, 200.0)


@dataclass(frozen=True)
class ClimateTrend:
    temperature_slope: float
    precipitation_slope: float
    sufficient_history: bool


@dataclass(frozen=True)
class ClimatePrediction:
    temperature: float
    precipitation: float
    growth_modifier: float


def regional_climate(latitude: float) -> RegionalClimate:
    abs_lat = abs(latitude)
    for upper, zone, temp, precip in CLIMATE_BANDS:
        if abs_lat < upper:
            return RegionalClimate(zone, temp, precip)
    return ARCTIC


def linear_trend(years: Sequence[float], values: Sequence[float]) -> float:
    """OLS slope of ``values`` over ``years``; 0.0 when it is undefined."""
    if len(years) != len(values):
        raise InvalidParametersError("Trend series must have the same length")
    n = len(years)
    if n < 2:
        return 0.0

    x = np.asarray(years, dtype=np.float64)
    y = np.asarray(values, dtype=np.float64)
    denominator = n * np.sum(x * x) - np.sum(x) ** 2
    if denominator == 0:
        return 0.0
    return float((n * np.sum(x * y) - np.sum(x) * np.sum(y)) / denominator)


def estimate_trend(observation: Optional[EnvironmentalObservation]) -> ClimateTrend:
    history = observation.history if observation else ()
    if len(history) < MIN_HISTORY_YEARS:
        return ClimateTrend(FALLBACK_TEMP_TREND, FALLBACK_PRECIP_TREND, False)

    years = [h.year for h in history]
    return ClimateTrend(
        temperature_slope=linear_trend(years, [h.temperature for h in history]),
        precipitation_slope=linear_trend(years, [h.precipitation for h in history]),
        sufficient_history=True,
    )


def current_conditions(
    observation: Optional[EnvironmentalObservation], latitude: float
) -> tuple[float, float, bool]:
    """Current (temperature, precipitation), substituting regional defaults.

    The third element is True when any default was used.
    """
    regional = regional_climate(latitude)
    temp = observation.temperature if observation else None
    precip = observation.precipitation if observation else None
    used_regional = temp is None or precip is None
    if temp is None:
        temp = regional.temperature
    if precip is None:
        precip = regional.precipitation
    return temp, precip, used_regional


def growth_modifier(
    predicted_temp: float,
    predicted_precip: float,
    current_temp: float,
    current_precip: float,
) -> float:
    """Geometric mean of temperature and precipitation effects, clamped to [0.5, 2.0]."""
    temp_modifier = 1.0 + (predicted_temp - current_temp) * TEMP_SENSITIVITY

    if current_precip > 0:
        precip_change = (predicted_precip - current_precip) / current_precip
        precip_modifier = 1.0 + precip_change * PRECIP_SENSITIVITY
    else:
        precip_modifier = 1.0

    product = temp_modifier * precip_modifier
    if math.isnan(product) or product <= 0:
        return MODIFIER_MIN
    return max(MODIFIER_MIN, min(MODIFIER_MAX, math.sqrt(product)))


def _compound(value: float, rate: float, years: int) -> float:
    """``value * (1 + rate) ** years``, saturating at the largest finite float."""
    try:
        factor = (1 + rate) ** years
    except OverflowError:
        factor = math.copysign(sys.float_info.max, (1 + rate) if years % 2 else 1.0)
    result = value * factor
    return max(-sys.float_info.max, min(sys.float_info.max, result))


def predict_climate(
    current_temp: float,
    current_precip: float,
    trend: ClimateTrend,
    year: int,
) -> ClimatePrediction:
    """Extrapolate conditions ``year`` years ahead of the current snapshot."""
    predicted_temp = current_temp + trend.temperature_slope * year
    predicted_precip = _compound(current_precip, trend.precipitation_slope, year)

    if not trend.sufficient_history:
        return ClimatePrediction(predicted_temp, predicted_precip, 1.0)

    modifier = growth_modifier(predicted_temp, predicted_precip, current_temp, current_precip)
    return ClimatePrediction(predicted_temp, predicted_precip, modifier)
