"""Tests for climate trend extrapolation and the growth modifier."""

import math

import pytest

from forestsim.models.schemas import EnvironmentalObservation, HistoricalClimatePoint
from forestsim.services import climate
from forestsim.services.validation import InvalidParametersError


def _history(temps, precips, start=2014):
    return tuple(
        HistoricalClimatePoint(year=start + i, temperature=t, precipitation=p)
        for i, (t, p) in enumerate(zip(temps, precips))
    )


class TestLinearTrend:
    def test_perfect_line(self):
        assert climate.linear_trend([2000, 2001, 2002], [10, 11, 12]) == pytest.approx(1.0)

    def test_falling_trend(self):
        assert climate.linear_trend([1, 2, 3, 4], [8, 6, 4, 2]) == pytest.approx(-2.0)

    def test_single_point_is_flat(self):
        assert climate.linear_trend([2020], [14.0]) == 0.0

    def test_empty_is_flat(self):
        assert climate.linear_trend([], []) == 0.0

    def test_zero_denominator_is_flat(self):
        assert climate.linear_trend([2020, 2020, 2020], [1, 2, 3]) == 0.0

    def test_mismatched_lengths_rejected(self):
        with pytest.raises(InvalidParametersError):
            climate.linear_trend([2020, 2021], [1.0])


class TestRegionalClimate:
    @pytest.mark.parametrize("lat,zone,temp,precip", [
        (0, "tropical", 25, 1500),
        (-23.0, "tropical", 25, 1500),
        (40, "temperate", 15, 800),
        (-30, "temperate", 15, 800),
        (50, "boreal", 5, 400),
        (70, "arctic", -5, 200),
        (-90, "arctic", -5, 200),
    ])
    def test_latitude_bands(self, lat, zone, temp, precip):
        regional = climate.regional_climate(lat)
        assert regional.zone == zone
        assert regional.temperature == temp
        assert regional.precipitation == precip

    def test_current_conditions_prefers_observation(self):
        obs = EnvironmentalObservation(temperature=12.0, precipitation=3.0)
        assert climate.current_conditions(obs, 0) == (12.0, 3.0, False)

    def test_current_conditions_fills_gaps(self):
        obs = EnvironmentalObservation(temperature=12.0)
        assert climate.current_conditions(obs, 0) == (12.0, 1500.0, True)
        assert climate.current_conditions(None, 50) == (5.0, 400.0, True)


class TestGrowthModifier:
    def test_no_change_is_neutral(self):
        assert climate.growth_modifier(15, 1000, 15, 1000) == pytest.approx(1.0)

    def test_warming_increases_growth(self):
        assert climate.growth_modifier(16, 1000, 15, 1000) == pytest.approx(1.02 ** 0.5)

    def test_clamped_high(self):
        assert climate.growth_modifier(500, 1e9, 15, 1000) == 2.0

    def test_clamped_low(self):
        assert climate.growth_modifier(-30, 10, 15, 1000) == 0.5

    def test_negative_product_clamps_low(self):
        assert climate.growth_modifier(-100, 1000, 15, 1000) == 0.5

    def test_zero_precipitation_guarded(self):
        assert climate.growth_modifier(20, 5, 15, 0) == pytest.approx(1.1 ** 0.5)

    @pytest.mark.parametrize("pred_t,pred_p", [
        (-1e6, 1.0), (1e6, 1.0), (0, 1e12), (40, 0.0), (-40, 5000),
    ])
    def test_always_within_bounds(self, pred_t, pred_p):
        modifier = climate.growth_modifier(pred_t, pred_p, 15, 800)
        assert 0.5 <= modifier <= 2.0


class TestPredictClimate:
    def test_insufficient_history_uses_fallback(self):
        obs = EnvironmentalObservation(history=_history([10, 11], [2, 2]))
        trend = climate.estimate_trend(obs)
        assert not trend.sufficient_history

        prediction = climate.predict_climate(15, 1000, trend, 10)
        assert prediction.temperature == pytest.approx(15.2)
        assert prediction.precipitation == pytest.approx(1000 * 1.01 ** 10)
        assert prediction.growth_modifier == 1.0

    def test_no_observation_uses_fallback(self):
        trend = climate.estimate_trend(None)
        assert trend.temperature_slope == 0.02
        assert trend.precipitation_slope == 0.01

    def test_trend_from_history(self):
        obs = EnvironmentalObservation(
            history=_history([10.0, 10.1, 10.2, 10.3], [2.0, 2.0, 2.0, 2.0])
        )
        trend = climate.estimate_trend(obs)
        assert trend.sufficient_history
        assert trend.temperature_slope == pytest.approx(0.1)
        assert trend.precipitation_slope == pytest.approx(0.0)

        prediction = climate.predict_climate(15, 1000, trend, 10)
        assert prediction.temperature == pytest.approx(16.0)
        assert prediction.precipitation == pytest.approx(1000)
        assert prediction.growth_modifier == pytest.approx(1.02 ** 0.5)

    def test_steep_precipitation_trend_saturates(self):
        obs = EnvironmentalObservation(
            history=_history([10.0, 10.0, 10.0], [500.0, 2000.0, 3500.0])
        )
        trend = climate.estimate_trend(obs)
        assert trend.precipitation_slope == pytest.approx(1500.0)

        prediction = climate.predict_climate(15, 800, trend, 100)
        assert math.isfinite(prediction.precipitation)
        assert prediction.precipitation > 0
        assert prediction.growth_modifier == 2.0
