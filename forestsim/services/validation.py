"""Input validation shared by the engine and the HTTP layer."""

from __future__ import annotations

import math

from forestsim.config import settings
from forestsim.models.schemas import Point, RegionBounds


class InvalidParametersError(ValueError):
    """Inputs that are rejected before any computation starts."""


def _finite(value: float) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value)


def validate_latitude(lat: float) -> float:
    if not _finite(lat) or not -90 <= lat <= 90:
        raise InvalidParametersError(f"Latitude must be within [-90, 90], got {lat}")
    return lat


def validate_longitude(lon: float) -> float:
    if not _finite(lon) or not -180 <= lon <= 180:
        raise InvalidParametersError(f"Longitude must be within [-180, 180], got {lon}")
    return lon


def validate_point(point: Point) -> Point:
    validate_latitude(point.lat)
    validate_longitude(point.lon)
    return point


def validate_region(bounds: RegionBounds) -> RegionBounds:
    for lat in (bounds.north, bounds.south):
        validate_latitude(lat)
    for lon in (bounds.east, bounds.west):
        validate_longitude(lon)
    if bounds.north <= bounds.south:
        raise InvalidParametersError("Invalid region: north must be greater than south")
    return bounds


def validate_years(years: int) -> int:
    if isinstance(years, bool) or not isinstance(years, int):
        raise InvalidParametersError(f"Years must be an integer, got {years!r}")
    if not 1 <= years <= settings.max_simulation_years:
        raise InvalidParametersError(
            f"Years must be between 1 and {settings.max_simulation_years}, got {years}"
        )
    return years


def validate_tree_age(age: int) -> int:
    if isinstance(age, bool) or not isinstance(age, int):
        raise InvalidParametersError(f"Tree age must be an integer, got {age!r}")
    if not 1 <= age <= settings.max_tree_age:
        raise InvalidParametersError(
            f"Tree age must be between 1 and {settings.max_tree_age}, got {age}"
        )
    return age
