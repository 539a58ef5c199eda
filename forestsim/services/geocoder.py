"""Geocode place names to a point and bounding box using Nominatim (no API key)."""

from __future__ import annotations

import logging

from geopy.exc import GeopyError
from geopy.geocoders import Nominatim

from forestsim.config import settings
from forestsim.models.schemas import GeocodeResult, Point, RegionBounds

logger = logging.getLogger(__name__)

_geocoder = Nominatim(user_agent=settings.user_agent, timeout=10)


def place_to_location(place_name: str) -> GeocodeResult | None:
    """Resolve a place name to its center point and bounds.

    Returns None if geocoding fails.
    """
    try:
        location = _geocoder.geocode(place_name, exactly_one=True)
    except GeopyError as e:
        logger.warning("Geocoding %r failed: %s", place_name, e)
        return None
    if location is None:
        return None

    region = None
    # Nominatim returns bounding box as [south, north, west, east]
    raw_bbox = location.raw.get("boundingbox", [])
    if len(raw_bbox) == 4:
        south, north, west, east = [float(x) for x in raw_bbox]
        if north > south:
            region = RegionBounds(north=north, south=south, east=east, west=west)

    return GeocodeResult(
        name=location.address,
        location=Point(lat=location.latitude, lon=location.longitude),
        region=region,
    )
