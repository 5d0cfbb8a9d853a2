"""Distance and map-region helpers for location-aware features."""

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Sequence

if TYPE_CHECKING:
    from ..models.property import Property

EARTH_RADIUS_KM = 6371.0

# Shown when there is nothing to fit (central Jakarta)
DEFAULT_LATITUDE = -6.2088
DEFAULT_LONGITUDE = 106.8456
DEFAULT_LATITUDE_DELTA = 0.0922
DEFAULT_LONGITUDE_DELTA = 0.0421

MIN_REGION_DELTA = 0.01


@dataclass
class MapRegion:
    """Map viewport: center plus latitude/longitude span in degrees."""

    latitude: float
    longitude: float
    latitude_delta: float
    longitude_delta: float


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance between two points using the haversine formula.

    Returns:
        Distance in kilometers
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def format_distance(distance_km: float) -> str:
    """Format a distance as ``"500 m"`` below one kilometer, else ``"2.5 km"``."""
    if distance_km < 1:
        return f"{int(math.floor(distance_km * 1000 + 0.5))} m"
    return f"{distance_km:.1f} km"


def get_distance_category(distance_km: float) -> str:
    """Coarse label for how far away a property is."""
    if distance_km < 1:
        return "Very close"
    if distance_km < 3:
        return "Close"
    if distance_km < 5:
        return "Fairly close"
    if distance_km < 10:
        return "Moderate"
    return "Far"


def get_region_for_properties(properties: Sequence["Property"], padding: float = 0.1) -> MapRegion:
    """
    Compute a map region that fits every property.

    Args:
        properties: Properties to fit
        padding: Fractional padding added to each span (0.1 = 10%)

    Returns:
        MapRegion centered on the bounding box. Spans never drop below
        MIN_REGION_DELTA so a single point still yields a usable region.
    """
    if not properties:
        return MapRegion(
            latitude=DEFAULT_LATITUDE,
            longitude=DEFAULT_LONGITUDE,
            latitude_delta=DEFAULT_LATITUDE_DELTA,
            longitude_delta=DEFAULT_LONGITUDE_DELTA,
        )

    lats = [p.latitude for p in properties]
    lons = [p.longitude for p in properties]
    min_lat, max_lat = min(lats), max(lats)
    min_lon, max_lon = min(lons), max(lons)

    return MapRegion(
        latitude=(min_lat + max_lat) / 2,
        longitude=(min_lon + max_lon) / 2,
        latitude_delta=max((max_lat - min_lat) * (1 + padding), MIN_REGION_DELTA),
        longitude_delta=max((max_lon - min_lon) * (1 + padding), MIN_REGION_DELTA),
    )


def sort_properties_by_distance(
    properties: Sequence["Property"], lat: float, lon: float
) -> List["Property"]:
    """Return a new list ordered nearest first."""
    return sorted(
        properties,
        key=lambda p: calculate_distance(lat, lon, p.latitude, p.longitude),
    )


def filter_properties_by_radius(
    properties: Sequence["Property"], lat: float, lon: float, radius_km: float
) -> List["Property"]:
    """Keep properties within ``radius_km`` (inclusive) of the center."""
    return [
        p for p in properties
        if calculate_distance(lat, lon, p.latitude, p.longitude) <= radius_km
    ]


def get_nearby_properties(
    properties: Sequence["Property"], lat: float, lon: float, max_distance_km: float = 10
) -> List["Property"]:
    """Properties within ``max_distance_km``, nearest first."""
    nearby = filter_properties_by_radius(properties, lat, lon, max_distance_km)
    return sort_properties_by_distance(nearby, lat, lon)


def is_valid_coordinates(lat, lon) -> bool:
    """Range-check a latitude/longitude pair, rejecting non-numbers and NaN."""
    for value in (lat, lon):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        if math.isnan(value):
            return False
    return -90 <= lat <= 90 and -180 <= lon <= 180
