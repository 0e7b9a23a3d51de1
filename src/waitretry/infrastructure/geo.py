"""Great-circle distance on a sphere"""

import math

from waitretry.domain.errors import InvalidArgument

DEFAULT_EARTH_RADIUS_KM = 6371.0


def _validate_latitude(latitude: float, param_name: str) -> None:
    if latitude < -90.0 or latitude > 90.0:
        raise InvalidArgument(param_name, latitude, "between -90 and 90 degrees")


def _validate_longitude(longitude: float, param_name: str) -> None:
    if longitude < -180.0 or longitude > 180.0:
        raise InvalidArgument(param_name, longitude, "between -180 and 180 degrees")


def haversine_distance(
    latitude1: float,
    longitude1: float,
    latitude2: float,
    longitude2: float,
    sphere_radius_km: float = DEFAULT_EARTH_RADIUS_KM,
    decimal_places: int = 4,
) -> float:
    """Distance between two WGS84 coordinates using the haversine formula

    Args:
        latitude1: Start latitude in degrees
        longitude1: Start longitude in degrees
        latitude2: End latitude in degrees
        longitude2: End longitude in degrees
        sphere_radius_km: Sphere radius, defaults to the mean Earth radius
        decimal_places: Rounding of the result

    Returns:
        Distance in kilometres

    Raises:
        InvalidArgument: If a coordinate, the radius or decimal_places is out of range
    """
    _validate_latitude(latitude1, "latitude1")
    _validate_longitude(longitude1, "longitude1")
    _validate_latitude(latitude2, "latitude2")
    _validate_longitude(longitude2, "longitude2")

    if sphere_radius_km <= 0:
        raise InvalidArgument("sphere_radius_km", sphere_radius_km, "> 0")
    if decimal_places < 0:
        raise InvalidArgument("decimal_places", decimal_places, ">= 0")

    rad_lat1 = math.radians(latitude1)
    rad_lat2 = math.radians(latitude2)
    delta_lat = rad_lat2 - rad_lat1
    delta_lon = math.radians(longitude2 - longitude1)

    a = math.sin(delta_lat / 2) ** 2 + math.cos(rad_lat1) * math.cos(rad_lat2) * math.sin(delta_lon / 2) ** 2
    c = 2 * math.asin(math.sqrt(a))
    return round(sphere_radius_km * c, decimal_places)
