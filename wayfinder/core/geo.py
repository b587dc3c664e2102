"""
Great-circle distance on a spherical Earth.

Mathematical Definition:
    a = sin^2((lat2-lat1)/2) + cos(lat1)*cos(lat2)*sin^2((lng2-lng1)/2)
    c = 2 * atan2(sqrt(a), sqrt(1-a))
    d = R * c

The atan2 form stays numerically stable for both very small and
near-antipodal separations.
"""

import math

import numpy as np

from .exceptions import ValidationError
from .models import GeoPoint

# Earth's radius in kilometers
EARTH_RADIUS_KM = 6371.0


def haversine_distance(
    lat1: float, lng1: float,
    lat2: float, lng2: float
) -> float:
    """
    Calculate the great-circle distance between two points on Earth.

    Returns:
        Distance in kilometers (always >= 0)
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlng / 2) ** 2
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def distance_km(a: GeoPoint, b: GeoPoint) -> float:
    """
    Distance between two GeoPoints in kilometers.

    Example:
        >>> paris = GeoPoint(48.8566, 2.3522)
        >>> lyon = GeoPoint(45.7640, 4.8357)
        >>> print(f"{distance_km(paris, lyon):.0f} km")  # roughly 390 km
    """
    return haversine_distance(a.latitude, a.longitude, b.latitude, b.longitude)


def vectorized_distance_km(center: GeoPoint, lats: np.ndarray, lngs: np.ndarray) -> np.ndarray:
    """
    Vectorized haversine distance from one center to many points.

    Args:
        center: Origin of the scan
        lats: Array of latitudes in degrees
        lngs: Array of longitudes in degrees

    Returns:
        Array of distances in kilometers
    """
    lat1_rad = np.radians(center.latitude)
    lats_rad = np.radians(lats)
    dlat = np.radians(lats - center.latitude)
    dlng = np.radians(lngs - center.longitude)

    a = np.sin(dlat / 2) ** 2 + np.cos(lat1_rad) * np.cos(lats_rad) * np.sin(dlng / 2) ** 2
    a = np.clip(a, 0.0, 1.0)
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def validate_geo_point(latitude: float, longitude: float, field: str = "coordinates") -> GeoPoint:
    """Build a GeoPoint, rejecting out-of-range or non-finite values."""
    if latitude is None or longitude is None:
        raise ValidationError(field, "latitude and longitude are required")
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise ValidationError(field, "coordinates must be finite numbers")
    if not -90.0 <= latitude <= 90.0:
        raise ValidationError(field, f"latitude {latitude} outside [-90, 90]")
    if not -180.0 <= longitude <= 180.0:
        raise ValidationError(field, f"longitude {longitude} outside [-180, 180]")
    return GeoPoint(latitude=latitude, longitude=longitude)
