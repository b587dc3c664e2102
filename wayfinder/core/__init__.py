"""
Core module for the Wayfinder Engine.

Contains the algorithmic logic for:
- Haversine Distance (geospatial queries)
- Travel history aggregation
- Destination catalog and multi-factor scoring
- Location clustering and proximity search
"""

from .analytics import LocationAnalytics
from .catalog import DestinationCatalog
from .exceptions import DataUnavailableError, ValidationError, WayfinderError
from .geo import distance_km, haversine_distance
from .history import TravelHistoryAggregator
from .models import (
    Destination,
    FilterCriteria,
    GeoPoint,
    GeotaggedPhoto,
    LocationCluster,
    ScoredDestination,
    TravelHistory,
    TravelSnapshot,
    Trip,
)
from .scoring import FixedJitter, JitterSource, RandomJitter, ScoringEngine

__all__ = [
    "LocationAnalytics",
    "DestinationCatalog",
    "DataUnavailableError",
    "ValidationError",
    "WayfinderError",
    "distance_km",
    "haversine_distance",
    "TravelHistoryAggregator",
    "Destination",
    "FilterCriteria",
    "GeoPoint",
    "GeotaggedPhoto",
    "LocationCluster",
    "ScoredDestination",
    "TravelHistory",
    "TravelSnapshot",
    "Trip",
    "FixedJitter",
    "JitterSource",
    "RandomJitter",
    "ScoringEngine",
]
