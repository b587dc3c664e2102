"""
Pydantic Schemas Package for the Wayfinder Engine.

This package contains all request and response models for the API.
"""

from .requests import (
    GeoLocation,
    SuggestionFilters,
    SuggestionRequest,
    TravelHistoryPayload,
)
from .responses import (
    DestinationResponse,
    ScoredDestinationResponse,
    SuggestionResponse,
    TravelHistoryResponse,
    PhotoResponse,
    NearbyPhotoResponse,
    NearbyPhotosResponse,
    LocationClusterResponse,
    LocationAnalyticsResponse,
    RoutePointResponse,
    TripRouteResponse,
    HealthResponse,
    ErrorResponse,
)

__all__ = [
    # Requests
    "GeoLocation",
    "SuggestionFilters",
    "SuggestionRequest",
    "TravelHistoryPayload",
    # Responses
    "DestinationResponse",
    "ScoredDestinationResponse",
    "SuggestionResponse",
    "TravelHistoryResponse",
    "PhotoResponse",
    "NearbyPhotoResponse",
    "NearbyPhotosResponse",
    "LocationClusterResponse",
    "LocationAnalyticsResponse",
    "RoutePointResponse",
    "TripRouteResponse",
    "HealthResponse",
    "ErrorResponse",
]
