"""
Response Schemas for the Wayfinder Engine API.

This module defines Pydantic models for API responses.
All dates are serialized as ISO-8601 strings and distances in kilometers.
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime

from ..core.models import (
    Destination,
    GeotaggedPhoto,
    LocationCluster,
    ScoredDestination,
    TravelHistory,
)


class DestinationResponse(BaseModel):
    """Catalog destination as exposed over the API."""
    id: str
    name: str
    country: str
    region: str
    category: str
    description: str
    highlights: List[str]
    best_time: str
    min_duration_days: int
    max_duration_days: int
    difficulty: str
    budget: str
    rating: float
    latitude: float
    longitude: float
    weather_score: float
    popularity_score: float
    activities: List[str]
    local_cuisine: List[str]
    safety_rating: float
    tourist_season: str
    accessibility: bool
    estimated_cost: Optional[float] = None

    @classmethod
    def from_destination(cls, destination: Destination, **extra) -> "DestinationResponse":
        return cls(
            id=destination.id,
            name=destination.name,
            country=destination.country,
            region=destination.region,
            category=destination.category.value,
            description=destination.description,
            highlights=list(destination.highlights),
            best_time=destination.best_time,
            min_duration_days=destination.min_duration_days,
            max_duration_days=destination.max_duration_days,
            difficulty=destination.difficulty.value,
            budget=destination.budget_tier.value,
            rating=destination.rating,
            latitude=destination.coordinates.latitude,
            longitude=destination.coordinates.longitude,
            weather_score=destination.weather_score,
            popularity_score=destination.popularity_score,
            activities=list(destination.activities),
            local_cuisine=list(destination.cuisine),
            safety_rating=destination.safety_rating,
            tourist_season=destination.tourist_season.value,
            accessibility=destination.accessibility,
            estimated_cost=destination.estimated_cost,
            **extra
        )


class ScoredDestinationResponse(DestinationResponse):
    """Destination with its match score for one request."""
    match_score: int = Field(..., ge=0, le=100)
    distance_km: Optional[float] = Field(None, ge=0.0)

    @classmethod
    def from_scored(cls, scored: ScoredDestination) -> "ScoredDestinationResponse":
        distance = round(scored.distance_km, 2) if scored.distance_km is not None else None
        return cls.from_destination(
            scored.destination,
            match_score=scored.match_score,
            distance_km=distance
        )


class SuggestionResponse(BaseModel):
    """
    Response model for destination suggestions.

    Attributes:
        suggestions: Ranked destinations (at most 12), best first
        count: Number of suggestions returned
        history_source: "stored" or "supplied"
    """
    suggestions: List[ScoredDestinationResponse]
    count: int
    history_source: str
    metadata: Dict[str, Any] = Field(default_factory=dict)


class TravelHistoryResponse(BaseModel):
    """Derived travel profile."""
    visited_countries: List[str]
    visited_cities: List[str]
    preferred_categories: Dict[str, int]
    seasonal_preferences: Dict[str, int]
    average_trip_duration_days: int
    most_active_month: Optional[str] = None
    travel_frequency_last_year: int

    @classmethod
    def from_history(cls, history: TravelHistory) -> "TravelHistoryResponse":
        return cls(**history.to_dict())


class PhotoResponse(BaseModel):
    """Geotagged photo."""
    id: str
    url: str
    latitude: float
    longitude: float
    location: Optional[str] = None
    trip_id: Optional[str] = None
    captured_at: Optional[datetime] = None
    caption: Optional[str] = None

    @classmethod
    def from_photo(cls, photo: GeotaggedPhoto, **extra) -> "PhotoResponse":
        return cls(
            id=photo.id,
            url=photo.url,
            latitude=photo.coordinates.latitude,
            longitude=photo.coordinates.longitude,
            location=photo.location_label,
            trip_id=photo.trip_id,
            captured_at=photo.captured_at,
            caption=photo.caption,
            **extra
        )


class NearbyPhotoResponse(PhotoResponse):
    """Photo returned by a proximity query."""
    distance_km: float = Field(..., ge=0.0)


class NearbyPhotosResponse(BaseModel):
    """Response model for the nearby photos endpoint."""
    latitude: float
    longitude: float
    radius_km: float
    count: int
    photos: List[NearbyPhotoResponse]


class LocationClusterResponse(BaseModel):
    """One location cluster of the analytics summary."""
    location: str
    latitude: float
    longitude: float
    photo_count: int
    first_visit: Optional[datetime] = None
    last_visit: Optional[datetime] = None

    @classmethod
    def from_cluster(cls, cluster: LocationCluster) -> "LocationClusterResponse":
        return cls(
            location=cluster.key,
            latitude=cluster.representative_coordinate.latitude,
            longitude=cluster.representative_coordinate.longitude,
            photo_count=cluster.photo_count,
            first_visit=cluster.first_visit,
            last_visit=cluster.last_visit,
        )


class LocationAnalyticsResponse(BaseModel):
    """
    Response model for location analytics.

    Attributes:
        total_geotagged_photos: Photos with usable coordinates
        unique_locations: Number of location clusters
        top_locations: Clusters by photo count (top 10)
        recent_locations: Clusters by last visit (top 5)
    """
    total_geotagged_photos: int
    unique_locations: int
    top_locations: List[LocationClusterResponse]
    recent_locations: List[LocationClusterResponse]

    class Config:
        json_schema_extra = {
            "example": {
                "total_geotagged_photos": 42,
                "unique_locations": 3,
                "top_locations": [
                    {
                        "location": "Paris, France",
                        "latitude": 48.8566,
                        "longitude": 2.3522,
                        "photo_count": 30,
                        "first_visit": "2025-04-02T09:12:00Z",
                        "last_visit": "2025-04-06T18:40:00Z"
                    }
                ],
                "recent_locations": []
            }
        }


class RoutePointResponse(BaseModel):
    """A photo position along a trip route."""
    photo_id: str
    latitude: float
    longitude: float
    timestamp: Optional[str] = None
    address: Optional[str] = None
    photo_url: Optional[str] = None
    caption: Optional[str] = None


class TripRouteResponse(BaseModel):
    """Geotagged photos of one trip ordered by capture time."""
    trip_id: str
    count: int
    points: List[RoutePointResponse]


class HealthResponse(BaseModel):
    """
    Response model for health check endpoint.

    Attributes:
        status: Service health status
        version: API version
        components: Status of individual components
    """
    status: str = Field(default="healthy")
    version: str
    components: Dict[str, str] = Field(default_factory=dict)

    class Config:
        json_schema_extra = {
            "example": {
                "status": "healthy",
                "version": "1.0.0",
                "components": {
                    "catalog": "available (16 destinations)",
                    "store": "csv (./data)"
                }
            }
        }


class ErrorResponse(BaseModel):
    """
    Response model for error responses.

    Attributes:
        error: Error type
        message: Human-readable error message
        details: Additional error details
    """
    error: str
    message: str
    details: Optional[Dict[str, Any]] = None
