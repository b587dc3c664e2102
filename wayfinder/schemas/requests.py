"""
Request Schemas for the Wayfinder Engine API.

This module defines Pydantic models for API request validation.
Shape and coordinate ranges are checked here; semantic filter rules
(positive duration, known budget tiers and categories) are enforced by
the scoring engine so that every caller gets the same ValidationError.
"""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional

from ..core.models import FilterCriteria, GeoPoint, TravelHistory


class GeoLocation(BaseModel):
    """Geographic coordinates with validation."""
    latitude: float = Field(
        ...,
        ge=-90.0, le=90.0,
        description="Latitude in degrees (-90 to 90)"
    )
    longitude: float = Field(
        ...,
        ge=-180.0, le=180.0,
        description="Longitude in degrees (-180 to 180)"
    )

    def to_point(self) -> GeoPoint:
        return GeoPoint(latitude=self.latitude, longitude=self.longitude)

    class Config:
        json_schema_extra = {
            "example": {
                "latitude": 48.8566,
                "longitude": 2.3522
            }
        }


class SuggestionFilters(BaseModel):
    """
    Filter panel of the destination suggestions view.

    Attributes:
        categories: Accepted categories (empty = all)
        budget: "any", "low", "medium" or "high"
        duration: Desired trip length in days
        weather_importance: Reward destinations with good weather
        safety_importance: Reward destinations with high safety ratings
        avoid_crowds: Prefer low tourist season destinations
        accessibility_needed: Only accessible destinations
        current_location: Optional origin for distances
        max_distance_km: Optional radius around current_location
    """
    categories: List[str] = Field(
        default_factory=list,
        description="Destination categories to keep",
        examples=[["beach", "nature"]]
    )
    budget: str = Field(
        "any",
        description="Budget tier or 'any'",
        examples=["any", "low", "medium", "high"]
    )
    duration: int = Field(
        7,
        description="Desired trip duration in days"
    )
    weather_importance: bool = False
    safety_importance: bool = False
    avoid_crowds: bool = False
    accessibility_needed: bool = False
    current_location: Optional[GeoLocation] = None
    max_distance_km: Optional[float] = Field(
        None,
        description="Maximum distance from current_location in km"
    )

    def to_criteria(self) -> FilterCriteria:
        return FilterCriteria(
            categories=set(self.categories),
            budget_tier=self.budget,
            accessibility_needed=self.accessibility_needed,
            weather_importance=self.weather_importance,
            safety_importance=self.safety_importance,
            avoid_crowds=self.avoid_crowds,
            desired_duration_days=self.duration,
            current_location=self.current_location.to_point() if self.current_location else None,
            max_distance_km=self.max_distance_km,
        )


class TravelHistoryPayload(BaseModel):
    """Travel profile supplied by the caller instead of the stored history."""
    visited_countries: List[str] = Field(default_factory=list)
    visited_cities: List[str] = Field(default_factory=list)
    preferred_categories: Dict[str, int] = Field(default_factory=dict)
    seasonal_preferences: Dict[str, int] = Field(default_factory=dict)
    average_trip_duration_days: int = Field(7, ge=0)
    most_active_month: Optional[str] = None
    travel_frequency_last_year: int = Field(0, ge=0)

    def to_history(self) -> TravelHistory:
        return TravelHistory(
            visited_countries=set(self.visited_countries),
            visited_cities=set(self.visited_cities),
            preferred_categories=dict(self.preferred_categories),
            seasonal_preferences=dict(self.seasonal_preferences),
            average_trip_duration_days=self.average_trip_duration_days,
            most_active_month=self.most_active_month,
            travel_frequency_last_year=self.travel_frequency_last_year,
        )


class SuggestionRequest(BaseModel):
    """
    Request body for POST /suggestions/locations.

    When ``user_history`` is omitted the travel profile is aggregated from
    the current trip/photo store.
    """
    filters: SuggestionFilters = Field(default_factory=SuggestionFilters)
    search_query: str = Field(
        "",
        max_length=200,
        description="Free-text search over name, country, region, description and activities",
        examples=["hiking"]
    )
    user_history: Optional[TravelHistoryPayload] = Field(
        None,
        description="Optional precomputed travel profile"
    )
    diversity_seed: Optional[str] = Field(
        None,
        description="Seed that makes the random score component reproducible"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "filters": {
                    "categories": ["beach"],
                    "budget": "any",
                    "duration": 7,
                    "weather_importance": True,
                    "safety_importance": True,
                    "avoid_crowds": False,
                    "accessibility_needed": False
                },
                "search_query": ""
            }
        }
