"""
Domain types shared by the scoring engine and location analytics.

These are plain dataclasses: the API layer converts them to and from the
Pydantic schemas in ``wayfinder.schemas``.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Tuple


class Category(str, Enum):
    """Destination categories."""
    CITY = "city"
    NATURE = "nature"
    BEACH = "beach"
    MOUNTAIN = "mountain"
    CULTURAL = "cultural"
    ADVENTURE = "adventure"


class BudgetTier(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TouristSeason(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Season(str, Enum):
    """Meteorological seasons (northern hemisphere)."""
    WINTER = "winter"
    SPRING = "spring"
    SUMMER = "summer"
    AUTUMN = "autumn"


ANY_BUDGET = "any"


def season_for_month(month: int) -> Season:
    """Map a calendar month (1-12) to its meteorological season."""
    if month in (12, 1, 2):
        return Season.WINTER
    if month in (3, 4, 5):
        return Season.SPRING
    if month in (6, 7, 8):
        return Season.SUMMER
    return Season.AUTUMN


def as_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class GeoPoint:
    """A (latitude, longitude) pair in decimal degrees."""
    latitude: float
    longitude: float

    def is_valid(self) -> bool:
        return -90.0 <= self.latitude <= 90.0 and -180.0 <= self.longitude <= 180.0


@dataclass(frozen=True)
class Destination:
    """
    Static catalog entry describing a travel-location candidate.

    ``duration_range`` is ``(min_days, max_days)`` with ``min_days <= max_days``.
    """
    id: str
    name: str
    country: str
    region: str
    category: Category
    description: str
    highlights: Tuple[str, ...]
    best_time: str
    duration_range: Tuple[int, int]
    difficulty: Difficulty
    budget_tier: BudgetTier
    rating: float
    coordinates: GeoPoint
    weather_score: float
    popularity_score: float
    activities: Tuple[str, ...]
    cuisine: Tuple[str, ...]
    safety_rating: float
    tourist_season: TouristSeason
    accessibility: bool
    estimated_cost: Optional[float] = None

    @property
    def min_duration_days(self) -> int:
        return self.duration_range[0]

    @property
    def max_duration_days(self) -> int:
        return self.duration_range[1]

    def searchable_text(self) -> str:
        """Lower-cased text matched by free-text search."""
        parts = [self.name, self.country, self.region, self.description]
        parts.extend(self.activities)
        return " ".join(parts).lower()


@dataclass
class FilterCriteria:
    """
    Per-request filter input for destination scoring.

    Attributes:
        categories: Accepted categories (empty = no category filter)
        budget_tier: "any" or an exact budget tier
        accessibility_needed: Only keep accessible destinations
        weather_importance: Reward good weather scores
        safety_importance: Reward high safety ratings
        avoid_crowds: Prefer low tourist season destinations
        desired_duration_days: Planned trip length in days
        current_location: Optional origin for distance computation
        max_distance_km: Optional radius around current_location
    """
    categories: Set[str] = field(default_factory=set)
    budget_tier: str = ANY_BUDGET
    accessibility_needed: bool = False
    weather_importance: bool = False
    safety_importance: bool = False
    avoid_crowds: bool = False
    desired_duration_days: int = 7
    current_location: Optional[GeoPoint] = None
    max_distance_km: Optional[float] = None


@dataclass
class TravelHistory:
    """Profile derived from a user's trips and photos. Never persisted."""
    visited_countries: Set[str] = field(default_factory=set)
    visited_cities: Set[str] = field(default_factory=set)
    preferred_categories: Dict[str, int] = field(default_factory=dict)
    seasonal_preferences: Dict[str, int] = field(default_factory=dict)
    average_trip_duration_days: int = 7
    most_active_month: Optional[str] = None
    travel_frequency_last_year: int = 0

    def favored_seasons(self) -> Set[str]:
        """Seasons sharing the highest non-zero photo count."""
        counts = {k: v for k, v in self.seasonal_preferences.items() if v > 0}
        if not counts:
            return set()
        top = max(counts.values())
        return {season for season, count in counts.items() if count == top}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "visited_countries": sorted(self.visited_countries),
            "visited_cities": sorted(self.visited_cities),
            "preferred_categories": dict(self.preferred_categories),
            "seasonal_preferences": dict(self.seasonal_preferences),
            "average_trip_duration_days": self.average_trip_duration_days,
            "most_active_month": self.most_active_month,
            "travel_frequency_last_year": self.travel_frequency_last_year,
        }


@dataclass
class ScoredDestination:
    """A catalog destination with its per-request match score."""
    destination: Destination
    match_score: int
    distance_km: Optional[float] = None


@dataclass(frozen=True)
class Trip:
    """Trip record as read from the persistence collaborator."""
    id: str
    location: str = ""
    title: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


@dataclass(frozen=True)
class GeotaggedPhoto:
    """
    Photo record as read from the persistence collaborator.

    ``coordinates`` is None when the photo carries no usable GPS fix;
    such photos are excluded from every geospatial operation.
    """
    id: str
    url: str = ""
    coordinates: Optional[GeoPoint] = None
    captured_at: Optional[datetime] = None
    location_label: Optional[str] = None
    trip_id: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    caption: Optional[str] = None

    @property
    def has_coordinates(self) -> bool:
        return self.coordinates is not None and self.coordinates.is_valid()


@dataclass
class LocationCluster:
    """Group of geotagged photos sharing a label or a ~1.1 km grid cell."""
    key: str
    representative_coordinate: GeoPoint
    photo_count: int = 0
    first_visit: Optional[datetime] = None
    last_visit: Optional[datetime] = None


@dataclass
class TravelSnapshot:
    """Trips and photos read once from the store for a single request."""
    trips: List[Trip] = field(default_factory=list)
    photos: List[GeotaggedPhoto] = field(default_factory=list)
