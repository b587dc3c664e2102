"""
Destination Scoring Engine.

Ranks catalog destinations for one request in two stages:

Stage 1: Hard filters (conjunctive)
    - Free-text search over name, country, region, description, activities
    - Category membership
    - Exact budget tier
    - Accessibility
    - Distance from the caller's current location (when given)

Stage 2: Soft scoring (base 70)
    - Travel-history affinity (preferred categories, visited countries,
      usual trip length, favored season)
    - Weather and safety weighting
    - Crowd avoidance
    - Fit with the desired trip duration
    - Random jitter in [0, 10)

The jitter is intentional: it diversifies repeated identical queries. It
is drawn from a request-local JitterSource so concurrent requests never
share a random stream, and tests can pin it with FixedJitter.
"""

import hashlib
import logging
import math
import random
import re
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import List, Optional, Set

from .catalog import DestinationCatalog
from .exceptions import ValidationError
from .geo import distance_km, validate_geo_point
from .models import (
    ANY_BUDGET,
    BudgetTier,
    Category,
    Destination,
    FilterCriteria,
    Season,
    ScoredDestination,
    TouristSeason,
    TravelHistory,
    as_utc,
    season_for_month,
)

logger = logging.getLogger(__name__)

BASE_SCORE = 70.0
MAX_RESULTS = 12
MAX_JITTER = 10.0

PREFERRED_CATEGORY_BONUS = 15.0
VISITED_COUNTRY_PENALTY = -10.0
DURATION_PROXIMITY_DAYS = 2
DURATION_PROXIMITY_BONUS = 10.0
SEASON_MATCH_BONUS = 8.0
WEATHER_PIVOT, WEATHER_WEIGHT = 70.0, 0.3
SAFETY_PIVOT, SAFETY_WEIGHT = 80.0, 0.2
LOW_SEASON_BONUS = 10.0
HIGH_SEASON_PENALTY = -5.0
DURATION_FIT_BONUS = 15.0

MONTH_NAMES = [
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
]

SEASON_WORDS = {
    Season.WINTER: {"winter"},
    Season.SPRING: {"spring"},
    Season.SUMMER: {"summer"},
    Season.AUTUMN: {"autumn", "fall"},
}


class JitterSource(ABC):
    """Provider of the random score component for one request."""

    @abstractmethod
    def next_jitter(self) -> float:
        """Return a value in [0, MAX_JITTER)."""
        pass


class RandomJitter(JitterSource):
    """
    Uniform jitter from a fresh, request-local random.Random.

    Args:
        seed: Optional diversity seed; the same seed replays the same jitter
    """

    def __init__(self, seed: Optional[str] = None):
        if seed is None:
            self._rng = random.Random()
        else:
            seed_value = int(hashlib.md5(seed.encode()).hexdigest()[:8], 16)
            self._rng = random.Random(seed_value)

    def next_jitter(self) -> float:
        return self._rng.random() * MAX_JITTER


class FixedJitter(JitterSource):
    """Constant jitter, used to make scoring fully deterministic."""

    def __init__(self, value: float = 0.0):
        if not 0.0 <= value < MAX_JITTER:
            raise ValueError(f"Jitter must be in [0, {MAX_JITTER}), got {value}")
        self.value = value

    def next_jitter(self) -> float:
        return self.value


def season_tokens(text: str, season: Season) -> Set[str]:
    """Words of ``text`` that name ``season`` or one of its months."""
    tokens = set(re.findall(r"[a-z]+", (text or "").lower()))
    season_words = set(SEASON_WORDS[season])
    season_words.update(
        name for idx, name in enumerate(MONTH_NAMES, start=1)
        if season_for_month(idx) == season
    )
    return tokens & season_words


def validate_filters(filters: FilterCriteria) -> None:
    """
    Reject malformed filter criteria before any scoring happens.

    Raises:
        ValidationError: naming the offending field
    """
    duration = filters.desired_duration_days
    if isinstance(duration, bool) or not isinstance(duration, int):
        raise ValidationError("desired_duration_days", "must be an integer")
    if duration < 1:
        raise ValidationError("desired_duration_days", f"must be positive, got {duration}")

    valid_budgets = {ANY_BUDGET} | {b.value for b in BudgetTier}
    if filters.budget_tier not in valid_budgets:
        raise ValidationError(
            "budget_tier",
            f"invalid budget tier '{filters.budget_tier}'. Valid: {sorted(valid_budgets)}"
        )

    valid_categories = {c.value for c in Category}
    invalid = set(filters.categories or ()) - valid_categories
    if invalid:
        raise ValidationError(
            "categories",
            f"invalid categories: {sorted(invalid)}. Valid: {sorted(valid_categories)}"
        )

    if filters.current_location is not None:
        validate_geo_point(
            filters.current_location.latitude,
            filters.current_location.longitude,
            field="current_location"
        )

    if filters.max_distance_km is not None:
        if filters.max_distance_km <= 0:
            raise ValidationError("max_distance_km", "must be positive")
        if filters.current_location is None:
            raise ValidationError("max_distance_km", "requires current_location")


class ScoringEngine:
    """
    Ranks destinations of an injected catalog against filters and history.

    Attributes:
        catalog: Read-only destination catalog shared by all requests
        max_results: Number of destinations returned per request

    Example:
        >>> engine = ScoringEngine(DestinationCatalog.from_json())
        >>> results = engine.score(FilterCriteria(categories={"beach"}), "", TravelHistory())
        >>> all(r.destination.category == Category.BEACH for r in results)
        True
    """

    def __init__(self, catalog: DestinationCatalog, max_results: int = MAX_RESULTS):
        self.catalog = catalog
        if max_results < 1:
            raise ValueError(f"max_results must be positive, got {max_results}")
        self.max_results = min(max_results, MAX_RESULTS)

    def score(
        self,
        filters: FilterCriteria,
        search_query: str,
        history: TravelHistory,
        now: Optional[datetime] = None,
        jitter: Optional[JitterSource] = None,
        diversity_seed: Optional[str] = None
    ) -> List[ScoredDestination]:
        """
        Filter, score and rank the catalog.

        Args:
            filters: Validated per-request filter criteria
            search_query: Free-text query (empty = no search filter)
            history: Travel profile of the caller
            now: Reference time for the current season (default: UTC now)
            jitter: Random source; a fresh RandomJitter when omitted
            diversity_seed: Seed for the default RandomJitter

        Returns:
            At most ``max_results`` destinations, sorted by descending score

        Raises:
            ValidationError: if ``filters`` is malformed
        """
        validate_filters(filters)

        query = (search_query or "").strip().lower()
        now = as_utc(now) if now else datetime.now(timezone.utc)
        current_season = season_for_month(now.month)
        jitter = jitter or RandomJitter(diversity_seed)
        history = history or TravelHistory()

        visited_countries = {c.strip().lower() for c in history.visited_countries}
        favored_seasons = history.favored_seasons()

        scored = []
        for destination in self.catalog.get_all():
            if not self._passes_hard_filters(destination, filters, query):
                continue

            distance = None
            if filters.current_location is not None:
                distance = distance_km(filters.current_location, destination.coordinates)
                if filters.max_distance_km is not None and distance > filters.max_distance_km:
                    continue

            raw = self._raw_score(
                destination, filters, query, history,
                visited_countries, current_season, favored_seasons
            )
            raw += jitter.next_jitter()

            scored.append(ScoredDestination(
                destination=destination,
                match_score=self._finalize(raw),
                distance_km=distance
            ))

        # Stable sort: catalog order breaks ties
        scored.sort(key=lambda s: s.match_score, reverse=True)
        results = scored[:self.max_results]

        logger.info(
            f"Scored {len(scored)} of {len(self.catalog)} destinations, "
            f"returning {len(results)} (query='{query}', season={current_season.value})"
        )
        return results

    @staticmethod
    def _passes_hard_filters(destination: Destination, filters: FilterCriteria, query: str) -> bool:
        if query and query not in destination.searchable_text():
            return False
        if filters.categories and destination.category.value not in filters.categories:
            return False
        if filters.budget_tier != ANY_BUDGET and destination.budget_tier.value != filters.budget_tier:
            return False
        if filters.accessibility_needed and not destination.accessibility:
            return False
        return True

    @staticmethod
    def _raw_score(
        destination: Destination,
        filters: FilterCriteria,
        query: str,
        history: TravelHistory,
        visited_countries: Set[str],
        current_season: Season,
        favored_seasons: Set[str]
    ) -> float:
        score = BASE_SCORE

        if history.preferred_categories.get(destination.category.value, 0) > 0:
            score += PREFERRED_CATEGORY_BONUS

        if not query and destination.country.lower() in visited_countries:
            score += VISITED_COUNTRY_PENALTY

        if abs(destination.min_duration_days - history.average_trip_duration_days) <= DURATION_PROXIMITY_DAYS:
            score += DURATION_PROXIMITY_BONUS

        if current_season.value in favored_seasons and season_tokens(destination.best_time, current_season):
            score += SEASON_MATCH_BONUS

        if filters.weather_importance:
            score += (destination.weather_score - WEATHER_PIVOT) * WEATHER_WEIGHT

        if filters.safety_importance:
            score += (destination.safety_rating - SAFETY_PIVOT) * SAFETY_WEIGHT

        if filters.avoid_crowds:
            if destination.tourist_season == TouristSeason.LOW:
                score += LOW_SEASON_BONUS
            elif destination.tourist_season == TouristSeason.HIGH:
                score += HIGH_SEASON_PENALTY

        if destination.min_duration_days <= filters.desired_duration_days <= destination.max_duration_days:
            score += DURATION_FIT_BONUS

        return score

    @staticmethod
    def _finalize(raw: float) -> int:
        """Clamp to [0, 100] and round half-up to an integer."""
        clamped = max(0.0, min(100.0, raw))
        return int(math.floor(clamped + 0.5))
