"""
Travel History Aggregator.

Derives a TravelHistory profile from the raw trip and photo collections
of the current request. The aggregator is a pure function of its inputs:
it never raises and returns conservative defaults for empty input.

Location parsing:
    Structured ``city``/``country`` fields win when present. Otherwise the
    free-text location is split on commas, treating the first token as the
    city and the last token as the country ("Lyon, France"). This split is a
    compatibility shim for legacy free-text data, not a robust parser.
"""

import calendar
import logging
import math
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional, Tuple

from .models import (
    GeotaggedPhoto,
    Season,
    TravelHistory,
    Trip,
    as_utc,
    season_for_month,
)

logger = logging.getLogger(__name__)

DEFAULT_TRIP_DURATION_DAYS = 7
TRAILING_WINDOW_DAYS = 365


def split_location(
    location: Optional[str],
    city: Optional[str] = None,
    country: Optional[str] = None
) -> Tuple[Optional[str], Optional[str]]:
    """
    Resolve (city, country) for a trip or photo.

    Example:
        >>> split_location("Lyon, Auvergne-Rhone-Alpes, France")
        ('Lyon', 'France')
        >>> split_location("Kyoto")
        ('Kyoto', None)
    """
    city = city.strip() if city and city.strip() else None
    country = country.strip() if country and country.strip() else None
    if city and country:
        return city, country

    tokens = [t.strip() for t in (location or "").split(",") if t.strip()]
    if tokens:
        city = city or tokens[0]
        if len(tokens) > 1:
            country = country or tokens[-1]
    return city, country


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class TravelHistoryAggregator:
    """
    Builds a TravelHistory from trips and photos.

    Attributes:
        default_duration_days: Average trip length used when no trip has
            both a start and an end date
    """

    def __init__(self, default_duration_days: int = DEFAULT_TRIP_DURATION_DAYS):
        self.default_duration_days = default_duration_days

    def aggregate(
        self,
        trips: Iterable[Trip],
        photos: Iterable[GeotaggedPhoto],
        now: Optional[datetime] = None
    ) -> TravelHistory:
        """
        Compute the travel profile for one request.

        Args:
            trips: Full trip collection
            photos: Full photo collection
            now: Reference time for the trailing-year window (default: UTC now)

        Returns:
            TravelHistory (preferred_categories is always left empty)
        """
        trips = list(trips or [])
        photos = list(photos or [])
        now = as_utc(now) if now else datetime.now(timezone.utc)

        history = TravelHistory(average_trip_duration_days=self.default_duration_days)

        for trip in trips:
            city, country = split_location(trip.location, trip.city, trip.country)
            self._add_place(history, city, country)

        for photo in photos:
            city, country = split_location(photo.location_label, photo.city, photo.country)
            if photo.location_label or photo.city or photo.country:
                self._add_place(history, city, country)

        history.seasonal_preferences = self._seasonal_preferences(photos)
        history.average_trip_duration_days = self._average_duration(trips)
        history.most_active_month = self._most_active_month(photos)
        history.travel_frequency_last_year = self._trips_in_window(trips, now)

        logger.debug(
            f"Aggregated history: {len(trips)} trips, {len(photos)} photos, "
            f"{len(history.visited_countries)} countries"
        )
        return history

    @staticmethod
    def _add_place(history: TravelHistory, city: Optional[str], country: Optional[str]) -> None:
        if city:
            history.visited_cities.add(city)
        if country:
            history.visited_countries.add(country)

    @staticmethod
    def _seasonal_preferences(photos) -> dict:
        counts = {season.value: 0 for season in Season}
        for photo in photos:
            if photo.captured_at is None:
                continue
            counts[season_for_month(as_utc(photo.captured_at).month).value] += 1
        return counts

    def _average_duration(self, trips) -> int:
        durations = []
        for trip in trips:
            if trip.start_date is None or trip.end_date is None:
                continue
            days = (as_utc(trip.end_date) - as_utc(trip.start_date)).days
            if days < 0:
                logger.debug(f"Ignoring trip {trip.id}: end date before start date")
                continue
            durations.append(days)

        if not durations:
            return self.default_duration_days
        return _round_half_up(sum(durations) / len(durations))

    @staticmethod
    def _most_active_month(photos) -> Optional[str]:
        months = Counter(as_utc(p.captured_at).month for p in photos if p.captured_at is not None)
        if not months:
            return None
        # Earliest month wins ties
        month = min(months, key=lambda m: (-months[m], m))
        return calendar.month_name[month]

    @staticmethod
    def _trips_in_window(trips, now: datetime) -> int:
        window_start = now - timedelta(days=TRAILING_WINDOW_DAYS)
        return sum(
            1 for trip in trips
            if trip.start_date is not None and window_start <= as_utc(trip.start_date) <= now
        )
