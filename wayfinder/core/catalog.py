"""
Destination Catalog: static, read-only reference data.

The catalog is loaded once at process start and injected into the
scoring engine, so tests can substitute fixture catalogs built from
plain dictionaries.

Load-time validation drops (with a warning) every entry that has empty
required fields, a malformed duration range, unknown enum values, scores
outside 0-100 or invalid coordinates. Duplicate ids keep the first
occurrence.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from .models import (
    BudgetTier,
    Category,
    Destination,
    Difficulty,
    GeoPoint,
    TouristSeason,
)

logger = logging.getLogger(__name__)

# Default path to the catalog shipped with the package
DEFAULT_DESTINATIONS_PATH = Path(__file__).parent.parent / "data" / "destinations.json"

REQUIRED_TEXT_FIELDS = ["id", "name", "country", "region", "category", "description", "best_time"]


class CatalogError(Exception):
    """Raised when the catalog file cannot be read at all."""
    pass


def _text_list(value: Any) -> Tuple[str, ...]:
    if not value:
        return ()
    return tuple(str(v).strip() for v in value if str(v).strip())


def parse_destination(record: Dict[str, Any]) -> Destination:
    """
    Build a Destination from a raw catalog record.

    Raises:
        ValueError: with a human-readable reason when the record is invalid
    """
    for name in REQUIRED_TEXT_FIELDS:
        value = record.get(name)
        if value is None or str(value).strip() == "":
            raise ValueError(f"missing required field '{name}'")

    duration = record.get("duration_range")
    if not isinstance(duration, (list, tuple)) or len(duration) != 2:
        raise ValueError("duration_range must be [min_days, max_days]")
    min_days, max_days = int(duration[0]), int(duration[1])
    if min_days < 1 or min_days > max_days:
        raise ValueError(f"malformed duration_range {list(duration)}")

    coordinates = GeoPoint(float(record["latitude"]), float(record["longitude"]))
    if not coordinates.is_valid():
        raise ValueError(f"invalid coordinates ({coordinates.latitude}, {coordinates.longitude})")

    weather_score = float(record.get("weather_score", 0))
    safety_rating = float(record.get("safety_rating", 0))
    for label, score in (("weather_score", weather_score), ("safety_rating", safety_rating)):
        if not 0 <= score <= 100:
            raise ValueError(f"{label}={score} out of range [0, 100]")

    estimated_cost = record.get("estimated_cost")

    return Destination(
        id=str(record["id"]).strip(),
        name=str(record["name"]).strip(),
        country=str(record["country"]).strip(),
        region=str(record["region"]).strip(),
        category=Category(record["category"]),
        description=str(record["description"]).strip(),
        highlights=_text_list(record.get("highlights")),
        best_time=str(record["best_time"]).strip(),
        duration_range=(min_days, max_days),
        difficulty=Difficulty(record.get("difficulty", "easy")),
        budget_tier=BudgetTier(record["budget_tier"]),
        rating=float(record.get("rating", 0.0)),
        coordinates=coordinates,
        weather_score=weather_score,
        popularity_score=float(record.get("popularity_score", 0.0)),
        activities=_text_list(record.get("activities")),
        cuisine=_text_list(record.get("cuisine")),
        safety_rating=safety_rating,
        tourist_season=TouristSeason(record["tourist_season"]),
        accessibility=bool(record.get("accessibility", False)),
        estimated_cost=float(estimated_cost) if estimated_cost is not None else None,
    )


class DestinationCatalog:
    """
    Immutable, validated list of destinations.

    Example:
        >>> catalog = DestinationCatalog.from_json()
        >>> len(catalog.get_all()) > 0
        True
    """

    def __init__(self, records: Iterable[Dict[str, Any]] = ()):
        self._destinations = self._validate(records)
        self._by_id = {d.id: d for d in self._destinations}

    @classmethod
    def from_json(cls, path: Optional[str] = None) -> "DestinationCatalog":
        """Load the catalog from a JSON file containing a list of records."""
        catalog_path = Path(path) if path else DEFAULT_DESTINATIONS_PATH
        try:
            with open(catalog_path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise CatalogError(f"Failed to load destination catalog {catalog_path}: {e}") from e

        records = payload.get("destinations", []) if isinstance(payload, dict) else payload
        catalog = cls(records)
        logger.info(f"Loaded {len(catalog)} destinations from {catalog_path}")
        return catalog

    @staticmethod
    def _validate(records: Iterable[Dict[str, Any]]) -> Tuple[Destination, ...]:
        destinations: List[Destination] = []
        seen_ids = set()
        validation_issues = []

        for idx, record in enumerate(records):
            label = record.get("name") or record.get("id") or f"Row {idx}"
            try:
                destination = parse_destination(record)
            except (ValueError, KeyError, TypeError) as e:
                validation_issues.append(f"{label}: {e}")
                continue

            if destination.id in seen_ids:
                validation_issues.append(f"{label}: duplicate id '{destination.id}'")
                continue

            seen_ids.add(destination.id)
            destinations.append(destination)

        if validation_issues:
            logger.warning(f"Catalog validation rejected {len(validation_issues)} entries")
            for issue in validation_issues[:10]:
                logger.warning(f"  - {issue}")
            if len(validation_issues) > 10:
                logger.warning(f"  ... and {len(validation_issues) - 10} more issues")

        return tuple(destinations)

    def get_all(self) -> Tuple[Destination, ...]:
        """Return every destination (an immutable view)."""
        return self._destinations

    def get(self, destination_id: str) -> Optional[Destination]:
        return self._by_id.get(destination_id)

    def __len__(self) -> int:
        return len(self._destinations)

    def __iter__(self) -> Iterator[Destination]:
        return iter(self._destinations)
