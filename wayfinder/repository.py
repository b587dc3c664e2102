"""
Data Repository abstraction for the trip/photo store.
Supports CSV (dev), MongoDB (production) and in-memory collections.

The store is owned by an external collaborator; this layer only reads it.
Every call to ``load_snapshot`` reads the current collections afresh so a
request sees one consistent snapshot and nothing is cached across requests.
"""

import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from .config import Settings
from .core.exceptions import DataUnavailableError
from .core.models import GeoPoint, GeotaggedPhoto, TravelSnapshot, Trip

logger = logging.getLogger(__name__)

TRIP_COLUMNS = ["id", "title", "location", "city", "country", "start_date", "end_date"]
PHOTO_COLUMNS = [
    "id", "trip_id", "url", "latitude", "longitude", "location",
    "city", "country", "caption", "captured_at", "uploaded_at",
]


def _clean(value: Any) -> Optional[Any]:
    """Map pandas missing values (NaN, NaT, None) to None."""
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    return value


def _as_id(value: Any) -> Optional[str]:
    value = _clean(value)
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _as_text(value: Any) -> Optional[str]:
    value = _clean(value)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_datetime(value: Any):
    value = _clean(value)
    if value is None:
        return None
    return value.to_pydatetime()


def _with_columns(df: pd.DataFrame, columns: List[str]) -> pd.DataFrame:
    df = df.copy()
    for column in columns:
        if column not in df.columns:
            df[column] = None
    return df


def trips_from_frame(df: pd.DataFrame) -> List[Trip]:
    """Convert a raw trips DataFrame into Trip records."""
    df = _with_columns(df, TRIP_COLUMNS)
    for column in ("start_date", "end_date"):
        df[column] = pd.to_datetime(df[column], errors="coerce", utc=True, format="ISO8601")

    trips = []
    for row in df.to_dict(orient="records"):
        trip_id = _as_id(row["id"])
        if trip_id is None:
            logger.warning("Skipping trip row without id")
            continue
        trips.append(Trip(
            id=trip_id,
            title=_as_text(row["title"]),
            location=_as_text(row["location"]) or "",
            city=_as_text(row["city"]),
            country=_as_text(row["country"]),
            start_date=_as_datetime(row["start_date"]),
            end_date=_as_datetime(row["end_date"]),
        ))
    return trips


def photos_from_frame(df: pd.DataFrame) -> List[GeotaggedPhoto]:
    """
    Convert a raw photos DataFrame into GeotaggedPhoto records.

    Unparseable or out-of-range coordinates are dropped (the photo is kept
    without coordinates). ``captured_at`` falls back to ``uploaded_at``.
    """
    df = _with_columns(df, PHOTO_COLUMNS)
    df["latitude"] = pd.to_numeric(df["latitude"], errors="coerce")
    df["longitude"] = pd.to_numeric(df["longitude"], errors="coerce")
    for column in ("captured_at", "uploaded_at"):
        df[column] = pd.to_datetime(df[column], errors="coerce", utc=True, format="ISO8601")

    photos = []
    invalid_coordinates = 0
    for row in df.to_dict(orient="records"):
        photo_id = _as_id(row["id"])
        if photo_id is None:
            logger.warning("Skipping photo row without id")
            continue

        coordinates = None
        lat, lng = _clean(row["latitude"]), _clean(row["longitude"])
        if lat is not None and lng is not None:
            point = GeoPoint(float(lat), float(lng))
            if point.is_valid():
                coordinates = point
            else:
                invalid_coordinates += 1

        photos.append(GeotaggedPhoto(
            id=photo_id,
            url=_as_text(row["url"]) or "",
            coordinates=coordinates,
            captured_at=_as_datetime(row["captured_at"]) or _as_datetime(row["uploaded_at"]),
            location_label=_as_text(row["location"]),
            trip_id=_as_id(row["trip_id"]),
            city=_as_text(row["city"]),
            country=_as_text(row["country"]),
            caption=_as_text(row["caption"]),
        ))

    if invalid_coordinates:
        logger.warning(f"Ignored out-of-range coordinates on {invalid_coordinates} photos")
    return photos


class TravelRepository(ABC):
    """Abstract base class for read-only trip/photo access."""

    @abstractmethod
    def load_snapshot(self) -> TravelSnapshot:
        """
        Read the current trip and photo collections.

        Raises:
            DataUnavailableError: if the store cannot be read
        """
        pass

    def describe(self) -> str:
        """Short human-readable description for health checks."""
        return self.__class__.__name__


class InMemoryRepository(TravelRepository):
    """Repository over in-process collections (tests, embedding)."""

    def __init__(self, trips: Iterable[Trip] = (), photos: Iterable[GeotaggedPhoto] = ()):
        self._trips = list(trips)
        self._photos = list(photos)

    def load_snapshot(self) -> TravelSnapshot:
        return TravelSnapshot(trips=list(self._trips), photos=list(self._photos))

    def describe(self) -> str:
        return f"memory ({len(self._trips)} trips, {len(self._photos)} photos)"


class CSVRepository(TravelRepository):
    """CSV-based repository (for development): trips.csv and photos.csv."""

    def __init__(self, data_path: str):
        self.data_path = data_path

    def _read(self, name: str) -> pd.DataFrame:
        path = os.path.join(self.data_path, name)
        try:
            return pd.read_csv(path, dtype={"id": str, "trip_id": str})
        except pd.errors.EmptyDataError:
            return pd.DataFrame()
        except (OSError, pd.errors.ParserError) as e:
            logger.error(f"Failed to read {path}: {e}")
            raise DataUnavailableError(f"Cannot read {name}: {e}", source=path) from e

    def load_snapshot(self) -> TravelSnapshot:
        trips = trips_from_frame(self._read("trips.csv"))
        photos = photos_from_frame(self._read("photos.csv"))
        return TravelSnapshot(trips=trips, photos=photos)

    def describe(self) -> str:
        return f"csv ({self.data_path})"


class MongoDBRepository(TravelRepository):
    """MongoDB-based repository (for production): ``trips`` and ``photos`` collections."""

    def __init__(
        self,
        mongo_uri: str = "mongodb://localhost:27017",
        db_name: str = "wayfinder",
    ):
        """
        Initialize MongoDB repository.

        Args:
            mongo_uri: MongoDB connection string
            db_name: Database name
        """
        from pymongo import MongoClient

        self.mongo_uri = mongo_uri
        self.db_name = db_name
        # MongoClient connects lazily; failures surface on first read
        self.client = MongoClient(mongo_uri, serverSelectionTimeoutMS=5000)
        self.db = self.client[db_name]

    def load_snapshot(self) -> TravelSnapshot:
        from pymongo.errors import PyMongoError

        try:
            trip_docs: List[Dict[str, Any]] = list(self.db.trips.find({}, {"_id": 0}))
            photo_docs: List[Dict[str, Any]] = list(self.db.photos.find({}, {"_id": 0}))
        except PyMongoError as e:
            logger.error(f"MongoDB read failed: {e}")
            raise DataUnavailableError(f"Cannot read trips/photos: {e}", source=self.db_name) from e

        return TravelSnapshot(
            trips=trips_from_frame(pd.DataFrame(trip_docs)),
            photos=photos_from_frame(pd.DataFrame(photo_docs)),
        )

    def describe(self) -> str:
        return f"mongo ({self.db_name})"

    def close(self):
        """Close MongoDB connection."""
        if self.client:
            self.client.close()


def create_repository(settings: Settings) -> TravelRepository:
    """
    Factory function to create the configured repository.

    Args:
        settings: Application settings (STORE_BACKEND selects the backend)

    Returns:
        TravelRepository instance
    """
    backend = settings.STORE_BACKEND.lower()
    if backend == "mongo":
        return MongoDBRepository(settings.MONGODB_URI, settings.MONGODB_DB_NAME)
    if backend == "csv":
        return CSVRepository(settings.DATA_DIR)
    raise ValueError(f"Unknown STORE_BACKEND '{settings.STORE_BACKEND}'. Valid: csv, mongo")
