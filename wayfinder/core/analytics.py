"""
Location Analytics over a user's geotagged photos.

Clustering:
    Photos are grouped by their location label when present, otherwise
    by a coordinate key rounded to 2 decimal places (~1.1 km grid cell),
    which merges near-duplicate GPS fixes.

Proximity:
    ``nearby`` is a linear scan using the vectorized haversine distance.
    O(n) is acceptable at personal-library scale; no spatial index is used.

Photos without usable coordinates are excluded from every operation.
"""

import logging
import math
from typing import Any, Dict, Iterable, List, Optional

import numpy as np

from .exceptions import ValidationError
from .geo import validate_geo_point, vectorized_distance_km
from .models import GeoPoint, GeotaggedPhoto, LocationCluster, as_utc

logger = logging.getLogger(__name__)

TOP_LOCATIONS = 10
RECENT_LOCATIONS = 5


def cluster_key(photo: GeotaggedPhoto) -> str:
    """Grouping key: the location label, or the rounded coordinate cell."""
    if photo.location_label and photo.location_label.strip():
        return photo.location_label.strip()
    return f"{photo.coordinates.latitude:.2f}, {photo.coordinates.longitude:.2f}"


class LocationAnalytics:
    """
    Request-scoped analytics over one photo collection.

    Attributes:
        scan_limit: Optional upper bound on photos scanned by ``nearby``

    Example:
        >>> analytics = LocationAnalytics(photos)
        >>> paris = GeoPoint(48.8566, 2.3522)
        >>> [p.id for p in analytics.nearby(paris, 50)]
    """

    def __init__(self, photos: Iterable[GeotaggedPhoto], scan_limit: Optional[int] = None):
        self._photos = [p for p in (photos or []) if p.has_coordinates]
        self.scan_limit = scan_limit
        self._clusters: Optional[List[LocationCluster]] = None

    def geotagged(self) -> List[GeotaggedPhoto]:
        """Photos carrying valid coordinates, in collection order."""
        return list(self._photos)

    def clusters(self) -> List[LocationCluster]:
        """Location clusters in first-seen order."""
        if self._clusters is not None:
            return list(self._clusters)

        groups: Dict[str, LocationCluster] = {}
        for photo in self._photos:
            key = cluster_key(photo)
            cluster = groups.get(key)
            if cluster is None:
                cluster = LocationCluster(key=key, representative_coordinate=photo.coordinates)
                groups[key] = cluster

            cluster.photo_count += 1
            if photo.captured_at is not None:
                taken = as_utc(photo.captured_at)
                if cluster.first_visit is None or taken < cluster.first_visit:
                    cluster.first_visit = taken
                if cluster.last_visit is None or taken > cluster.last_visit:
                    cluster.last_visit = taken

        self._clusters = list(groups.values())
        return list(self._clusters)

    def nearby(
        self,
        center: GeoPoint,
        radius_km: float,
        limit: Optional[int] = None
    ) -> List[GeotaggedPhoto]:
        """
        Photos within ``radius_km`` of ``center``, in collection order.

        Raises:
            ValidationError: for a negative radius, a non-positive limit or
                an out-of-range center
        """
        validate_geo_point(center.latitude, center.longitude, field="center")
        if radius_km is None or not math.isfinite(radius_km) or radius_km < 0:
            raise ValidationError("radius_km", f"must be a finite number >= 0, got {radius_km}")
        if limit is not None and limit < 1:
            raise ValidationError("limit", f"must be positive, got {limit}")

        candidates = self._photos
        if self.scan_limit is not None and len(candidates) > self.scan_limit:
            logger.warning(
                f"Nearby scan truncated to {self.scan_limit} of {len(candidates)} geotagged photos"
            )
            candidates = candidates[:self.scan_limit]

        if not candidates:
            return []

        lats = np.array([p.coordinates.latitude for p in candidates], dtype=np.float64)
        lngs = np.array([p.coordinates.longitude for p in candidates], dtype=np.float64)
        distances = vectorized_distance_km(center, lats, lngs)

        matches = [photo for photo, d in zip(candidates, distances) if d <= radius_km]
        if limit is not None:
            matches = matches[:limit]

        logger.debug(f"Nearby query: {len(matches)} photos within {radius_km}km")
        return matches

    def distances_from(self, center: GeoPoint, photos: List[GeotaggedPhoto]) -> List[float]:
        """Distances in km from ``center`` to each photo."""
        if not photos:
            return []
        lats = np.array([p.coordinates.latitude for p in photos], dtype=np.float64)
        lngs = np.array([p.coordinates.longitude for p in photos], dtype=np.float64)
        return [float(d) for d in vectorized_distance_km(center, lats, lngs)]

    def summary(self) -> Dict[str, Any]:
        """
        Location analytics summary.

        Returns:
            Dict with total_geotagged_photos, unique_locations,
            top_locations (by photo count) and recent_locations (by last visit)
        """
        clusters = self.clusters()
        by_count = sorted(clusters, key=lambda c: c.photo_count, reverse=True)
        by_recency = self._sort_by_last_visit(by_count)

        return {
            "total_geotagged_photos": len(self._photos),
            "unique_locations": len(clusters),
            "top_locations": by_count[:TOP_LOCATIONS],
            "recent_locations": by_recency[:RECENT_LOCATIONS],
        }

    @staticmethod
    def _sort_by_last_visit(clusters: List[LocationCluster]) -> List[LocationCluster]:
        dated = [c for c in clusters if c.last_visit is not None]
        undated = [c for c in clusters if c.last_visit is None]
        dated.sort(key=lambda c: c.last_visit, reverse=True)
        return dated + undated

    def trip_route(self, trip_id: str) -> List[Dict[str, Any]]:
        """
        Geotagged photos of one trip as route points ordered by capture time.

        Photos without a capture time are placed last.
        """
        points = [p for p in self._photos if p.trip_id is not None and str(p.trip_id) == str(trip_id)]
        dated = sorted((p for p in points if p.captured_at), key=lambda p: as_utc(p.captured_at))
        undated = [p for p in points if not p.captured_at]

        return [
            {
                "photo_id": p.id,
                "latitude": p.coordinates.latitude,
                "longitude": p.coordinates.longitude,
                "timestamp": as_utc(p.captured_at).isoformat() if p.captured_at else None,
                "address": p.location_label,
                "photo_url": p.url,
                "caption": p.caption,
            }
            for p in dated + undated
        ]
