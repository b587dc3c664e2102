"""
Tests for Location Analytics over geotagged photos.
"""

import logging

import pytest

from conftest import LYON, PARIS, utc
from wayfinder.core.analytics import LocationAnalytics, cluster_key
from wayfinder.core.exceptions import ValidationError
from wayfinder.core.models import GeoPoint, GeotaggedPhoto


class TestClusterKey:
    """Tests for the grouping key."""

    def test_label_wins(self):
        photo = GeotaggedPhoto(id="a", coordinates=PARIS, location_label=" Paris, France ")
        assert cluster_key(photo) == "Paris, France"

    def test_rounded_coordinates(self):
        photo = GeotaggedPhoto(id="a", coordinates=GeoPoint(45.7640, 4.8357))
        assert cluster_key(photo) == "45.76, 4.84"

    def test_blank_label_falls_back(self):
        photo = GeotaggedPhoto(id="a", coordinates=GeoPoint(-33.8688, 151.2093), location_label="  ")
        assert cluster_key(photo) == "-33.87, 151.21"


class TestClusters:
    """Tests for LocationAnalytics.clusters and summary."""

    def test_photos_without_coordinates_excluded(self, sample_photos):
        analytics = LocationAnalytics(sample_photos)
        assert [p.id for p in analytics.geotagged()] == ["p1", "p2", "p3", "p4", "p5"]

    def test_clusters(self, sample_photos):
        clusters = {c.key: c for c in LocationAnalytics(sample_photos).clusters()}

        assert set(clusters) == {"Paris, France", "45.76, 4.84"}
        paris = clusters["Paris, France"]
        assert paris.photo_count == 3
        assert paris.first_visit == utc(2025, 4, 1, 8)
        assert paris.last_visit == utc(2025, 4, 3, 10)

    def test_first_photo_is_representative(self, sample_photos):
        clusters = {c.key: c for c in LocationAnalytics(sample_photos).clusters()}
        assert clusters["Paris, France"].representative_coordinate == PARIS
        assert clusters["45.76, 4.84"].representative_coordinate == LYON

    def test_undated_photos_counted(self, sample_photos):
        clusters = {c.key: c for c in LocationAnalytics(sample_photos).clusters()}
        lyon = clusters["45.76, 4.84"]

        assert lyon.photo_count == 2
        assert lyon.first_visit == lyon.last_visit == utc(2025, 7, 20, 12)

    def test_summary(self, sample_photos):
        summary = LocationAnalytics(sample_photos).summary()

        assert summary["total_geotagged_photos"] == 5
        assert summary["unique_locations"] == 2
        assert [c.key for c in summary["top_locations"]] == ["Paris, France", "45.76, 4.84"]
        assert [c.key for c in summary["recent_locations"]] == ["45.76, 4.84", "Paris, France"]

    def test_unique_locations_equals_distinct_keys(self, sample_photos):
        analytics = LocationAnalytics(sample_photos)
        keys = {cluster_key(p) for p in analytics.geotagged()}
        assert analytics.summary()["unique_locations"] == len(keys)

    def test_summary_truncation(self):
        photos = []
        for i in range(15):
            for j in range(i + 1):
                photos.append(GeotaggedPhoto(
                    id=f"{i}-{j}",
                    coordinates=GeoPoint(10.0 + i, 20.0),
                    captured_at=utc(2025, 1, 1 + i),
                ))
        summary = LocationAnalytics(photos).summary()

        assert summary["unique_locations"] == 15
        assert len(summary["top_locations"]) == 10
        assert [c.photo_count for c in summary["top_locations"]] == list(range(15, 5, -1))
        assert len(summary["recent_locations"]) == 5
        assert summary["recent_locations"][0].last_visit == utc(2025, 1, 15)

    def test_undated_clusters_sort_last_in_recent(self):
        photos = [
            GeotaggedPhoto(id="a", coordinates=GeoPoint(1.0, 1.0)),
            GeotaggedPhoto(id="b", coordinates=GeoPoint(2.0, 2.0), captured_at=utc(2024, 5, 1)),
        ]
        recent = LocationAnalytics(photos).summary()["recent_locations"]
        assert [c.key for c in recent] == ["2.00, 2.00", "1.00, 1.00"]

    def test_empty_collection(self):
        summary = LocationAnalytics([]).summary()

        assert summary["total_geotagged_photos"] == 0
        assert summary["unique_locations"] == 0
        assert summary["top_locations"] == []
        assert summary["recent_locations"] == []


class TestNearby:
    """Tests for the proximity scan."""

    @pytest.fixture
    def photos(self):
        return [
            GeotaggedPhoto(id="A", coordinates=PARIS),
            GeotaggedPhoto(id="B", coordinates=LYON),
            GeotaggedPhoto(id="C"),
        ]

    def test_small_radius(self, photos):
        result = LocationAnalytics(photos).nearby(PARIS, 50)
        assert [p.id for p in result] == ["A"]

    def test_large_radius_keeps_collection_order(self, photos):
        result = LocationAnalytics(photos).nearby(PARIS, 500)
        assert [p.id for p in result] == ["A", "B"]

    def test_zero_radius_includes_exact_point(self, photos):
        result = LocationAnalytics(photos).nearby(PARIS, 0)
        assert [p.id for p in result] == ["A"]

    def test_every_result_within_radius(self, sample_photos):
        analytics = LocationAnalytics(sample_photos)
        result = analytics.nearby(PARIS, 5)

        assert {p.id for p in result} == {"p1", "p2", "p3"}
        assert all(d <= 5 for d in analytics.distances_from(PARIS, result))

    def test_limit(self, photos):
        result = LocationAnalytics(photos).nearby(PARIS, 500, limit=1)
        assert [p.id for p in result] == ["A"]

    def test_negative_radius_rejected(self, photos):
        with pytest.raises(ValidationError) as exc_info:
            LocationAnalytics(photos).nearby(PARIS, -1)
        assert exc_info.value.field == "radius_km"

    @pytest.mark.parametrize("radius", [float("nan"), float("inf")])
    def test_non_finite_radius_rejected(self, photos, radius):
        with pytest.raises(ValidationError) as exc_info:
            LocationAnalytics(photos).nearby(PARIS, radius)
        assert exc_info.value.field == "radius_km"

    def test_invalid_center_rejected(self, photos):
        with pytest.raises(ValidationError):
            LocationAnalytics(photos).nearby(GeoPoint(100.0, 0.0), 10)

    def test_invalid_limit_rejected(self, photos):
        with pytest.raises(ValidationError):
            LocationAnalytics(photos).nearby(PARIS, 10, limit=0)

    def test_scan_limit_truncates_with_warning(self, photos, caplog):
        analytics = LocationAnalytics(photos, scan_limit=1)

        with caplog.at_level(logging.WARNING):
            result = analytics.nearby(PARIS, 500)

        assert [p.id for p in result] == ["A"]
        assert "truncated" in caplog.text

    def test_empty_collection(self):
        assert LocationAnalytics([]).nearby(PARIS, 100) == []


class TestTripRoute:
    """Tests for trip route reconstruction."""

    def test_ordered_by_capture_time(self, sample_photos):
        route = LocationAnalytics(sample_photos).trip_route("t1")

        assert [p["photo_id"] for p in route] == ["p3", "p1", "p2"]
        assert route[0]["timestamp"] == "2025-04-01T08:00:00+00:00"
        assert route[0]["address"] == "Paris, France"
        assert route[0]["photo_url"] == "/p3.jpg"

    def test_undated_last_and_ungeotagged_skipped(self, sample_photos):
        route = LocationAnalytics(sample_photos).trip_route("t2")

        assert [p["photo_id"] for p in route] == ["p4", "p5"]
        assert route[1]["timestamp"] is None

    def test_unknown_trip(self, sample_photos):
        assert LocationAnalytics(sample_photos).trip_route("nope") == []
