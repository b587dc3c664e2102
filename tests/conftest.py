"""Shared fixtures for the Wayfinder test suite."""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from wayfinder.core.models import GeoPoint, GeotaggedPhoto, Trip


PARIS = GeoPoint(48.8566, 2.3522)
LYON = GeoPoint(45.7640, 4.8357)


def destination_record(**overrides):
    """
    Raw catalog record with neutral scoring attributes.

    With an empty history and a 7 day trip this record scores exactly
    85 (base 70 + duration fit 15) under a zero jitter.
    """
    record = {
        "id": "test-1",
        "name": "Testville",
        "country": "Testland",
        "region": "Test Region",
        "category": "nature",
        "description": "Quiet valley with lakes and forest trails.",
        "highlights": ["Lake", "Forest"],
        "best_time": "All year",
        "duration_range": [3, 7],
        "difficulty": "easy",
        "budget_tier": "medium",
        "rating": 4.0,
        "latitude": 10.0,
        "longitude": 10.0,
        "weather_score": 70,
        "popularity_score": 50,
        "activities": ["walking"],
        "cuisine": ["bread"],
        "safety_rating": 80,
        "tourist_season": "medium",
        "accessibility": False,
    }
    record.update(overrides)
    return record


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def make_record():
    return destination_record


@pytest.fixture
def sample_photos():
    """Three labelled Paris photos, two unlabelled Lyon photos, one without GPS."""
    return [
        GeotaggedPhoto(id="p1", url="/p1.jpg", coordinates=PARIS, captured_at=utc(2025, 4, 2, 9),
                       location_label="Paris, France", trip_id="t1"),
        GeotaggedPhoto(id="p2", url="/p2.jpg", coordinates=GeoPoint(48.8606, 2.3376),
                       captured_at=utc(2025, 4, 3, 10), location_label="Paris, France", trip_id="t1"),
        GeotaggedPhoto(id="p3", url="/p3.jpg", coordinates=GeoPoint(48.8530, 2.3499),
                       captured_at=utc(2025, 4, 1, 8), location_label="Paris, France", trip_id="t1"),
        GeotaggedPhoto(id="p4", url="/p4.jpg", coordinates=LYON, captured_at=utc(2025, 7, 20, 12),
                       trip_id="t2"),
        GeotaggedPhoto(id="p5", url="/p5.jpg", coordinates=GeoPoint(45.7612, 4.8389),
                       captured_at=None, trip_id="t2"),
        GeotaggedPhoto(id="p6", url="/p6.jpg", coordinates=None, captured_at=utc(2025, 7, 21, 12),
                       location_label="Lyon, France", trip_id="t2"),
    ]


@pytest.fixture
def sample_trips():
    return [
        Trip(id="t1", location="Paris, France", title="Spring in Paris",
             start_date=utc(2025, 4, 1), end_date=utc(2025, 4, 6)),
        Trip(id="t2", location="Lyon, France", title="Lyon weekend",
             start_date=utc(2025, 7, 19), end_date=utc(2025, 7, 22)),
    ]
