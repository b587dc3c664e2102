"""
Tests for the trip/photo repository layer.
"""

import pandas as pd
import pytest
from pydantic import ValidationError as PydanticValidationError

from conftest import PARIS, utc
from wayfinder.config import Settings
from wayfinder.core.exceptions import DataUnavailableError
from wayfinder.core.models import GeotaggedPhoto, Trip
from wayfinder.repository import (
    CSVRepository,
    InMemoryRepository,
    create_repository,
    photos_from_frame,
    trips_from_frame,
)

TRIPS_CSV = """id,title,location,start_date,end_date
1,Spring in Paris,"Paris, France",2025-04-01,2025-04-06
2,Kyoto,Kyoto,2025-10-10T09:00:00Z,
"""

PHOTOS_CSV = """id,trip_id,url,latitude,longitude,location,captured_at,uploaded_at
10,1,/a.jpg,48.8566,2.3522,"Paris, France",2025-04-02T09:00:00Z,2025-04-08T10:00:00Z
11,1,/b.jpg,,,,,2025-04-08T10:00:00Z
12,2,/c.jpg,95.0,2.0,,2025-10-11T09:00:00Z,
13,2,/d.jpg,35.0116,135.7681,,,2025-10-12T18:30:00Z
"""


@pytest.fixture
def csv_dir(tmp_path):
    (tmp_path / "trips.csv").write_text(TRIPS_CSV)
    (tmp_path / "photos.csv").write_text(PHOTOS_CSV)
    return tmp_path


class TestFrameConversion:
    """Tests for DataFrame to record conversion."""

    def test_trips(self, csv_dir):
        snapshot = CSVRepository(str(csv_dir)).load_snapshot()
        trips = {t.id: t for t in snapshot.trips}

        assert set(trips) == {"1", "2"}
        assert trips["1"].location == "Paris, France"
        assert trips["1"].start_date == utc(2025, 4, 1)
        assert trips["1"].end_date == utc(2025, 4, 6)
        assert trips["2"].start_date == utc(2025, 10, 10, 9)
        assert trips["2"].end_date is None

    def test_photos(self, csv_dir):
        snapshot = CSVRepository(str(csv_dir)).load_snapshot()
        photos = {p.id: p for p in snapshot.photos}

        assert set(photos) == {"10", "11", "12", "13"}
        assert photos["10"].coordinates.latitude == pytest.approx(PARIS.latitude)
        assert photos["10"].coordinates.longitude == pytest.approx(PARIS.longitude)
        assert photos["10"].location_label == "Paris, France"
        assert photos["10"].trip_id == "1"
        assert photos["10"].captured_at == utc(2025, 4, 2, 9)

    def test_missing_coordinates(self, csv_dir):
        photos = {p.id: p for p in CSVRepository(str(csv_dir)).load_snapshot().photos}
        assert photos["11"].coordinates is None
        assert not photos["11"].has_coordinates

    def test_out_of_range_coordinates_dropped(self, csv_dir):
        photos = {p.id: p for p in CSVRepository(str(csv_dir)).load_snapshot().photos}
        assert photos["12"].coordinates is None

    def test_captured_at_falls_back_to_upload_time(self, csv_dir):
        photos = {p.id: p for p in CSVRepository(str(csv_dir)).load_snapshot().photos}
        assert photos["13"].captured_at == utc(2025, 10, 12, 18, 30)

    def test_missing_columns_tolerated(self):
        trips = trips_from_frame(pd.DataFrame([{"id": "a", "location": "Oslo, Norway"}]))
        photos = photos_from_frame(pd.DataFrame([{"id": "p", "latitude": 1.0, "longitude": 2.0}]))

        assert trips[0].start_date is None
        assert photos[0].coordinates.latitude == 1.0
        assert photos[0].captured_at is None

    def test_rows_without_id_skipped(self):
        trips = trips_from_frame(pd.DataFrame([{"id": None, "location": "Oslo"}, {"id": "b"}]))
        assert [t.id for t in trips] == ["b"]

    def test_empty_frames(self):
        assert trips_from_frame(pd.DataFrame()) == []
        assert photos_from_frame(pd.DataFrame()) == []


class TestCSVRepository:
    """Tests for CSVRepository failure modes."""

    def test_missing_directory_raises(self, tmp_path):
        repository = CSVRepository(str(tmp_path / "missing"))

        with pytest.raises(DataUnavailableError):
            repository.load_snapshot()

    def test_empty_files(self, tmp_path):
        (tmp_path / "trips.csv").write_text("")
        (tmp_path / "photos.csv").write_text("")

        snapshot = CSVRepository(str(tmp_path)).load_snapshot()
        assert snapshot.trips == []
        assert snapshot.photos == []

    def test_reads_fresh_data_each_call(self, csv_dir):
        repository = CSVRepository(str(csv_dir))
        assert len(repository.load_snapshot().trips) == 2

        (csv_dir / "trips.csv").write_text(TRIPS_CSV + "3,Oslo,\"Oslo, Norway\",2025-06-01,2025-06-03\n")
        assert len(repository.load_snapshot().trips) == 3

    def test_describe(self, csv_dir):
        assert CSVRepository(str(csv_dir)).describe() == f"csv ({csv_dir})"


class TestInMemoryRepository:
    """Tests for InMemoryRepository."""

    def test_snapshot_is_a_copy(self):
        repository = InMemoryRepository(
            trips=[Trip(id="t1")],
            photos=[GeotaggedPhoto(id="p1", coordinates=PARIS)]
        )
        snapshot = repository.load_snapshot()
        snapshot.trips.append(Trip(id="t2"))

        assert len(repository.load_snapshot().trips) == 1
        assert repository.describe() == "memory (1 trips, 1 photos)"


class TestSettings:
    """Tests for configuration bounds."""

    def test_max_suggestions_bounded(self):
        with pytest.raises(PydanticValidationError):
            Settings(MAX_SUGGESTIONS=20)

    def test_max_suggestions_default(self):
        assert Settings().MAX_SUGGESTIONS == 12


class TestCreateRepository:
    """Tests for the repository factory."""

    def test_csv_backend(self, tmp_path):
        repository = create_repository(Settings(STORE_BACKEND="csv", DATA_DIR=str(tmp_path)))
        assert isinstance(repository, CSVRepository)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_repository(Settings(STORE_BACKEND="sqlite"))
