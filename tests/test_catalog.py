"""
Tests for the Destination Catalog loader and validation.
"""

import json
import logging

import pytest

from conftest import destination_record
from wayfinder.core.catalog import CatalogError, DestinationCatalog, parse_destination
from wayfinder.core.models import BudgetTier, Category, TouristSeason


class TestParseDestination:
    """Tests for parse_destination."""

    def test_valid_record(self):
        destination = parse_destination(destination_record(estimated_cost=1200))

        assert destination.id == "test-1"
        assert destination.category == Category.NATURE
        assert destination.budget_tier == BudgetTier.MEDIUM
        assert destination.tourist_season == TouristSeason.MEDIUM
        assert destination.duration_range == (3, 7)
        assert destination.min_duration_days == 3
        assert destination.max_duration_days == 7
        assert destination.estimated_cost == 1200.0
        assert destination.highlights == ("Lake", "Forest")

    def test_searchable_text(self):
        destination = parse_destination(
            destination_record(activities=["Kayaking"], highlights=["Glacier"])
        )
        text = destination.searchable_text()

        assert "testville" in text
        assert "testland" in text
        assert "test region" in text
        assert "forest trails" in text
        assert "kayaking" in text
        # Highlights are not searchable
        assert "glacier" not in text

    @pytest.mark.parametrize("overrides", [
        {"name": ""},
        {"category": "space"},
        {"budget_tier": "luxury"},
        {"tourist_season": "peak"},
        {"duration_range": [5, 3]},
        {"duration_range": [0, 3]},
        {"duration_range": [4]},
        {"latitude": 120.0},
        {"weather_score": 140},
        {"safety_rating": -1},
    ])
    def test_invalid_record(self, overrides):
        with pytest.raises(ValueError):
            parse_destination(destination_record(**overrides))


class TestDestinationCatalog:
    """Tests for DestinationCatalog."""

    def test_shipped_catalog_loads(self):
        catalog = DestinationCatalog.from_json()

        assert len(catalog) >= 12
        categories = {d.category for d in catalog}
        assert categories == set(Category)

    def test_invalid_entries_dropped_with_warning(self, caplog):
        records = [
            destination_record(id="good"),
            destination_record(id="bad", category="space"),
            destination_record(id="also-good", name="Other"),
        ]
        with caplog.at_level(logging.WARNING):
            catalog = DestinationCatalog(records)

        assert [d.id for d in catalog.get_all()] == ["good", "also-good"]
        assert "rejected 1 entries" in caplog.text

    def test_duplicate_ids_keep_first(self):
        records = [
            destination_record(id="dup", name="First"),
            destination_record(id="dup", name="Second"),
        ]
        catalog = DestinationCatalog(records)

        assert len(catalog) == 1
        assert catalog.get("dup").name == "First"

    def test_get_unknown(self):
        assert DestinationCatalog([destination_record()]).get("nope") is None

    def test_get_all_is_immutable(self):
        catalog = DestinationCatalog([destination_record()])
        assert isinstance(catalog.get_all(), tuple)

    def test_from_json_bare_list(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps([destination_record(id="a"), destination_record(id="b")]))

        catalog = DestinationCatalog.from_json(str(path))
        assert [d.id for d in catalog] == ["a", "b"]

    def test_from_json_wrapped(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({"destinations": [destination_record(id="a")]}))

        assert len(DestinationCatalog.from_json(str(path))) == 1

    def test_from_json_missing_file(self, tmp_path):
        with pytest.raises(CatalogError):
            DestinationCatalog.from_json(str(tmp_path / "missing.json"))

    def test_from_json_malformed(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text("{not json")

        with pytest.raises(CatalogError):
            DestinationCatalog.from_json(str(path))
