"""Tests for the nearest-store ranking."""
from __future__ import annotations

import math

import pytest

from store_locator.services.geospatial import InvalidCoordinate
from store_locator.services.nearest import RankedStore, StoreRecord, find_nearest


def _store(store_id: int, lat: float, lon: float, title: str | None = None) -> StoreRecord:
    return StoreRecord(id=store_id, title=title or f"Store {store_id}", address=None, lat=lat, lon=lon)


class TestFindNearestScenarios:
    """Reference scenarios for find_nearest."""

    def test_candidate_at_query_point(self):
        """A store at the query point is returned with distance ~0."""
        result = find_nearest(13.0843, 80.2705, [_store(1, 13.0843, 80.2705)])
        assert len(result) == 1
        assert result[0].store.id == 1
        assert result[0].distance == pytest.approx(0.0, abs=1e-9)

    def test_equator_candidates_nearest_first(self):
        """(0,1) comes before (0,2) from a query at the origin."""
        far = _store(2, 0, 2)
        near = _store(1, 0, 1)
        result = find_nearest(0, 0, [far, near])

        assert [r.store.id for r in result] == [1, 2]
        assert result[0].distance == pytest.approx(111.19, abs=0.01)
        assert result[1].distance == pytest.approx(222.39, abs=0.01)

    def test_limit_larger_than_candidates(self):
        """limit=5 with 3 candidates returns all 3 sorted."""
        candidates = [_store(1, 0, 3), _store(2, 0, 1), _store(3, 0, 2)]
        result = find_nearest(0, 0, candidates, limit=5)
        assert [r.store.id for r in result] == [2, 3, 1]

    def test_empty_candidates(self):
        assert find_nearest(0, 0, []) == []

    def test_invalid_query_latitude(self):
        with pytest.raises(InvalidCoordinate):
            find_nearest(91, 0, [_store(1, 0, 0)])


class TestFindNearestProperties:
    """Invariants of find_nearest over realistic data."""

    def test_default_limit_is_five(self, chennai_records):
        result = find_nearest(13.0843, 80.2705, chennai_records)
        assert len(result) == 5
        assert [r.store.id for r in result] == [1, 2, 3, 4, 5]

    def test_distances_non_decreasing(self, chennai_records):
        result = find_nearest(12.9716, 77.5946, chennai_records, limit=len(chennai_records))
        distances = [r.distance for r in result]
        assert distances == sorted(distances)
        assert result[0].store.title == "Bengaluru"

    @pytest.mark.parametrize("limit", [1, 2, 3, 7, 20])
    def test_length_is_min_of_limit_and_count(self, chennai_records, limit):
        result = find_nearest(13.0843, 80.2705, chennai_records, limit=limit)
        assert len(result) == min(limit, len(chennai_records))

    def test_deterministic(self, chennai_records):
        first = find_nearest(13.0, 80.0, chennai_records, limit=4)
        second = find_nearest(13.0, 80.0, chennai_records, limit=4)
        assert first == second

    def test_accepts_any_iterable(self, chennai_records):
        from_generator = find_nearest(13.0843, 80.2705, (r for r in chennai_records), limit=3)
        from_list = find_nearest(13.0843, 80.2705, chennai_records, limit=3)
        assert from_generator == from_list

    def test_ties_keep_input_order(self):
        """Stores at the same distance keep the order they were supplied in."""
        candidates = [_store(10, 0, 1), _store(11, 0, -1), _store(12, 0, 1.5), _store(13, 0, 1)]
        result = find_nearest(0, 0, candidates, limit=3)
        assert [r.store.id for r in result] == [10, 11, 13]

    def test_partial_selection_matches_full_sort(self, chennai_records):
        full = find_nearest(15.0, 75.0, chennai_records, limit=len(chennai_records))
        top = find_nearest(15.0, 75.0, chennai_records, limit=3)
        assert top == full[:3]

    def test_does_not_mutate_candidates(self, chennai_records):
        snapshot = list(chennai_records)
        find_nearest(0, 0, chennai_records, limit=2)
        assert chennai_records == snapshot


class TestFindNearestValidation:
    """Input validation for find_nearest."""

    @pytest.mark.parametrize("lat, lon", [(0, 181), (-91, 0), (math.nan, 0), (0, math.inf)])
    def test_rejects_bad_query_point(self, lat, lon):
        with pytest.raises(InvalidCoordinate):
            find_nearest(lat, lon, [])

    def test_bad_query_point_with_empty_candidates_still_fails(self):
        with pytest.raises(InvalidCoordinate):
            find_nearest(91, 0, [])

    @pytest.mark.parametrize("limit", [0, -1, 2.5, True])
    def test_rejects_bad_limit(self, limit):
        with pytest.raises(ValueError, match="limit"):
            find_nearest(0, 0, [_store(1, 0, 1)], limit=limit)

    def test_skips_candidates_with_invalid_coordinates(self):
        candidates = [
            _store(1, 0, 2),
            StoreRecord(id=2, title="No pin", address=None, lat=math.nan, lon=0.0),
            StoreRecord(id=3, title="Out of range", address=None, lat=95.0, lon=0.0),
            _store(4, 0, 1),
        ]
        result = find_nearest(0, 0, candidates, limit=5)
        assert [r.store.id for r in result] == [4, 1]


class TestRankedStore:
    """Tests for RankedStore wire conversion."""

    def test_to_dict_fields(self):
        ranked = RankedStore(
            store=StoreRecord(id=7, title="Adyar", address="Adyar, Chennai", lat=13.0012, lon=80.2565),
            distance=9.4,
        )
        assert ranked.to_dict() == {
            "id": 7,
            "title": "Adyar",
            "address": "Adyar, Chennai",
            "lat": 13.0012,
            "lon": 80.2565,
            "distance": 9.4,
        }

    def test_to_dict_null_address(self):
        ranked = RankedStore(store=_store(1, 0, 0), distance=0.0)
        assert ranked.to_dict()["address"] is None
