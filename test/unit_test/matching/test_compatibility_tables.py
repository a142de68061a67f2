"""Unit tests for the compatibility tables and distance helpers."""

import pytest

from travel_buddy.matching.compatibility import (
    ALL_PERSONALITIES,
    DEFAULT_BUDGET_RANGE,
    budget_range,
    common_interests,
    compatible_personalities,
    complementary_personalities,
    jaccard,
)
from travel_buddy.matching.geo import haversine_km, rounded_distance_km

LONDON = [-0.1278, 51.5074]
PARIS = [2.3522, 48.8566]


class TestPersonalities:
    def test_known_type(self):
        assert compatible_personalities("planner") == ["relaxed", "flexible", "planner", "cultural"]

    @pytest.mark.parametrize("personality", [None, "", "wanderer"])
    def test_unknown_type_is_compatible_with_everyone(self, personality):
        assert compatible_personalities(personality) == ALL_PERSONALITIES

    def test_complementary_of_unknown_type_is_empty(self):
        assert complementary_personalities(None) == []
        assert "cultural" in complementary_personalities("adventurer")


class TestBudgets:
    def test_known_budget(self):
        assert budget_range("luxury") == ["high", "luxury"]

    def test_unknown_budget_uses_default(self):
        assert budget_range("comfortable") == DEFAULT_BUDGET_RANGE
        assert budget_range(None) == DEFAULT_BUDGET_RANGE


class TestOverlap:
    def test_common_interests_keep_first_order(self):
        assert common_interests(["food", "art", "nature"], ["nature", "food"]) == ["food", "nature"]

    @pytest.mark.parametrize("first, second", [(None, ["food"]), (["food"], []), ([], [])])
    def test_common_interests_with_missing_side(self, first, second):
        assert common_interests(first, second) == []

    def test_jaccard(self):
        assert jaccard(["a", "b"], ["b", "c"]) == pytest.approx(1 / 3)
        assert jaccard([], None) == 0.0


class TestDistance:
    def test_same_point(self):
        assert haversine_km(PARIS, PARIS) == pytest.approx(0.0)

    def test_london_to_paris(self):
        assert 340 <= haversine_km(LONDON, PARIS) <= 347

    def test_symmetric(self):
        assert haversine_km(LONDON, PARIS) == pytest.approx(haversine_km(PARIS, LONDON))

    def test_rounded(self):
        assert rounded_distance_km(LONDON, PARIS) == round(haversine_km(LONDON, PARIS))

    @pytest.mark.parametrize("first, second", [(None, PARIS), (LONDON, None), ([1.0], PARIS), ([], [])])
    def test_missing_point(self, first, second):
        assert rounded_distance_km(first, second) is None
