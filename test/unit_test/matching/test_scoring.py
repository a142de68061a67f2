"""
Unit tests for the compatibility scorers.

Profiles are plain namespaces: the scorers only read attributes, so ORM
entities are not needed here.
"""

from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from travel_buddy.matching.scoring import (
    BASE_WEIGHTS,
    EnhancedScorer,
    behavioral_component,
    dynamic_weights,
    interests_component,
    logistics_component,
    personality_component,
    preference_match_score,
    profile_match_score,
    travel_component,
)

NOW = datetime(2026, 6, 1, 12, 0, 0)


def profile(**fields):
    defaults = dict(
        id=1,
        age=None,
        bio=None,
        personality_type=None,
        travel_preferences={},
        location=None,
        languages=[],
        profile_picture=None,
        last_active=None,
    )
    defaults.update(fields)
    return SimpleNamespace(**defaults)


class TestProfileMatchScore:
    def test_empty_profiles_score_the_base(self):
        assert profile_match_score(profile(), profile(), NOW) == 50

    def test_components_add_up(self):
        user = profile(
            age=30,
            personality_type="planner",
            travel_preferences={
                "budget": "luxury",
                "destinations": ["beaches", "cities"],
                "interests": ["food", "art", "nature"],
            },
        )
        other = profile(
            age=40,
            personality_type="adventurer",
            travel_preferences={
                "budget": "budget",
                "destinations": ["cities", "mountains"],
                "interests": ["art", "food"],
            },
        )

        # age within 12 years (+10), one shared destination (+5), two shared interests (+6)
        assert profile_match_score(user, other, NOW) == 71

    def test_bio_overlap_and_detailed_bio(self):
        user = profile(bio="love hiking mountains")
        other = profile(bio="I enjoy hiking in the mountains daily")

        # two shared long words (+4) and a bio longer than 20 characters (+3)
        assert profile_match_score(user, other, NOW) == 57

    @pytest.mark.parametrize(
        "last_active, expected",
        [(NOW - timedelta(days=1), 55), (NOW - timedelta(days=8), 50), (None, 50)],
    )
    def test_activity_bonus(self, last_active, expected):
        assert profile_match_score(profile(), profile(last_active=last_active), NOW) == expected

    def test_picture_bonus_only_counts_for_the_candidate(self):
        assert profile_match_score(profile(profile_picture="/uploads/me.jpg"), profile(), NOW) == 50
        assert profile_match_score(profile(), profile(profile_picture="/uploads/me.jpg"), NOW) == 55

    def test_score_is_capped(self):
        prefs = {
            "budget": "moderate",
            "destinations": ["beaches", "cities", "mountains"],
            "interests": ["food", "art", "nature", "history"],
        }
        user = profile(age=28, personality_type="cultural", travel_preferences=prefs)
        other = profile(
            age=29,
            personality_type="cultural",
            travel_preferences=prefs,
            profile_picture="/uploads/x.jpg",
            last_active=NOW,
        )

        assert profile_match_score(user, other, NOW) == 100


class TestPreferenceMatchScore:
    def test_no_shared_preference_fields(self):
        assert preference_match_score(profile(), profile()) == 0

    def test_weighted_overlap(self):
        user = profile(
            travel_preferences={
                "budget": "moderate",
                "pace": "slow",
                "interests": ["food", "art"],
                "accommodation_preference": "flexible",
            }
        )
        other = profile(
            travel_preferences={
                "budget": "moderate",
                "pace": "fast",
                "interests": ["art", "nature", "history"],
                "accommodation_preference": "hostel",
            }
        )

        # budget 20 + pace 0 + interests 40 * 1/3 + flexible accommodation 20
        assert preference_match_score(user, other) == 53

    def test_empty_interest_lists_score_zero(self):
        user = profile(travel_preferences={"interests": []})
        other = profile(travel_preferences={"interests": []})

        assert preference_match_score(user, other) == 0


class TestEnhancedComponents:
    @pytest.mark.parametrize(
        "first, second, expected",
        [
            (None, "planner", 60),
            ("planner", "planner", 90),
            ("adventurer", "flexible", 100),
            ("adventurer", "planner", 60),
        ],
    )
    def test_personality(self, first, second, expected):
        assert personality_component(first, second) == expected

    def test_travel_is_the_mean_of_its_parts(self):
        first = profile(travel_preferences={"budget": "moderate", "pace": "flexible", "destinations": ["beaches", "cities"]})
        second = profile(travel_preferences={"budget": "moderate", "pace": "slow", "destinations": ["cities"]})

        # budget 100, pace 100, destinations jaccard 1/2
        assert travel_component(first, second) == 83

    def test_travel_without_preferences_is_neutral(self):
        assert travel_component(profile(), profile()) == 50

    def test_interests_use_jaccard(self):
        first = profile(travel_preferences={"interests": ["food", "art", "nature"]})
        second = profile(travel_preferences={"interests": ["food", "art", "history"]})

        assert interests_component(first, second) == 50

    def test_logistics_neutral_without_data(self):
        assert logistics_component(profile(), profile()) == 50

    def test_logistics_same_place_shared_language(self):
        first = profile(location={"coordinates": [2.35, 48.85]}, languages=["English", "Spanish"])
        second = profile(location={"coordinates": [2.35, 48.85]}, languages=["english"])

        assert logistics_component(first, second) == 100

    def test_behavioral_recency(self):
        fresh = profile(last_active=NOW - timedelta(hours=2))
        stale = profile(last_active=NOW - timedelta(days=60))

        assert behavioral_component(fresh, fresh, NOW) == 100
        assert behavioral_component(fresh, stale, NOW) == 60
        assert behavioral_component(profile(), profile(), NOW) == 20

    def test_dynamic_weights_are_normalized(self):
        weights = dynamic_weights(profile(), profile())

        assert sum(weights.values()) == pytest.approx(1.0)
        # No destination overlap halves the travel weight before normalizing
        assert weights["travel"] == pytest.approx(BASE_WEIGHTS["travel"] * 0.5 / 0.875)

    def test_full_destination_overlap_keeps_base_weights(self):
        prefs = {"destinations": ["beaches"]}
        weights = dynamic_weights(profile(travel_preferences=prefs), profile(travel_preferences=prefs))

        assert weights == pytest.approx(BASE_WEIGHTS)


class TestEnhancedScorer:
    def test_cache_key_orders_the_pair(self):
        scorer = EnhancedScorer(model_version="2.0.0", clock=lambda: NOW)
        first = profile(id=7, last_active=NOW)
        second = profile(id=3, last_active=None)

        key = scorer.cache_key(first, second)

        assert key == "match:3:7:2.0.0:matching_version:2.0.0,u1_active:20,u2_active:100"
        assert scorer.cache_key(second, first) == key

    def test_cache_key_tracks_how_recently_users_were_active(self):
        scorer = EnhancedScorer(clock=lambda: NOW)
        other = profile(id=2, last_active=NOW)

        keys = {
            scorer.cache_key(profile(id=1, last_active=NOW - idle), other)
            for idle in (timedelta(hours=1), timedelta(hours=20), timedelta(days=3), timedelta(days=90))
        }

        # Within a day twice, then within a week, then long gone
        assert len(keys) == 3

    def test_compute_combines_components_with_weights(self):
        scorer = EnhancedScorer(clock=lambda: NOW)
        first = profile(id=1, personality_type="adventurer", last_active=NOW)
        second = profile(id=2, personality_type="flexible", last_active=NOW)

        result = scorer.compute(first, second)

        expected = sum(result.components[name] * dynamic_weights(first, second)[name] for name in BASE_WEIGHTS)
        assert result.score == round(expected)
        assert set(result.components) == set(BASE_WEIGHTS)
        assert result.model_version == "1.0.0"
        assert result.computed_at == NOW

    async def test_score_without_cache_recomputes(self):
        ticks = iter([NOW, NOW + timedelta(seconds=1)])
        scorer = EnhancedScorer(clock=lambda: next(ticks))
        first, second = profile(id=1), profile(id=2)

        one = await scorer.score(first, second)
        two = await scorer.score(first, second)

        assert one.computed_at != two.computed_at
