"""
Compatibility scoring between two travellers.

Three scorers live here:

- ``profile_match_score``: the discovery score used to rank candidates and
  stamped on new matches (15 to 100).
- ``preference_match_score``: a weighted overlap of travel preferences used
  for suggestions (0 to 100).
- ``EnhancedScorer``: a five-component breakdown with dynamic weights, served
  through ``MatchScoreCache``.

Scorers work on any object exposing the user profile attributes (``age``,
``bio``, ``personality_type``, ``travel_preferences``, ``location``,
``languages``, ``profile_picture``, ``last_active``), so they can be fed ORM
entities as well as plain test doubles.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

from travel_buddy.core.database.base import utc_now

from .cache import MatchScoreCache
from .compatibility import (
    budget_range,
    common_items,
    compatible_personalities,
    complementary_personalities,
    jaccard,
)
from .geo import haversine_km

logger = logging.getLogger(__name__)

MIN_PROFILE_SCORE = 15
MAX_SCORE = 100
BASE_PROFILE_SCORE = 50


def _prefs(user: Any) -> Dict[str, Any]:
    return getattr(user, "travel_preferences", None) or {}


def _coordinates(user: Any) -> Optional[List[float]]:
    coords = (getattr(user, "location", None) or {}).get("coordinates")
    if isinstance(coords, (list, tuple)) and len(coords) == 2:
        return [float(coords[0]), float(coords[1])]
    return None


def _clamp(value: float, low: int, high: int) -> int:
    return int(min(max(value, low), high))


# =====================================================================
# Discovery score
# =====================================================================


def _age_points(first: Optional[int], second: Optional[int]) -> int:
    if not first or not second:
        return 0
    diff = abs(first - second)
    if diff <= 3:
        return 20
    if diff <= 7:
        return 15
    if diff <= 12:
        return 10
    if diff <= 20:
        return 5
    return 0


def _shared_bio_words(bio: Optional[str], other_bio: Optional[str]) -> int:
    if not bio or not other_bio:
        return 0
    haystack = other_bio.lower()
    return sum(1 for word in bio.lower().split(" ") if len(word) > 3 and word in haystack)


def profile_match_score(user: Any, other: Any, now: Optional[datetime] = None) -> int:
    """Score how well ``other`` fits ``user`` for discovery.

    The score starts at 50 and collects points for a close age, compatible
    personality and budget, shared destinations, interests and bio words,
    and for ``other`` having a complete, recently active profile.

    Args:
        user: The user looking for matches
        other: The candidate being scored
        now: Reference time for the activity bonus

    Returns:
        Score clamped to [15, 100]
    """
    now = now or utc_now()
    score = BASE_PROFILE_SCORE
    score += _age_points(getattr(user, "age", None), getattr(other, "age", None))

    mine, theirs = getattr(user, "personality_type", None), getattr(other, "personality_type", None)
    if mine and theirs:
        if mine == theirs:
            score += 15
        elif theirs in compatible_personalities(mine):
            score += 10

    prefs, other_prefs = _prefs(user), _prefs(other)
    budget, other_budget = prefs.get("budget"), other_prefs.get("budget")
    if budget and other_budget:
        if budget == other_budget:
            score += 15
        elif other_budget in budget_range(budget):
            score += 8

    score += min(15, 5 * len(common_items(prefs.get("destinations"), other_prefs.get("destinations"))))
    score += min(10, 3 * len(common_items(prefs.get("interests"), other_prefs.get("interests"))))
    score += min(10, 2 * _shared_bio_words(getattr(user, "bio", None), getattr(other, "bio", None)))

    if getattr(other, "profile_picture", None):
        score += 5
    last_active = getattr(other, "last_active", None)
    if last_active is not None and last_active > now - timedelta(days=7):
        score += 5
    other_bio = getattr(other, "bio", None)
    if other_bio and len(other_bio) > 20:
        score += 3

    return _clamp(score, MIN_PROFILE_SCORE, MAX_SCORE)


# =====================================================================
# Weighted preference score
# =====================================================================


def preference_match_score(user: Any, other: Any) -> int:
    """Weighted overlap of travel preferences (0 to 100).

    Budget and pace are worth 20 each, interests 40 (scaled by the share of
    common interests) and accommodation 20 (a ``flexible`` side always
    agrees). A component only counts when both users have a value for it.
    """
    prefs, other_prefs = _prefs(user), _prefs(other)
    score = 0.0
    total_weight = 0

    if prefs.get("budget") and other_prefs.get("budget"):
        total_weight += 20
        if prefs["budget"] == other_prefs["budget"]:
            score += 20

    if prefs.get("pace") and other_prefs.get("pace"):
        total_weight += 20
        if prefs["pace"] == other_prefs["pace"]:
            score += 20

    interests, other_interests = prefs.get("interests"), other_prefs.get("interests")
    if interests is not None and other_interests is not None:
        total_weight += 40
        longest = max(len(interests), len(other_interests))
        if longest:
            score += 40 * len(common_items(interests, other_interests)) / longest

    accommodation, other_accommodation = prefs.get("accommodation_preference"), other_prefs.get(
        "accommodation_preference"
    )
    if accommodation and other_accommodation:
        total_weight += 20
        if accommodation == other_accommodation or "flexible" in (accommodation, other_accommodation):
            score += 20

    return _clamp(round(score), 0, MAX_SCORE) if total_weight else 0


# =====================================================================
# Enhanced scorer
# =====================================================================

BASE_WEIGHTS: Dict[str, float] = {
    "personality": 0.25,
    "travel": 0.25,
    "interests": 0.20,
    "logistics": 0.15,
    "behavioral": 0.15,
}

NEUTRAL = 50


@dataclass(frozen=True)
class CompatibilityBreakdown:
    """Result of the enhanced scorer."""

    score: int
    components: Dict[str, int]
    weights: Dict[str, float]
    model_version: str
    computed_at: datetime = field(default_factory=utc_now)


def personality_component(first: Optional[str], second: Optional[str]) -> int:
    if not first or not second:
        return 60
    if first == second:
        return 90
    if second in complementary_personalities(first):
        return 100
    return 60


def _budget_component(first: Optional[str], second: Optional[str]) -> int:
    if not first or not second:
        return NEUTRAL
    if first == second:
        return 100
    if second in budget_range(first):
        return 70
    return 30


def _pace_component(first: Optional[str], second: Optional[str]) -> int:
    if not first or not second:
        return NEUTRAL
    if first == second or "flexible" in (first, second):
        return 100
    return 40


def _destination_component(first: Optional[List[str]], second: Optional[List[str]]) -> int:
    if not first or not second:
        return NEUTRAL
    return round(jaccard(first, second) * 100)


def travel_component(first: Any, second: Any) -> int:
    """Mean of the budget, pace and destination sub-scores."""
    prefs, other_prefs = _prefs(first), _prefs(second)
    parts = [
        _budget_component(prefs.get("budget"), other_prefs.get("budget")),
        _pace_component(prefs.get("pace"), other_prefs.get("pace")),
        _destination_component(prefs.get("destinations"), other_prefs.get("destinations")),
    ]
    return round(sum(parts) / len(parts))


def interests_component(first: Any, second: Any) -> int:
    return round(jaccard(_prefs(first).get("interests"), _prefs(second).get("interests")) * 100)


def _distance_decay(distance_km: float) -> float:
    # 100 at the same spot, 50 at 500 km
    return 100.0 / (1.0 + distance_km / 500.0)


def logistics_component(first: Any, second: Any) -> int:
    """Closeness combined with shared languages."""
    coords, other_coords = _coordinates(first), _coordinates(second)
    distance = _distance_decay(haversine_km(coords, other_coords)) if coords and other_coords else NEUTRAL

    languages = [lang.lower() for lang in getattr(first, "languages", None) or []]
    other_languages = [lang.lower() for lang in getattr(second, "languages", None) or []]
    if languages and other_languages:
        language = 100.0 * len(set(languages) & set(other_languages)) / min(len(set(languages)), len(set(other_languages)))
    else:
        language = NEUTRAL

    return _clamp(round(0.6 * distance + 0.4 * language), 0, MAX_SCORE)


def _recency(last_active: Optional[datetime], now: datetime) -> int:
    if last_active is None:
        return 20
    idle = now - last_active
    if idle <= timedelta(days=1):
        return 100
    if idle <= timedelta(days=7):
        return 80
    if idle <= timedelta(days=30):
        return 50
    return 20


def behavioral_component(first: Any, second: Any, now: datetime) -> int:
    """How recently both users were active."""
    return round(
        (_recency(getattr(first, "last_active", None), now) + _recency(getattr(second, "last_active", None), now)) / 2
    )


def dynamic_weights(first: Any, second: Any) -> Dict[str, float]:
    """Base weights with travel scaled by destination overlap, normalized to 1."""
    overlap = jaccard(_prefs(first).get("destinations"), _prefs(second).get("destinations"))
    weights = dict(BASE_WEIGHTS)
    weights["travel"] *= 0.5 + 0.5 * overlap
    total = sum(weights.values())
    return {name: weight / total for name, weight in weights.items()}


class EnhancedScorer:
    """Five-component compatibility scorer with a result cache.

    Attributes:
        model_version: Tag mixed into cache keys so a scoring change never
            serves stale results
    """

    def __init__(
        self,
        cache: Optional[MatchScoreCache] = None,
        model_version: str = "1.0.0",
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._cache = cache
        self.model_version = model_version
        self._clock = clock

    def cache_key(self, first: Any, second: Any) -> str:
        """Build ``match:{low}:{high}:{version}:{features}`` for a user pair."""
        lower, higher = sorted((first, second), key=lambda u: u.id)
        low, high = lower.id, higher.id
        now = self._clock()
        # Activity buckets feed the behavioral component, so a user changing bucket changes the key
        features = {
            "u1_active": _recency(getattr(lower, "last_active", None), now),
            "u2_active": _recency(getattr(higher, "last_active", None), now),
            "matching_version": self.model_version,
        }
        feature_part = ",".join(f"{name}:{value}" for name, value in sorted(features.items()))
        return f"match:{low}:{high}:{self.model_version}:{feature_part}"

    def compute(self, first: Any, second: Any) -> CompatibilityBreakdown:
        """Score a pair without touching the cache."""
        now = self._clock()
        components = {
            "personality": personality_component(
                getattr(first, "personality_type", None), getattr(second, "personality_type", None)
            ),
            "travel": travel_component(first, second),
            "interests": interests_component(first, second),
            "logistics": logistics_component(first, second),
            "behavioral": behavioral_component(first, second, now),
        }
        weights = dynamic_weights(first, second)
        total = sum(components[name] * weights[name] for name in components)
        return CompatibilityBreakdown(
            score=_clamp(round(total), 0, MAX_SCORE),
            components=components,
            weights={name: round(weight, 4) for name, weight in weights.items()},
            model_version=self.model_version,
            computed_at=now,
        )

    async def score(self, first: Any, second: Any) -> CompatibilityBreakdown:
        """Score a pair, serving and filling the cache when one is configured."""
        if self._cache is None:
            return self.compute(first, second)

        key = self.cache_key(first, second)

        async def refresh() -> CompatibilityBreakdown:
            return self.compute(first, second)

        cached = await self._cache.get(key, refresh=refresh)
        if cached is not None:
            logger.debug(f"Compatibility cache hit for {key}")
            return cached

        result = self.compute(first, second)
        await self._cache.set(key, result)
        return result
