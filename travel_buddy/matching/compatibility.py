"""
Compatibility tables shared by the scorers and the discovery queries.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

ALL_PERSONALITIES: List[str] = ["flexible", "adventurer", "planner", "cultural", "relaxed"]

COMPATIBLE_PERSONALITIES: Dict[str, List[str]] = {
    "adventurer": ["flexible", "cultural", "adventurer", "planner"],
    "planner": ["relaxed", "flexible", "planner", "cultural"],
    "cultural": ["adventurer", "planner", "cultural", "relaxed"],
    "relaxed": ["planner", "flexible", "relaxed", "adventurer"],
    "flexible": ["adventurer", "cultural", "planner", "relaxed", "flexible"],
}

# Pairs that complete each other rather than merely get along
COMPLEMENTARY_PERSONALITIES: Dict[str, List[str]] = {
    "adventurer": ["flexible", "cultural"],
    "planner": ["relaxed", "flexible"],
    "cultural": ["adventurer", "planner"],
    "relaxed": ["planner", "flexible"],
    "flexible": ["adventurer", "cultural", "planner", "relaxed"],
}

BUDGET_RANGES: Dict[str, List[str]] = {
    "low": ["low", "medium"],
    "budget": ["low", "budget", "medium"],
    "medium": ["low", "budget", "medium", "high"],
    "moderate": ["budget", "medium", "moderate", "high"],
    "high": ["medium", "moderate", "high", "luxury"],
    "luxury": ["high", "luxury"],
}

DEFAULT_BUDGET_RANGE: List[str] = ["low", "medium", "high"]


def compatible_personalities(personality_type: Optional[str]) -> List[str]:
    """Personality types that get along with ``personality_type``.

    Unknown or missing types are compatible with everyone.
    """
    return COMPATIBLE_PERSONALITIES.get(personality_type or "", ALL_PERSONALITIES)


def complementary_personalities(personality_type: Optional[str]) -> List[str]:
    return COMPLEMENTARY_PERSONALITIES.get(personality_type or "", [])


def budget_range(budget: Optional[str]) -> List[str]:
    """Budgets considered close enough to ``budget``."""
    return BUDGET_RANGES.get(budget or "", DEFAULT_BUDGET_RANGE)


def common_items(first: Optional[Sequence[str]], second: Optional[Sequence[str]]) -> List[str]:
    """Items of ``first`` that also appear in ``second``, in the order of ``first``."""
    if not first or not second:
        return []
    other = set(second)
    return [item for item in first if item in other]


def common_interests(first: Optional[Sequence[str]], second: Optional[Sequence[str]]) -> List[str]:
    return common_items(first, second)


def jaccard(first: Optional[Sequence[str]], second: Optional[Sequence[str]]) -> float:
    """Jaccard similarity of two collections, 0.0 when both are empty."""
    left, right = set(first or ()), set(second or ())
    union = left | right
    if not union:
        return 0.0
    return len(left & right) / len(union)
