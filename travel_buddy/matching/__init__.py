"""
Matching engine.

- compatibility: personality and budget tables plus overlap helpers
- geo: great-circle distance
- scoring: discovery, preference and enhanced compatibility scorers
- cache: in-process compatibility score cache
- service: swipe workflow, discovery and match listings
"""

from .cache import MatchScoreCache
from .scoring import (
    CompatibilityBreakdown,
    EnhancedScorer,
    preference_match_score,
    profile_match_score,
)
from .service import MatchService, SwipeOutcome

__all__ = [
    "CompatibilityBreakdown",
    "EnhancedScorer",
    "MatchScoreCache",
    "MatchService",
    "SwipeOutcome",
    "preference_match_score",
    "profile_match_score",
]
