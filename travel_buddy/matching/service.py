"""
Matching service.

Owns the swipe workflow, candidate discovery and the match listings. It is
independent of HTTP and WebSocket transport: both the REST router and the
real-time channel drive it, and it reports new matches through a notifier.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Dict, List, Optional, Protocol

from sqlalchemy.exc import IntegrityError

from travel_buddy.core.database.base import utc_now
from travel_buddy.core.database.entities.matches import Match, Swipe
from travel_buddy.core.database.entities.users import User
from travel_buddy.core.database.repositories import RepositoryBundle
from travel_buddy.core.exceptions import Conflict, NotFound, ValidationFailed
from travel_buddy.core.monitoring import log_match_created, log_swipe

from .cache import MatchScoreCache
from .compatibility import budget_range, common_interests, compatible_personalities
from .geo import rounded_distance_km
from .scoring import CompatibilityBreakdown, EnhancedScorer, preference_match_score, profile_match_score

logger = logging.getLogger(__name__)

SWIPE_ACTIONS = ("like", "reject")
ACTIVE_MATCH_STATUSES = ("accepted", "pending")
DEFAULT_MIN_SCORE = 30
# Scores closer than this are ordered by distance instead
SCORE_TIE_WINDOW = 5


class MatchNotifier(Protocol):
    """Anything able to tell both members about a new match."""

    async def notify_match(self, match: Match) -> None: ...


@dataclass
class SwipeOutcome:
    """Result of recording a swipe."""

    swipe: Swipe
    swiped_user: User
    match: Optional[Match] = None

    @property
    def is_match(self) -> bool:
        return self.match is not None


@dataclass
class ScoredCandidate:
    user: User
    match_score: int
    distance: Optional[int] = None


@dataclass
class PotentialMatches:
    """One page of ranked discovery candidates."""

    candidates: List[ScoredCandidate]
    page: int
    total_pages: int
    total_found: int
    average_score: int
    has_more: bool


@dataclass
class MatchWithUser:
    match: Match
    other_user: Optional[User]


@dataclass
class Suggestion:
    user: User
    score: int


@dataclass
class _CandidatePool:
    users: List[User] = field(default_factory=list)
    seen: set = field(default_factory=set)

    def extend(self, users: List[User], limit: int) -> None:
        added = 0
        for user in users:
            if added >= limit:
                break
            if user.id in self.seen:
                continue
            self.seen.add(user.id)
            self.users.append(user)
            added += 1


def _fits_preferences(user: User, candidate: User) -> bool:
    """Budget in range and personality compatible, or unknown on the candidate side."""
    budget = user.preferences.get("budget")
    if budget:
        candidate_budget = candidate.preferences.get("budget")
        if candidate_budget and candidate_budget not in budget_range(budget):
            return False
    if user.personality_type:
        if candidate.personality_type and candidate.personality_type not in compatible_personalities(
            user.personality_type
        ):
            return False
    return True


def _compare_candidates(first: ScoredCandidate, second: ScoredCandidate) -> int:
    if abs(first.match_score - second.match_score) < SCORE_TIE_WINDOW:
        if first.distance is None and second.distance is None:
            return 0
        if first.distance is None:
            return 1
        if second.distance is None:
            return -1
        return first.distance - second.distance
    return second.match_score - first.match_score


class MatchService:
    """Swipes, discovery and matches for one request or socket event.

    Args:
        repos: Repositories bound to the current session
        cache: Compatibility score cache shared across requests
        notifier: Receives newly created matches (usually the connection manager)
        model_version: Version tag for the enhanced scorer
    """

    def __init__(
        self,
        repos: RepositoryBundle,
        cache: Optional[MatchScoreCache] = None,
        notifier: Optional[MatchNotifier] = None,
        model_version: str = "1.0.0",
    ) -> None:
        self.repos = repos
        self.cache = cache
        self.notifier = notifier
        self.scorer = EnhancedScorer(cache=cache, model_version=model_version)

    # -----------------------------------------------------------------
    # Swipes
    # -----------------------------------------------------------------

    async def record_swipe(self, swiper: User, swiped_user_id: Optional[int], action: Optional[str]) -> SwipeOutcome:
        """Record a like or reject and create a match on a mutual like.

        Raises:
            ValidationFailed: Invalid action or a swipe on oneself
            NotFound: The swiped user does not exist
            Conflict: The swiper already swiped on this user
        """
        if not swiped_user_id or action not in SWIPE_ACTIONS:
            raise ValidationFailed("Invalid request. Required fields: swiped_user_id, action (like/reject)")
        if swiped_user_id == swiper.id:
            raise ValidationFailed("You cannot swipe on yourself")

        swiped = await self.repos.users.get_by_id(swiped_user_id)
        if swiped is None:
            raise NotFound("Swiped user not found")
        if await self.repos.swipes.get_swipe(swiper.id, swiped.id) is not None:
            raise Conflict("You have already swiped on this user")

        try:
            swipe = await self.repos.swipes.create(Swipe(swiper_id=swiper.id, swiped_id=swiped.id, action=action))
        except IntegrityError:
            await self.repos.swipes.session.rollback()
            raise Conflict("You have already swiped on this user")
        log_swipe(swiper.id, swiped.id, action)

        outcome = SwipeOutcome(swipe=swipe, swiped_user=swiped)
        if action == "like" and await self.repos.swipes.has_liked(swiped.id, swiper.id):
            outcome.match = await self._match_for(swipe, swiper, swiped)
            if self.notifier is not None:
                await self.notifier.notify_match(outcome.match)
        return outcome

    async def _match_for(self, swipe: Swipe, swiper: User, swiped: User) -> Match:
        existing = await self.repos.matches.get_for_pair(swiper.id, swiped.id)
        if existing is not None:
            return existing

        low, high = Match.ordered_pair(swiper.id, swiped.id)
        score = profile_match_score(swiper, swiped)
        try:
            match = await self.repos.matches.create(
                Match(
                    user_one_id=low,
                    user_two_id=high,
                    match_score=score,
                    status="accepted",
                    match_type="mutual",
                    initiated_by=swiper.id,
                    common_interests=common_interests(
                        swiper.preferences.get("interests"), swiped.preferences.get("interests")
                    ),
                )
            )
        except IntegrityError:
            # The other user's like created the match first
            session = self.repos.matches.session
            await session.rollback()
            # Rollback expires everything this session loaded; the socket handler's user belongs to another one
            for entity in (swipe, swiper, swiped):
                if entity in session:
                    await session.refresh(entity)
            existing = await self.repos.matches.get_for_pair(low, high)
            if existing is None:
                raise
            logger.info(f"Match {existing.id} between users {low} and {high} was created concurrently")
            return existing
        logger.info(f"Match {match.id} created between users {low} and {high} (score {score})")
        log_match_created(match.id, (low, high), score)
        return match

    # -----------------------------------------------------------------
    # Discovery
    # -----------------------------------------------------------------

    async def potential_matches(self, user: User, page: int = 1, limit: int = 10) -> PotentialMatches:
        """Rank users the caller has not swiped on yet.

        Candidates are collected in three widening tiers (preference fit,
        age window, anyone), scored with ``profile_match_score`` and sorted by
        score, with near-equal scores ordered by distance.
        """
        page = max(page, 1)
        limit = max(limit, 1)
        excluded = set(await self.repos.swipes.swiped_user_ids(user.id))
        excluded.add(user.id)
        pool = _CandidatePool(seen=set(excluded))

        if user.preferences:
            candidates = await self.repos.users.list_candidates(excluded)
            pool.extend([c for c in candidates if _fits_preferences(user, c)], 3 * limit)

        if len(pool.users) < limit:
            min_age = max(18, user.age - 15) if user.age else None
            max_age = user.age + 15 if user.age else None
            candidates = await self.repos.users.list_candidates(pool.seen, min_age=min_age, max_age=max_age)
            pool.extend(candidates, 2 * limit)

        if len(pool.users) < limit:
            candidates = await self.repos.users.list_candidates(pool.seen, limit=limit)
            pool.extend(candidates, limit)

        now = utc_now()
        scored = [
            ScoredCandidate(
                user=candidate,
                match_score=profile_match_score(user, candidate, now),
                distance=rounded_distance_km(user.coordinates, candidate.coordinates),
            )
            for candidate in pool.users
        ]
        ranked = sorted(scored, key=cmp_to_key(_compare_candidates))

        skip = (page - 1) * limit
        page_items = ranked[skip : skip + limit]
        average = round(sum(c.match_score for c in page_items) / len(page_items)) if page_items else 0
        return PotentialMatches(
            candidates=page_items,
            page=page,
            total_pages=math.ceil(len(ranked) / limit),
            total_found=len(ranked),
            average_score=average,
            has_more=skip + limit < len(ranked),
        )

    async def find_matches(
        self, user: User, limit: int = 10, min_score: int = DEFAULT_MIN_SCORE
    ) -> List[Suggestion]:
        """Weighted preference suggestions above ``min_score``, best first."""
        candidates = await self.repos.users.list_candidates([user.id])
        suggestions = [
            Suggestion(user=candidate, score=preference_match_score(user, candidate))
            for candidate in candidates
            if "interests" in candidate.preferences
        ]
        suggestions = [s for s in suggestions if s.score >= min_score]
        suggestions.sort(key=lambda s: s.score, reverse=True)
        return suggestions[:limit]

    async def compatibility(self, user: User, other_user_id: int) -> CompatibilityBreakdown:
        """Enhanced compatibility breakdown, served from the cache when fresh."""
        if other_user_id == user.id:
            raise ValidationFailed("Cannot compute compatibility with yourself")
        other = await self.repos.users.get_by_id(other_user_id)
        if other is None:
            raise NotFound("User not found")
        return await self.scorer.score(user, other)

    # -----------------------------------------------------------------
    # Matches
    # -----------------------------------------------------------------

    async def my_matches(self, user: User) -> List[MatchWithUser]:
        """Accepted and pending matches of ``user``, newest first."""
        matches = await self.repos.matches.list_for_user(user.id, statuses=ACTIVE_MATCH_STATUSES)
        others: Dict[int, User] = await self.repos.users.get_many(m.other_user_id(user.id) for m in matches)
        return [MatchWithUser(match=m, other_user=others.get(m.other_user_id(user.id))) for m in matches]

    async def delete_match(self, user: User, match_id: int) -> None:
        """Delete one of the caller's matches.

        Raises:
            NotFound: The match does not exist or the caller is not part of it
        """
        match = await self.repos.matches.get_by_id(match_id)
        if match is None or not match.involves(user.id):
            raise NotFound("Match not found")
        await self.repos.matches.delete(match_id)
        logger.info(f"User {user.id} deleted match {match_id}")
