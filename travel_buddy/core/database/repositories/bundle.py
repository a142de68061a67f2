"""
Repository bundle for dependency injection.

This module provides a convenience bundle of all repository instances
for easy dependency injection in services and application components.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from .conversations import ConversationRepository, MessageRepository
from .groups import GroupRepository
from .journals import JournalRepository
from .marketplace import ListingRepository
from .matches import MatchRepository, SwipeRepository
from .users import UserRepository


@dataclass(frozen=True)
class RepositoryBundle:
    """Convenience bundle of all SQL repositories sharing one session."""

    users: UserRepository
    swipes: SwipeRepository
    matches: MatchRepository
    conversations: ConversationRepository
    messages: MessageRepository
    groups: GroupRepository
    journals: JournalRepository
    listings: ListingRepository


def build_repositories(session: AsyncSession) -> RepositoryBundle:
    """Build a RepositoryBundle from an existing session.

    Args:
        session: Existing async session

    Returns:
        Bundle containing all repository instances
    """
    return RepositoryBundle(
        users=UserRepository(session),
        swipes=SwipeRepository(session),
        matches=MatchRepository(session),
        conversations=ConversationRepository(session),
        messages=MessageRepository(session),
        groups=GroupRepository(session),
        journals=JournalRepository(session),
        listings=ListingRepository(session),
    )
