"""
Service Dependencies.

Provides the per-request repositories and services, plus the process-wide
singletons (score cache, connection manager), for API endpoints.
"""

from typing import Annotated, Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from travel_buddy.core.database import get_session
from travel_buddy.core.database.entities.users import User
from travel_buddy.core.database.repositories import RepositoryBundle, build_repositories
from travel_buddy.matching import MatchScoreCache, MatchService
from travel_buddy.server.core.config import settings

from .accounts import AccountService
from .auth import get_current_user, get_optional_user
from .connections import ConnectionManager, get_connection_manager
from .conversations import ConversationService
from .groups import GroupService
from .journals import JournalService
from .marketplace import MarketplaceService

_score_cache: Optional[MatchScoreCache] = None


def get_score_cache() -> MatchScoreCache:
    """
    Get the process-wide compatibility score cache.
    """
    global _score_cache
    if _score_cache is None:
        matching = settings.matching
        _score_cache = MatchScoreCache(
            ttl=matching.cache_ttl_seconds,
            refresh_after=matching.cache_refresh_seconds,
            max_size=matching.cache_max_size,
        )
    return _score_cache


async def close_score_cache() -> None:
    global _score_cache
    if _score_cache is not None:
        await _score_cache.close()
        _score_cache = None


def get_repositories(session: AsyncSession = Depends(get_session)) -> RepositoryBundle:
    return build_repositories(session)


SessionDep = Annotated[AsyncSession, Depends(get_session)]
ReposDep = Annotated[RepositoryBundle, Depends(get_repositories)]
CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[Optional[User], Depends(get_optional_user)]
ConnectionsDep = Annotated[ConnectionManager, Depends(get_connection_manager)]
ScoreCacheDep = Annotated[MatchScoreCache, Depends(get_score_cache)]


def get_match_service(repos: ReposDep, cache: ScoreCacheDep, connections: ConnectionsDep) -> MatchService:
    return MatchService(
        repos,
        cache=cache,
        notifier=connections,
        model_version=settings.matching.model_version,
    )


def get_conversation_service(repos: ReposDep, connections: ConnectionsDep) -> ConversationService:
    return ConversationService(repos, connections)


def get_group_service(repos: ReposDep, connections: ConnectionsDep) -> GroupService:
    return GroupService(repos, connections)


def get_journal_service(repos: ReposDep) -> JournalService:
    return JournalService(repos)


def get_marketplace_service(repos: ReposDep) -> MarketplaceService:
    return MarketplaceService(repos)


MatchServiceDep = Annotated[MatchService, Depends(get_match_service)]
ConversationServiceDep = Annotated[ConversationService, Depends(get_conversation_service)]
GroupServiceDep = Annotated[GroupService, Depends(get_group_service)]
JournalServiceDep = Annotated[JournalService, Depends(get_journal_service)]
MarketplaceServiceDep = Annotated[MarketplaceService, Depends(get_marketplace_service)]


def get_account_service(repos: ReposDep) -> AccountService:
    return AccountService(repos.users)


AccountServiceDep = Annotated[AccountService, Depends(get_account_service)]
