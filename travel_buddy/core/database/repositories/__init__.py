"""
Database repository layer using SQLModel.

This package contains all repository classes organized by aggregate. Each
module provides typed data access operations for its SQLModel entities.

Modules:
- base: AsyncBaseRepository interface, shared CRUD and QueryBuilder utilities
- users: Account and candidate queries
- matches: Swipes and matches
- conversations: Conversations, participants and messages
- groups: Groups, members and join requests
- journals: Journals, likes and comments
- marketplace: Marketplace listings
- bundle: RepositoryBundle for dependency injection
"""

from .bundle import RepositoryBundle, build_repositories

__all__ = ["RepositoryBundle", "build_repositories"]
