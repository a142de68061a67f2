"""
Repository base classes.

``AsyncBaseRepository`` is the contract every aggregate repository honours;
``SQLModelRepository`` implements it on an ``AsyncSession``. Each write
commits immediately, so a repository call is one unit of work.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

EntityType = TypeVar("EntityType", bound=SQLModel)


class AsyncBaseRepository(ABC, Generic[EntityType]):
    """CRUD contract for one entity table."""

    def __init__(self, session: AsyncSession, model: Type[EntityType]) -> None:
        self.session = session
        self.model = model

    @abstractmethod
    async def create(self, entity: EntityType) -> EntityType:
        """Insert ``entity`` and return it with its id and defaults loaded."""

    @abstractmethod
    async def get_by_id(self, entity_id: int) -> Optional[EntityType]:
        """Return the row with this primary key, or None."""

    @abstractmethod
    async def update(self, entity: EntityType) -> EntityType:
        """Write the changed fields of ``entity`` back."""

    @abstractmethod
    async def delete(self, entity_id: int) -> bool:
        """Delete by primary key; False when nothing matched."""

    @abstractmethod
    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[EntityType]:
        """Return one page of rows matching ``filters`` (field name to value)."""


class SQLModelRepository(AsyncBaseRepository[EntityType]):
    """Shared implementation for the aggregate repositories.

    Subclasses pass their entity class to ``super().__init__`` and override
    ``default_order`` when newest-created-first is not the natural listing.
    """

    async def _persist(self, entity: EntityType) -> EntityType:
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def create(self, entity: EntityType) -> EntityType:
        return await self._persist(entity)

    async def get_by_id(self, entity_id: int) -> Optional[EntityType]:
        return await self.session.get(self.model, entity_id)

    async def update(self, entity: EntityType) -> EntityType:
        return await self._persist(entity)

    async def delete(self, entity_id: int) -> bool:
        entity = await self.get_by_id(entity_id)
        if entity is None:
            return False
        await self.session.delete(entity)
        await self.session.commit()
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[EntityType]:
        stmt = QueryBuilder.apply_filters(select(self.model), self.model, filters or {})
        stmt = QueryBuilder.apply_pagination(stmt.order_by(*self.default_order()), limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        stmt = QueryBuilder.apply_filters(select(func.count()).select_from(self.model), self.model, filters or {})
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    def default_order(self) -> tuple:
        created_at = getattr(self.model, "created_at", None)
        return (created_at.desc(),) if created_at is not None else ()


class QueryBuilder:
    """Helpers that narrow a ``select`` for the repositories."""

    @staticmethod
    def apply_filters(stmt, model: Type[EntityType], filters: Dict[str, Any]):
        """Add an equality condition per filter.

        None values and names that are not columns of ``model`` are skipped;
        list, tuple and set values match any of their members.
        """
        for key, value in filters.items():
            if value is None or not hasattr(model, key):
                continue
            column = getattr(model, key)
            if isinstance(value, (list, tuple, set)):
                stmt = stmt.where(column.in_(list(value)))
            else:
                stmt = stmt.where(column == value)
        return stmt

    @staticmethod
    def apply_pagination(stmt, limit: Optional[int], offset: Optional[int]):
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset is not None:
            stmt = stmt.offset(offset)
        return stmt
