"""
Base database models and utilities.

This module provides the foundational database components used across
all entities in the Travel Buddy database layer using SQLModel.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import ConfigDict
from sqlmodel import SQLModel


class Base(SQLModel):
    """Base class for all SQLModel entities."""

    model_config = ConfigDict(arbitrary_types_allowed=True)


def utc_now() -> datetime:
    """Get current UTC datetime as naive datetime.

    Returns:
        Current UTC datetime without timezone info
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)
