"""
Base database models and utilities.

This module provides the foundational database components used across
all entities in the persistence layer using SQLModel.

Timestamps are timezone-aware UTC everywhere. ``UTCDateTime`` is the column
type for every datetime field; it keeps values aware on backends that drop the
offset on storage (SQLite).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ConfigDict
from sqlalchemy import DateTime, TypeDecorator
from sqlmodel import SQLModel


class Base(SQLModel):
    """Base class for all SQLModel entities."""

    model_config = ConfigDict(arbitrary_types_allowed=True)


class UTCDateTime(TypeDecorator):
    """Timezone-aware datetime column that always stores and returns UTC."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect: Any) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            # naive input (e.g. from an API payload) is taken as UTC
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value: Optional[datetime], dialect: Any) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)
