"""
Company entity models.

A company is the tenant that owns interviews and job campaigns.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlmodel import Field

from ..base import Base, UTCDateTime, utc_now


class Company(Base, table=True):
    """Entity for a tenant company.

    Table: companies
    """

    __tablename__ = "companies"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True, max_length=36)
    name: str = Field(max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    domain: Optional[str] = Field(default=None, max_length=255, unique=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)

    def __repr__(self) -> str:
        return f"Company(id={self.id}, name={self.name})"
