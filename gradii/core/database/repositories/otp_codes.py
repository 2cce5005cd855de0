"""
OTP code repository.

Provides data access operations for one-time passcodes: replacing the codes
of an (email, purpose) pair, looking up the newest unused code and purging
expired rows.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..entities.otp_codes import OtpCode
from .base import AsyncBaseRepository, AsyncQueryBuilder


class OtpCodeRepository(AsyncBaseRepository[OtpCode]):
    """Repository for OTP code data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, OtpCode)

    async def create(self, code: OtpCode) -> OtpCode:
        return await self._save(code)

    async def get_by_id(self, code_id: str | int) -> Optional[OtpCode]:
        return await self.session.get(OtpCode, str(code_id))

    async def update(self, code: OtpCode) -> OtpCode:
        return await self._save(code)

    async def delete(self, code_id: str | int) -> bool:
        code = await self.get_by_id(code_id)
        if code is None:
            return False
        await self.session.delete(code)
        await self.session.commit()
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[OtpCode]:
        stmt = select(OtpCode).order_by(col(OtpCode.created_at).desc())
        if filters:
            stmt = AsyncQueryBuilder.apply_filters(stmt, OtpCode, filters)
        stmt = AsyncQueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def get_latest_unused(self, email: str, purpose: str) -> Optional[OtpCode]:
        """Get the newest code for (email, purpose) that has not been used yet."""
        stmt = (
            select(OtpCode)
            .where(OtpCode.email == email, OtpCode.purpose == purpose, col(OtpCode.used_at).is_(None))
            .order_by(col(OtpCode.created_at).desc())
        )
        result = await self.session.exec(stmt)
        return result.first()

    async def delete_for(self, email: str, purpose: str) -> int:
        """Delete every code issued for (email, purpose).

        Returns:
            Number of rows deleted
        """
        return await self._delete_where(OtpCode.email == email, OtpCode.purpose == purpose)

    async def delete_expired(self, now: datetime) -> int:
        """Delete every code whose expiry is before ``now``.

        Returns:
            Number of rows deleted
        """
        return await self._delete_where(col(OtpCode.expires_at) < now)

    async def _delete_where(self, *conditions) -> int:
        result = await self.session.exec(select(OtpCode).where(*conditions))
        rows = list(result.all())
        for row in rows:
            await self.session.delete(row)
        await self.session.commit()
        return len(rows)
