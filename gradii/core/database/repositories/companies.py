"""
Company repository.

Provides data access operations for tenant companies.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..base import utc_now
from ..entities.companies import Company
from .base import AsyncBaseRepository, AsyncQueryBuilder


class CompanyRepository(AsyncBaseRepository[Company]):
    """Repository for company data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Company)

    async def create(self, company: Company) -> Company:
        return await self._save(company)

    async def get_by_id(self, company_id: str | int) -> Optional[Company]:
        return await self.session.get(Company, str(company_id))

    async def update(self, company: Company) -> Company:
        company.updated_at = utc_now()
        return await self._save(company)

    async def delete(self, company_id: str | int) -> bool:
        company = await self.get_by_id(company_id)
        if company is None:
            return False
        await self.session.delete(company)
        await self.session.commit()
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[Company]:
        stmt = select(Company).order_by(Company.name)
        if filters:
            stmt = AsyncQueryBuilder.apply_filters(stmt, Company, filters)
        stmt = AsyncQueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def get_by_domain(self, domain: str) -> Optional[Company]:
        """Get a company by its (unique) email domain."""
        stmt = select(Company).where(Company.domain == domain.lower())
        result = await self.session.exec(stmt)
        return result.first()
