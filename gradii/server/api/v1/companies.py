"""
Company Management Endpoints.
"""

from fastapi import APIRouter, Depends

from gradii.core.database.entities import Company
from gradii.core.errors import ConflictError, NotFoundError
from gradii.core.logging_config import get_logger
from gradii.core.models.io.admin import CompanyCreate, CompanyRead
from gradii.server.services.deps import ReposDep, require_admin_key

logger = get_logger(__name__)

router = APIRouter(dependencies=[Depends(require_admin_key)])


@router.post(
    "",
    response_model=CompanyRead,
    status_code=201,
    summary="Create Company",
    description="Register a company that owns interviews and campaigns.",
)
async def create_company(body: CompanyCreate, repos: ReposDep) -> CompanyRead:
    domain = body.domain.strip().lower() if body.domain else None
    if domain and await repos.companies.get_by_domain(domain) is not None:
        raise ConflictError(f"A company with domain '{domain}' already exists")
    company = await repos.companies.create(Company(name=body.name, email=body.email, domain=domain))
    logger.info(f"Company created: {company.id} ({company.name})")
    return CompanyRead.model_validate(company)


@router.get(
    "/{company_id}",
    response_model=CompanyRead,
    summary="Get Company",
    responses={404: {"description": "Company not found"}},
)
async def get_company(company_id: str, repos: ReposDep) -> CompanyRead:
    company = await repos.companies.get_by_id(company_id)
    if company is None:
        raise NotFoundError("Company")
    return CompanyRead.model_validate(company)
