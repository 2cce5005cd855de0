"""Unit tests for the company repository on in-memory SQLite."""

import pytest

from gradii.core.database.entities.companies import Company

pytestmark = pytest.mark.asyncio


async def test_create_and_get(repos):
    created = await repos.companies.create(Company(name="Globex", domain="globex.test"))

    fetched = await repos.companies.get_by_id(created.id)

    assert fetched is not None
    assert fetched.name == "Globex"


async def test_get_by_domain_is_case_insensitive(repos, company):
    assert (await repos.companies.get_by_domain("ACME.test")).id == company.id
    assert await repos.companies.get_by_domain("nowhere.test") is None


async def test_list_orders_by_name_and_filters(repos, company):
    await repos.companies.create(Company(name="Zeta", domain="zeta.test"))
    await repos.companies.create(Company(name="Beta", domain="beta.test"))

    names = [c.name for c in await repos.companies.list()]
    filtered = await repos.companies.list(filters={"domain": "zeta.test"})

    assert names == ["Acme", "Beta", "Zeta"]
    assert [c.name for c in filtered] == ["Zeta"]


async def test_update_and_delete(repos, company):
    company.name = "Acme Corp"
    updated = await repos.companies.update(company)

    assert updated.name == "Acme Corp"
    assert await repos.companies.delete(company.id) is True
    assert await repos.companies.delete(company.id) is False
