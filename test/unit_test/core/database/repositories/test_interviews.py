"""Unit tests for the interview repository on in-memory SQLite."""

import pytest

pytestmark = pytest.mark.asyncio


async def test_get_by_interview_id(repos, make_interview):
    created = await make_interview("int-abc")

    fetched = await repos.interviews.get_by_interview_id("int-abc")

    assert fetched is not None
    assert fetched.id == created.id
    assert await repos.interviews.get_by_interview_id("missing") is None


async def test_get_by_numeric_id(repos, make_interview):
    created = await make_interview()

    assert (await repos.interviews.get_by_id(created.id)).interview_id == "int-1"
    assert (await repos.interviews.get_by_id(str(created.id))).interview_id == "int-1"


async def test_find_by_candidate_email_ignores_case(repos, make_interview):
    await make_interview("int-1", candidate_email="Casey@Example.com")
    await make_interview("int-2", candidate_email="casey@example.com")
    await make_interview("int-3", candidate_email="other@example.com")

    found = await repos.interviews.find_by_candidate_email("  CASEY@example.com ")

    assert {i.interview_id for i in found} == {"int-1", "int-2"}


async def test_update_status(repos, make_interview):
    await make_interview()

    updated = await repos.interviews.update_status("int-1", "completed")

    assert updated.interview_status == "completed"
    assert await repos.interviews.update_status("missing", "completed") is None


async def test_list_filters_and_paginates(repos, make_interview, company):
    await make_interview("int-1", interview_type="mcq")
    await make_interview("int-2", interview_type="coding")
    await make_interview("int-3", interview_type="coding")

    coding = await repos.interviews.list(filters={"interview_type": "coding", "company_id": company.id})
    page = await repos.interviews.list(limit=2, offset=0)
    ignored_unknown = await repos.interviews.list(filters={"not_a_column": "x", "interview_status": None})

    assert {i.interview_id for i in coding} == {"int-2", "int-3"}
    assert len(page) == 2
    assert len(ignored_unknown) == 3


async def test_delete_by_interview_id(repos, make_interview):
    await make_interview()

    assert await repos.interviews.delete_by_interview_id("int-1") is True
    assert await repos.interviews.delete_by_interview_id("int-1") is False
    assert await repos.interviews.get_by_interview_id("int-1") is None
