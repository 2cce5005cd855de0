"""Timestamps survive a trip through the database as aware UTC values."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from gradii.core.database.base import UTCDateTime, utc_now
from gradii.core.database.entities.otp_codes import OtpCode
from gradii.core.database.repositories import build_sql_repos_from_session


def test_utc_now_is_aware():
    assert utc_now().tzinfo is not None
    assert utc_now().utcoffset() == timedelta(0)


@pytest.mark.parametrize(
    "value, expected",
    [
        (datetime(2030, 1, 1, 12, 0), datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)),
        (
            datetime(2030, 1, 1, 14, 0, tzinfo=timezone(timedelta(hours=2))),
            datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc),
        ),
        (None, None),
    ],
)
def test_utc_datetime_bind_normalizes_to_utc(value, expected):
    bound = UTCDateTime().process_bind_param(value, None)

    assert bound == expected
    if bound is not None:
        assert bound.tzinfo == timezone.utc


def test_utc_datetime_result_attaches_utc_to_naive_values():
    loaded = UTCDateTime().process_result_value(datetime(2030, 1, 1, 12, 0), None)

    assert loaded == datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)


def _new_session(test_engine) -> AsyncSession:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)()


async def test_otp_code_round_trip(repos, test_engine):
    expires_at = utc_now() + timedelta(minutes=5)
    created = await repos.otp_codes.create(
        OtpCode(email="candidate@example.com", otp="123456", purpose="candidate_access", expires_at=expires_at)
    )

    async with _new_session(test_engine) as session:
        loaded = await build_sql_repos_from_session(session=session).otp_codes.get_by_id(created.id)

    assert loaded is not None
    assert loaded.expires_at.tzinfo is not None
    assert loaded.expires_at == expires_at
    assert loaded.created_at.tzinfo is not None
    assert loaded.expires_at > utc_now()


async def test_interview_round_trip(make_interview, test_engine):
    created = await make_interview("int-tz", expires_in_hours=2)

    async with _new_session(test_engine) as session:
        loaded = await build_sql_repos_from_session(session=session).interviews.get_by_interview_id("int-tz")

    assert loaded is not None
    assert loaded.link_expiry_time == created.link_expiry_time
    assert loaded.link_expiry_time.tzinfo is not None
    assert loaded.created_at.tzinfo is not None
    assert loaded.link_expiry_time > utc_now()
