"""Shared fixtures: in-memory database sessions and CDR builders."""

from datetime import datetime, timedelta

import pytest
import pytest_asyncio

from app.db.session import build_engine, build_session_factory, init_db
from app.models.schemas import CallRecord, CallType
from app.services.call_record_store import CallRecordStore


ALICE = "71111111111"
BOB = "72222222222"
CAROL = "73333333333"


def record(
    call_type: CallType,
    phone_one: str,
    phone_two: str,
    start: datetime,
    seconds: int = 60,
) -> CallRecord:
    return CallRecord(
        call_type=call_type,
        phone_one=phone_one,
        phone_two=phone_two,
        start_time=start,
        end_time=start + timedelta(seconds=seconds),
    )


@pytest.fixture
def make_record():
    """Factory for CallRecords lasting `seconds` from `start`."""
    return record


@pytest_asyncio.fixture
async def db_session():
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    await init_db(engine)
    session_factory = build_session_factory(engine)
    async with session_factory() as session:
        yield session
    await engine.dispose()


@pytest_asyncio.fixture
async def store(db_session) -> CallRecordStore:
    return CallRecordStore(db_session)
