"""Call record persistence for the CDR billing service.

This module provides methods to:
- Query call data records by participant and/or start-time window
- Store generated call data records and subscribers
- Find the latest stored call, used to continue generation
"""

from collections.abc import Iterable, Sequence
from datetime import datetime

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from app.db.models import CallDataRecordModel, SubscriberModel
from app.models.schemas import CallRecord


class CallRecordStore:
    """Repository over the cdr and subscriber tables.

    Query methods return immutable CallRecord values ordered by start
    time. Time windows are half-open: start <= start_time < end.
    """

    def __init__(self, session: AsyncSession):
        """Initialize the store.

        Args:
            session: An async SQLAlchemy session.
        """
        self._session = session

    async def _fetch(self, stmt: Select) -> list[CallRecord]:
        result = await self._session.execute(
            stmt.order_by(CallDataRecordModel.start_time, CallDataRecordModel.id)
        )
        return [CallRecord.model_validate(row) for row in result.scalars().all()]

    @staticmethod
    def _participant(msisdn: str):
        return or_(
            CallDataRecordModel.phone_one == msisdn,
            CallDataRecordModel.phone_two == msisdn,
        )

    @staticmethod
    def _started_within(start: datetime, end: datetime):
        return (
            CallDataRecordModel.start_time >= start,
            CallDataRecordModel.start_time < end,
        )

    async def find_by_participant_and_range(
        self,
        msisdn: str,
        start: datetime,
        end: datetime,
    ) -> list[CallRecord]:
        """Calls msisdn took part in that started within [start, end)."""
        stmt = select(CallDataRecordModel).where(
            self._participant(msisdn),
            *self._started_within(start, end),
        )
        return await self._fetch(stmt)

    async def find_by_participant(self, msisdn: str) -> list[CallRecord]:
        """Every call msisdn took part in."""
        return await self._fetch(
            select(CallDataRecordModel).where(self._participant(msisdn))
        )

    async def find_all_in_range(self, start: datetime, end: datetime) -> list[CallRecord]:
        """Every call that started within [start, end)."""
        return await self._fetch(
            select(CallDataRecordModel).where(*self._started_within(start, end))
        )

    async def find_all(self) -> list[CallRecord]:
        return await self._fetch(select(CallDataRecordModel))

    async def count_records(self) -> int:
        result = await self._session.execute(
            select(func.count()).select_from(CallDataRecordModel)
        )
        return result.scalar_one()

    async def latest_end_time(self) -> datetime | None:
        """End time of the most recently finished call, None for an empty store."""
        result = await self._session.execute(select(func.max(CallDataRecordModel.end_time)))
        return result.scalar_one_or_none()

    async def add_records(self, records: Iterable[CallRecord]) -> int:
        """Persist call records.

        Returns:
            Number of records added.
        """
        models = [
            CallDataRecordModel(
                call_type=record.call_type.value,
                phone_one=record.phone_one,
                phone_two=record.phone_two,
                start_time=record.start_time,
                end_time=record.end_time,
            )
            for record in records
        ]
        self._session.add_all(models)
        await self._session.flush()
        return len(models)

    async def delete_all_records(self) -> int:
        result = await self._session.execute(delete(CallDataRecordModel))
        await self._session.flush()
        return result.rowcount or 0

    # Subscribers

    async def count_subscribers(self) -> int:
        result = await self._session.execute(
            select(func.count()).select_from(SubscriberModel)
        )
        return result.scalar_one()

    async def list_subscriber_msisdns(self) -> list[str]:
        result = await self._session.execute(
            select(SubscriberModel.msisdn).order_by(SubscriberModel.id)
        )
        return list(result.scalars().all())

    async def add_subscribers(self, msisdns: Sequence[str]) -> list[str]:
        self._session.add_all(SubscriberModel(msisdn=msisdn) for msisdn in msisdns)
        await self._session.flush()
        return list(msisdns)
