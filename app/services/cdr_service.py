"""Call data record (CDR) service.

This module implements:
- get_all: List every stored CDR
- generate_records: Extend the store with another generated period
- regenerate: Wipe stored CDRs and generate a fresh period
- generate_report: Export a subscriber's CDRs for a day range to CSV
"""

import logging

from app.core.exceptions import NoDataError
from app.models.schemas import CallRecord
from app.services.call_record_store import CallRecordStore
from app.services.cdr_generator import CallRecordGenerator
from app.services.periods import parse_day_range
from app.services.report_exporter import CsvReportExporter, ExportedReport
from app.services.usage_report import validate_msisdn


logger = logging.getLogger(__name__)


class CallDataRecordService:
    """Service for listing, generating and exporting CDRs."""

    def __init__(
        self,
        store: CallRecordStore,
        generator: CallRecordGenerator,
        exporter: CsvReportExporter,
    ):
        self._store = store
        self._generator = generator
        self._exporter = exporter

    async def get_all(self) -> list[CallRecord]:
        """Return every stored CDR.

        Raises:
            NoDataError: the store is empty.
        """
        records = await self._store.find_all()
        if not records:
            raise NoDataError()
        return records

    async def _subscribers(self) -> list[str]:
        if await self._store.count_subscribers() == 0:
            msisdns = self._generator.new_msisdns()
            logger.info(f"Initializing {len(msisdns)} subscribers")
            return await self._store.add_subscribers(msisdns)
        return await self._store.list_subscriber_msisdns()

    async def generate_records(self) -> int:
        """Generate calls continuing from the last stored call.

        An empty store starts from a random date.

        Returns:
            Number of CDRs written.
        """
        subscribers = await self._subscribers()
        latest = await self._store.latest_end_time()
        start_date = latest.date() if latest else self._generator.random_start_date()
        records = self._generator.generate(subscribers, start_date)
        return await self._store.add_records(records)

    async def regenerate(self) -> int:
        deleted = await self._store.delete_all_records()
        logger.info(f"Deleted {deleted} CDRs before regeneration")
        return await self.generate_records()

    async def generate_report(self, msisdn: str, start: str, end: str) -> ExportedReport:
        """Export msisdn's calls that started between two days, both inclusive.

        Raises:
            InvalidDateFormatError: start or end is not YYYY-MM-DD.
            ValidationError: end is before start.
            InvalidIdentifierError: msisdn is not 11 characters long.
            NoDataError: no calls in the range.
            ReportExportError: the file could not be written.
        """
        window = parse_day_range(start, end)
        validate_msisdn(msisdn)

        records = await self._store.find_by_participant_and_range(
            msisdn, window.start, window.end
        )
        if not records:
            raise NoDataError(query={"msisdn": msisdn, "start": start, "end": end})
        return self._exporter.export(msisdn, records)
