"""Usage data report (UDR) service.

Resolves the record set for a UDR query through the CallRecordStore and
hands it to the usage aggregator.
"""

import logging

from app.core.exceptions import InvalidIdentifierError
from app.models.schemas import MSISDN_LENGTH
from app.services.call_record_store import CallRecordStore
from app.services.periods import parse_month
from app.services.usage_aggregator import (
    NegativeDurationPolicy,
    UsageSummary,
    aggregate_for_all,
    aggregate_for_subscriber,
)


logger = logging.getLogger(__name__)


def validate_msisdn(msisdn: str) -> str:
    """Check the fixed MSISDN length; the content is not inspected."""
    if msisdn is None or len(msisdn) != MSISDN_LENGTH:
        raise InvalidIdentifierError(msisdn, MSISDN_LENGTH)
    return msisdn


class UsageReportService:
    """Builds usage data reports for one subscriber or a whole month."""

    def __init__(
        self,
        store: CallRecordStore,
        negative_duration_policy: NegativeDurationPolicy = "clamp",
    ):
        self._store = store
        self._policy = negative_duration_policy

    async def get_by_subscriber(self, msisdn: str, month: str | None = None) -> UsageSummary:
        """Usage for one subscriber in a month, or over all time when month is empty.

        Raises:
            InvalidIdentifierError: msisdn is not 11 characters long.
            InvalidDateFormatError: month is not YYYY-MM.
            NoDataError: the subscriber has no calls in the period.
        """
        validate_msisdn(msisdn)

        if month:
            window = parse_month(month)
            records = await self._store.find_by_participant_and_range(
                msisdn, window.start, window.end
            )
        else:
            records = await self._store.find_by_participant(msisdn)

        logger.info(f"UDR for {msisdn} (month={month or 'all'}): {len(records)} records")
        return aggregate_for_subscriber(msisdn, records, self._policy)

    async def get_all_by_month(self, month: str) -> list[UsageSummary]:
        """Usage for every subscriber with calls starting in the month.

        Raises:
            InvalidDateFormatError: month is not YYYY-MM.
            NoDataError: no calls started in the month.
        """
        window = parse_month(month)
        records = await self._store.find_all_in_range(window.start, window.end)
        logger.info(f"UDR for all subscribers (month={month}): {len(records)} records")
        return aggregate_for_all(records, self._policy)
