"""
Synthetic CDR generator.

- A fixed pool of subscribers with MSISDNs of the form <prefix><10 digits>.
- Each day in the generation window gets a uniform random number of calls.
- Caller and receiver are distinct random subscribers, the call type is a coin flip.
- Call start is a random second of the day; the end is start + a random duration,
  so a call that crosses midnight ends on the next day.
"""

import calendar
import logging
import random
from collections.abc import Sequence
from datetime import date, datetime, time, timedelta

from app.core.config import GeneratorConfig
from app.models.schemas import MSISDN_LENGTH, CallRecord, CallType


logger = logging.getLogger(__name__)


def add_months(start: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the target month's length."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


class CallRecordGenerator:
    """Generates random calls between a pool of subscribers."""

    def __init__(self, config: GeneratorConfig, rng: random.Random | None = None):
        self.config = config
        self._rng = rng or random.Random(config.seed)

    def new_msisdns(self, count: int | None = None) -> list[str]:
        """Generate distinct subscriber numbers."""
        count = self.config.subscriber_count if count is None else count
        digits = MSISDN_LENGTH - len(self.config.msisdn_prefix)
        msisdns: list[str] = []
        seen: set[str] = set()
        while len(msisdns) < count:
            suffix = "".join(str(self._rng.randint(0, 9)) for _ in range(digits))
            msisdn = f"{self.config.msisdn_prefix}{suffix}"
            if msisdn not in seen:
                seen.add(msisdn)
                msisdns.append(msisdn)
        return msisdns

    def random_start_date(self) -> date:
        """Random calendar date between 1980-01-01 and 2024-12-31."""
        year = self._rng.randint(1980, 2024)
        month = self._rng.randint(1, 12)
        day = self._rng.randint(1, calendar.monthrange(year, month)[1])
        return date(year, month, day)

    def _random_call(self, subscribers: Sequence[str], day: date) -> CallRecord:
        caller = self._rng.choice(subscribers)
        receiver = self._rng.choice(subscribers)
        while receiver == caller:
            receiver = self._rng.choice(subscribers)

        start = datetime.combine(
            day,
            time(
                hour=self._rng.randint(0, 23),
                minute=self._rng.randint(0, 59),
                second=self._rng.randint(0, 59),
            ),
        )
        seconds = self._rng.randrange(self.config.min_call_seconds, self.config.max_call_seconds)
        return CallRecord(
            call_type=CallType.OUTGOING if self._rng.random() < 0.5 else CallType.INCOMING,
            phone_one=caller,
            phone_two=receiver,
            start_time=start,
            end_time=start + timedelta(seconds=seconds),
        )

    def generate(self, subscribers: Sequence[str], start_date: date) -> list[CallRecord]:
        """Generate calls for every day from start_date for the configured months.

        Args:
            subscribers: MSISDNs to pick participants from, at least two.
            start_date: First day of the generation window.

        Returns:
            Generated records in chronological day order.
        """
        if len(set(subscribers)) < 2:
            raise ValueError("At least two distinct subscribers are required")

        end_date = add_months(start_date, self.config.months_to_generate)
        records: list[CallRecord] = []
        day = start_date
        while day < end_date:
            calls_today = self._rng.randrange(1, self.config.max_calls_per_day)
            records.extend(self._random_call(subscribers, day) for _ in range(calls_today))
            day += timedelta(days=1)

        logger.info(
            f"Generated {len(records)} CDRs for {len(subscribers)} subscribers "
            f"from {start_date} to {end_date}"
        )
        return records
