"""Usage aggregation over call data records.

Reduces a materialized set of CDRs into per-subscriber incoming/outgoing
talk-time totals. Two entry points:

- aggregate_for_subscriber: totals for one MSISDN, direction resolved
  relative to whichever side of the call that MSISDN is on.
- aggregate_for_all: totals for every participant, each record counted
  once for phone_one and once, in the opposite direction, for phone_two.

Both functions are pure and hold no state between calls.
"""

import logging
from collections.abc import Iterable
from datetime import timedelta
from typing import Literal

from app.core.exceptions import InvalidRecordError, NoDataError
from app.models.schemas import CallRecord, CallType


logger = logging.getLogger(__name__)

NegativeDurationPolicy = Literal["clamp", "reject"]


class DurationAccumulator:
    """Non-negative running total of elapsed time.

    Backed by a timedelta, so totals past 24 hours keep growing instead
    of wrapping like a time of day would.
    """

    __slots__ = ("_total",)

    def __init__(self) -> None:
        self._total = timedelta(0)

    def add(self, duration: timedelta) -> None:
        if duration < timedelta(0):
            raise ValueError(f"Cannot add a negative duration: {duration}")
        self._total += duration

    @property
    def value(self) -> timedelta:
        return self._total

    @property
    def total_seconds(self) -> int:
        return int(self._total.total_seconds())

    def format(self) -> str:
        """Render as HH:MM:SS with an unbounded hour field."""
        hours, remainder = divmod(self.total_seconds, 3600)
        minutes, seconds = divmod(remainder, 60)
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"

    def __repr__(self) -> str:
        return f"DurationAccumulator({self.format()})"


class UsageSummary:
    """Incoming and outgoing totals for one subscriber.

    Two summaries are equal when they belong to the same subscriber,
    whatever their accumulated time.
    """

    __slots__ = ("subscriber_id", "incoming", "outgoing")

    def __init__(self, subscriber_id: str) -> None:
        self.subscriber_id = subscriber_id
        self.incoming = DurationAccumulator()
        self.outgoing = DurationAccumulator()

    def add(self, direction: CallType, duration: timedelta) -> None:
        if direction is CallType.OUTGOING:
            self.outgoing.add(duration)
        else:
            self.incoming.add(duration)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UsageSummary):
            return NotImplemented
        return self.subscriber_id == other.subscriber_id

    def __hash__(self) -> int:
        return hash(self.subscriber_id)

    def __repr__(self) -> str:
        return (
            f"UsageSummary({self.subscriber_id!r}, "
            f"incoming={self.incoming.format()}, outgoing={self.outgoing.format()})"
        )


def billable_duration(
    record: CallRecord,
    policy: NegativeDurationPolicy = "clamp",
) -> timedelta:
    """Return the duration a record contributes to the totals.

    A record that ends before it starts is either counted as zero
    (clamp) or fails the aggregation (reject).
    """
    duration = record.duration
    if duration >= timedelta(0):
        return duration
    if policy == "reject":
        raise InvalidRecordError(record=record.model_dump(mode="json"))
    logger.warning(
        "Clamping negative call duration to zero",
        extra={
            "phone_one": record.phone_one,
            "phone_two": record.phone_two,
            "start_time": record.start_time.isoformat(),
            "end_time": record.end_time.isoformat(),
        },
    )
    return timedelta(0)


def direction_for(record: CallRecord, msisdn: str) -> CallType | None:
    """Direction of a record from msisdn's side, None if msisdn is not on the call."""
    if record.phone_one == msisdn:
        return record.call_type
    if record.phone_two == msisdn:
        return record.call_type.opposite
    return None


def aggregate_for_subscriber(
    msisdn: str,
    records: Iterable[CallRecord],
    policy: NegativeDurationPolicy = "clamp",
) -> UsageSummary:
    """Sum incoming and outgoing time for one subscriber.

    Args:
        msisdn: Subscriber to report on.
        records: Calls to scan; calls not involving msisdn are skipped.
        policy: Handling of records with a negative duration.

    Returns:
        The subscriber's UsageSummary.

    Raises:
        NoDataError: If no record involves msisdn.
    """
    summary = UsageSummary(msisdn)
    counted = 0
    for record in records:
        direction = direction_for(record, msisdn)
        if direction is None:
            logger.debug(f"Skipping record not involving {msisdn}: {record}")
            continue
        summary.add(direction, billable_duration(record, policy))
        counted += 1

    if counted == 0:
        raise NoDataError(query={"msisdn": msisdn})

    logger.debug(f"Aggregated {counted} records: {summary!r}")
    return summary


def aggregate_for_all(
    records: Iterable[CallRecord],
    policy: NegativeDurationPolicy = "clamp",
) -> list[UsageSummary]:
    """Sum incoming and outgoing time for every participant in records.

    phone_one is credited in the direction of the call type and phone_two
    in the opposite direction, with the same duration.

    Returns:
        One UsageSummary per distinct MSISDN, in no particular order.

    Raises:
        NoDataError: If records is empty.
    """
    summaries: dict[str, UsageSummary] = {}

    def summary_for(msisdn: str) -> UsageSummary:
        summary = summaries.get(msisdn)
        if summary is None:
            summary = summaries[msisdn] = UsageSummary(msisdn)
        return summary

    for record in records:
        duration = billable_duration(record, policy)
        summary_for(record.phone_one).add(record.call_type, duration)
        summary_for(record.phone_two).add(record.call_type.opposite, duration)

    if not summaries:
        raise NoDataError()

    logger.debug(f"Aggregated usage for {len(summaries)} subscribers")
    return list(summaries.values())
