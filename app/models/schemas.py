"""Core business models for the CDR billing service.

This module defines:
- CallType: Direction of a call as seen from phone_one
- CallRecord: Immutable call data record handed to the usage aggregator
"""

from datetime import datetime, timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


MSISDN_LENGTH = 11


class CallType(str, Enum):
    """Two-character call type code, relative to phone_one."""

    OUTGOING = "01"
    INCOMING = "02"

    @property
    def opposite(self) -> "CallType":
        return CallType.INCOMING if self is CallType.OUTGOING else CallType.OUTGOING


class CallRecord(BaseModel):
    """A single call between two subscribers."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    call_type: CallType
    phone_one: str = Field(..., description="Subscriber the call type is relative to")
    phone_two: str = Field(..., description="The other participant")
    start_time: datetime
    end_time: datetime

    @property
    def duration(self) -> timedelta:
        """Elapsed time of the call; negative if end_time precedes start_time."""
        return self.end_time - self.start_time
