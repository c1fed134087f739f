"""API request and response models for the CDR billing service.

This module defines Pydantic models for:
- CallRecordResponse: One CDR as returned by /cdr/all
- UsageReportResponse: Incoming/outgoing totals for one subscriber
- ReportGeneratedResponse: Result of a CSV report export
- ErrorResponse: Standard error body
"""

from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from app.models.schemas import CallRecord, CallType

if TYPE_CHECKING:
    from app.services.usage_aggregator import DurationAccumulator, UsageSummary


class CallRecordResponse(BaseModel):
    """Response model for a single call data record."""

    call_type: CallType = Field(..., description="01 outgoing, 02 incoming (relative to phone_one)")
    phone_one: str
    phone_two: str
    start_time: datetime
    end_time: datetime

    @classmethod
    def from_record(cls, record: CallRecord) -> "CallRecordResponse":
        return cls(
            call_type=record.call_type,
            phone_one=record.phone_one,
            phone_two=record.phone_two,
            start_time=record.start_time,
            end_time=record.end_time,
        )


class CallTotalResponse(BaseModel):
    """Accumulated talk time in one direction."""

    total_time: str = Field(..., description="HH:MM:SS, hours are not capped at 24")
    total_seconds: int = Field(..., ge=0)

    @classmethod
    def from_accumulator(cls, accumulator: "DurationAccumulator") -> "CallTotalResponse":
        return cls(
            total_time=accumulator.format(),
            total_seconds=accumulator.total_seconds,
        )


class UsageReportResponse(BaseModel):
    """Usage data report for one subscriber."""

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "msisdn": "71111111111",
            "incoming_call": {"total_time": "00:04:00", "total_seconds": 240},
            "outgoing_call": {"total_time": "27:03:10", "total_seconds": 97390},
        }
    })

    msisdn: str
    incoming_call: CallTotalResponse
    outgoing_call: CallTotalResponse

    @classmethod
    def from_summary(cls, summary: "UsageSummary") -> "UsageReportResponse":
        return cls(
            msisdn=summary.subscriber_id,
            incoming_call=CallTotalResponse.from_accumulator(summary.incoming),
            outgoing_call=CallTotalResponse.from_accumulator(summary.outgoing),
        )


class ReportGeneratedResponse(BaseModel):
    """Response model for POST /cdr/generateReport."""

    uuid: str = Field(..., description="Report identifier")
    file_name: str
    records: int = Field(..., ge=1, description="Number of CDRs written")
    message: str = "Report was generated successfully"


class RecordsGeneratedResponse(BaseModel):
    """Response model for POST /cdr/generateRecord."""

    generated: int = Field(..., ge=0)


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error: str = Field(..., description="Error type identifier")
    message: str = Field(..., description="Human-readable error message")
    details: dict | None = Field(default=None, description="Additional error details")
