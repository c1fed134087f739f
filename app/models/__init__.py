# Models

from app.models.api import (
    CallRecordResponse,
    CallTotalResponse,
    ErrorResponse,
    RecordsGeneratedResponse,
    ReportGeneratedResponse,
    UsageReportResponse,
)
from app.models.schemas import MSISDN_LENGTH, CallRecord, CallType

__all__ = [
    # Domain
    "MSISDN_LENGTH",
    "CallType",
    "CallRecord",
    # API
    "CallRecordResponse",
    "CallTotalResponse",
    "UsageReportResponse",
    "ReportGeneratedResponse",
    "RecordsGeneratedResponse",
    "ErrorResponse",
]
