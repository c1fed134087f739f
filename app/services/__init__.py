# Service Layer

from app.services.call_record_store import CallRecordStore
from app.services.cdr_generator import CallRecordGenerator
from app.services.cdr_service import CallDataRecordService
from app.services.report_exporter import CsvReportExporter, ExportedReport
from app.services.usage_aggregator import (
    DurationAccumulator,
    UsageSummary,
    aggregate_for_all,
    aggregate_for_subscriber,
)
from app.services.usage_report import UsageReportService

__all__ = [
    # Usage aggregation
    "DurationAccumulator",
    "UsageSummary",
    "aggregate_for_subscriber",
    "aggregate_for_all",
    # Core services
    "CallRecordStore",
    "CallRecordGenerator",
    "CallDataRecordService",
    "CsvReportExporter",
    "ExportedReport",
    "UsageReportService",
]
