"""FastAPI dependency injection configuration.

This module provides FastAPI Depends functions for injecting services
into route handlers.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db.session import get_async_session
from app.services.call_record_store import CallRecordStore
from app.services.cdr_generator import CallRecordGenerator
from app.services.cdr_service import CallDataRecordService
from app.services.report_exporter import CsvReportExporter
from app.services.usage_report import UsageReportService


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency.

    Yields:
        An async SQLAlchemy session.
    """
    async for session in get_async_session():
        yield session


DbSessionDep = Annotated[AsyncSession, Depends(get_db_session)]


def get_call_record_store(session: DbSessionDep) -> CallRecordStore:
    """Get the call record store dependency.

    Args:
        session: The database session (injected).

    Returns:
        CallRecordStore instance.
    """
    return CallRecordStore(session)


# Global generator instance
_generator: CallRecordGenerator | None = None


def get_call_record_generator() -> CallRecordGenerator:
    """Get the global CDR generator instance.

    Creates the generator from settings on first use.
    """
    global _generator
    if _generator is None:
        _generator = CallRecordGenerator(settings.generator)
    return _generator


def reset_call_record_generator() -> None:
    """Reset the global generator instance.

    Useful for testing to start again from the configured seed.
    """
    global _generator
    _generator = None


def get_report_exporter() -> CsvReportExporter:
    return CsvReportExporter(settings.report.output_dir)


def get_usage_report_service(
    store: Annotated[CallRecordStore, Depends(get_call_record_store)]
) -> UsageReportService:
    """Get the usage report service dependency.

    Args:
        store: The call record store (injected).

    Returns:
        UsageReportService configured with the negative duration policy.
    """
    return UsageReportService(store, settings.usage.negative_duration_policy)


def get_call_data_record_service(
    store: Annotated[CallRecordStore, Depends(get_call_record_store)],
    generator: Annotated[CallRecordGenerator, Depends(get_call_record_generator)],
    exporter: Annotated[CsvReportExporter, Depends(get_report_exporter)],
) -> CallDataRecordService:
    return CallDataRecordService(store, generator, exporter)


# Type aliases for cleaner route signatures
CallRecordStoreDep = Annotated[CallRecordStore, Depends(get_call_record_store)]
UsageReportServiceDep = Annotated[UsageReportService, Depends(get_usage_report_service)]
CallDataRecordServiceDep = Annotated[
    CallDataRecordService, Depends(get_call_data_record_service)
]
