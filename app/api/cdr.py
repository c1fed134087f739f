"""
Call data record API endpoints.
Lists stored CDRs, generates new ones and exports per-subscriber reports.
"""

from fastapi import APIRouter, Query

from app.core.dependencies import CallDataRecordServiceDep
from app.models.api import (
    CallRecordResponse,
    ErrorResponse,
    RecordsGeneratedResponse,
    ReportGeneratedResponse,
)


router = APIRouter(prefix="/cdr", tags=["cdr"])


@router.get(
    "/all",
    response_model=list[CallRecordResponse],
    responses={404: {"model": ErrorResponse, "description": "No CDRs stored"}},
)
async def get_all(service: CallDataRecordServiceDep) -> list[CallRecordResponse]:
    """Every stored CDR, 404 when there are none."""
    records = await service.get_all()
    return [CallRecordResponse.from_record(record) for record in records]


@router.post("/generateRecord", response_model=RecordsGeneratedResponse)
async def generate_records(service: CallDataRecordServiceDep) -> RecordsGeneratedResponse:
    """Generate another period of CDRs after the latest stored call."""
    generated = await service.generate_records()
    return RecordsGeneratedResponse(generated=generated)


@router.post(
    "/generateReport",
    response_model=ReportGeneratedResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid MSISDN or dates"},
        404: {"model": ErrorResponse, "description": "No calls in the range"},
        500: {"model": ErrorResponse, "description": "Report file could not be written"},
    },
)
async def generate_report(
    service: CallDataRecordServiceDep,
    msisdn: str = Query(..., description="Subscriber MSISDN, 11 digits"),
    start: str = Query(..., description="First day, YYYY-MM-DD"),
    end: str = Query(..., description="Last day (inclusive), YYYY-MM-DD"),
) -> ReportGeneratedResponse:
    """
    Export the subscriber's CDRs between two days to a CSV file.

    Returns:
        The report UUID and file name
    """
    report = await service.generate_report(msisdn, start, end)
    return ReportGeneratedResponse(
        uuid=report.uuid,
        file_name=report.path.name,
        records=report.records,
    )
