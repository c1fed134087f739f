"""
Usage data report API endpoints.
"""

from fastapi import APIRouter, Query

from app.core.dependencies import UsageReportServiceDep
from app.models.api import ErrorResponse, UsageReportResponse


router = APIRouter(prefix="/udr", tags=["udr"])


@router.get(
    "/getByMsisdn",
    response_model=UsageReportResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid MSISDN or month"},
        404: {"model": ErrorResponse, "description": "No calls in the period"},
        422: {"model": ErrorResponse, "description": "Stored call rejected"},
    },
)
async def get_by_msisdn(
    service: UsageReportServiceDep,
    msisdn: str = Query(..., description="Subscriber MSISDN, 11 digits"),
    month: str | None = Query(default=None, description="YYYY-MM; all time when omitted"),
) -> UsageReportResponse:
    """Incoming and outgoing call time of one subscriber."""
    summary = await service.get_by_subscriber(msisdn, month)
    return UsageReportResponse.from_summary(summary)


@router.get(
    "/getAllByMonth",
    response_model=list[UsageReportResponse],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid month"},
        404: {"model": ErrorResponse, "description": "No calls in the month"},
        422: {"model": ErrorResponse, "description": "Stored call rejected"},
    },
)
async def get_all_by_month(
    service: UsageReportServiceDep,
    month: str = Query(..., description="YYYY-MM"),
) -> list[UsageReportResponse]:
    """Incoming and outgoing call time of every subscriber active in a month."""
    summaries = await service.get_all_by_month(month)
    return [
        UsageReportResponse.from_summary(summary)
        for summary in sorted(summaries, key=lambda s: s.subscriber_id)
    ]
