"""Dependency injection and shared helpers for FastAPI endpoints"""

import logging
from datetime import date
from typing import List, Optional

from fastapi import HTTPException, Query, Request
from sqlalchemy.orm import Session

from westgate_analytics.config import settings
from westgate_analytics.domain.exceptions import RecordStoreError
from westgate_analytics.domain.models import DashboardView, DateRange, LoanRecord, Thresholds
from westgate_analytics.infrastructure.clients.records import RecordSource, build_record_source
from westgate_analytics.infrastructure.database.repositories import ThresholdRepository
from westgate_analytics.utils.date_utils import default_date_range, quick_range
from westgate_analytics.api.v1.schemas import (
    DashboardResponse,
    MonthlyStatSchema,
    SummarySchema,
    ThresholdsSchema,
)


QUICK_RANGE_MONTHS = (3, 6, 12)


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_record_source() -> RecordSource:
    """Provide the configured record source"""
    return build_record_source(settings)


def get_date_range(
    start: Optional[date] = Query(None, description="Inclusive start day (default: January 1st)"),
    end: Optional[date] = Query(None, description="Inclusive end day (default: today)"),
    months: Optional[int] = Query(
        None, description="Quick window of the last 3, 6 or 12 months, used when start and end are absent"
    ),
) -> DateRange:
    """Analysis window from query parameters, defaulting to year-to-date"""
    if months is not None and months not in QUICK_RANGE_MONTHS:
        raise HTTPException(status_code=422, detail=f"months must be one of {list(QUICK_RANGE_MONTHS)}")
    if months is not None and start is None and end is None:
        return quick_range(months)

    fallback = default_date_range()
    date_range = DateRange(start=start or fallback.start, end=end or fallback.end)
    if date_range.start > date_range.end:
        raise HTTPException(status_code=422, detail="start must not be after end")
    return date_range


async def load_records(source: RecordSource, date_range: DateRange, request_id: str) -> List[LoanRecord]:
    """Fetch the record set, turning store failures into a retryable 503"""
    try:
        return await source.get_records(date_range)
    except RecordStoreError as e:
        logging.error(f"Record store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Record store unavailable")


def resolve_thresholds(
    db: Session,
    default_threshold: Optional[float] = None,
    refusal_threshold: Optional[float] = None,
) -> Thresholds:
    """Explicit values win, then the latest committed pair, then configuration"""
    base = ThresholdRepository(db).latest() or Thresholds(
        default_threshold=settings.default_threshold,
        refusal_threshold=settings.refusal_threshold,
    )
    return Thresholds(
        default_threshold=base.default_threshold if default_threshold is None else default_threshold,
        refusal_threshold=base.refusal_threshold if refusal_threshold is None else refusal_threshold,
    )


def to_dashboard_response(view: DashboardView) -> DashboardResponse:
    return DashboardResponse(
        mode=view.mode.value,
        thresholds=ThresholdsSchema(
            default_threshold=view.thresholds.default_threshold,
            refusal_threshold=view.thresholds.refusal_threshold,
        ),
        record_count=view.record_count,
        summary=SummarySchema(
            total=view.summary.total,
            accepted=view.summary.accepted,
            refused=view.summary.refused,
            unknown=view.summary.unknown,
            acceptance_rate=view.summary.acceptance_rate,
        ),
        monthly=[
            MonthlyStatSchema(
                month=m.month_key,
                total=m.total,
                accepted=m.accepted,
                refused=m.refused,
                acceptance_rate=m.acceptance_rate,
                trend=m.trend,
            )
            for m in view.monthly
        ],
    )
