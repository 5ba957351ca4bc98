"""GET /v1/dashboard - historical or simulated acceptance statistics"""

import time
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from westgate_analytics.api.dependencies import (
    get_date_range,
    get_record_source,
    get_request_id,
    load_records,
    resolve_thresholds,
    to_dashboard_response,
)
from westgate_analytics.api.v1.schemas import DashboardResponse
from westgate_analytics.domain.dashboard import compute_dashboard
from westgate_analytics.domain.models import DateRange, DisplayMode
from westgate_analytics.infrastructure.clients.records import RecordSource
from westgate_analytics.infrastructure.database.session import get_db
from westgate_analytics.infrastructure.observability.logging import log_view_computed
from westgate_analytics.infrastructure.observability.metrics import record_view

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    request: Request,
    mode: Literal["historical", "simulation"] = Query("historical"),
    default_threshold: Optional[float] = Query(None, ge=0.0, le=1.0),
    refusal_threshold: Optional[float] = Query(None, ge=0.0, le=1.0),
    date_range: DateRange = Depends(get_date_range),
    db: Session = Depends(get_db),
    record_source: RecordSource = Depends(get_record_source),
):
    """
    Overall summary and monthly breakdown for the analysis window.

    Historical mode replays recorded decisions; simulation mode re-decides
    every loan under the given thresholds (falling back to the committed
    pair, then configuration).
    """
    start_time = time.perf_counter()
    request_id = get_request_id(request)

    thresholds = resolve_thresholds(db, default_threshold, refusal_threshold)
    records = await load_records(record_source, date_range, request_id)

    view = compute_dashboard(records, DisplayMode(mode), thresholds)

    record_view(view.mode.value)
    log_view_computed(
        request_id,
        view.mode.value,
        view.record_count,
        view.summary.acceptance_rate,
        (time.perf_counter() - start_time) * 1000,
    )

    return to_dashboard_response(view)
