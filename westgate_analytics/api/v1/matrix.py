"""GET /v1/threshold-matrix - acceptance-rate sensitivity grid"""

import time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from westgate_analytics.api.dependencies import (
    get_date_range,
    get_record_source,
    get_request_id,
    load_records,
    resolve_thresholds,
    to_dashboard_response,
)
from westgate_analytics.api.v1.schemas import (
    CellCoordinate,
    CellSelectionResponse,
    ThresholdCellSchema,
    ThresholdMatrixResponse,
)
from westgate_analytics.config import settings
from westgate_analytics.domain.dashboard import DashboardSession
from westgate_analytics.domain.models import DateRange, DisplayMode
from westgate_analytics.domain.sweep import MIN_STEP, build_threshold_matrix
from westgate_analytics.infrastructure.clients.records import RecordSource
from westgate_analytics.infrastructure.database.session import get_db
from westgate_analytics.infrastructure.observability.logging import log_view_computed
from westgate_analytics.infrastructure.observability.metrics import record_view, sweep_duration_histogram

router = APIRouter()


@router.get("/threshold-matrix", response_model=ThresholdMatrixResponse)
async def get_threshold_matrix(
    request: Request,
    step: float = Query(settings.sweep_step, ge=MIN_STEP, le=1.0),
    default_threshold: Optional[float] = Query(None, ge=0.0, le=1.0),
    refusal_threshold: Optional[float] = Query(None, ge=0.0, le=1.0),
    date_range: DateRange = Depends(get_date_range),
    db: Session = Depends(get_db),
    record_source: RecordSource = Depends(get_record_source),
):
    """
    Accept rate for every (default, refusal) threshold pair on the grid.

    Rows follow the default threshold axis, columns the refusal axis. The
    current thresholds are reported as the selected cell when on-grid.
    """
    start_time = time.perf_counter()
    request_id = get_request_id(request)

    thresholds = resolve_thresholds(db, default_threshold, refusal_threshold)
    records = await load_records(record_source, date_range, request_id)

    with sweep_duration_histogram.time():
        matrix = build_threshold_matrix(records, step)

    selected = matrix.locate(thresholds.default_threshold, thresholds.refusal_threshold)

    record_view(DisplayMode.THRESHOLD_GRID.value)
    log_view_computed(
        request_id,
        DisplayMode.THRESHOLD_GRID.value,
        matrix.record_count,
        None,
        (time.perf_counter() - start_time) * 1000,
    )

    return ThresholdMatrixResponse(
        default_axis=matrix.default_axis,
        refusal_axis=matrix.refusal_axis,
        rates=matrix.rates,
        record_count=matrix.record_count,
        selected=CellCoordinate(row=selected[0], col=selected[1]) if selected else None,
    )


@router.get("/threshold-matrix/cell", response_model=CellSelectionResponse)
async def select_threshold_cell(
    request: Request,
    row: int = Query(..., ge=0, description="Index on the default threshold axis"),
    col: int = Query(..., ge=0, description="Index on the refusal threshold axis"),
    step: float = Query(settings.sweep_step, ge=MIN_STEP, le=1.0),
    date_range: DateRange = Depends(get_date_range),
    db: Session = Depends(get_db),
    record_source: RecordSource = Depends(get_record_source),
):
    """
    Select a grid cell and switch to simulation mode with its exact thresholds.

    Returns the cell and the simulation dashboard evaluated at that pair.
    """
    request_id = get_request_id(request)
    records = await load_records(record_source, date_range, request_id)

    session = DashboardSession(records, thresholds=resolve_thresholds(db), step=step)
    session.switch_mode(DisplayMode.THRESHOLD_GRID)
    try:
        cell = session.select_cell(row, col)
    except IndexError as e:
        raise HTTPException(status_code=422, detail=str(e))

    view = session.view()
    record_view(view.mode.value)

    return CellSelectionResponse(
        cell=ThresholdCellSchema(
            default_threshold=cell.default_threshold,
            refusal_threshold=cell.refusal_threshold,
            acceptance_rate=cell.acceptance_rate,
        ),
        dashboard=to_dashboard_response(view),
    )
