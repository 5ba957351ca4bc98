"""GET/PUT /v1/thresholds - committed threshold pair for the underwriting model"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request
from sqlalchemy.orm import Session

from westgate_analytics.api.dependencies import get_request_id
from westgate_analytics.api.v1.schemas import (
    CurrentThresholdsResponse,
    SavedThresholdsResponse,
    ThresholdHistoryResponse,
    ThresholdUpdateRequest,
)
from westgate_analytics.config import settings
from westgate_analytics.domain.exceptions import ThresholdWriteForbiddenError
from westgate_analytics.domain.models import Thresholds
from westgate_analytics.domain.permissions import authorize_threshold_write
from westgate_analytics.infrastructure.database.models import ThresholdSetting
from westgate_analytics.infrastructure.database.repositories import ThresholdRepository
from westgate_analytics.infrastructure.database.session import get_db
from westgate_analytics.infrastructure.observability.metrics import threshold_save_counter

router = APIRouter()


def _saved_response(setting: ThresholdSetting) -> SavedThresholdsResponse:
    return SavedThresholdsResponse(
        id=str(setting.id),
        default_threshold=setting.default_threshold,
        refusal_threshold=setting.refusal_threshold,
        saved_by=setting.saved_by,
        created_at=setting.created_at.isoformat(),
    )


@router.get("/thresholds", response_model=CurrentThresholdsResponse)
def get_thresholds(db: Session = Depends(get_db)):
    """Latest committed thresholds, or the configured defaults before any commit"""
    saved = ThresholdRepository(db).latest()
    if saved is None:
        return CurrentThresholdsResponse(
            default_threshold=settings.default_threshold,
            refusal_threshold=settings.refusal_threshold,
            source="default",
        )
    return CurrentThresholdsResponse(
        default_threshold=saved.default_threshold,
        refusal_threshold=saved.refusal_threshold,
        source="saved",
    )


@router.get("/thresholds/history", response_model=ThresholdHistoryResponse)
def get_threshold_history(
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return ThresholdHistoryResponse(
        settings=[_saved_response(s) for s in ThresholdRepository(db).history(limit=limit)]
    )


@router.put("/thresholds", response_model=SavedThresholdsResponse)
def save_thresholds(
    request_body: ThresholdUpdateRequest,
    request: Request,
    x_threshold_key: Optional[str] = Header(None),
    db: Session = Depends(get_db),
):
    """
    Commit thresholds for use in future loan decisions.

    Requires the threshold write key in the X-Threshold-Key header.
    """
    request_id = get_request_id(request)

    try:
        authorize_threshold_write(x_threshold_key, settings.threshold_write_key)
    except ThresholdWriteForbiddenError as e:
        threshold_save_counter.labels(outcome="forbidden").inc()
        logging.warning(f"Threshold write refused: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=403, detail=str(e))

    thresholds = Thresholds(
        default_threshold=request_body.default_threshold,
        refusal_threshold=request_body.refusal_threshold,
    )
    setting = ThresholdRepository(db).save(thresholds, saved_by=request_body.saved_by)
    db.commit()

    threshold_save_counter.labels(outcome="saved").inc()
    logging.info(
        "Thresholds saved",
        extra={
            "request_id": request_id,
            "default_threshold": thresholds.default_threshold,
            "refusal_threshold": thresholds.refusal_threshold,
        },
    )

    return _saved_response(setting)
