"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from typing import List, Optional


class ThresholdsSchema(BaseModel):
    """Threshold pair used for a computation"""

    default_threshold: float
    refusal_threshold: float


class SummarySchema(BaseModel):
    """Overall counts across the analysis window"""

    total: int
    accepted: int
    refused: int
    unknown: int
    acceptance_rate: float


class MonthlyStatSchema(BaseModel):
    """Single month of the breakdown"""

    month: str
    total: int
    accepted: int
    refused: int
    acceptance_rate: float
    trend: Optional[str] = None


class DashboardResponse(BaseModel):
    """Response for GET /v1/dashboard"""

    mode: str
    thresholds: ThresholdsSchema
    record_count: int
    summary: SummarySchema
    monthly: List[MonthlyStatSchema]


class CellCoordinate(BaseModel):
    """Row/column of a threshold pair within the grid"""

    row: int
    col: int


class ThresholdMatrixResponse(BaseModel):
    """Response for GET /v1/threshold-matrix"""

    default_axis: List[float]
    refusal_axis: List[float]
    rates: List[List[float]]
    record_count: int
    selected: Optional[CellCoordinate] = None


class ThresholdCellSchema(BaseModel):
    """Exact threshold pair and acceptance rate of one grid cell"""

    default_threshold: float
    refusal_threshold: float
    acceptance_rate: float


class CellSelectionResponse(BaseModel):
    """Response for GET /v1/threshold-matrix/cell"""

    cell: ThresholdCellSchema
    dashboard: DashboardResponse


class ThresholdUpdateRequest(BaseModel):
    """Request body for PUT /v1/thresholds"""

    default_threshold: float = Field(..., ge=0.0, le=1.0)
    refusal_threshold: float = Field(..., ge=0.0, le=1.0)
    saved_by: Optional[str] = Field(None, max_length=200)


class CurrentThresholdsResponse(BaseModel):
    """Response for GET /v1/thresholds"""

    default_threshold: float
    refusal_threshold: float
    source: str  # "saved" | "default"


class SavedThresholdsResponse(BaseModel):
    """A committed threshold pair"""

    id: str
    default_threshold: float
    refusal_threshold: float
    saved_by: Optional[str] = None
    created_at: str


class ThresholdHistoryResponse(BaseModel):
    """Response for GET /v1/thresholds/history"""

    settings: List[SavedThresholdsResponse]
