"""Domain models - pure Python dataclasses representing lending analytics entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Iterator, List, Optional, Tuple, Union

from westgate_analytics.domain.exceptions import InvalidThresholdError


class Decision(str, Enum):
    """Outcome assigned to a loan under a given mode and threshold pair"""

    ACCEPT = "accept"
    REFUSE = "refuse"
    UNKNOWN = "unknown"


class DisplayMode(str, Enum):
    """Dashboard display modes"""

    HISTORICAL = "historical"
    SIMULATION = "simulation"
    THRESHOLD_GRID = "threshold-grid"


@dataclass(frozen=True)
class LoanRecord:
    """Normalized loan event from the record store"""

    id: Union[int, str]
    created_at: datetime  # Always timezone-aware
    default_score: float
    refusal_score: float
    historical_decision: Optional[str] = None  # "accept" | "refuse" | None


@dataclass(frozen=True)
class Thresholds:
    """Risk threshold pair applied by the simulation rule"""

    default_threshold: float
    refusal_threshold: float

    def __post_init__(self) -> None:
        for name in ("default_threshold", "refusal_threshold"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise InvalidThresholdError(f"{name} must be within [0, 1], got {value}")


@dataclass(frozen=True)
class DecisionedLoan:
    """Loan record paired with its computed decision"""

    record: LoanRecord
    decision: Decision


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar-day analysis window"""

    start: date
    end: date


@dataclass
class OverallSummary:
    """Aggregate counts over every decisioned loan"""

    total: int
    accepted: int
    refused: int
    unknown: int
    acceptance_rate: float  # 0-100


@dataclass
class MonthlyStat:
    """Decided loans bucketed by calendar month"""

    month_key: str  # "YYYY-MM"
    total: int
    accepted: int
    refused: int
    acceptance_rate: float  # 0-100
    trend: Optional[str] = None  # "up" | "down" vs previous month


@dataclass(frozen=True)
class ThresholdCell:
    """One grid coordinate of the threshold sweep"""

    default_threshold: float
    refusal_threshold: float
    acceptance_rate: float  # 0-1


@dataclass
class ThresholdMatrix:
    """
    Acceptance rates over the cross product of two threshold axes.

    Rows follow default_axis, columns follow refusal_axis. An empty record set
    leaves rates empty; every cell then reads as 0.
    """

    default_axis: List[float]
    refusal_axis: List[float]
    rates: List[List[float]] = field(default_factory=list)
    record_count: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.rates

    def rate_at(self, row: int, col: int) -> float:
        self._check_bounds(row, col)
        if self.is_empty:
            return 0.0
        return self.rates[row][col]

    def cell_at(self, row: int, col: int) -> ThresholdCell:
        """Map a grid coordinate back to its exact threshold pair"""
        self._check_bounds(row, col)
        return ThresholdCell(
            default_threshold=self.default_axis[row],
            refusal_threshold=self.refusal_axis[col],
            acceptance_rate=self.rate_at(row, col),
        )

    def locate(self, default_threshold: float, refusal_threshold: float) -> Optional[Tuple[int, int]]:
        """Grid coordinate of a threshold pair, or None when the pair is off-grid"""
        try:
            return self.default_axis.index(default_threshold), self.refusal_axis.index(refusal_threshold)
        except ValueError:
            return None

    def cells(self) -> Iterator[ThresholdCell]:
        for row in range(len(self.default_axis)):
            for col in range(len(self.refusal_axis)):
                yield self.cell_at(row, col)

    def _check_bounds(self, row: int, col: int) -> None:
        if not (0 <= row < len(self.default_axis) and 0 <= col < len(self.refusal_axis)):
            raise IndexError(f"Cell ({row}, {col}) outside {len(self.default_axis)}x{len(self.refusal_axis)} grid")


@dataclass
class DashboardView:
    """Everything the display layer needs for one mode"""

    mode: DisplayMode
    thresholds: Thresholds
    record_count: int
    summary: Optional[OverallSummary] = None
    monthly: List[MonthlyStat] = field(default_factory=list)
    matrix: Optional[ThresholdMatrix] = None
