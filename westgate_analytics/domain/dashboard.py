"""Dashboard session - display-mode state machine over a loaded record set"""

from dataclasses import replace
from typing import List, Optional, Sequence

from westgate_analytics.domain.aggregation import aggregate
from westgate_analytics.domain.decisions import decide_all
from westgate_analytics.domain.models import (
    DashboardView,
    DateRange,
    DisplayMode,
    LoanRecord,
    ThresholdCell,
    ThresholdMatrix,
    Thresholds,
)
from westgate_analytics.domain.sweep import DEFAULT_STEP, build_threshold_matrix
from westgate_analytics.utils.date_utils import in_date_range

DEFAULT_THRESHOLDS = Thresholds(default_threshold=0.7, refusal_threshold=0.6)


def filter_by_date_range(records: Sequence[LoanRecord], date_range: Optional[DateRange]) -> List[LoanRecord]:
    if date_range is None:
        return list(records)
    return [r for r in records if in_date_range(r.created_at, date_range)]


def compute_dashboard(
    records: Sequence[LoanRecord],
    mode: DisplayMode,
    thresholds: Thresholds,
    step: float = DEFAULT_STEP,
) -> DashboardView:
    """
    Build the view for one display mode from scratch.

    Historical and simulation modes yield a summary plus monthly breakdown;
    the threshold-grid mode yields the sweep matrix.
    """
    if mode == DisplayMode.THRESHOLD_GRID:
        return DashboardView(
            mode=mode,
            thresholds=thresholds,
            record_count=len(records),
            matrix=build_threshold_matrix(records, step),
        )

    summary, monthly = aggregate(decide_all(records, mode, thresholds))
    return DashboardView(
        mode=mode,
        thresholds=thresholds,
        record_count=len(records),
        summary=summary,
        monthly=monthly,
    )


class DashboardSession:
    """
    Holds the controls of one dashboard session.

    Starts in historical mode. Any mode can be entered from any other; every
    view is recomputed from the latest record set and control values.
    """

    def __init__(
        self,
        records: Sequence[LoanRecord] = (),
        thresholds: Thresholds = DEFAULT_THRESHOLDS,
        date_range: Optional[DateRange] = None,
        step: float = DEFAULT_STEP,
    ):
        self.records: List[LoanRecord] = list(records)
        self.thresholds = thresholds
        self.date_range = date_range
        self.step = step
        self.mode = DisplayMode.HISTORICAL

    def load(self, records: Sequence[LoanRecord]) -> None:
        """Replace the record set, e.g. after a fresh fetch"""
        self.records = list(records)

    def switch_mode(self, mode: DisplayMode) -> None:
        self.mode = DisplayMode(mode)

    def set_thresholds(
        self,
        default_threshold: Optional[float] = None,
        refusal_threshold: Optional[float] = None,
    ) -> Thresholds:
        changes = {}
        if default_threshold is not None:
            changes["default_threshold"] = default_threshold
        if refusal_threshold is not None:
            changes["refusal_threshold"] = refusal_threshold
        self.thresholds = replace(self.thresholds, **changes)
        return self.thresholds

    def set_date_range(self, date_range: Optional[DateRange]) -> None:
        self.date_range = date_range

    @property
    def visible_records(self) -> List[LoanRecord]:
        return filter_by_date_range(self.records, self.date_range)

    def view(self) -> DashboardView:
        return compute_dashboard(self.visible_records, self.mode, self.thresholds, self.step)

    def matrix(self) -> ThresholdMatrix:
        return build_threshold_matrix(self.visible_records, self.step)

    def select_cell(self, row: int, col: int) -> ThresholdCell:
        """Adopt a grid cell's exact threshold pair and switch to simulation mode"""
        cell = self.matrix().cell_at(row, col)
        self.thresholds = Thresholds(
            default_threshold=cell.default_threshold,
            refusal_threshold=cell.refusal_threshold,
        )
        self.mode = DisplayMode.SIMULATION
        return cell
