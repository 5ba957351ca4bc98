"""Decision evaluator - maps a loan to accept/refuse/unknown per display mode"""

from typing import Iterable, List

from westgate_analytics.domain.models import (
    Decision,
    DecisionedLoan,
    DisplayMode,
    LoanRecord,
    Thresholds,
)


def simulate_decision(record: LoanRecord, thresholds: Thresholds) -> Decision:
    """
    Simulation rule: refuse when EITHER score exceeds its threshold.

    Strict comparison on both axes, so a score equal to its threshold is
    accepted.
    """
    if (
        record.default_score > thresholds.default_threshold
        or record.refusal_score > thresholds.refusal_threshold
    ):
        return Decision.REFUSE
    return Decision.ACCEPT


def historical_decision(record: LoanRecord) -> Decision:
    """Recorded real-world decision; thresholds play no part"""
    if record.historical_decision is None:
        return Decision.UNKNOWN
    return Decision(record.historical_decision)


def decide(record: LoanRecord, mode: DisplayMode, thresholds: Thresholds) -> Decision:
    if mode == DisplayMode.HISTORICAL:
        return historical_decision(record)
    return simulate_decision(record, thresholds)


def decide_all(
    records: Iterable[LoanRecord],
    mode: DisplayMode,
    thresholds: Thresholds,
) -> List[DecisionedLoan]:
    return [DecisionedLoan(record=r, decision=decide(r, mode, thresholds)) for r in records]
