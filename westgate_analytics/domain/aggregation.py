"""Aggregation of decisioned loans into overall and monthly acceptance statistics"""

from collections import Counter, defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from westgate_analytics.domain.models import Decision, DecisionedLoan, MonthlyStat, OverallSummary
from westgate_analytics.utils.date_utils import month_key

# Month-over-month moves smaller than this (in percentage points) show no trend
TREND_TOLERANCE = 0.1


def safe_rate(numerator: int, denominator: int, scale: float = 100.0) -> float:
    """numerator / denominator * scale, defined as 0 for an empty denominator"""
    if denominator <= 0:
        return 0.0
    return numerator / denominator * scale


def summarize(loans: Iterable[DecisionedLoan]) -> OverallSummary:
    """
    Overall counts across every loan, unknown decisions included.

    The acceptance rate only considers decided loans:
    accepted / (total - unknown) * 100.
    """
    counts = Counter(loan.decision for loan in loans)
    accepted = counts[Decision.ACCEPT]
    refused = counts[Decision.REFUSE]
    unknown = counts[Decision.UNKNOWN]
    total = accepted + refused + unknown

    return OverallSummary(
        total=total,
        accepted=accepted,
        refused=refused,
        unknown=unknown,
        acceptance_rate=safe_rate(accepted, total - unknown),
    )


def acceptance_trend(current_rate: float, previous_rate: float) -> Optional[str]:
    if previous_rate == 0:
        return None
    diff = current_rate - previous_rate
    if abs(diff) < TREND_TOLERANCE:
        return None
    return "up" if diff > 0 else "down"


def monthly_stats(loans: Iterable[DecisionedLoan]) -> List[MonthlyStat]:
    """
    One MonthlyStat per calendar month holding at least one decided loan.

    Unknown decisions never create or touch a bucket. Output is sorted by
    month key, which is also chronological.
    """
    buckets: Dict[str, Counter] = defaultdict(Counter)
    for loan in loans:
        if loan.decision == Decision.UNKNOWN:
            continue
        buckets[month_key(loan.record.created_at)][loan.decision] += 1

    stats: List[MonthlyStat] = []
    for key in sorted(buckets):
        accepted = buckets[key][Decision.ACCEPT]
        refused = buckets[key][Decision.REFUSE]
        rate = safe_rate(accepted, accepted + refused)
        trend = acceptance_trend(rate, stats[-1].acceptance_rate) if stats else None
        stats.append(
            MonthlyStat(
                month_key=key,
                total=accepted + refused,
                accepted=accepted,
                refused=refused,
                acceptance_rate=rate,
                trend=trend,
            )
        )

    return stats


def aggregate(loans: Iterable[DecisionedLoan]) -> Tuple[OverallSummary, List[MonthlyStat]]:
    """Overall summary and ordered monthly breakdown for the same loans"""
    loans = list(loans)
    return summarize(loans), monthly_stats(loans)
