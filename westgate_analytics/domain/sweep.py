"""Threshold sweep engine - acceptance rate over a 2D grid of threshold pairs"""

import math
from bisect import bisect_left
from decimal import Decimal
from typing import List, Sequence

from westgate_analytics.domain.exceptions import InvalidThresholdError
from westgate_analytics.domain.models import LoanRecord, ThresholdMatrix

DEFAULT_STEP = 0.05
AXIS_PRECISION = 2
MIN_STEP = 0.01  # At most 101 values per axis


def threshold_axis(step: float = DEFAULT_STEP) -> List[float]:
    """
    Threshold values from 0 to 1 at the given step, both endpoints included.

    Values are index * step rounded to the step's own decimal places (at
    least 2), so there is no drift from repeated float addition: 0.05 gives 21
    values, 0.00 ... 1.00.
    """
    if not MIN_STEP <= step <= 1:
        raise InvalidThresholdError(f"Sweep step must be within [{MIN_STEP}, 1], got {step}")

    precision = max(AXIS_PRECISION, -Decimal(repr(step)).normalize().as_tuple().exponent)

    # Small epsilon so 1 / 0.05 = 19.999... still counts 20 steps
    steps = math.floor(1 / step + 1e-9)
    return [round(i * step, precision) for i in range(steps + 1)]


def sweep_accepts(record: LoanRecord, default_threshold: float, refusal_threshold: float) -> bool:
    """
    Grid rule: accept when BOTH scores are within bound (inclusive).

    Stated separately from decisions.simulate_decision (refuse when EITHER
    score strictly exceeds its threshold); at any given pair both accept the
    same loans.
    """
    return record.default_score <= default_threshold and record.refusal_score <= refusal_threshold


def build_threshold_matrix(records: Sequence[LoanRecord], step: float = DEFAULT_STEP) -> ThresholdMatrix:
    """
    Acceptance rate for every (default, refusal) pair on the grid.

    Rate per cell = records accepted by sweep_accepts / all records. Instead of
    testing every record against every cell, each record is placed at the
    first grid index whose threshold covers its score; a 2D prefix sum over
    those placements then gives the accepted count of every cell.
    """
    axis = threshold_axis(step)
    if not records:
        return ThresholdMatrix(default_axis=axis, refusal_axis=list(axis), rates=[], record_count=0)

    size = len(axis)
    counts = [[0] * size for _ in range(size)]

    for record in records:
        # First index i with axis[i] >= score, i.e. score <= axis[i] for every index from i on
        row = bisect_left(axis, record.default_score)
        col = bisect_left(axis, record.refusal_score)
        if row < size and col < size:
            counts[row][col] += 1

    # Cumulative sums turn placements into "accepted at or before (row, col)"
    for row in range(size):
        for col in range(size):
            if row > 0:
                counts[row][col] += counts[row - 1][col]
            if col > 0:
                counts[row][col] += counts[row][col - 1]
            if row > 0 and col > 0:
                counts[row][col] -= counts[row - 1][col - 1]

    total = len(records)
    rates = [[accepted / total for accepted in row_counts] for row_counts in counts]

    return ThresholdMatrix(default_axis=axis, refusal_axis=list(axis), rates=rates, record_count=total)
