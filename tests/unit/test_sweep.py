"""Unit tests for the threshold sweep engine"""

import random
import pytest
from datetime import datetime, timezone
from westgate_analytics.domain.exceptions import InvalidThresholdError
from westgate_analytics.domain.decisions import simulate_decision
from westgate_analytics.domain.models import Decision, LoanRecord, Thresholds
from westgate_analytics.domain.sweep import build_threshold_matrix, sweep_accepts, threshold_axis


def test_threshold_axis_default_step():
    """Test 21 values from 0.00 to 1.00 without float drift"""
    axis = threshold_axis()

    assert len(axis) == 21
    assert axis[0] == 0.0
    assert axis[-1] == 1.0
    assert axis[7] == 0.35
    assert axis[12] == 0.6
    assert axis == [round(i * 0.05, 2) for i in range(21)]


def test_threshold_axis_other_steps():
    """Test coarser steps and steps that do not divide 1"""
    assert threshold_axis(0.25) == [0.0, 0.25, 0.5, 0.75, 1.0]
    assert threshold_axis(1.0) == [0.0, 1.0]
    assert threshold_axis(0.3) == [0.0, 0.3, 0.6, 0.9]


def test_threshold_axis_fine_steps_are_unique():
    """Test steps finer than 0.05 keep one distinct value per index"""
    axis = threshold_axis(0.01)
    assert len(axis) == 101
    assert len(set(axis)) == 101
    assert axis[37] == 0.37

    axis = threshold_axis(0.015)
    assert len(axis) == 67
    assert len(set(axis)) == 67
    assert axis[1] == 0.015
    assert axis[3] == 0.045


@pytest.mark.parametrize("step", [0.0, -0.05, 1.5, 0.005, 1e-7])
def test_threshold_axis_rejects_invalid_step(step):
    """Test steps outside [0.01, 1]"""
    with pytest.raises(InvalidThresholdError):
        threshold_axis(step)


def test_sweep_accepts_is_inclusive_and(make_record):
    """Test grid rule: both scores within bound, equality accepted"""
    assert sweep_accepts(make_record(default_score=0.5, refusal_score=0.5), 0.5, 0.5)
    assert not sweep_accepts(make_record(default_score=0.51, refusal_score=0.1), 0.5, 0.5)
    assert not sweep_accepts(make_record(default_score=0.1, refusal_score=0.51), 0.5, 0.5)


def test_sweep_rule_agrees_with_simulation_rule(sample_records):
    """Test the inclusive AND rule accepts exactly the loans the strict OR rule does not refuse"""
    for d in threshold_axis(0.1):
        for r in threshold_axis(0.1):
            for record in sample_records:
                simulated = simulate_decision(record, Thresholds(d, r)) == Decision.ACCEPT
                assert sweep_accepts(record, d, r) == simulated


def test_matrix_matches_brute_force(sample_records):
    """Test every cell against a direct count with the grid rule"""
    matrix = build_threshold_matrix(sample_records)

    assert len(matrix.rates) == 21
    assert all(len(row) == 21 for row in matrix.rates)
    for i, d in enumerate(matrix.default_axis):
        for j, r in enumerate(matrix.refusal_axis):
            expected = sum(sweep_accepts(rec, d, r) for rec in sample_records) / len(sample_records)
            assert matrix.rates[i][j] == pytest.approx(expected)


def test_matrix_matches_brute_force_random_scores():
    """Test randomized scores including exact grid values"""
    rng = random.Random(11)
    ts = datetime(2024, 1, 1, tzinfo=timezone.utc)
    records = [
        LoanRecord(id=i, created_at=ts, default_score=rng.choice([rng.random(), round(rng.randint(0, 20) * 0.05, 2)]),
                   refusal_score=rng.choice([rng.random(), round(rng.randint(0, 20) * 0.05, 2)]))
        for i in range(300)
    ]
    matrix = build_threshold_matrix(records)

    for cell in matrix.cells():
        expected = sum(sweep_accepts(rec, cell.default_threshold, cell.refusal_threshold) for rec in records) / 300
        assert cell.acceptance_rate == pytest.approx(expected)


def test_matrix_corner_cells(sample_records):
    """Test (0, 0) counts only zero-score loans and (1, 1) accepts everything"""
    matrix = build_threshold_matrix(sample_records)

    zero_zero = sum(1 for r in sample_records if r.default_score == 0 and r.refusal_score == 0)
    assert matrix.rate_at(0, 0) == zero_zero / len(sample_records) == 0.125
    assert matrix.rate_at(20, 20) == 1.0


def test_matrix_known_cell(sample_records):
    """Test the (0.70, 0.60) cell of the sample portfolio"""
    matrix = build_threshold_matrix(sample_records)
    row, col = matrix.locate(0.7, 0.6)

    assert (row, col) == (14, 12)
    assert matrix.rate_at(row, col) == 0.625


def test_matrix_rates_are_bounded_and_monotonic(sample_records):
    """Test rates in [0, 1] and non-decreasing along both axes"""
    matrix = build_threshold_matrix(sample_records)

    for i in range(21):
        for j in range(21):
            rate = matrix.rate_at(i, j)
            assert 0.0 <= rate <= 1.0
            if i > 0:
                assert rate >= matrix.rate_at(i - 1, j)
            if j > 0:
                assert rate >= matrix.rate_at(i, j - 1)


def test_empty_record_set():
    """Test empty input short-circuits to an empty matrix with zero rates"""
    matrix = build_threshold_matrix([])

    assert matrix.is_empty
    assert matrix.rates == []
    assert matrix.record_count == 0
    assert len(matrix.default_axis) == 21
    assert all(cell.acceptance_rate == 0.0 for cell in matrix.cells())


def test_cell_at_returns_exact_pair(sample_records):
    """Test grid coordinate maps back to the exact threshold values"""
    matrix = build_threshold_matrix(sample_records)
    cell = matrix.cell_at(3, 17)

    assert cell.default_threshold == 0.15
    assert cell.refusal_threshold == 0.85
    assert cell.acceptance_rate == matrix.rates[3][17]


def test_cell_out_of_bounds(sample_records):
    """Test coordinates outside the grid"""
    matrix = build_threshold_matrix(sample_records)

    with pytest.raises(IndexError):
        matrix.cell_at(21, 0)
    with pytest.raises(IndexError):
        matrix.rate_at(0, -1)
    assert matrix.locate(0.33, 0.5) is None
