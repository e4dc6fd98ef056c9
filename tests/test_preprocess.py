from __future__ import annotations

import math

from hrvdfa.config import ArtifactConfig
from hrvdfa.core.preprocess import clean_intervals, correct_intervals, is_malformed


def test_short_sequences_returned_unchanged() -> None:
    assert correct_intervals([]) == []
    assert correct_intervals([50.0]) == [50.0]
    assert correct_intervals([50.0, 5000.0]) == [50.0, 5000.0]


def test_single_glitch_replaced_by_neighbour_mean() -> None:
    rr = [800.0] * 10 + [50.0, 810.0] + [800.0] * 10
    out = correct_intervals(rr)
    assert len(out) == len(rr)
    assert out[10] == 805.0
    assert out[11] == 810.0


def test_leading_invalid_samples_dropped() -> None:
    res = clean_intervals([100.0, 2000.0, 800.0, 810.0, 790.0])
    assert res.values == [800.0, 810.0, 790.0]
    assert res.dropped == 2
    assert res.corrected == 0


def test_trailing_invalid_sample_clamped_forward() -> None:
    assert correct_intervals([800.0, 810.0, 805.0, 2000.0]) == [800.0, 810.0, 805.0, 805.0]


def test_relative_jump_rejected() -> None:
    # 1200 is in range but 49% above the last accepted beat
    assert correct_intervals([800.0, 805.0, 1200.0, 810.0]) == [800.0, 805.0, 807.5, 810.0]


def test_jump_reference_is_last_accepted_beat() -> None:
    # 1100 is rejected; 1050 is compared against 800, not against the replacement
    out = correct_intervals([800.0, 800.0, 1100.0, 1050.0, 800.0])
    assert out[2] == (800.0 + 1050.0) / 2.0
    assert out[3] == 800.0  # mean of last accepted 800 and next raw 800
    assert out[4] == 800.0


def test_bounds_are_inclusive() -> None:
    assert correct_intervals([300.0, 300.0, 300.0]) == [300.0, 300.0, 300.0]
    assert correct_intervals([1300.0, 1300.0, 1300.0]) == [1300.0, 1300.0, 1300.0]


def test_malformed_samples_never_accepted() -> None:
    assert is_malformed(float("nan"))
    assert is_malformed(float("inf"))
    assert is_malformed(0.0)
    assert is_malformed(-5.0)
    assert not is_malformed(812.5)

    assert correct_intervals([800.0, float("nan"), 810.0, 805.0]) == [800.0, 805.0, 810.0, 805.0]
    # next raw beat is malformed too, so both fall back to the last accepted beat
    assert correct_intervals([800.0, 810.0, -5.0, float("inf")]) == [800.0, 810.0, 810.0, 810.0]


def test_output_is_finite_and_counts_add_up() -> None:
    rr = [float("nan"), 900.0, 880.0, 40.0, 870.0, 3000.0, 860.0, 0.0, 850.0, 2500.0]
    res = clean_intervals(rr)
    assert all(math.isfinite(v) and v > 0 for v in res.values)
    assert len(res.values) == len(rr) - res.dropped
    assert res.dropped == 1
    assert res.corrected == 4
    assert abs(res.artifact_fraction - 0.5) < 1e-12


def test_custom_bounds() -> None:
    cfg = ArtifactConfig(min_rr_ms=250.0, max_rr_ms=2000.0, max_relative_jump=0.5)
    res = clean_intervals([1800.0, 1900.0, 1500.0], cfg)
    assert res.values == [1800.0, 1900.0, 1500.0]
    assert res.artifact_fraction == 0.0
