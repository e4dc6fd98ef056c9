from __future__ import annotations

import math

import numpy as np

from hrvdfa.config import DfaConfig, RuntimeConfig
from hrvdfa.core.dfa import (
    EstimateStatus,
    alpha1_from_profile,
    calculate_dfa_alpha1,
    estimate_alpha1,
    fluctuation,
    integrate,
    linear_fit,
)


def test_linear_fit_basic() -> None:
    slope, intercept = linear_fit([0.0, 1.0, 2.0, 3.0], [1.0, 3.0, 5.0, 7.0])
    assert abs(slope - 2.0) < 1e-12
    assert abs(intercept - 1.0) < 1e-12


def test_linear_fit_without_spread_is_nan() -> None:
    slope, intercept = linear_fit([2.0, 2.0, 2.0], [1.0, 2.0, 3.0])
    assert math.isnan(slope) and math.isnan(intercept)


def test_integrate_length_and_first_element() -> None:
    x = [800.0, 820.0, 790.0, 810.0]
    y = integrate(x)
    assert len(y) == len(x)
    assert y[0] == x[0] - 805.0
    assert abs(y[-1]) < 1e-9
    assert integrate([]).size == 0


def test_fluctuation_known_value() -> None:
    # Fit of 0,1,0,1 is 0.2 + 0.2k; residuals -0.2, 0.6, -0.6, 0.2
    assert abs(fluctuation([0.0, 1.0, 0.0, 1.0], 4) - math.sqrt(0.2)) < 1e-12
    # trailing partial box is ignored
    assert abs(fluctuation([0.0, 1.0, 0.0, 1.0, 99.0], 4) - math.sqrt(0.2)) < 1e-12


def test_fluctuation_undefined_when_no_full_box() -> None:
    assert math.isnan(fluctuation([1.0, 2.0, 3.0], 4))
    assert math.isnan(fluctuation([1.0, 2.0, 3.0], 1))


def test_fluctuation_invariant_to_constant_offset() -> None:
    rng = np.random.default_rng(7)
    profile = np.cumsum(rng.normal(0.0, 20.0, size=200))
    for n in (4, 7, 16):
        assert math.isclose(fluctuation(profile, n), fluctuation(profile + 1234.5, n), rel_tol=1e-9)


def test_fluctuation_of_linear_series_is_zero() -> None:
    profile = 3.0 * np.arange(200) + 5.0
    assert fluctuation(profile, 8) < 1e-9


def test_linear_profile_yields_no_alpha1() -> None:
    est = alpha1_from_profile(3.0 * np.arange(200) - 40.0, range(4, 17))
    assert est.alpha1 is None
    assert est.status is EstimateStatus.INSUFFICIENT_DATA


def test_constant_rhythm_yields_no_alpha1() -> None:
    est = estimate_alpha1([800.0] * 200)
    assert est.alpha1 is None
    assert est.status is EstimateStatus.INSUFFICIENT_DATA
    assert est.n_samples == 200


def test_box_sizes_longer_than_series_are_degenerate() -> None:
    est = alpha1_from_profile(np.arange(5, dtype=float) ** 2, [8, 9, 10])
    assert est.status is EstimateStatus.DEGENERATE_INPUT
    assert est.alpha1 is None

    cfg = RuntimeConfig(dfa=DfaConfig(min_samples=10, min_box_size=12, max_box_size=16))
    rng = np.random.default_rng(3)
    est = estimate_alpha1(rng.uniform(780.0, 820.0, size=11).tolist(), cfg)
    assert est.status is EstimateStatus.DEGENERATE_INPUT


def test_minimum_sample_count() -> None:
    rng = np.random.default_rng(11)
    rr = rng.uniform(780.0, 820.0, size=50).tolist()

    short = estimate_alpha1(rr[:49])
    assert short.status is EstimateStatus.INSUFFICIENT_DATA
    assert short.alpha1 is None

    full = estimate_alpha1(rr)
    assert full.status is EstimateStatus.OK
    assert isinstance(full.alpha1, float)
    assert full.n_scales == 13


def test_dropped_leading_beats_count_against_minimum() -> None:
    rng = np.random.default_rng(12)
    rr = [20.0, 5000.0] + rng.uniform(780.0, 820.0, size=49).tolist()
    est = estimate_alpha1(rr)
    assert est.status is EstimateStatus.INSUFFICIENT_DATA
    assert est.n_samples == 49
    assert calculate_dfa_alpha1(rr) is None


def test_estimate_is_idempotent() -> None:
    rng = np.random.default_rng(5)
    rr = rng.uniform(700.0, 900.0, size=200).tolist()
    snapshot = list(rr)
    first = estimate_alpha1(rr)
    second = estimate_alpha1(rr)
    assert first.alpha1 == second.alpha1
    assert rr == snapshot


def test_regular_alternation_differs_from_random_intervals() -> None:
    alternating = [800.0 if i % 2 == 0 else 820.0 for i in range(200)]
    rng = np.random.default_rng(42)
    random_rr = rng.uniform(700.0, 900.0, size=200).tolist()

    a_alt = calculate_dfa_alpha1(alternating)
    a_rand = calculate_dfa_alpha1(random_rr)
    assert a_alt is not None and a_rand is not None
    assert abs(a_alt - a_rand) > 0.15


def test_white_and_correlated_series() -> None:
    rng = np.random.default_rng(2024)
    white = 800.0 + rng.normal(0.0, 20.0, size=200)
    walk = 800.0 + np.cumsum(rng.normal(0.0, 3.0, size=200))

    a_white = calculate_dfa_alpha1(white.tolist())
    a_walk = calculate_dfa_alpha1(walk.tolist())
    assert a_white is not None and 0.2 < a_white < 0.8
    assert a_walk is not None and a_walk > 1.1
