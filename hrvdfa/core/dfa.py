"""Short-term detrended fluctuation analysis (DFA-alpha1) of RR intervals.

The RR series is artifact-corrected, mean-centred and integrated into a
profile. For each box size n the profile is cut into non-overlapping boxes,
a least-squares line is removed from every box and the RMS residual F(n) is
taken. alpha1 is the slope of log10 F(n) against log10 n over n = 4..16.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from ..config import DfaConfig, RuntimeConfig
from .preprocess import clean_intervals


logger = logging.getLogger(__name__)


class EstimateStatus(str, Enum):
    OK = "ok"
    INSUFFICIENT_DATA = "insufficient_data"
    DEGENERATE_INPUT = "degenerate_input"


@dataclass
class Alpha1Estimate:
    alpha1: Optional[float]
    status: EstimateStatus
    n_samples: int = 0
    n_scales: int = 0
    artifact_fraction: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status is EstimateStatus.OK


def linear_fit(x: Sequence[float], y: Sequence[float]) -> Tuple[float, float]:
    """Closed-form least-squares line through (x, y); NaNs when x has no spread."""
    xa = np.asarray(x, dtype=float)
    ya = np.asarray(y, dtype=float)
    n = xa.size
    if n == 0 or n != ya.size:
        return math.nan, math.nan
    sum_x = xa.sum()
    sum_y = ya.sum()
    denom = n * np.dot(xa, xa) - sum_x * sum_x
    if denom == 0:
        return math.nan, math.nan
    slope = (n * np.dot(xa, ya) - sum_x * sum_y) / denom
    intercept = (sum_y - slope * sum_x) / n
    return float(slope), float(intercept)


def integrate(values: Sequence[float]) -> np.ndarray:
    """Profile y[k] = sum_{i<=k} (x[i] - mean(x)). Empty in, empty out."""
    x = np.asarray(values, dtype=float)
    if x.size == 0:
        return x
    return np.cumsum(x - x.mean())


def fluctuation(profile: Sequence[float], box_size: int) -> float:
    """RMS residual F(n) of per-box linear detrending; NaN if no full box fits."""
    y = np.asarray(profile, dtype=float)
    n = int(box_size)
    if n < 2:
        return math.nan
    num_boxes = y.size // n
    if num_boxes == 0:
        return math.nan

    boxes = y[: num_boxes * n].reshape(num_boxes, n)
    t = np.arange(n, dtype=float)
    t_mean = (n - 1) / 2.0
    t_dev = t - t_mean
    box_mean = boxes.mean(axis=1, keepdims=True)
    slope = ((boxes - box_mean) @ t_dev) / np.dot(t_dev, t_dev)
    intercept = box_mean[:, 0] - slope * t_mean
    trend = intercept[:, None] + slope[:, None] * t[None, :]
    residual = boxes - trend
    return float(np.sqrt(np.sum(residual * residual) / (num_boxes * n)))


def alpha1_from_profile(
    profile: Sequence[float],
    box_sizes: Iterable[int],
    zero_floor: float = 1e-9,
) -> Alpha1Estimate:
    y = np.asarray(profile, dtype=float)
    log_n: List[float] = []
    log_f: List[float] = []
    degenerate: List[int] = []
    for n in box_sizes:
        if n > 0 and y.size < n:
            degenerate.append(n)
            continue
        f_n = fluctuation(y, n)
        if math.isfinite(f_n) and f_n > zero_floor:
            log_n.append(math.log10(n))
            log_f.append(math.log10(f_n))

    if degenerate:
        logger.warning(
            "box sizes longer than series skipped",
            extra={"series_len": int(y.size), "box_sizes": degenerate},
        )

    if len(log_n) < 2:
        status = EstimateStatus.DEGENERATE_INPUT if degenerate else EstimateStatus.INSUFFICIENT_DATA
        return Alpha1Estimate(alpha1=None, status=status, n_samples=int(y.size), n_scales=len(log_n))

    slope, _ = linear_fit(log_n, log_f)
    if not math.isfinite(slope):
        return Alpha1Estimate(
            alpha1=None,
            status=EstimateStatus.DEGENERATE_INPUT,
            n_samples=int(y.size),
            n_scales=len(log_n),
        )
    return Alpha1Estimate(
        alpha1=slope, status=EstimateStatus.OK, n_samples=int(y.size), n_scales=len(log_n)
    )


def estimate_alpha1(rr: Sequence[float], config: Optional[RuntimeConfig] = None) -> Alpha1Estimate:
    """Estimate DFA-alpha1 from a window of raw RR intervals (ms).

    Never raises for bad data: a missing value is reported through
    ``Alpha1Estimate.status`` so callers can keep showing the last good value.
    """
    cfg = config or RuntimeConfig()
    dfa: DfaConfig = cfg.dfa
    cleaned = clean_intervals(rr, cfg.artifacts)
    if len(cleaned.values) < dfa.min_samples:
        return Alpha1Estimate(
            alpha1=None,
            status=EstimateStatus.INSUFFICIENT_DATA,
            n_samples=len(cleaned.values),
            artifact_fraction=cleaned.artifact_fraction,
        )

    profile = integrate(cleaned.values)
    est = alpha1_from_profile(profile, dfa.box_sizes, zero_floor=dfa.zero_floor)
    est.artifact_fraction = cleaned.artifact_fraction
    return est


def calculate_dfa_alpha1(rr: Sequence[float], config: Optional[RuntimeConfig] = None) -> Optional[float]:
    return estimate_alpha1(rr, config).alpha1
