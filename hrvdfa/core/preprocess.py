from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..config import ArtifactConfig


logger = logging.getLogger(__name__)


@dataclass
class CleanedIntervals:
    values: List[float] = field(default_factory=list)
    n_input: int = 0
    dropped: int = 0
    corrected: int = 0

    @property
    def artifact_fraction(self) -> float:
        if self.n_input == 0:
            return 0.0
        return (self.dropped + self.corrected) / self.n_input


def is_malformed(value: float) -> bool:
    """True for interval values that can never be accepted (non-finite or <= 0)."""
    try:
        v = float(value)
    except (TypeError, ValueError):
        return True
    return not math.isfinite(v) or v <= 0.0


def clean_intervals(rr: Sequence[float], config: Optional[ArtifactConfig] = None) -> CleanedIntervals:
    """Repair single-beat artifacts in an RR sequence (milliseconds).

    A beat is accepted as-is when it lies within ``[min_rr_ms, max_rr_ms]`` and
    differs from the last accepted beat by at most ``max_relative_jump``.
    Rejected beats keep the timeline intact: they become the mean of the last
    accepted beat and the next raw beat, or the last accepted beat when no
    usable next beat exists. Beats rejected before anything was accepted are
    dropped. Sequences shorter than three beats are returned unchanged.
    """
    cfg = config or ArtifactConfig()
    raw = list(rr)
    result = CleanedIntervals(n_input=len(raw))
    if len(raw) < 3:
        result.values = raw
        return result

    lo, hi, jump = cfg.min_rr_ms, cfg.max_rr_ms, cfg.max_relative_jump
    last_accepted: Optional[float] = None
    out: List[float] = []
    for i, value in enumerate(raw):
        valid = not is_malformed(value) and lo <= value <= hi
        if valid and last_accepted is not None:
            valid = abs(value - last_accepted) / last_accepted <= jump
        if valid:
            last_accepted = float(value)
            out.append(last_accepted)
            continue

        if last_accepted is None:
            result.dropped += 1
            continue

        nxt = raw[i + 1] if i + 1 < len(raw) else None
        if nxt is not None and not is_malformed(nxt):
            out.append((last_accepted + float(nxt)) / 2.0)
        else:
            out.append(last_accepted)
        result.corrected += 1

    result.values = out
    if result.dropped or result.corrected:
        logger.debug(
            "rr artifacts repaired",
            extra={"n_input": result.n_input, "dropped": result.dropped, "corrected": result.corrected},
        )
    return result


def correct_intervals(
    rr: Sequence[float],
    min_rr_ms: float = 300.0,
    max_rr_ms: float = 1300.0,
    max_relative_jump: float = 0.30,
) -> List[float]:
    cfg = ArtifactConfig(min_rr_ms=min_rr_ms, max_rr_ms=max_rr_ms, max_relative_jump=max_relative_jump)
    return clean_intervals(rr, cfg).values
