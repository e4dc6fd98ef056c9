from __future__ import annotations

import threading
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .monitor import Alpha1Reading
from .zones import Zone


@dataclass
class HistoryPoint:
    timestamp: int
    alpha1: float
    heart_rate: int
    zone: Optional[Zone] = None


@dataclass
class HistoryStats:
    count: int = 0
    mean_alpha1: Optional[float] = None
    min_alpha1: Optional[float] = None
    max_alpha1: Optional[float] = None
    per_zone: Dict[str, int] = field(default_factory=dict)


class Alpha1History:
    """Time-ordered alpha1 points for charting, at most one per ``min_interval_ms``."""

    def __init__(self, min_interval_ms: int = 2000) -> None:
        self.min_interval_ms = min_interval_ms
        self._lock = threading.RLock()
        self._points: List[HistoryPoint] = []

    def record(self, reading: Alpha1Reading) -> bool:
        if reading.alpha1 is None:
            return False
        with self._lock:
            if self._points and reading.timestamp - self._points[-1].timestamp <= self.min_interval_ms:
                return False
            self._points.append(
                HistoryPoint(
                    timestamp=reading.timestamp,
                    alpha1=reading.alpha1,
                    heart_rate=reading.heart_rate,
                    zone=reading.zone,
                )
            )
            return True

    def recent(self, limit: int = 100) -> List[HistoryPoint]:
        with self._lock:
            return list(self._points[-limit:])

    def clear(self) -> None:
        with self._lock:
            self._points.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._points)

    def stats(self) -> HistoryStats:
        with self._lock:
            if not self._points:
                return HistoryStats()
            values = [p.alpha1 for p in self._points]
            zones = Counter(p.zone.value for p in self._points if p.zone is not None)
            return HistoryStats(
                count=len(values),
                mean_alpha1=sum(values) / len(values),
                min_alpha1=min(values),
                max_alpha1=max(values),
                per_zone=dict(zones),
            )
