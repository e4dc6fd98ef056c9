from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional

from ..config import AppConfig, RuntimeConfig
from .dfa import Alpha1Estimate, EstimateStatus, estimate_alpha1
from .window import RollingWindow
from .zones import Zone, classify_alpha1


logger = logging.getLogger(__name__)


def utc_now_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


@dataclass
class Measurement:
    # One decoded sensor notification: heart rate plus zero or more RR intervals
    heart_rate: int
    rr_intervals: List[float] = field(default_factory=list)
    timestamp: Optional[int] = None


@dataclass
class Alpha1Reading:
    timestamp: int
    heart_rate: int
    alpha1: Optional[float]
    zone: Optional[Zone]
    status: EstimateStatus
    window_size: int
    artifact_fraction: float = 0.0
    fresh: bool = False  # True when alpha1 was computed from this batch


class Alpha1Monitor:
    """Per-session engine: buffers incoming beats and recomputes alpha1.

    Processing is synchronous; every batch is appended and, once the window
    is full, scored before ``process`` returns. The last good alpha1 is kept
    when a recomputation yields no value.
    """

    def __init__(
        self,
        config: Optional[AppConfig | RuntimeConfig] = None,
        on_reading: Optional[Callable[[Alpha1Reading], None]] = None,
    ) -> None:
        if isinstance(config, AppConfig):
            config = config.runtime
        self.config: RuntimeConfig = config or RuntimeConfig()
        self.on_reading = on_reading
        self.window = RollingWindow(self.config.window)
        self.current_alpha1: Optional[float] = None
        self._last_status = EstimateStatus.INSUFFICIENT_DATA

    def process(self, measurement: Measurement) -> Alpha1Reading:
        ts = measurement.timestamp if measurement.timestamp is not None else utc_now_ms()
        est: Optional[Alpha1Estimate] = None
        if measurement.rr_intervals:
            self.window.append(measurement.rr_intervals)
            if self.window.ready_for_computation():
                est = estimate_alpha1(self.window.latest_window(), self.config)
                if est.ok:
                    self.current_alpha1 = est.alpha1
                self._note_status(est.status)

        reading = Alpha1Reading(
            timestamp=int(ts),
            heart_rate=int(measurement.heart_rate),
            alpha1=self.current_alpha1,
            zone=classify_alpha1(self.current_alpha1, self.config.zones),
            status=est.status if est is not None else self._last_status,
            window_size=self.window.size(),
            artifact_fraction=est.artifact_fraction if est is not None else 0.0,
            fresh=est is not None and est.ok,
        )
        if self.on_reading is not None:
            self.on_reading(reading)
        return reading

    def reset(self) -> None:
        """Forget buffered beats and the last alpha1, e.g. after a reconnect."""
        self.window.reset()
        self.current_alpha1 = None
        self._last_status = EstimateStatus.INSUFFICIENT_DATA
        logger.info("monitor reset")

    def _note_status(self, status: EstimateStatus) -> None:
        if status is not self._last_status:
            log = logger.info if status is EstimateStatus.OK else logger.warning
            log("alpha1 status changed", extra={"from_status": self._last_status.value, "to_status": status.value})
        self._last_status = status
