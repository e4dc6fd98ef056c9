from __future__ import annotations

from enum import Enum
from typing import Optional

from ..config import ZoneThresholds


class Zone(str, Enum):
    AEROBIC = "aerobic"
    THRESHOLD = "threshold"
    ANAEROBIC = "anaerobic"


def classify_alpha1(alpha1: Optional[float], thresholds: Optional[ZoneThresholds] = None) -> Optional[Zone]:
    """Map alpha1 to a display zone.

    Above the aerobic level (0.75) the athlete is below AeT; between the two
    levels they sit between AeT and AnT; at or below 0.50 they are past AnT.
    """
    if alpha1 is None:
        return None
    th = thresholds or ZoneThresholds()
    if alpha1 > th.aerobic:
        return Zone.AEROBIC
    if alpha1 > th.anaerobic:
        return Zone.THRESHOLD
    return Zone.ANAEROBIC
