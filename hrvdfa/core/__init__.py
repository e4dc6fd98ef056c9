"""Numeric core: artifact correction, DFA-alpha1, rolling window, zones.

Everything here is synchronous and CPU-only; a session feeds batches to
``Alpha1Monitor`` and receives one ``Alpha1Reading`` per batch.
"""

from .dfa import Alpha1Estimate, EstimateStatus, calculate_dfa_alpha1, estimate_alpha1
from .monitor import Alpha1Monitor, Alpha1Reading, Measurement
from .window import RollingWindow
from .zones import Zone, classify_alpha1

__all__ = [
    "Alpha1Estimate",
    "Alpha1Monitor",
    "Alpha1Reading",
    "EstimateStatus",
    "Measurement",
    "RollingWindow",
    "Zone",
    "calculate_dfa_alpha1",
    "classify_alpha1",
    "estimate_alpha1",
]
