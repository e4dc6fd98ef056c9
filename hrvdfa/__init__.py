"""Real-time DFA-alpha1 from heart-rate-variability streams.

Short-term detrended fluctuation analysis (alpha1) of RR intervals tracks
autonomic balance during exercise: it sits near 1.0 at easy intensities and
falls through ~0.75 at the aerobic threshold and ~0.5 at the anaerobic
threshold. This package implements a streaming engine that corrects beat
artifacts, keeps a rolling window of recent beats and recomputes alpha1 as
new sensor notifications arrive.
"""

__version__ = "0.1.0"

__all__ = [
    "config",
    "core",
    "data",
    "utils",
]
