from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Iterator, List, Sequence

import pandas as pd

from ..core.monitor import Measurement


logger = logging.getLogger(__name__)

RR_COLUMNS = ("rr", "rr_ms", "ibi", "ibi_ms", "rr_interval")


def load_rr_file(path: Path | str) -> List[float]:
    """Read RR intervals (ms) from a CSV or plain one-value-per-line file.

    A header naming one of ``RR_COLUMNS`` selects that column; without one the
    first column is used. Unparseable cells become NaN and are left for the
    artifact corrector to handle.
    """
    path = Path(path)
    df = pd.read_csv(path)
    cols = {str(c).strip().lower(): c for c in df.columns}
    for name in RR_COLUMNS:
        if name in cols:
            series = df[cols[name]]
            break
    else:
        # No recognised header: the header row itself is the first sample
        df = pd.read_csv(path, header=None)
        series = df.iloc[:, 0]
    values = pd.to_numeric(series, errors="coerce").astype(float).tolist()
    logger.info("loaded rr file", extra={"path": str(path), "beats": len(values)})
    return values


def iter_measurements(
    rr: Sequence[float],
    batch_size: int = 1,
    start_ms: int = 0,
) -> Iterator[Measurement]:
    """Replay RR intervals as sensor notifications of ``batch_size`` beats.

    Timestamps advance by the beats' own durations, so the replay keeps the
    recording's timebase. Heart rate is derived from the batch mean.
    """
    if batch_size < 1:
        raise ValueError("batch_size must be >= 1")
    clock = float(start_ms)
    for i in range(0, len(rr), batch_size):
        batch = [float(v) for v in rr[i : i + batch_size]]
        usable = [v for v in batch if math.isfinite(v) and v > 0]
        if usable:
            clock += sum(usable)
            hr = int(round(60000.0 / (sum(usable) / len(usable))))
        else:
            hr = 0
        yield Measurement(heart_rate=hr, rr_intervals=batch, timestamp=int(clock))
