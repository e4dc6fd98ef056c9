from __future__ import annotations

import threading
from collections import deque
from itertools import islice
from typing import Deque, Iterable, List, Optional

from ..config import WindowConfig


class RollingWindow:
    """Capped buffer of recent RR intervals for one monitoring session.

    Holds at most ``window_width + headroom`` beats; older beats fall off the
    front as new ones arrive. Each call is atomic, but a caller sharing the
    window across threads must hold its own lock around append + read +
    recompute.
    """

    def __init__(self, config: Optional[WindowConfig] = None) -> None:
        cfg = config or WindowConfig()
        self._window_width: int = cfg.window_width
        self._capacity: int = cfg.capacity
        self._buffer: Deque[float] = deque(maxlen=self._capacity)
        self._lock = threading.RLock()

    @property
    def window_width(self) -> int:
        return self._window_width

    def append(self, samples: Iterable[float]) -> None:
        with self._lock:
            self._buffer.extend(float(s) for s in samples)

    def ready_for_computation(self) -> bool:
        with self._lock:
            return len(self._buffer) >= self._window_width

    def latest_window(self) -> List[float]:
        with self._lock:
            skip = max(0, len(self._buffer) - self._window_width)
            return list(islice(self._buffer, skip, None))

    def reset(self) -> None:
        with self._lock:
            self._buffer.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._buffer)

    def capacity(self) -> int:
        return self._capacity

    def snapshot(self) -> List[float]:
        with self._lock:
            return list(self._buffer)
