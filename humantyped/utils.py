from __future__ import annotations
import ctypes
import platform
import random
from typing import Tuple, Union

Delay = Union[float, Tuple[float, float]]


class HiResTimer:
    """Context manager to request 1ms Windows system timer resolution.

    On Windows this reduces sleep jitter/latency for tighter timing loops.
    On other platforms, it is a no-op.
    """

    def __enter__(self):
        if ctypes and platform.system() == "Windows":
            ctypes.windll.winmm.timeBeginPeriod(1)
        return self

    def __exit__(self, exc_type, exc, tb):
        if ctypes and platform.system() == "Windows":
            ctypes.windll.winmm.timeEndPeriod(1)


def random_uniform(a: float, b: float) -> float:
    """Return a random float between a and b, agnostic to order."""
    lo, hi = (a, b) if a <= b else (b, a)
    return random.uniform(lo, hi)


def delay_ms(delay: Delay) -> float:
    """Resolve a delay (ms, or a (min, max) range in ms) to a concrete value."""
    if isinstance(delay, (tuple, list)):
        lo, hi = delay
        if lo == hi:
            return max(0.0, float(lo))
        return max(0.0, random_uniform(lo, hi))
    return max(0.0, float(delay or 0))
