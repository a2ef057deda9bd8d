from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, List, Optional
import time


@dataclass(frozen=True)
class TypingEvent:
    t: float
    kind: str  # 'char' | 'typo' | 'erase' | 'pause' | 'fast_forward' | 'reset'
    part: str
    value: str  # character, pause tag, or empty
    dt: float  # planned delay in seconds (pauses only)


@dataclass(frozen=True)
class Frame:
    t: float
    snapshot: Any  # Plain | Parts


@dataclass
class TypingRecorder:
    events: List[TypingEvent] = field(default_factory=list)
    frames: List[Frame] = field(default_factory=list)
    start_ts: float = field(default_factory=lambda: time.perf_counter())
    seed: Optional[int] = None
    error_count: int = 0  # number of mistyped letters shown
    fast_forward_count: int = 0
    keep_frames: bool = True

    def _now(self) -> float:
        return time.perf_counter() - self.start_ts

    def log(self, kind: str, part: str, value: str = "", dt: float = 0.0) -> None:
        self.events.append(TypingEvent(self._now(), kind, part, value, dt))

    def frame(self, snapshot: Any) -> None:
        if self.keep_frames:
            self.frames.append(Frame(self._now(), snapshot))

    def reset(self, seed: Optional[int] = None) -> None:
        self.events.clear()
        self.frames.clear()
        self.start_ts = time.perf_counter()
        self.seed = seed
        self.error_count = 0
        self.fast_forward_count = 0
