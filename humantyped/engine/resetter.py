from __future__ import annotations
import asyncio
import logging
from typing import Optional

from .config import tcfg


class CancelSignal:
    """One-shot broadcast signal. Rearming means issuing a fresh instance."""

    def __init__(self):
        self._event = asyncio.Event()

    def signal(self) -> None:
        self._event.set()

    @property
    def is_set(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()


class Resetter:
    """Cooperative cancellation with a full-reset and a single-reset channel.

    A full reset aborts every part loop of a run. A single reset only wakes
    whoever is currently suspended, which is how fast-forward hands control
    over to a different queue.
    """

    def __init__(self, grace_ms: float = tcfg.RESET_GRACE_MS):
        self.grace_ms = grace_ms
        self._reset = CancelSignal()
        self._single = CancelSignal()

    async def reset(self) -> None:
        self._reset.signal()
        logging.getLogger(__name__).debug("Full reset signaled")
        # suspended waiters must all observe the signal before it is replaced
        await asyncio.sleep(self.grace_ms / 1000.0)
        self._reset = CancelSignal()

    @property
    def is_reset(self) -> bool:
        return self._reset.is_set

    @property
    def reset_signal(self) -> CancelSignal:
        return self._reset

    def rearm(self) -> None:
        """Issue fresh signals on both channels, e.g. at the start of a run."""
        self._reset = CancelSignal()
        self._single = CancelSignal()

    def single_reset(self) -> None:
        self._single.signal()

    def reset_single_resetter(self, observed: Optional[CancelSignal] = None) -> None:
        """Rearm the single channel.

        With `observed`, only rearm if that signal is still the current one, so
        several waiters woken by the same signal rearm it exactly once.
        """
        if observed is not None and observed is not self._single:
            return
        self._single = CancelSignal()

    @property
    def is_single_reset(self) -> bool:
        return self._single.is_set

    @property
    def single_signal(self) -> CancelSignal:
        return self._single
