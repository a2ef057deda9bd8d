from __future__ import annotations
import asyncio
from typing import Optional

from ..utils import Delay, delay_ms
from .resetter import Resetter
from .telemetry import TypingRecorder


async def wait(ms: float, resetter: Resetter) -> None:
    """Sleep for ms, cut short by a full or single reset.

    A zero delay still yields to the event loop once so concurrent parts
    interleave. When the single-reset channel ends the sleep it is rearmed
    here, exactly once per signal.
    """
    if resetter.is_reset:
        return
    single = resetter.single_signal
    if single.is_set:
        resetter.reset_single_resetter(single)
        return
    if ms <= 0:
        await asyncio.sleep(0)
        return

    full = resetter.reset_signal
    waiters = [
        asyncio.ensure_future(full.wait()),
        asyncio.ensure_future(single.wait()),
    ]
    try:
        await asyncio.wait(
            waiters, timeout=ms / 1000.0, return_when=asyncio.FIRST_COMPLETED
        )
    finally:
        for waiter in waiters:
            waiter.cancel()
    if single.is_set:
        resetter.reset_single_resetter(single)


class _Pacer:
    """Per-part delay helper: resolves the delay, records it, then waits."""

    def __init__(self, part: str, resetter: Resetter, recorder: Optional[TypingRecorder]):
        self.part = part
        self.resetter = resetter
        self.recorder = recorder

    async def sleep(self, delay: Delay, tag: str) -> None:
        ms = delay_ms(delay)
        if self.recorder is not None:
            self.recorder.log("pause", self.part, tag, ms / 1000.0)
        await wait(ms, self.resetter)
