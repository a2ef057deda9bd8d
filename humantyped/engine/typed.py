from __future__ import annotations
import asyncio
import logging
import random
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..errors import TypingStateError
from ..keyboard import (
    KeyboardRegistry,
    error_probability,
    is_special_char,
    random_char_close_to_char,
)
from ..keyboard.layouts import LayoutLike
from ..utils import Delay, HiResTimer
from .config import FAST_FORWARD_OPTIONS, TypingOptions, check_options, resolve_options
from .pacer import _Pacer
from .queue import DEFAULT_PART_NAME, Erase, Queue, QueueItem, QueueManager, Sentence, Wait
from .resetter import Resetter
from .results import Parts, Plain, ResultList, common_prefix_length
from .telemetry import TypingRecorder

Snapshot = Union[Plain, Parts]
Sink = Callable[[Snapshot], None]

logger = logging.getLogger(__name__)


class _PartState:
    """Runtime bookkeeping of one part's drain loop during a run."""

    def __init__(self, part: str, generation: int, pacer: _Pacer):
        self.part = part
        self.generation = generation
        self.pacer = pacer
        self.letters_since_error = 0


class Typed:
    """Animates text as if a human were typing it.

    Instructions are queued with `type`, `backspace` and `wait` (chainable),
    then played by `run`. Every display change is pushed to `callback` as a
    `Plain` snapshot, or as a `Parts` snapshot when `named_parts` is given.
    Delays are milliseconds, either a number or a (min, max) range.
    """

    def __init__(
        self,
        callback: Sink,
        *,
        locale: Optional[str] = None,
        per_letter_delay: Optional[Delay] = None,
        erase_delay: Optional[Delay] = None,
        error_delay: Optional[Delay] = None,
        error_multiplier: Optional[float] = None,
        no_special_char_errors: Optional[bool] = None,
        named_parts: Optional[Sequence[str]] = None,
        keyboards: Optional[Mapping[str, LayoutLike]] = None,
        fast_forward_options: Optional[Mapping[str, Any]] = None,
        seed: Optional[int] = None,
        recorder: Optional[TypingRecorder] = None,
    ):
        self._callback = callback
        self._options = check_options(
            {
                "locale": locale,
                "per_letter_delay": per_letter_delay,
                "erase_delay": erase_delay,
                "error_delay": error_delay,
                "error_multiplier": error_multiplier,
                "no_special_char_errors": no_special_char_errors,
            }
        )
        self._ff_options = {
            **FAST_FORWARD_OPTIONS,
            **check_options(fast_forward_options or {}),
        }

        if named_parts and len(set(named_parts)) != len(named_parts):
            raise ValueError(f"Duplicate part names in {list(named_parts)!r}")
        self._named = bool(named_parts)
        self._parts: Tuple[str, ...] = (
            tuple(named_parts) if named_parts else (DEFAULT_PART_NAME,)
        )

        self._keyboards = KeyboardRegistry(keyboards)
        self._resetter = Resetter()
        self._queue = QueueManager("queue", self._resetter, self._parts)
        self._ff_queue = QueueManager("ff-queue", self._resetter, self._parts)
        self._results: Dict[str, ResultList] = {p: ResultList(p) for p in self._parts}
        self._end_results: Dict[str, ResultList] = {
            p: ResultList(p) for p in self._parts
        }
        self._fast_forwarding = False
        self._ff_next_run = False
        self._running = False
        self._generation = 0
        self._seed = seed
        self.recorder = recorder if recorder is not None else TypingRecorder()
        # set by `factory`
        self.updater: Any = None

    @classmethod
    def factory(
        cls,
        set_up: Callable[[], Any],
        update: Callable[[Any, Snapshot], None],
        **defaults: Any,
    ) -> Callable[..., "Typed"]:
        """Build Typed instances that push snapshots into a per-instance updater.

        `set_up()` creates the updater (a subject, a widget, ...) and
        `update(updater, snapshot)` is called on every change. The updater is
        exposed as `typed.updater`.
        """

        def create(**options: Any) -> "Typed":
            updater = set_up()
            typed = cls(
                lambda snapshot: update(updater, snapshot), **{**defaults, **options}
            )
            typed.updater = updater
            return typed

        return create

    # ------------------------------------------------------------------
    # Public surface
    # ------------------------------------------------------------------

    @property
    def parts(self) -> Tuple[str, ...]:
        return self._parts

    @property
    def text(self) -> Snapshot:
        return self._snapshot(self._results)

    @property
    def end_result(self) -> Snapshot:
        """What the display will show once everything queued has been played."""
        return self._snapshot(self._end_results)

    @property
    def is_fast_forwarding(self) -> bool:
        return self._fast_forwarding

    def add_keyboard(self, locale: str, layout: LayoutLike) -> None:
        self._keyboards.add(locale, layout)

    def type(
        self,
        text: str,
        *,
        style: Optional[str] = None,
        part: str = DEFAULT_PART_NAME,
        **options: Any,
    ) -> "Typed":
        targets = self._targets(part)
        self._queue.add(Sentence(part, text, check_options(options), style))
        for target in targets:
            self._end_results[target].append(text, style)
        return self

    def backspace(
        self, count: int, *, part: str = DEFAULT_PART_NAME, **options: Any
    ) -> "Typed":
        if count < 0:
            raise ValueError(f"backspace count must be >= 0, got {count}")
        targets = self._targets(part)
        self._queue.add(Erase(part, count, check_options(options)))
        for target in targets:
            removed = self._end_results[target].erase(count)
            if removed < count:
                logger.warning(
                    "backspace(%d) on part %r exceeds queued text by %d char(s)",
                    count,
                    target,
                    count - removed,
                )
        return self

    def wait(self, ms: float, *, part: str = DEFAULT_PART_NAME) -> "Typed":
        self._targets(part)
        self._queue.add(Wait(part, ms))
        return self

    async def run(self) -> None:
        """Play the queued instructions; returns once every part is drained."""
        if self._seed is not None:
            random.seed(self._seed)
        self.recorder.reset(seed=self._seed)
        if not self._resetter.is_reset:
            self._resetter.rearm()
        self._queue.reset_indices()
        self._ff_queue.reset_indices()
        for results in self._results.values():
            results.clear()
        self._running = True
        self._fast_forwarding = False
        if self._ff_next_run:
            # requested while idle: diff against the empty display
            self._ff_next_run = False
            self._fast_forwarding = True
            self._engage_fast_forward()

        generation = self._generation
        logger.debug("Run started for parts %s", list(self._parts))
        try:
            with HiResTimer():
                pending: Sequence[str] = self._parts
                while pending and generation == self._generation:
                    await self._drain_parts(pending, generation)
                    # a part may have finished before fast-forward gave it new work
                    pending = [
                        part
                        for part in self._parts
                        if self._fast_forwarding
                        and self._ff_queue.get(part).item is not None
                    ]
        finally:
            if generation == self._generation:
                self._running = False
                self._fast_forwarding = False
                self._ff_queue.clear()
        logger.debug("Run finished")

    def fast_forward(self) -> None:
        """Jump to the final text through a short, quick corrective sequence.

        While idle this only arms the next `run()`, and only if there is
        queued text the display does not show yet.
        """
        if not self._running:
            self._ff_next_run = any(
                self._results[part].chars() != self._end_results[part].chars()
                for part in self._parts
            )
            logger.debug("Fast-forward while idle, next run armed: %s", self._ff_next_run)
            return
        if self._fast_forwarding:
            logger.debug("Fast-forward already engaged")
            return
        self._fast_forwarding = True
        self._engage_fast_forward()
        self._resetter.single_reset()

    async def reset(self, clear_texts: bool = False) -> None:
        """Abort the current run and clear the display.

        With `clear_texts`, the queued instructions are dropped as well.
        """
        self._generation += 1
        for results in self._results.values():
            results.clear()
        self._update_text()
        self._ff_queue.clear()
        self._fast_forwarding = False
        self._ff_next_run = False
        self._running = False
        if clear_texts:
            self._queue.clear()
            for results in self._end_results.values():
                results.clear()
        for part in self._parts:
            self.recorder.log("reset", part)
        await self._resetter.reset()

    # ------------------------------------------------------------------
    # Engine
    # ------------------------------------------------------------------

    def _targets(self, part: str) -> Sequence[str]:
        if part == DEFAULT_PART_NAME and DEFAULT_PART_NAME not in self._parts:
            return self._parts
        if part not in self._parts:
            raise KeyError(f"No queue found for part: {part!r}")
        return (part,)

    def _active_queue(self, part: str) -> Queue:
        manager = self._ff_queue if self._fast_forwarding else self._queue
        return manager.get(part)

    def _is_stale(self, state: _PartState, queue: Queue) -> bool:
        return (
            state.generation != self._generation
            or queue is not self._active_queue(state.part)
        )

    def _options_for(self, item: Union[Sentence, Erase]) -> TypingOptions:
        return resolve_options(
            construction=self._options,
            item=item.options,
            fast_forward=self._ff_options if self._fast_forwarding else None,
        )

    async def _drain_parts(self, parts: Sequence[str], generation: int) -> None:
        """Drain parts concurrently; the first fault stops every sibling."""
        tasks = [asyncio.ensure_future(self._drain(part, generation)) for part in parts]
        try:
            await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        finally:
            stragglers = [task for task in tasks if not task.done()]
            for task in stragglers:
                task.cancel()
            if stragglers:
                await asyncio.gather(*stragglers, return_exceptions=True)
        for task in tasks:
            if not task.cancelled() and task.exception() is not None:
                raise task.exception()

    async def _drain(self, part: str, generation: int) -> None:
        state = _PartState(
            part, generation, _Pacer(part, self._resetter, self.recorder)
        )
        while generation == self._generation:
            queue = self._active_queue(part)
            item = queue.item
            if item is None:
                break
            keep_going = await self._do_queue_action(state, queue, item)
            if not keep_going and queue is self._active_queue(part):
                break

    async def _do_queue_action(
        self, state: _PartState, queue: Queue, item: QueueItem
    ) -> bool:
        if isinstance(item, Sentence):
            return await self._type_letter(state, queue, item)
        if isinstance(item, Erase):
            return await self._erase_letter(state, queue, item)
        if isinstance(item, Wait):
            return await self._wait(state, queue, item)
        raise TypingStateError(f"Unknown queue item type: {type(item).__name__}")

    async def _type_letter(self, state: _PartState, queue: Queue, item: Sentence) -> bool:
        if not item.text:
            return queue.increment()
        options = self._options_for(item)
        letter = item.text[queue.detail_index]
        if not await self._maybe_do_error(state, queue, item, options):
            return False
        self._add(state.part, letter, item.style)
        state.letters_since_error += 1
        self.recorder.log("char", state.part, letter)
        await state.pacer.sleep(options.per_letter_delay, "<per-letter>")
        return queue.increment(len(item.text))

    async def _erase_letter(self, state: _PartState, queue: Queue, item: Erase) -> bool:
        if item.count <= 0:
            return queue.increment()
        options = self._options_for(item)
        self._erase(state.part, 1)
        self.recorder.log("erase", state.part)
        await state.pacer.sleep(options.erase_delay, "<erase>")
        return queue.increment(item.count)

    async def _wait(self, state: _PartState, queue: Queue, item: Wait) -> bool:
        if not self._fast_forwarding:
            await state.pacer.sleep(item.delay, "<wait>")
        return queue.increment()

    async def _maybe_do_error(
        self,
        state: _PartState,
        queue: Queue,
        item: Sentence,
        options: TypingOptions,
    ) -> bool:
        """Maybe show a burst of wrong letters, then correct them.

        Each wrong letter raises the chance of another one right after it.
        Returns False when a reset or fast-forward interrupted the sequence;
        whatever is on screen at that point is left for the new owner of the
        display to handle.
        """
        if options.error_multiplier <= 0:
            return True
        start = queue.detail_index
        # (position of the intended letter, wrong letters on screen)
        stack: List[Tuple[int, int]] = []
        while True:
            position = start + len(stack)
            if position >= len(item.text):
                break
            intended = item.text[position]
            if options.no_special_char_errors and is_special_char(intended):
                break
            probability = error_probability(
                state.letters_since_error, len(stack), options.error_multiplier
            )
            if random.random() >= probability:
                break
            layout = self._keyboards.get(options.locale)
            wrong = random_char_close_to_char(intended, layout)
            if wrong is None:
                break
            state.letters_since_error = 0
            self._add(state.part, wrong, item.style)
            self.recorder.error_count += 1
            self.recorder.log("typo", state.part, wrong)
            stack.append((position, len(stack) + 1))
            await state.pacer.sleep(options.per_letter_delay, "<typo>")
            if self._is_stale(state, queue):
                return False

        if not stack:
            return True
        await state.pacer.sleep(options.error_delay, "<error-correction>")
        while stack:
            if self._is_stale(state, queue):
                return False
            position, wrong_count = stack.pop()
            logger.debug(
                "Correcting typo at %d (%d wrong on screen)", position, wrong_count
            )
            self._erase(state.part, 1)
            await state.pacer.sleep(options.erase_delay, "<erase-typo>")
        return not self._is_stale(state, queue)

    def _engage_fast_forward(self) -> None:
        self._build_fast_forward_queues()
        self.recorder.fast_forward_count += 1
        for part in self._parts:
            self.recorder.log("fast_forward", part)

    def _build_fast_forward_queues(self) -> None:
        self._ff_queue.clear()
        for part in self._parts:
            current = self._results[part].chars()
            target = self._end_results[part].chars()
            matching = common_prefix_length(current, target)
            needed = len(current) - matching
            queue = self._ff_queue.get(part)
            if needed > 0:
                queue.add(Erase(part, needed))
            for char, style in target[matching:]:
                queue.add(Sentence(part, char, style=style))
            logger.debug(
                "Fast-forward %r: keep %d, erase %d, type %d",
                part,
                matching,
                max(0, needed),
                len(target) - matching,
            )

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def _add(self, part: str, text: str, style: Optional[str]) -> None:
        self._results[part].append(text, style)
        self._update_text()

    def _erase(self, part: str, count: int) -> None:
        results = self._results[part]
        if len(results) < count and not self._resetter.is_reset:
            raise TypingStateError(
                f"Cannot erase {count} char(s) from part {part!r}: "
                f"only {len(results)} displayed"
            )
        results.erase(count)
        self._update_text()

    def _snapshot(self, results: Mapping[str, ResultList]) -> Snapshot:
        if self._named:
            return Parts({part: results[part].markup() for part in self._parts})
        return Plain(results[DEFAULT_PART_NAME].markup())

    def _update_text(self) -> None:
        snapshot = self.text
        self.recorder.frame(snapshot)
        self._callback(snapshot)
