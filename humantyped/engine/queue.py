from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .config import tcfg
from .resetter import Resetter

DEFAULT_PART_NAME = tcfg.DEFAULT_PART_NAME


@dataclass(frozen=True)
class Sentence:
    part: str
    text: str
    options: Mapping[str, Any] = field(default_factory=dict)
    style: Optional[str] = None


@dataclass(frozen=True)
class Erase:
    part: str
    count: int
    options: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Wait:
    part: str
    delay: float  # ms, skipped while fast-forwarding


QueueItem = Union[Sentence, Erase, Wait]


class Queue:
    """Ordered typing instructions for one part, with a two-level cursor."""

    def __init__(self, name: str, resetter: Resetter):
        self.name = name
        self._resetter = resetter
        self._items: List[QueueItem] = []
        self._index = 0
        self._detail_index = 0

    def add(self, item: QueueItem) -> None:
        self._items.append(item)

    def clear(self) -> None:
        self._items.clear()
        self.reset_indices()

    def reset_indices(self) -> None:
        self._index = 0
        self._detail_index = 0

    @property
    def item(self) -> Optional[QueueItem]:
        """Current item, or None once the queue is exhausted."""
        if self._index < len(self._items):
            return self._items[self._index]
        return None

    @property
    def detail_index(self) -> int:
        return self._detail_index

    @property
    def items(self) -> Sequence[QueueItem]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def increment(self, max_detail: Optional[int] = None) -> bool:
        """Advance one step; False means stop (reset or exhausted)."""
        if self._resetter.is_reset:
            return False
        self._detail_index += 1
        if not max_detail or self._detail_index >= max_detail:
            return self._next_item()
        return True

    def _next_item(self) -> bool:
        if self._resetter.is_reset:
            return False
        self._index += 1
        self._detail_index = 0
        return self._index < len(self._items)


class QueueManager:
    """One Queue per part; routes instructions by part name."""

    def __init__(self, name: str, resetter: Resetter, named_parts: Sequence[str]):
        self.name = name
        self._named_parts = tuple(named_parts)
        self._queues: Dict[str, Queue] = {
            part: Queue(f"{name}:{part}", resetter) for part in self._named_parts
        }

    @property
    def parts(self) -> Sequence[str]:
        return self._named_parts

    def get(self, part: str) -> Queue:
        try:
            return self._queues[part]
        except KeyError:
            raise KeyError(f"No queue found for part: {part!r}") from None

    def add(self, item: QueueItem) -> None:
        if item.part == DEFAULT_PART_NAME and DEFAULT_PART_NAME not in self._queues:
            for queue in self._queues.values():
                queue.add(item)
            return
        self.get(item.part).add(item)
        logging.getLogger(__name__).debug("%s queued %r", self.name, item)

    def clear(self) -> None:
        for queue in self._queues.values():
            queue.clear()

    def reset_indices(self) -> None:
        for queue in self._queues.values():
            queue.reset_indices()
