from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Tuple

from .config import tcfg


@dataclass
class ResultItem:
    """A run of displayed characters sharing part and style."""

    part: str
    text: str
    style: Optional[str] = None


class ResultList:
    """Ordered runs for one part. Adjacent same-style runs are merged."""

    def __init__(self, part: str):
        self.part = part
        self._runs: List[ResultItem] = []

    @property
    def runs(self) -> Tuple[ResultItem, ...]:
        return tuple(self._runs)

    @property
    def text(self) -> str:
        return "".join(run.text for run in self._runs)

    def __len__(self) -> int:
        return sum(len(run.text) for run in self._runs)

    def append(self, text: str, style: Optional[str] = None) -> None:
        if not text:
            return
        if self._runs and self._runs[-1].style == style:
            self._runs[-1].text += text
        else:
            self._runs.append(ResultItem(self.part, text, style))

    def erase(self, count: int) -> int:
        """Remove up to count trailing characters; returns how many were removed."""
        removed = 0
        while removed < count and self._runs:
            last = self._runs[-1]
            take = min(count - removed, len(last.text))
            last.text = last.text[: len(last.text) - take]
            removed += take
            if not last.text:
                self._runs.pop()
        return removed

    def chars(self) -> List[Tuple[str, Optional[str]]]:
        return [(ch, run.style) for run in self._runs for ch in run.text]

    def clear(self) -> None:
        self._runs.clear()

    def markup(self) -> str:
        return render_markup(self._runs)


def render_markup(runs: Iterable[ResultItem], template: str = tcfg.STYLE_TEMPLATE) -> str:
    return "".join(
        template.format(style=run.style, text=run.text) if run.style else run.text
        for run in runs
    )


def common_prefix_length(
    current: List[Tuple[str, Optional[str]]], target: List[Tuple[str, Optional[str]]]
) -> int:
    """Length of the longest prefix where both character and style match."""
    length = 0
    for have, want in zip(current, target):
        if have != want:
            break
        length += 1
    return length


@dataclass(frozen=True)
class Plain:
    """Snapshot of a single-part engine."""

    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Parts:
    """Snapshot of a named-parts engine, part name -> markup."""

    parts: Mapping[str, str]

    def __getitem__(self, part: str) -> str:
        return self.parts[part]
