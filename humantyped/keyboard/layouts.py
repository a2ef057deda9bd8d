from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence, Tuple, Union

from ..errors import UnknownLocaleError


@dataclass(frozen=True)
class KeyboardLayout:
    """Row-organized character grids for one locale.

    Row 0 is the number/symbol row. A character is expected at most once per
    grid; lookups return the first match.
    """

    lower: Tuple[str, ...]
    upper: Tuple[str, ...]

    def __post_init__(self):
        object.__setattr__(self, "lower", tuple(self.lower))
        object.__setattr__(self, "upper", tuple(self.upper))

    def position(self, char: str) -> Optional[Tuple[Tuple[str, ...], int, int]]:
        """Return (grid, row, col) for char, looking in the lowercase grid first."""
        for grid in (self.lower, self.upper):
            for row_index, row in enumerate(grid):
                col = row.find(char)
                if col != -1:
                    return grid, row_index, col
        return None


LayoutLike = Union[KeyboardLayout, Mapping[str, Sequence[str]]]


DEFAULT_KEYBOARDS: Dict[str, KeyboardLayout] = {
    "en": KeyboardLayout(
        lower=("1234567890-=", "qwertyuiop[]", "asdfghjkl;", "zxcvbnm,./", " "),
        upper=("!@#$%^&*()_+", "QWERTYUIOP{}|", 'ASDFGHJKL:"', "ZXCVBNM?", " "),
    ),
    "de": KeyboardLayout(
        lower=("1234567890ß", "qwertzuiopü+", "asdfghjklöä#", "yxcvbnm,.-", " "),
        upper=('!"§$%&/()=?', "QWERTZUIOPÜ*", "ASDFGHJKLÖÄ'", "YXCVBNM;:_", " "),
    ),
}


def _coerce_layout(layout: LayoutLike) -> KeyboardLayout:
    if isinstance(layout, KeyboardLayout):
        return layout
    return KeyboardLayout(lower=tuple(layout["lower"]), upper=tuple(layout["upper"]))


class KeyboardRegistry:
    """Locale -> layout table owned by a single engine instance."""

    def __init__(self, keyboards: Optional[Mapping[str, LayoutLike]] = None):
        self._keyboards: Dict[str, KeyboardLayout] = dict(DEFAULT_KEYBOARDS)
        for locale, layout in (keyboards or {}).items():
            self.add(locale, layout)

    def add(self, locale: str, layout: LayoutLike) -> None:
        """Register or overwrite the layout for locale (last writer wins)."""
        self._keyboards[locale] = _coerce_layout(layout)
        logging.getLogger(__name__).debug("Keyboard layout registered for %r", locale)

    def get(self, locale: str) -> KeyboardLayout:
        self.ensure_locale(locale)
        return self._keyboards[locale]

    def ensure_locale(self, locale: str) -> None:
        if locale not in self._keyboards:
            raise UnknownLocaleError(locale)

    def __contains__(self, locale: object) -> bool:
        return locale in self._keyboards

    def locales(self) -> Tuple[str, ...]:
        return tuple(self._keyboards)
