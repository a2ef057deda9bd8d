from __future__ import annotations
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional, Tuple

from ..utils import Delay


class tcfg:
    # Per-letter / erase / error-correction delays in milliseconds, (min, max)
    PER_LETTER_DELAY: Tuple[float, float] = (40, 150)
    ERASE_DELAY: Tuple[float, float] = (40, 90)
    ERROR_DELAY: Tuple[float, float] = (150, 400)

    # 0 disables typos entirely
    ERROR_MULTIPLIER = 1.0
    NO_SPECIAL_CHAR_ERRORS = False
    LOCALE = "en"

    # Fast-forward still renders discrete steps, just much quicker and clean
    FF_PER_LETTER_DELAY: Delay = 8
    FF_ERASE_DELAY: Delay = 5
    FF_ERROR_DELAY: Delay = 0
    FF_ERROR_MULTIPLIER = 0.0

    # Time a full reset stays signaled so every suspended waiter observes it
    RESET_GRACE_MS = 10

    # Keep page sends from blocking the typing loop
    CDP_SEND_TIMEOUT_S = 0.35

    DEFAULT_PART_NAME = "__default__"
    STYLE_TEMPLATE = '<span class="{style}">{text}</span>'


@dataclass(frozen=True)
class TypingOptions:
    locale: str = tcfg.LOCALE
    per_letter_delay: Delay = tcfg.PER_LETTER_DELAY
    erase_delay: Delay = tcfg.ERASE_DELAY
    error_delay: Delay = tcfg.ERROR_DELAY
    error_multiplier: float = tcfg.ERROR_MULTIPLIER
    no_special_char_errors: bool = tcfg.NO_SPECIAL_CHAR_ERRORS


OPTION_NAMES = frozenset(f.name for f in fields(TypingOptions))

FAST_FORWARD_OPTIONS = {
    "per_letter_delay": tcfg.FF_PER_LETTER_DELAY,
    "erase_delay": tcfg.FF_ERASE_DELAY,
    "error_delay": tcfg.FF_ERROR_DELAY,
    "error_multiplier": tcfg.FF_ERROR_MULTIPLIER,
}


def check_options(options: Mapping[str, Any]) -> dict:
    """Validate override names; returns a plain dict without None values."""
    unknown = set(options) - OPTION_NAMES
    if unknown:
        raise TypeError(f"Unknown typing option(s): {', '.join(sorted(unknown))}")
    return {k: v for k, v in options.items() if v is not None}


def resolve_options(
    base: Optional[TypingOptions] = None,
    construction: Optional[Mapping[str, Any]] = None,
    item: Optional[Mapping[str, Any]] = None,
    fast_forward: Optional[Mapping[str, Any]] = None,
) -> TypingOptions:
    """Layer overrides on top of the defaults; later layers win."""
    resolved = base or TypingOptions()
    for layer in (construction, item, fast_forward):
        if layer:
            resolved = replace(resolved, **check_options(layer))
    return resolved
