from __future__ import annotations


class TypedError(Exception):
    """Base class for faults raised by humantyped."""


class UnknownLocaleError(TypedError, KeyError):
    """A keyboard layout was requested for a locale nobody registered."""

    def __init__(self, locale: str):
        super().__init__(f"Locale {locale!r} is not known")
        self.locale = locale

    def __str__(self) -> str:
        return self.args[0]


class TypingStateError(TypedError, RuntimeError):
    """Internal consistency fault (erase on empty display, unknown queue item)."""
