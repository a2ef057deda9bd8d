from __future__ import annotations
from .engine import Typed, Plain, Parts, DEFAULT_PART_NAME, summarize_typing
from .engine.primitives import page_sink
from .engine.render import save_typing_gif
from .errors import TypedError, TypingStateError, UnknownLocaleError
from .keyboard import KeyboardLayout

__all__ = [
    "Typed",
    "Plain",
    "Parts",
    "DEFAULT_PART_NAME",
    "summarize_typing",
    "page_sink",
    "save_typing_gif",
    "TypedError",
    "TypingStateError",
    "UnknownLocaleError",
    "KeyboardLayout",
]
