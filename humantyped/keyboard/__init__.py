from .layouts import DEFAULT_KEYBOARDS, KeyboardLayout, KeyboardRegistry
from .typos import error_probability, is_special_char, random_char_close_to_char

__all__ = [
    "DEFAULT_KEYBOARDS",
    "KeyboardLayout",
    "KeyboardRegistry",
    "error_probability",
    "is_special_char",
    "random_char_close_to_char",
]
