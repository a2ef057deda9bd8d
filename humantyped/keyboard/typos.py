from __future__ import annotations
import random
from typing import List, Optional, Sequence

from .layouts import KeyboardLayout

# Error escalation added on top of the base probability while a burst of
# wrong letters is on screen, indexed by the number of wrong letters so far.
ERROR_ESCALATION = {1: 0.4, 2: 0.2}


def is_special_char(ch: str) -> bool:
    """Anything not alphanumeric. Digits are never special."""
    return not ch.isalnum()


def error_probability(
    letters_since_error: int, wrong_count: int, multiplier: float
) -> float:
    """Chance of mistyping the next letter.

    Grows quadratically with the letters typed since the last typo, with a
    fixed bump while a typo burst is already on screen.
    """
    if multiplier <= 0:
        return 0.0
    base = (letters_since_error ** 2) / 1000.0
    return (base + ERROR_ESCALATION.get(wrong_count, 0.0)) * multiplier


def _nearby_chars(
    intended: str, row_index: int, col_index: int, grid: Sequence[str]
) -> List[str]:
    threshold = 2 if random.random() < 0.5 else 1
    intended_special = is_special_char(intended)
    nearby: List[str] = []
    for d_row in range(-1, 2):
        for d_col in range(-2, 3):
            if (d_row == 0 and d_col == 0) or abs(d_row) + abs(d_col) > threshold:
                continue
            row = row_index + d_row
            col = col_index + d_col
            # never slip onto the number row from another row
            if row == 0 and row_index != 0:
                continue
            if row < 0 or row >= len(grid) or col < 0 or col >= len(grid[row]):
                continue
            candidate = grid[row][col]
            if is_special_char(candidate) != intended_special:
                continue
            nearby.append(candidate)
    return nearby


def random_char_close_to_char(intended: str, layout: KeyboardLayout) -> Optional[str]:
    """Pick a plausible neighbouring key for intended, or None."""
    found = layout.position(intended)
    if found is None:
        return None
    grid, row_index, col_index = found
    nearby = _nearby_chars(intended, row_index, col_index, grid)
    if not nearby:
        return None
    return random.choice(nearby)
