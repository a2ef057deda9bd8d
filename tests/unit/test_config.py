"""Tests for layered option resolution."""

from __future__ import annotations

import pytest

from humantyped.engine import TypingOptions, resolve_options, tcfg


def test_defaults() -> None:
    options = resolve_options()
    assert options == TypingOptions()
    assert options.locale == tcfg.LOCALE


def test_later_layers_win() -> None:
    options = resolve_options(
        construction={"per_letter_delay": 10, "locale": "de"},
        item={"per_letter_delay": 20},
        fast_forward={"per_letter_delay": 1, "error_multiplier": 0},
    )
    assert options.per_letter_delay == 1
    assert options.locale == "de"
    assert options.error_multiplier == 0


def test_none_values_do_not_override() -> None:
    options = resolve_options(construction={"locale": "de"}, item={"locale": None})
    assert options.locale == "de"


def test_unknown_option_rejected() -> None:
    with pytest.raises(TypeError, match="colour"):
        resolve_options(item={"colour": "red"})
