"""Tests for keyboard layouts and the adjacency typo model."""

from __future__ import annotations

import pytest

from humantyped.errors import UnknownLocaleError
from humantyped.keyboard import (
    DEFAULT_KEYBOARDS,
    KeyboardLayout,
    KeyboardRegistry,
    error_probability,
    is_special_char,
    random_char_close_to_char,
)
from humantyped.keyboard import typos


def _all_candidates(monkeypatch, char: str, layout: KeyboardLayout):
    # threshold 2 is the widest neighbourhood
    monkeypatch.setattr(typos.random, "random", lambda: 0.0)
    found = layout.position(char)
    assert found is not None
    grid, row, col = found
    return typos._nearby_chars(char, row, col, grid)


def test_is_special_char_boundary() -> None:
    assert not is_special_char("a")
    assert not is_special_char("7")
    assert not is_special_char("ü")
    assert is_special_char(" ")
    assert is_special_char(";")


def test_letters_never_mistype_into_digits_or_symbols(monkeypatch) -> None:
    layout = DEFAULT_KEYBOARDS["en"]
    for row in layout.lower[1:] + layout.upper[1:]:
        for char in row:
            if is_special_char(char):
                continue
            for candidate in _all_candidates(monkeypatch, char, layout):
                assert candidate.isalpha(), (char, candidate)


def test_number_row_only_reachable_from_number_row(monkeypatch) -> None:
    layout = DEFAULT_KEYBOARDS["en"]
    number_row = set(layout.lower[0]) | set(layout.upper[0])
    for char in "qwertyuiop[]asdf":
        candidates = _all_candidates(monkeypatch, char, layout)
        assert not number_row.intersection(candidates)
    # digits are not special, so the letter row below is fair game
    assert sorted(_all_candidates(monkeypatch, "5", layout)) == sorted("3467rty")


def test_candidates_stay_in_the_same_case_grid(monkeypatch) -> None:
    layout = DEFAULT_KEYBOARDS["en"]
    assert set(_all_candidates(monkeypatch, "G", layout)) <= set(layout.upper[2] + layout.upper[3] + layout.upper[1])
    assert all(c.isupper() for c in _all_candidates(monkeypatch, "G", layout))


def test_threshold_one_only_direct_neighbours(monkeypatch) -> None:
    monkeypatch.setattr(typos.random, "random", lambda: 0.9)
    layout = DEFAULT_KEYBOARDS["en"]
    grid, row, col = layout.position("s")
    assert sorted(typos._nearby_chars("s", row, col, grid)) == sorted("adwx")


def test_unknown_char_has_no_typo() -> None:
    assert random_char_close_to_char("€", DEFAULT_KEYBOARDS["en"]) is None


def test_space_has_no_typo() -> None:
    assert random_char_close_to_char(" ", DEFAULT_KEYBOARDS["en"]) is None


def test_error_probability_escalates_in_bursts() -> None:
    assert error_probability(0, 0, 1.0) == 0.0
    assert error_probability(10, 0, 1.0) == pytest.approx(0.1)
    assert error_probability(0, 1, 1.0) == pytest.approx(0.4)
    assert error_probability(0, 2, 1.0) == pytest.approx(0.2)
    assert error_probability(0, 3, 1.0) == 0.0
    assert error_probability(10, 1, 2.0) == pytest.approx(1.0)
    assert error_probability(30, 2, 0.0) == 0.0


def test_registry_unknown_locale() -> None:
    registry = KeyboardRegistry()
    with pytest.raises(UnknownLocaleError, match="xx"):
        registry.get("xx")
    with pytest.raises(KeyError):
        registry.ensure_locale("xx")


def test_registry_add_is_per_instance() -> None:
    first = KeyboardRegistry()
    second = KeyboardRegistry()
    first.add("xx", {"lower": ["12", "ab"], "upper": ["!@", "AB"]})
    assert "xx" in first
    assert "xx" not in second
    assert first.get("xx").position("B") == (("!@", "AB"), 1, 1)
    first.add("en", KeyboardLayout(lower=("1", "q"), upper=("!", "Q")))
    assert first.get("en").lower == ("1", "q")
    assert DEFAULT_KEYBOARDS["en"].lower[1] == "qwertyuiop[]"
