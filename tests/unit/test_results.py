"""Tests for displayed runs, markup and the prefix diff."""

from __future__ import annotations

from humantyped.engine import ResultList
from humantyped.engine.results import common_prefix_length


def test_same_style_runs_merge() -> None:
    results = ResultList("p")
    for char in "Hello":
        results.append(char, "x")
    results.append(" ", None)
    results.append("you", None)
    assert [(run.text, run.style) for run in results.runs] == [("Hello", "x"), (" you", None)]
    assert results.markup() == '<span class="x">Hello</span> you'


def test_erase_spans_style_boundary_and_drops_empty_runs() -> None:
    results = ResultList("p")
    results.append("ab")
    results.append("cd", "x")
    assert results.erase(3) == 3
    assert results.text == "a"
    assert [run.style for run in results.runs] == [None]


def test_erase_reports_shortfall() -> None:
    results = ResultList("p")
    results.append("ab")
    assert results.erase(5) == 2
    assert len(results) == 0
    assert results.runs == ()


def test_common_prefix_compares_style_too() -> None:
    current = [("a", None), ("b", None), ("c", None)]
    target = [("a", None), ("b", "x"), ("c", None)]
    assert common_prefix_length(current, target) == 1
    assert common_prefix_length(current, current[:2]) == 2
    assert common_prefix_length([], target) == 0
