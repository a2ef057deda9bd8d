"""Pytest fixtures and path configuration for humantyped tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


class SnapshotSink:
    """Collects every snapshot pushed by an engine."""

    def __init__(self):
        self.snapshots: List[object] = []
        self.listeners = []

    def __call__(self, snapshot) -> None:
        self.snapshots.append(snapshot)
        for listener in self.listeners:
            listener(snapshot)

    @property
    def last(self):
        return self.snapshots[-1]


@pytest.fixture
def sink() -> SnapshotSink:
    return SnapshotSink()

