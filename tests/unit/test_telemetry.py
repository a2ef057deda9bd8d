"""Tests for the recorder, the typing summary and the integrations."""

from __future__ import annotations

import asyncio

from PIL import Image

from humantyped import Typed, page_sink, save_typing_gif, summarize_typing
from humantyped.engine import TypingRecorder, tcfg


def _typed(sink, **options) -> Typed:
    return Typed(sink, per_letter_delay=1, erase_delay=0, error_delay=0, error_multiplier=0, **options)


def test_recorder_tracks_chars_and_frames(sink) -> None:
    typed = _typed(sink, seed=42)
    typed.type("Hello").backspace(2)
    asyncio.run(typed.run())
    kinds = [event.kind for event in typed.recorder.events]
    assert kinds.count("char") == 5
    assert kinds.count("erase") == 2
    assert len(typed.recorder.frames) == 7
    assert typed.recorder.seed == 42


def test_summary_reports_counts(sink) -> None:
    typed = _typed(sink, seed=5)
    typed.type("Hello World")
    asyncio.run(typed.run())
    summary = summarize_typing(typed.recorder)
    assert summary.startswith("Typing Summary:")
    assert "Typed chars: 11" in summary
    assert "Random seed: 5" in summary


def test_summary_without_data() -> None:
    assert summarize_typing(TypingRecorder()) == "No typing data"


def test_save_typing_gif(sink, tmp_path) -> None:
    typed = _typed(sink)
    typed.type("gifme")
    asyncio.run(typed.run())
    outfile = str(tmp_path / "typing.gif")
    assert asyncio.run(save_typing_gif(typed.recorder, outfile)) == outfile
    with Image.open(outfile) as image:
        assert 1 < image.n_frames <= len("gifme")


class FakePage:
    def __init__(self):
        self.sent = []

    async def send(self, command):
        self.sent.append(command)


def test_page_sink_sends_every_snapshot() -> None:
    page = FakePage()

    async def scenario():
        typed = _typed(page_sink(page, "#out"))
        typed.type("abc")
        await typed.run()
        await asyncio.sleep(0.05)

    asyncio.run(scenario())
    assert len(page.sent) == 3


def test_page_sink_named_parts() -> None:
    page = FakePage()

    async def scenario():
        sink = page_sink(page, "#out", part_selectors={"title": "h1"})
        typed = _typed(sink, named_parts=["title", "body"])
        typed.type("a", part="title").type("b", part="body")
        await typed.run()
        await asyncio.sleep(0.05)

    asyncio.run(scenario())
    # every snapshot carries both parts
    assert len(page.sent) == 4


class StalledPage(FakePage):
    def __init__(self):
        super().__init__()
        self.release = asyncio.Event()

    async def send(self, command):
        await self.release.wait()
        self.sent.append(command)


def test_page_sink_stalled_send_finishes_in_background(monkeypatch, caplog) -> None:
    monkeypatch.setattr(tcfg, "CDP_SEND_TIMEOUT_S", 0.01)
    page = StalledPage()

    async def scenario():
        typed = _typed(page_sink(page, "#out"))
        typed.type("ab")
        await asyncio.wait_for(typed.run(), timeout=1)
        await asyncio.sleep(0.1)
        assert page.sent == []
        page.release.set()
        await asyncio.sleep(0.1)

    with caplog.at_level("WARNING"):
        asyncio.run(scenario())
    assert "stalled >10 ms" in caplog.text
    assert len(page.sent) == 2
