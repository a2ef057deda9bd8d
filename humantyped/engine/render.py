from __future__ import annotations
import asyncio
import logging
import re
import textwrap
from typing import List, Tuple

from PIL import Image, ImageDraw, ImageFont

from .results import Parts, Plain
from .telemetry import Frame, TypingRecorder

_TAG_RE = re.compile(r"<[^>]+>")

# GIF frame durations below ~20 ms are clamped by most viewers anyway
MIN_FRAME_MS = 20


def _frame_lines(frame: Frame, wrap: int) -> List[str]:
    snapshot = frame.snapshot
    if isinstance(snapshot, Plain):
        blocks = [_TAG_RE.sub("", snapshot.text)]
    elif isinstance(snapshot, Parts):
        blocks = [f"{part}: {_TAG_RE.sub('', text)}" for part, text in snapshot.parts.items()]
    else:
        blocks = [str(snapshot)]
    lines: List[str] = []
    for block in blocks:
        for raw in block.split("\n"):
            lines.extend(textwrap.wrap(raw, wrap) or [""])
    return lines


def _sample_frames(frames: List[Frame], max_frames: int) -> List[Tuple[Frame, int]]:
    """Pick at most max_frames frames, each with its display duration in ms."""
    if len(frames) > max_frames:
        step = len(frames) / float(max_frames)
        frames = [frames[int(i * step)] for i in range(max_frames - 1)] + [frames[-1]]
    timed: List[Tuple[Frame, int]] = []
    for i, frame in enumerate(frames):
        if i + 1 < len(frames):
            dt_ms = (frames[i + 1].t - frame.t) * 1000.0
        else:
            dt_ms = 1500.0  # hold the final text
        timed.append((frame, max(MIN_FRAME_MS, int(dt_ms))))
    return timed


async def save_typing_gif(
    recorder: TypingRecorder,
    outfile: str = "typing.gif",
    *,
    width: int = 640,
    wrap: int = 70,
    line_height: int = 16,
    margin: int = 12,
    background_color: Tuple[int, int, int] = (12, 12, 14),
    text_color: Tuple[int, int, int] = (220, 220, 220),
    max_frames: int = 600,
) -> str:
    """
    Render the recorded snapshots into an animated GIF, one frame per display
    change, timed like the recorded run. Style markup is stripped.
    Rendering is offloaded to a worker thread to avoid blocking the event loop.
    """
    frames_snapshot = list(recorder.frames)

    def _render() -> str:
        font = ImageFont.load_default()
        timed = _sample_frames(frames_snapshot, max_frames) if frames_snapshot else []
        all_lines = [_frame_lines(frame, wrap) for frame, _ in timed] or [["No typing recorded"]]
        rows = max(len(lines) for lines in all_lines)
        height = margin * 2 + rows * line_height

        images = []
        for lines in all_lines:
            image = Image.new("RGB", (width, height), background_color)
            draw = ImageDraw.Draw(image)
            for row, line in enumerate(lines):
                draw.text((margin, margin + row * line_height), line, fill=text_color, font=font)
            images.append(image)

        durations = [duration for _, duration in timed] or [1000]
        images[0].save(
            outfile,
            format="GIF",
            save_all=True,
            append_images=images[1:],
            duration=durations,
            loop=0,
        )
        return outfile

    outfile_path = await asyncio.to_thread(_render)
    logging.getLogger(__name__).debug(
        "Typing animation saved to %s (%d frames)", outfile_path, len(frames_snapshot)
    )
    return outfile_path
