from __future__ import annotations
import logging
from typing import Dict, List

from .telemetry import TypingRecorder

# Route debug prints in this module through logging
print = logging.getLogger(__name__).debug


def summarize_typing(recorder: TypingRecorder) -> str:
    """
    Reports:
      - Total duration
      - Typed / mistyped / erased characters (per part when there are several)
      - Avg chars per minute and WPM (includes pauses/corrections)
      - Planned pause time
      - Fast-forwards and seed used
    """
    evs = recorder.events
    if len(evs) < 2:
        return "No typing data"

    total_time = max(0.0, evs[-1].t - evs[0].t)
    if total_time <= 0:
        return "Invalid timing data"

    chars: Dict[str, int] = {}
    typos = 0
    erasures = 0
    pauses: List[float] = []
    for ev in evs:
        if ev.kind == "char":
            chars[ev.part] = chars.get(ev.part, 0) + 1
        elif ev.kind == "typo":
            typos += 1
        elif ev.kind == "erase":
            erasures += 1
        elif ev.kind == "pause":
            pauses.append(ev.dt)

    total_chars = sum(chars.values())
    cpm = (total_chars / total_time) * 60.0
    wpm = cpm / 5.0
    per_part = ""
    if len(chars) > 1:
        per_part = "".join(
            f"\n    {part}: {count}" for part, count in sorted(chars.items())
        )

    return (
        "Typing Summary:\n"
        f"  Total duration: {total_time:.2f}s\n"
        f"  Typed chars: {total_chars}{per_part}\n"
        f"  Mistyped chars (corrected): {typos}\n"
        f"  Erased chars: {erasures}\n"
        f"  Avg CPM / WPM (with pauses): {cpm:.1f} / {wpm:.2f}\n"
        f"  Planned pause time: {sum(pauses):.2f}s over {len(pauses)} pauses\n"
        f"  Fast-forwards: {recorder.fast_forward_count}\n"
        f"  Random seed: {recorder.seed if recorder.seed is not None else 'N/A'}"
    )


def print_typing_summary(recorder: TypingRecorder) -> None:
    print(summarize_typing(recorder))
