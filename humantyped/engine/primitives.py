from __future__ import annotations
import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Mapping, Optional, Set

from zendriver import cdp

from .config import tcfg
from .results import Parts, Plain


_pending: Set[asyncio.Task] = set()


async def _send_cdp_event(
    page, fn: Callable[[], Awaitable[Any]], *, label: str
) -> None:
    """Send a CDP event with a short timeout; fall back to background dispatch."""
    # Create the task once to ensure it runs to completion regardless of timeout
    task = asyncio.create_task(fn())
    try:
        await asyncio.wait_for(asyncio.shield(task), timeout=tcfg.CDP_SEND_TIMEOUT_S)
    except asyncio.TimeoutError:
        logging.getLogger(__name__).warning(
            "CDP %s stalled >%.0f ms; continuing in background",
            label,
            tcfg.CDP_SEND_TIMEOUT_S * 1000.0,
        )
    except Exception:
        logging.getLogger(__name__).warning(
            "CDP %s failed (skipped this event)", label, exc_info=True
        )


def _set_html_expression(selector: str, html: str) -> str:
    return (
        f"(() => {{ const el = document.querySelector({json.dumps(selector)});"
        f" if (el) {{ el.innerHTML = {json.dumps(html)}; }} }})()"
    )


async def _emit_html(page, selector: str, html: str) -> None:
    await _send_cdp_event(
        page,
        lambda: page.send(cdp.runtime.evaluate(expression=_set_html_expression(selector, html))),
        label="setHTML",
    )


def page_sink(
    page,
    selector: str,
    *,
    part_selectors: Optional[Mapping[str, str]] = None,
) -> Callable[[Any], None]:
    """Sink that mirrors snapshots into DOM elements of a zendriver page.

    Plain snapshots go to `selector`; for named parts each part goes to
    `part_selectors[part]`, falling back to `selector` with a `data-part`
    attribute filter. Sends are scheduled on the running loop, one at a time
    and in order, so the sink itself stays synchronous.
    """

    send_lock = asyncio.Lock()

    async def _emit_in_order(target: str, html: str) -> None:
        async with send_lock:
            await _emit_html(page, target, html)

    def _target(part: str) -> str:
        if part_selectors and part in part_selectors:
            return part_selectors[part]
        return f'{selector} [data-part="{part}"]'

    def sink(snapshot) -> None:
        if isinstance(snapshot, Plain):
            updates = [(selector, snapshot.text)]
        elif isinstance(snapshot, Parts):
            updates = [(_target(part), html) for part, html in snapshot.parts.items()]
        else:
            raise TypeError(f"Unsupported snapshot {snapshot!r}")
        for target, html in updates:
            task = asyncio.get_running_loop().create_task(_emit_in_order(target, html))
            _pending.add(task)
            task.add_done_callback(_pending.discard)

    return sink
