from .typed import Typed
from .queue import DEFAULT_PART_NAME, Erase, Queue, QueueManager, Sentence, Wait
from .resetter import CancelSignal, Resetter
from .results import Parts, Plain, ResultItem, ResultList
from .config import TypingOptions, resolve_options, tcfg
from .analysis import summarize_typing, print_typing_summary
from .telemetry import TypingRecorder

__all__ = [
    "Typed",
    "DEFAULT_PART_NAME",
    "Erase",
    "Queue",
    "QueueManager",
    "Sentence",
    "Wait",
    "CancelSignal",
    "Resetter",
    "Parts",
    "Plain",
    "ResultItem",
    "ResultList",
    "TypingOptions",
    "resolve_options",
    "tcfg",
    "summarize_typing",
    "print_typing_summary",
    "TypingRecorder",
]
