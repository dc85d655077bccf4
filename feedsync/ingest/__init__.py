"""Event ingestion: sources, event conversion and the ingestion loop."""

from .events import find_attribute, record_from_event
from .loop import IngestionLoop, LoopResult, LoopState, StopReason
from .source import EventDecodeError, EventSource, JSONLineEventSource, WaitStatus

__all__ = [
    "EventDecodeError",
    "EventSource",
    "IngestionLoop",
    "JSONLineEventSource",
    "LoopResult",
    "LoopState",
    "StopReason",
    "WaitStatus",
    "find_attribute",
    "record_from_event",
]
