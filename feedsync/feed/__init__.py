"""Event feed model: records, the bounded log and its JSON document form."""

from .codec import (
    DocumentError,
    DocumentLoadError,
    DocumentSaveError,
    decode_document,
    encode_document,
    load_log,
    save_log,
)
from .event_log import DEFAULT_MAX_EVENTS, EventLog
from .record import EventRecord

__all__ = [
    "DEFAULT_MAX_EVENTS",
    "DocumentError",
    "DocumentLoadError",
    "DocumentSaveError",
    "EventLog",
    "EventRecord",
    "decode_document",
    "encode_document",
    "load_log",
    "save_log",
]
