"""JSON document codec for the event feed.

The published document is a single object::

    {"events": [{"sequence-number": 1, "printer-state": 3, ...}, ...]}

Entries are written oldest first, the same order the EventLog keeps, so a
document decodes back to an identical log.
"""

import json
import logging
from collections.abc import Iterable
from pathlib import Path

from .event_log import DEFAULT_MAX_EVENTS, EventLog
from .record import EventRecord

logger = logging.getLogger(__name__)


class DocumentError(Exception):
    """Base class for feed document errors."""


class DocumentLoadError(DocumentError):
    """The document could not be parsed or has no events array."""


class DocumentSaveError(DocumentError):
    """The document could not be written."""


def decode_document(data: bytes | str) -> list[EventRecord]:
    """Parse a feed document into records.

    Entries lacking link-url, job-name or sequence-number are skipped.

    Args:
        data: Raw document bytes.

    Returns:
        Records in document order.

    Raises:
        DocumentLoadError: If the document is not JSON or has no events array.
    """
    try:
        root = json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DocumentLoadError(f"Invalid JSON: {e}") from e

    if not isinstance(root, dict) or "events" not in root:
        raise DocumentLoadError("Unable to find events")

    events = root["events"]
    if not isinstance(events, list):
        raise DocumentLoadError("events is not an array")

    records = []
    for entry in events:
        if not isinstance(entry, dict):
            continue
        try:
            records.append(EventRecord.from_dict(entry))
        except KeyError:
            continue

    return records


def encode_document(records: Iterable[EventRecord]) -> bytes:
    """Serialize records into a feed document."""
    document = {"events": [record.to_dict() for record in records]}
    return json.dumps(document, indent=2, ensure_ascii=False).encode("utf-8")


def load_log(path: str | Path, max_events: int = DEFAULT_MAX_EVENTS) -> EventLog:
    """Load an existing feed file into an EventLog.

    A missing or unreadable file gives an empty log.

    Args:
        path: Feed file to read.
        max_events: Retention limit for the returned log.

    Returns:
        The hydrated (possibly empty) log.
    """
    path = Path(path)

    try:
        data = path.read_bytes()
    except FileNotFoundError:
        logger.debug(f"No existing feed at {path}, starting empty")
        return EventLog(max_events)
    except OSError as e:
        logger.error(f"Unable to load JSON file {path}: {e}")
        return EventLog(max_events)

    try:
        records = decode_document(data)
    except DocumentLoadError as e:
        logger.error(f"Unable to load JSON file {path}: {e}")
        return EventLog(max_events)

    logger.debug(f"Loaded {len(records)} events from {path}")
    return EventLog(max_events, records)


def save_log(records: Iterable[EventRecord], path: str | Path) -> None:
    """Write records to a feed file.

    Raises:
        DocumentSaveError: If the file cannot be written.
    """
    path = Path(path)
    data = encode_document(records)

    try:
        path.write_bytes(data)
    except OSError as e:
        raise DocumentSaveError(f"Unable to write {path}: {e}") from e
