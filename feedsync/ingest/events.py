"""Turn decoded notification events into feed records."""

from typing import Any

from ..destination import link_url_for
from ..feed import EventRecord

JOB_ID = "notify-job-id"
JOB_NAME = "job-name"
JOB_STATE = "job-state"
PRINTER_URI = "notify-printer-uri"
SEQUENCE_NUMBER = "notify-sequence-number"
PRINTER_UP_TIME = "printer-up-time"
PRINTER_STATE = "printer-state"


def find_attribute(event: dict[str, Any], name: str, kind: type) -> Any | None:
    """Look up an attribute value of the expected type.

    Multi-valued attributes give their first value. A value of another type
    counts as missing.
    """
    value = event.get(name)
    if isinstance(value, list):
        value = value[0] if value else None

    if isinstance(value, bool) or not isinstance(value, kind):
        return None
    return value


def record_from_event(event: dict[str, Any]) -> EventRecord | None:
    """Build a feed record from an event.

    Returns:
        The record, or None if the event lacks printer-up-time,
        notify-sequence-number or notify-printer-uri.
    """
    up_time = find_attribute(event, PRINTER_UP_TIME, int)
    sequence_number = find_attribute(event, SEQUENCE_NUMBER, int)
    printer_uri = find_attribute(event, PRINTER_URI, str)

    if up_time is None or sequence_number is None or printer_uri is None:
        return None

    return EventRecord(
        sequence_number=sequence_number,
        printer_state=find_attribute(event, PRINTER_STATE, int) or 0,
        job_id=find_attribute(event, JOB_ID, int) or 0,
        job_state=find_attribute(event, JOB_STATE, int) or 0,
        job_name=find_attribute(event, JOB_NAME, str),
        link_url=link_url_for(printer_uri),
        event_time=up_time,
    )
