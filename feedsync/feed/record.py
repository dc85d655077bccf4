"""A single printer or job state change, as kept in the event feed."""

import math
from dataclasses import dataclass
from typing import Any

# Keys that must be present for a persisted entry to be usable
REQUIRED_KEYS = ("link-url", "job-name", "sequence-number")


def _number(value: Any) -> int:
    """Read a JSON number, treating anything else as 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    # NaN and overflowed literals such as 1e400
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    return int(value)


def _state(value: Any) -> int:
    """Read a state or id field; the -1 placeholder means not reported."""
    return max(_number(value), 0)


def _text(value: Any) -> str | None:
    return value if isinstance(value, str) else None


@dataclass(frozen=True)
class EventRecord:
    """One state-change notification.

    Zero values of the state and id fields mean "not reported" and are
    written to the document as -1.
    """

    sequence_number: int
    printer_state: int = 0
    job_id: int = 0
    job_state: int = 0
    job_name: str | None = None
    link_url: str | None = None
    event_time: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to the document entry form."""
        return {
            "sequence-number": self.sequence_number,
            "printer-state": self.printer_state or -1,
            "job-state": self.job_state or -1,
            "job-id": self.job_id or -1,
            "event-time": self.event_time,
            "job-name": self.job_name or "",
            "link-url": self.link_url or "",
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EventRecord":
        """Create from a document entry.

        Raises:
            KeyError: If link-url, job-name or sequence-number is missing.
        """
        for key in REQUIRED_KEYS:
            if key not in data:
                raise KeyError(key)

        return cls(
            sequence_number=_number(data["sequence-number"]),
            printer_state=_state(data.get("printer-state")),
            job_id=_state(data.get("job-id")),
            job_state=_state(data.get("job-state")),
            job_name=_text(data["job-name"]),
            link_url=_text(data["link-url"]),
            event_time=_number(data.get("event-time")),
        )
