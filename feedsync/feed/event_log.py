"""Bounded, sequence-ordered log of the most recent events."""

import bisect
import logging
from collections.abc import Iterable, Iterator
from operator import attrgetter

from .record import EventRecord

logger = logging.getLogger(__name__)

DEFAULT_MAX_EVENTS = 20

_sequence_key = attrgetter("sequence_number")


class EventLog:
    """In-memory event feed, ascending by sequence number.

    Records are never deduplicated: a producer that restarts and reuses
    sequence numbers ends up with both copies, ordered numerically.
    """

    def __init__(
        self,
        max_events: int = DEFAULT_MAX_EVENTS,
        records: Iterable[EventRecord] = (),
    ):
        """Initialize the log.

        Args:
            max_events: Retention limit applied by trim().
            records: Initial records, e.g. from a persisted document.
        """
        self.max_events = max_events if max_events > 0 else DEFAULT_MAX_EVENTS
        self.dirty = False
        self._records: list[EventRecord] = sorted(records, key=_sequence_key)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[EventRecord]:
        return iter(self._records)

    @property
    def records(self) -> list[EventRecord]:
        """Snapshot of the records, oldest first."""
        return list(self._records)

    @property
    def sequence_numbers(self) -> list[int]:
        return [r.sequence_number for r in self._records]

    def append(self, record: EventRecord) -> None:
        """Add a record in sequence order and mark the log dirty.

        For a monotonic producer this is always the tail. Equal sequence
        numbers keep their arrival order.
        """
        bisect.insort_right(self._records, record, key=_sequence_key)
        self.dirty = True

    def trim(self, max_events: int | None = None) -> list[EventRecord]:
        """Drop the oldest records until at most max_events remain.

        Args:
            max_events: Limit to apply. Defaults to the log's own limit.

        Returns:
            The removed records, oldest first.
        """
        limit = self.max_events if max_events is None else max_events
        excess = len(self._records) - limit
        if excess <= 0:
            return []

        removed = self._records[:excess]
        del self._records[:excess]
        logger.debug(f"Trimmed {len(removed)} events, {len(self._records)} remain")
        return removed

    def mark_clean(self) -> None:
        self.dirty = False
