"""Event sources feeding the ingestion loop."""

import asyncio
import json
import logging
import sys
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, TextIO

logger = logging.getLogger(__name__)


class WaitStatus(Enum):
    """Outcome of waiting for the next event."""

    READY = "ready"
    TIMEOUT = "timeout"
    ERROR = "error"


class EventDecodeError(Exception):
    """An event record could not be decoded."""


class EventSource(ABC):
    """A sequential stream of decoded event records."""

    @abstractmethod
    async def wait(self, timeout: float) -> WaitStatus:
        """Block until an event (or end of stream) is available.

        Args:
            timeout: Seconds to wait before giving up.
        """

    @abstractmethod
    def read_event(self) -> dict[str, Any] | None:
        """Return the next event, or None at end of stream.

        Raises:
            EventDecodeError: If the record is malformed.
        """


class JSONLineEventSource(EventSource):
    """Reads one JSON object per line from an asyncio stream."""

    def __init__(self, reader: asyncio.StreamReader):
        self._reader = reader
        self._pending: bytes | None = None
        self._pending_error: str | None = None

    @classmethod
    async def from_stdin(cls, stream: TextIO | None = None) -> "JSONLineEventSource":
        """Create a source reading from standard input."""
        loop = asyncio.get_running_loop()
        reader = asyncio.StreamReader()
        protocol = asyncio.StreamReaderProtocol(reader)
        await loop.connect_read_pipe(lambda: protocol, stream or sys.stdin)
        return cls(reader)

    async def wait(self, timeout: float) -> WaitStatus:
        if self._pending is not None or self._pending_error is not None:
            return WaitStatus.READY

        try:
            self._pending = await asyncio.wait_for(self._reader.readline(), timeout)
        except asyncio.TimeoutError:
            return WaitStatus.TIMEOUT
        except ValueError as e:
            # Line longer than the stream limit
            self._pending_error = str(e)
        except OSError as e:
            logger.error(f"Error reading events: {e}")
            return WaitStatus.ERROR

        return WaitStatus.READY

    def read_event(self) -> dict[str, Any] | None:
        line, self._pending = self._pending, None
        error, self._pending_error = self._pending_error, None

        if error is not None:
            raise EventDecodeError(error)

        if not line:
            return None

        if not line.strip():
            return {}

        try:
            event = json.loads(line)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise EventDecodeError(f"Invalid event record: {e}") from e

        if not isinstance(event, dict):
            raise EventDecodeError(
                f"Event record is a {type(event).__name__}, not an object"
            )

        return event
