"""The ingestion loop: wait for events, update the log, republish."""

import logging
from dataclasses import dataclass
from enum import Enum

from ..feed import EventLog
from ..sync import SyncTarget
from .events import record_from_event
from .source import EventDecodeError, EventSource, WaitStatus

logger = logging.getLogger(__name__)

DEFAULT_IDLE_TIMEOUT = 30.0


class LoopState(Enum):
    IDLE = "idle"
    DECODING = "decoding"
    UPDATING = "updating"
    PUBLISHING = "publishing"
    TERMINATED = "terminated"


class StopReason(Enum):
    """Why the loop ended."""

    TIMEOUT = "timeout"
    END_OF_STREAM = "end_of_stream"
    MALFORMED_EVENT = "malformed_event"
    SOURCE_ERROR = "source_error"
    RECORD_ERROR = "record_error"  # Could not allocate a record

    @property
    def exit_status(self) -> int:
        return 1 if self is StopReason.RECORD_ERROR else 0


@dataclass
class LoopResult:
    """Outcome of a loop run."""

    reason: StopReason
    events_received: int = 0
    events_accepted: int = 0
    publish_attempts: int = 0
    publish_failures: int = 0

    @property
    def exit_status(self) -> int:
        return self.reason.exit_status


class IngestionLoop:
    """Single-flow state machine that owns the event log.

    Each turn publishes the log if it changed, waits for one event, and
    appends it. Publish failures are not retried until the next change.
    """

    def __init__(
        self,
        source: EventSource,
        target: SyncTarget,
        log: EventLog,
        idle_timeout: float = DEFAULT_IDLE_TIMEOUT,
    ):
        """Initialize the loop.

        Args:
            source: Where events come from.
            target: Where the log is published.
            log: The primed event log.
            idle_timeout: Seconds without input before the loop ends.
        """
        self._source = source
        self._target = target
        self._log = log
        self._idle_timeout = idle_timeout
        self._state = LoopState.IDLE
        self._result = LoopResult(reason=StopReason.END_OF_STREAM)

    @property
    def state(self) -> LoopState:
        return self._state

    @property
    def log(self) -> EventLog:
        return self._log

    async def run(self) -> LoopResult:
        """Run until the source times out, ends or fails.

        The target is cleaned up exactly once on the way out.
        """
        try:
            self._result.reason = await self._run_loop()
        finally:
            self._state = LoopState.TERMINATED
            await self._target.cleanup()

        logger.info(
            f"Ingestion stopped ({self._result.reason.value}): "
            f"received={self._result.events_received}, "
            f"accepted={self._result.events_accepted}, "
            f"publish_failures={self._result.publish_failures}"
        )
        return self._result

    async def _run_loop(self) -> StopReason:
        while True:
            if self._log.dirty:
                await self._publish()

            self._state = LoopState.IDLE
            status = await self._source.wait(self._idle_timeout)

            if status is WaitStatus.TIMEOUT:
                logger.debug(
                    f"No input for {self._idle_timeout}s, shutting down"
                )
                return StopReason.TIMEOUT

            if status is WaitStatus.ERROR:
                logger.error("Unable to wait for events, shutting down")
                return StopReason.SOURCE_ERROR

            self._state = LoopState.DECODING
            try:
                event = self._source.read_event()
            except EventDecodeError as e:
                logger.debug(f"Unable to read event: {e}")
                return StopReason.MALFORMED_EVENT

            if event is None:
                logger.debug("End of event stream")
                return StopReason.END_OF_STREAM

            self._result.events_received += 1

            try:
                record = record_from_event(event)
            except MemoryError:
                logger.error("Unable to create event record: out of memory")
                return StopReason.RECORD_ERROR

            if record is None:
                continue

            self._state = LoopState.UPDATING
            self._log.append(record)
            self._log.trim()
            self._result.events_accepted += 1

    async def _publish(self) -> None:
        self._state = LoopState.PUBLISHING
        self._result.publish_attempts += 1

        if not await self._target.publish(self._log):
            self._result.publish_failures += 1

        self._log.mark_clean()
