"""Publishing targets for the event feed."""

from abc import ABC, abstractmethod

from ..feed import EventLog


class StartupError(Exception):
    """The target could not establish its baseline; the notifier must exit."""


class SyncTarget(ABC):
    """Where the feed document is published.

    A target is primed once at startup, published after every change and
    cleaned up once when ingestion ends.
    """

    def __init__(self, max_events: int):
        self.max_events = max_events

    @property
    @abstractmethod
    def feed_url(self) -> str:
        """URL at which readers find the published feed."""

    @abstractmethod
    async def prime(self) -> EventLog:
        """Establish the starting log from previously published state.

        Raises:
            StartupError: If no baseline can be established.
        """

    @abstractmethod
    async def publish(self, log: EventLog) -> bool:
        """Publish the log.

        Failures are logged and reported as False; they never raise.
        """

    @abstractmethod
    async def cleanup(self) -> None:
        """Release files and connections held by the target."""
