"""Local feed file in the scheduler's cache directory."""

import logging
import os
from pathlib import Path

from ..feed import DocumentSaveError, EventLog, load_log, save_log
from .base import StartupError, SyncTarget

logger = logging.getLogger(__name__)


class LocalSyncTarget(SyncTarget):
    """Writes the feed next to its canonical path and renames it into place."""

    def __init__(
        self,
        path: str | Path,
        max_events: int,
        feed_url: str,
        staging_suffix: str = ".N",
    ):
        """Initialize the local target.

        Args:
            path: Canonical feed file.
            max_events: Retention limit for the primed log.
            feed_url: URL the local server publishes the file under.
            staging_suffix: Suffix of the file written before each rename.
        """
        super().__init__(max_events)
        self.path = Path(path)
        self.staging_path = self.path.with_name(self.path.name + staging_suffix)
        self._feed_url = feed_url

    @property
    def feed_url(self) -> str:
        return self._feed_url

    async def prime(self) -> EventLog:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StartupError(
                f"Could not create feed directory {self.path.parent}: {e}"
            ) from e

        return load_log(self.path, self.max_events)

    async def publish(self, log: EventLog) -> bool:
        try:
            save_log(log, self.staging_path)
        except DocumentSaveError as e:
            logger.error(str(e))
            return False

        try:
            os.replace(self.staging_path, self.path)
        except OSError as e:
            logger.error(f"Unable to rename {self.staging_path} to {self.path}: {e}")
            return False

        logger.debug(f"Wrote {len(log)} events to {self.path}")
        return True

    async def cleanup(self) -> None:
        logger.debug(f"Leaving local feed {self.path} in place")
