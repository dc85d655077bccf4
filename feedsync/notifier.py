"""Startup wiring for the feed notifier."""

import logging

import httpx

from .config import Config
from .destination import Destination, DestinationError
from .ingest import EventSource, IngestionLoop, JSONLineEventSource
from .sync import StartupError, create_sync_target

logger = logging.getLogger(__name__)


async def run_notifier(
    destination_uri: str,
    config: Config,
    source: EventSource | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    """Prime the feed for a destination and ingest events until idle.

    Args:
        destination_uri: Where to publish the feed.
        config: Loaded configuration.
        source: Event source. Defaults to JSON lines on standard input.
        transport: Optional httpx transport for remote destinations.

    Returns:
        Process exit status.
    """
    try:
        destination = Destination.parse(
            destination_uri, config.feed.default_max_events
        )
    except DestinationError as e:
        logger.error(str(e))
        return 1

    target = create_sync_target(destination, config, transport=transport)
    logger.debug(
        f"Feed {target.feed_url} keeps at most {destination.max_events} events"
    )

    try:
        log = await target.prime()
    except StartupError as e:
        logger.error(str(e))
        return 1

    # Publish right away when there is nothing to carry over
    log.dirty = len(log) == 0

    if source is None:
        try:
            source = await JSONLineEventSource.from_stdin()
        except (OSError, ValueError) as e:
            # Regular files cannot be read through a pipe transport
            logger.error(f"Unable to read events from standard input: {e}")
            await target.cleanup()
            return 1

    loop = IngestionLoop(
        source,
        target,
        log,
        idle_timeout=config.feed.idle_timeout_seconds,
    )
    result = await loop.run()
    return result.exit_status
