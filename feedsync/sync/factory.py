"""Choose the sync target for a destination."""

import logging
from pathlib import Path

import httpx

from ..config import Config
from ..destination import Destination
from .base import SyncTarget
from .local import LocalSyncTarget
from .remote import RemoteSyncTarget

logger = logging.getLogger(__name__)


def create_sync_target(
    destination: Destination,
    config: Config,
    transport: httpx.AsyncBaseTransport | None = None,
) -> SyncTarget:
    """Create the local or remote target for a parsed destination.

    Local feeds live at ``<cache_dir>/http<resource>`` and are served by the
    local server under ``/http<resource>``.

    Args:
        destination: Parsed destination URI.
        config: Loaded configuration.
        transport: Optional httpx transport for the remote target.
    """
    server = config.server

    if destination.is_local(server.server_name):
        path = Path(server.cache_dir) / f"http{destination.resource}"
        feed_url = (
            f"http://{server.server_name}:{server.server_port}"
            f"/http{destination.resource}"
        )
        logger.debug(f"Publishing locally to {path}")
        return LocalSyncTarget(
            path=path,
            max_events=destination.max_events,
            feed_url=feed_url,
            staging_suffix=config.feed.staging_suffix,
        )

    logger.debug(f"Publishing remotely to {destination.base_url}")
    return RemoteSyncTarget(destination, config.http, transport=transport)
