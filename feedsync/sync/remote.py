"""Remote feed published to an HTTP server with GET and PUT.

The current document is fetched once at startup into a staging file; every
later publish rewrites that file and PUTs it back over the same client.
"""

import logging
import os
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import httpx

from ..config import HTTPConfig
from ..destination import Destination
from ..feed import DocumentSaveError, EventLog, load_log, save_log
from .base import StartupError, SyncTarget

logger = logging.getLogger(__name__)


class CachedPasswordAuth(httpx.Auth):
    """Answers one authentication challenge with a cached password.

    The request goes out without credentials. On a 401 the password callback
    is asked once; if it returns a value the request is retried with Basic
    credentials, otherwise the 401 is returned to the caller.
    """

    def __init__(self, username: str, password_cb: Callable[[str], str | None]):
        self._username = username
        self._password_cb = password_cb

    def auth_flow(
        self, request: httpx.Request
    ) -> Generator[httpx.Request, httpx.Response, None]:
        response = yield request

        if response.status_code != httpx.codes.UNAUTHORIZED:
            return

        password = self._password_cb(response.headers.get("WWW-Authenticate", ""))
        if password is None:
            return

        yield from httpx.BasicAuth(self._username, password).auth_flow(request)


class RemoteSyncTarget(SyncTarget):
    """Publishes the feed to a resource on a remote HTTP server."""

    def __init__(
        self,
        destination: Destination,
        http_config: HTTPConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the remote target.

        Args:
            destination: Parsed destination with host, port and resource.
            http_config: Connection and request timeouts.
            transport: Optional httpx transport (used by tests).
        """
        super().__init__(destination.max_events)
        self.destination = destination
        self.http_config = http_config or HTTPConfig()
        self._transport = transport
        self._password = destination.password
        self._client: httpx.AsyncClient | None = None
        self._staging_path: Path | None = None

    @property
    def feed_url(self) -> str:
        return f"{self.destination.base_url}{self.destination.resource}"

    @property
    def staging_path(self) -> Path | None:
        return self._staging_path

    def _password_cb(self, prompt: str) -> str | None:
        """Return the cached password whatever the prompt."""
        return self._password

    def _describe(self) -> str:
        d = self.destination
        return f"{d.resource} from {d.host} on port {d.port}"

    def _create_client(self) -> httpx.AsyncClient:
        timeout = httpx.Timeout(
            self.http_config.request_timeout_seconds,
            connect=self.http_config.connect_timeout_seconds,
        )
        return httpx.AsyncClient(
            base_url=self.destination.base_url,
            auth=CachedPasswordAuth(self.destination.username or "", self._password_cb),
            timeout=timeout,
            transport=self._transport,
        )

    async def prime(self) -> EventLog:
        try:
            fd, name = tempfile.mkstemp(prefix="feedsync-", suffix=".json")
        except OSError as e:
            raise StartupError(f"Could not create temporary file: {e}") from e
        os.close(fd)
        self._staging_path = Path(name)

        self._client = self._create_client()

        try:
            found = await self._fetch()
        except httpx.HTTPError as e:
            await self.cleanup()
            raise StartupError(
                f"Could not connect to server {self.destination.host} "
                f"on port {self.destination.port}: {e}"
            ) from e
        except OSError as e:
            staging_path = self._staging_path
            await self.cleanup()
            raise StartupError(f"Unable to write {staging_path}: {e}") from e
        except BaseException:
            await self.cleanup()
            raise

        if not found:
            logger.debug(f"No existing feed at {self.feed_url}, starting empty")
            return EventLog(self.max_events)

        try:
            return load_log(self._staging_path, self.max_events)
        except BaseException:
            await self.cleanup()
            raise

    async def _fetch(self) -> bool:
        """GET the current document into the staging file.

        Returns:
            False if the resource does not exist yet.
        """
        async with self._client.stream("GET", self.destination.resource) as response:
            if response.status_code == httpx.codes.NOT_FOUND:
                return False

            if not response.is_success:
                raise StartupError(
                    f"Unable to GET {self._describe()}: "
                    f"{response.status_code} {response.reason_phrase}"
                )

            with open(self._staging_path, "wb") as f:
                async for chunk in response.aiter_bytes():
                    f.write(chunk)

        return True

    async def publish(self, log: EventLog) -> bool:
        if self._client is None or self._staging_path is None:
            logger.error(f"Unable to PUT {self._describe()}: target not primed")
            return False

        try:
            save_log(log, self._staging_path)
            content = self._staging_path.read_bytes()
        except (DocumentSaveError, OSError) as e:
            logger.error(str(e))
            return False

        try:
            response = await self._client.put(
                self.destination.resource,
                content=content,
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as e:
            logger.error(f"Unable to PUT {self._describe()}: {e}")
            return False

        if not response.is_success:
            logger.error(
                f"Unable to PUT {self._describe()}: "
                f"{response.status_code} {response.reason_phrase}"
            )
            return False

        logger.debug(f"Published {len(log)} events to {self.feed_url}")
        return True

    async def cleanup(self) -> None:
        if self._staging_path is not None:
            self._staging_path.unlink(missing_ok=True)
            self._staging_path = None

        if self._client is not None:
            await self._client.aclose()
            self._client = None
