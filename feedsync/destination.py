"""Destination URI parsing and printer link normalization."""

import logging
from dataclasses import dataclass
from urllib.parse import parse_qs, unquote, urlsplit, urlunsplit

from .feed import DEFAULT_MAX_EVENTS

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {
    "http": 80,
    "https": 443,
    "ipp": 631,
    "ipps": 631,
}


class DestinationError(ValueError):
    """The destination URI cannot be used."""


@dataclass(frozen=True)
class Destination:
    """Where the feed is published.

    ``scheme://[user[:password]@]host[:port]/path[?max_events=N]``
    """

    scheme: str
    host: str
    port: int
    resource: str
    username: str | None = None
    password: str | None = None
    max_events: int = DEFAULT_MAX_EVENTS

    @classmethod
    def parse(cls, uri: str, default_max_events: int = DEFAULT_MAX_EVENTS) -> "Destination":
        """Parse a destination URI.

        Args:
            uri: The destination URI.
            default_max_events: Limit used when max_events is absent or invalid.

        Raises:
            DestinationError: If the URI is malformed.
        """
        try:
            parts = urlsplit(uri)
            port = parts.port
        except ValueError as e:
            raise DestinationError(f"Bad HTTP URI {uri}: {e}") from e

        if not parts.scheme:
            raise DestinationError(f"Bad HTTP URI {uri}: missing scheme")

        resource = parts.path or "/"
        if not resource.startswith("/"):
            resource = f"/{resource}"
        if ".." in resource.split("/"):
            raise DestinationError(f"Bad HTTP URI {uri}: invalid resource {resource}")

        scheme = parts.scheme.lower()

        return cls(
            scheme=scheme,
            host=parts.hostname or "",
            port=port or DEFAULT_PORTS.get(scheme, 80),
            resource=resource,
            username=unquote(parts.username) if parts.username else None,
            password=unquote(parts.password) if parts.password is not None else None,
            max_events=_parse_max_events(parts.query, default_max_events),
        )

    def is_local(self, server_name: str = "") -> bool:
        """Whether the feed is written into the local cache directory.

        True when no host is given or the host names the local server, whose
        cache directory is what that server publishes.
        """
        return not self.host or (bool(server_name) and self.host == server_name.lower())

    @property
    def base_url(self) -> str:
        """HTTP(S) origin for a remote destination."""
        scheme = "https" if self.scheme in ("https", "ipps") else "http"
        return f"{scheme}://{_netloc(self.host, self.port, None, scheme)}"


def _parse_max_events(query: str, default: int) -> int:
    values = parse_qs(query).get("max_events")
    if not values:
        return default

    try:
        max_events = int(values[0])
    except ValueError:
        logger.debug(f"Ignoring invalid max_events={values[0]!r}")
        return default

    return max_events if max_events > 0 else default


def _netloc(host: str, port: int | None, username: str | None, scheme: str) -> str:
    if ":" in host:
        host = f"[{host}]"
    netloc = f"{username}@{host}" if username else host
    if port and port != DEFAULT_PORTS.get(scheme):
        netloc = f"{netloc}:{port}"
    return netloc


def link_url_for(printer_uri: str) -> str:
    """Turn a printer URI into an http link to the same printer.

    ``ipp://host/printers/office`` becomes ``http://host:631/printers/office``.
    URIs that cannot be parsed are returned as they are.
    """
    try:
        parts = urlsplit(printer_uri)
        port = parts.port or DEFAULT_PORTS.get(parts.scheme.lower())
    except ValueError:
        return printer_uri

    if not parts.hostname:
        return printer_uri

    netloc = _netloc(parts.hostname, port, parts.username, "http")
    return urlunsplit(("http", netloc, parts.path or "/", "", ""))
