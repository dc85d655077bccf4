"""Configuration loading for feedsync."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


@dataclass
class ServerConfig:
    """Local scheduler defaults, consulted only for local feeds."""

    cache_dir: str = "/var/cache/cups"
    server_name: str = "localhost"
    server_port: int = 631


@dataclass
class FeedConfig:
    default_max_events: int = 20
    idle_timeout_seconds: float = 30.0
    staging_suffix: str = ".N"


@dataclass
class HTTPConfig:
    connect_timeout_seconds: float = 30.0
    request_timeout_seconds: float = 30.0


@dataclass
class Config:
    server: ServerConfig = field(default_factory=ServerConfig)
    feed: FeedConfig = field(default_factory=FeedConfig)
    http: HTTPConfig = field(default_factory=HTTPConfig)


def _get_env(key: str, default: Any = None) -> Any:
    """Get environment variable with FEEDSYNC_ prefix."""
    return os.environ.get(f"FEEDSYNC_{key}", default)


def _parse_env(name: str, value: str, kind: type, current: Any) -> Any:
    """Convert an environment value, keeping the current setting if it is invalid."""
    try:
        return kind(value)
    except ValueError:
        logger.error(f"Ignoring {name}={value!r}: not a valid {kind.__name__}")
        return current


def _apply_env_overrides(config: Config) -> Config:
    """Apply environment variable overrides to config."""
    # Variables exported by the scheduler to its notifiers
    if cache_dir := os.environ.get("CUPS_CACHEDIR"):
        config.server.cache_dir = cache_dir
    if server_name := os.environ.get("SERVER_NAME"):
        config.server.server_name = server_name
    if server_port := os.environ.get("SERVER_PORT"):
        config.server.server_port = _parse_env(
            "SERVER_PORT", server_port, int, config.server.server_port
        )

    # Feed overrides
    if max_events := _get_env("MAX_EVENTS"):
        config.feed.default_max_events = _parse_env(
            "FEEDSYNC_MAX_EVENTS", max_events, int, config.feed.default_max_events
        )
    if idle_timeout := _get_env("IDLE_TIMEOUT"):
        config.feed.idle_timeout_seconds = _parse_env(
            "FEEDSYNC_IDLE_TIMEOUT", idle_timeout, float, config.feed.idle_timeout_seconds
        )

    # HTTP overrides
    if http_timeout := _get_env("HTTP_TIMEOUT"):
        timeout = _parse_env("FEEDSYNC_HTTP_TIMEOUT", http_timeout, float, None)
        if timeout is not None:
            config.http.connect_timeout_seconds = timeout
            config.http.request_timeout_seconds = timeout

    return config


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from YAML file with environment variable overrides.

    Args:
        config_path: Path to YAML config file. If None, uses default config.

    Returns:
        Loaded Config object.
    """
    config = Config()

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                data = yaml.safe_load(f) or {}

            # Parse server config
            if "server" in data:
                server_data = data["server"]
                config.server = ServerConfig(
                    cache_dir=server_data.get("cache_dir", config.server.cache_dir),
                    server_name=server_data.get(
                        "server_name", config.server.server_name
                    ),
                    server_port=server_data.get(
                        "server_port", config.server.server_port
                    ),
                )

            # Parse feed config
            if "feed" in data:
                feed_data = data["feed"]
                config.feed = FeedConfig(
                    default_max_events=feed_data.get(
                        "default_max_events", config.feed.default_max_events
                    ),
                    idle_timeout_seconds=feed_data.get(
                        "idle_timeout_seconds", config.feed.idle_timeout_seconds
                    ),
                    staging_suffix=feed_data.get(
                        "staging_suffix", config.feed.staging_suffix
                    ),
                )

            # Parse HTTP config
            if "http" in data:
                http_data = data["http"]
                config.http = HTTPConfig(
                    connect_timeout_seconds=http_data.get(
                        "connect_timeout_seconds", config.http.connect_timeout_seconds
                    ),
                    request_timeout_seconds=http_data.get(
                        "request_timeout_seconds", config.http.request_timeout_seconds
                    ),
                )

    # Apply environment variable overrides
    config = _apply_env_overrides(config)

    # A non-positive default would disable retention entirely
    if config.feed.default_max_events <= 0:
        config.feed.default_max_events = FeedConfig.default_max_events

    return config
