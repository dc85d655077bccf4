"""Shared fixtures for the feedsync tests."""

import asyncio
import json

import pytest

from feedsync.config import Config
from feedsync.ingest import JSONLineEventSource


@pytest.fixture
def config(tmp_path):
    """Config whose local cache directory is a temporary directory."""
    config = Config()
    config.server.cache_dir = str(tmp_path / "cache")
    config.feed.idle_timeout_seconds = 0.05
    return config


@pytest.fixture
def make_source():
    """Factory for JSON-line sources fed from a list of events.

    Must be called inside a running event loop.
    """

    def _make(events, eof=True):
        reader = asyncio.StreamReader()
        for event in events:
            line = event if isinstance(event, (bytes, str)) else json.dumps(event)
            if isinstance(line, str):
                line = line.encode("utf-8")
            reader.feed_data(line.rstrip(b"\n") + b"\n")
        if eof:
            reader.feed_eof()
        return JSONLineEventSource(reader)

    return _make


@pytest.fixture
def printer_event():
    """Factory for events carrying the three mandatory attributes."""

    def _make(sequence_number, extra=None):
        event = {
            "notify-sequence-number": sequence_number,
            "printer-up-time": 1700000000 + sequence_number,
            "notify-printer-uri": "ipp://localhost/printers/office",
        }
        event.update(extra or {})
        return event

    return _make
