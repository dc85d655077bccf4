"""Sync targets that publish the event feed locally or over HTTP."""

from .base import StartupError, SyncTarget
from .factory import create_sync_target
from .local import LocalSyncTarget
from .remote import CachedPasswordAuth, RemoteSyncTarget

__all__ = [
    "CachedPasswordAuth",
    "LocalSyncTarget",
    "RemoteSyncTarget",
    "StartupError",
    "SyncTarget",
    "create_sync_target",
]
