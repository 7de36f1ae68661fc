"""Snapshot lifecycle: capture, retention, catalog and restore."""

from .manager import BackupManager
from .database import MongoGateway
from .errors import (
    SnapshotError,
    CaptureError,
    RestoreError,
    InvalidSelectionError,
    MirrorError,
)

__all__ = [
    "BackupManager",
    "MongoGateway",
    "SnapshotError",
    "CaptureError",
    "RestoreError",
    "InvalidSelectionError",
    "MirrorError",
]
