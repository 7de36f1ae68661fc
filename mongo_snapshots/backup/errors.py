"""Exceptions raised by the snapshot lifecycle."""


class SnapshotError(Exception):
    """Base exception for snapshot operations."""
    pass


class CaptureError(SnapshotError):
    """A capture could not complete; no artifact was written."""

    def __init__(self, database: str, reason: str):
        self.database = database
        super().__init__(f"Capture of database '{database}' failed: {reason}")


class RestoreError(SnapshotError):
    """A restore could not start or was aborted by the database."""
    pass


class InvalidSelectionError(SnapshotError):
    """A catalog selection did not name an available snapshot."""

    def __init__(self, selection, available: int):
        self.selection = selection
        self.available = available
        super().__init__(f"Invalid selection {selection!r}: choose 1-{available}")


class MirrorError(SnapshotError):
    """The remote mirror tool failed or could not be started."""
    pass
