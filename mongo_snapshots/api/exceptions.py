"""Custom exceptions for FastAPI application."""

from fastapi import HTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_503_SERVICE_UNAVAILABLE,
)


class BackupAPIError(HTTPException):
    """Base exception for backup API errors."""
    pass


class BackupNotFoundError(BackupAPIError):
    def __init__(self, selection):
        super().__init__(HTTP_404_NOT_FOUND, f"Backup not found: {selection}")


class ConfirmationRequiredError(BackupAPIError):
    def __init__(self):
        super().__init__(HTTP_400_BAD_REQUEST, "Restore deletes current data; set confirm=true")


class DatabaseUnavailableError(BackupAPIError):
    def __init__(self, reason: str):
        super().__init__(HTTP_503_SERVICE_UNAVAILABLE, f"Database temporarily unavailable: {reason}")


class UnreadableBackupError(BackupAPIError):
    def __init__(self, path: str, reason: str):
        super().__init__(HTTP_422_UNPROCESSABLE_ENTITY, f"Backup {path} cannot be read: {reason}")
