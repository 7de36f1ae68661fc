"""Backup and restore API endpoints."""

from fastapi import APIRouter, Depends
from typing import List

from ..dependencies import get_backup_manager
from ..exceptions import (
    BackupNotFoundError,
    ConfirmationRequiredError,
    DatabaseUnavailableError,
    UnreadableBackupError,
)
from ..models import BackupEntryResponse, CreatedBackupResponse, RestoreRequest, StatisticsResponse
from mongo_snapshots import BackupManager
from mongo_snapshots.backup import CaptureError, InvalidSelectionError, RestoreError
from mongo_snapshots.backup.catalog import resolve_selection
from mongo_snapshots.backup.models import RestoreReport, SweepResult
from mongo_snapshots._utils import logger

router = APIRouter(prefix="/backups", tags=["backups"])


@router.get("", response_model=List[BackupEntryResponse])
async def list_backups(
    backup_manager: BackupManager = Depends(get_backup_manager)
) -> List[BackupEntryResponse]:
    """List available backups, newest first."""
    return [
        BackupEntryResponse(
            index=index,
            path=entry.relative_path,
            size_bytes=entry.size_bytes,
            modified_at=entry.modified_at,
        )
        for index, entry in enumerate(backup_manager.list_backups(), start=1)
    ]


@router.post("", response_model=CreatedBackupResponse)
async def create_backup(
    backup_manager: BackupManager = Depends(get_backup_manager)
) -> CreatedBackupResponse:
    """Capture the configured database now."""
    try:
        path = await backup_manager.create_backup()
    except CaptureError as e:
        raise DatabaseUnavailableError(str(e))

    logger.info(f"Backup created via API: {path}")
    return CreatedBackupResponse(
        path=str(path.relative_to(backup_manager.backup_dir)),
        size_bytes=path.stat().st_size,
    )


@router.post("/sweep", response_model=SweepResult)
async def sweep_backups(
    backup_manager: BackupManager = Depends(get_backup_manager)
) -> SweepResult:
    """Delete backups older than the retention window."""
    return backup_manager.clean_old_backups()


@router.get("/stats", response_model=StatisticsResponse)
async def backup_statistics(
    backup_manager: BackupManager = Depends(get_backup_manager)
) -> StatisticsResponse:
    """Count and size of stored backups."""
    stats = backup_manager.get_statistics()
    return StatisticsResponse(
        backup_count=stats.backup_count,
        total_bytes=stats.total_bytes,
        total_mb=stats.total_mb,
        location=stats.location,
    )


@router.post("/restore", response_model=RestoreReport)
async def restore_backup(
    request: RestoreRequest,
    backup_manager: BackupManager = Depends(get_backup_manager)
) -> RestoreReport:
    """Restore the backup at ``index`` from the listing.

    Destructive: requires ``confirm=true``.
    """
    if not request.confirm:
        raise ConfirmationRequiredError()

    try:
        entry = resolve_selection(backup_manager.list_backups(), request.index)
    except InvalidSelectionError:
        raise BackupNotFoundError(request.index)

    try:
        artifact = await backup_manager.load_backup(entry.path)
    except RestoreError as e:
        raise UnreadableBackupError(entry.relative_path, str(e))

    try:
        return await backup_manager.restore_backup(artifact, request.database)
    except RestoreError as e:
        logger.error(f"Restore of {entry.relative_path} failed: {e}")
        raise DatabaseUnavailableError(str(e))
