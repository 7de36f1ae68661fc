"""Retention sweep over the snapshot storage tree."""

import os
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional, Union

from .._utils import logger
from .models import SweepResult
from .tree import ARTIFACT_SUFFIXES, TEMP_SUFFIX, visit_artifacts

# Interrupted writes are expired by the same age rule as artifacts.
SWEPT_SUFFIXES = ARTIFACT_SUFFIXES + (TEMP_SUFFIX,)


def sweep(
    root: Union[str, Path],
    max_age: timedelta,
    now: Optional[datetime] = None,
) -> SweepResult:
    """Delete artifacts older than ``max_age`` and reclaim emptied directories.

    An artifact is deleted when ``now - mtime > max_age`` (an artifact exactly
    at the boundary is kept). Temporary files left by an interrupted capture
    or compression follow the same rule. A directory is removed only when this sweep
    deleted something inside it and it is empty afterwards; directories that
    were already empty are left alone so a capture that has just created its
    day directory is not raced.

    Filesystem errors end the sweep early and are reported in the result
    rather than raised.

    Args:
        root: Snapshot root directory
        max_age: Retention window
        now: Reference instant, defaults to the current time

    Returns:
        SweepResult with counts of deleted files and removed directories
    """
    now = now or datetime.now()
    cutoff = now.timestamp() - max_age.total_seconds()
    result = SweepResult()

    def expire(path: Path, stat: os.stat_result) -> bool:
        if stat.st_mtime >= cutoff:
            return False
        path.unlink()
        result.deleted_files += 1
        logger.info(f"Deleted: {path}")
        return True

    def reclaim(directory: Path, removed: int) -> None:
        if removed and not any(directory.iterdir()):
            directory.rmdir()
            result.removed_directories += 1
            logger.info(f"Removed empty folder: {directory}")

    try:
        visit_artifacts(root, expire, reclaim, suffixes=SWEPT_SUFFIXES)
    except OSError as e:
        result.error = str(e)
        logger.error(f"Error cleaning old backups: {e}")
        return result

    if result.deleted_files == 0:
        logger.info("No old backups to delete")
    else:
        logger.info(f"Deleted {result.deleted_files} old backup(s)")

    return result
