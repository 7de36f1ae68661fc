"""Inventory of the snapshot storage tree."""

import os
import re
from datetime import datetime
from pathlib import Path
from typing import List, Sequence, Union

from .._utils import logger
from .errors import InvalidSelectionError
from .models import SnapshotEntry, StorageStatistics
from .tree import visit_artifacts

_SEPARATORS = re.compile(r"[-/]")


def list_snapshots(root: Union[str, Path]) -> List[SnapshotEntry]:
    """List artifacts under ``root``, newest first.

    Storage paths sort in capture order, so the path alone decides the
    order. Separators are normalised before comparing so that partitioned
    (``YYYY/MM/DD/...``) and flat (``YYYY-MM-DD_...``) artifacts interleave
    by date when both layouts share a root. A missing root yields an empty
    list.

    Args:
        root: Snapshot root directory

    Returns:
        Entries sorted descending by path
    """
    root = Path(root)
    entries: List[SnapshotEntry] = []

    def collect(path: Path, stat: os.stat_result) -> bool:
        entries.append(SnapshotEntry(
            path=path,
            relative_path=str(path.relative_to(root)),
            size_bytes=stat.st_size,
            modified_at=datetime.fromtimestamp(stat.st_mtime),
        ))
        return False

    try:
        visit_artifacts(root, collect)
    except OSError as e:
        logger.warning(f"Failed to scan backup directory {root}: {e}")

    entries.sort(key=_chronological_key, reverse=True)
    return entries


def _chronological_key(entry: SnapshotEntry):
    relative = Path(entry.relative_path).as_posix()
    return _SEPARATORS.sub("_", relative), relative


def resolve_selection(
    entries: Sequence[SnapshotEntry],
    selection: Union[int, str],
) -> SnapshotEntry:
    """Map a 1-based selection from a displayed listing back to its entry.

    Raises:
        InvalidSelectionError: non-numeric or out-of-range selection
    """
    try:
        index = int(str(selection).strip())
    except ValueError:
        raise InvalidSelectionError(selection, len(entries))

    if index < 1 or index > len(entries):
        raise InvalidSelectionError(selection, len(entries))

    return entries[index - 1]


def get_statistics(root: Union[str, Path]) -> StorageStatistics:
    """Count artifacts under ``root`` and sum their sizes."""
    root = Path(root)
    stats = StorageStatistics(location=str(root.resolve()))

    def tally(path: Path, stat: os.stat_result) -> bool:
        stats.backup_count += 1
        stats.total_bytes += stat.st_size
        return False

    try:
        visit_artifacts(root, tally)
    except OSError as e:
        logger.warning(f"Failed to compute backup statistics: {e}")

    return stats
