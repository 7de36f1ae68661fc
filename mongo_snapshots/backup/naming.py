"""Storage path derivation for new snapshots."""

import secrets
from datetime import datetime
from pathlib import Path
from typing import Union

SNAPSHOT_SUFFIX = ".json"
DISAMBIGUATOR_BYTES = 4


def generate_disambiguator() -> str:
    """Return 8 lowercase hex characters from a CSPRNG."""
    return secrets.token_hex(DISAMBIGUATOR_BYTES)


def next_snapshot_path(
    now: datetime,
    root: Union[str, Path],
    date_partitioned: bool = True,
) -> Path:
    """Derive the storage path for a snapshot captured at ``now``.

    Partitioned layout: ``<root>/YYYY/MM/DD/HH_MM_SS_<hex>.json``.
    Flat layout: ``<root>/YYYY-MM-DD_HH_MM_SS_<hex>.json``.

    Both sort lexicographically in capture order. The parent directory is
    created if missing.

    Args:
        now: Capture instant
        root: Snapshot root directory
        date_partitioned: Use the year/month/day directory layout

    Returns:
        Path for the new snapshot file
    """
    root = Path(root)
    stem = f"{now:%H_%M_%S}_{generate_disambiguator()}"

    if date_partitioned:
        folder = root / f"{now:%Y}" / f"{now:%m}" / f"{now:%d}"
    else:
        folder = root
        stem = f"{now:%Y-%m-%d}_{stem}"

    folder.mkdir(parents=True, exist_ok=True)
    return folder / f"{stem}{SNAPSHOT_SUFFIX}"
