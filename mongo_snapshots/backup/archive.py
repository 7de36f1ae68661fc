"""Compression and loading of snapshot artifacts."""

import json
import os
import zipfile
from pathlib import Path
from typing import Any, Dict

from pydantic import ValidationError

from .._utils import logger
from .errors import RestoreError
from .models import ARTIFACT_FORMAT_VERSION, SnapshotArtifact
from .tree import TEMP_SUFFIX


async def compress_snapshot(snapshot_path: Path) -> Path:
    """Pack a JSON artifact into a sibling ``.zip`` and delete the JSON.

    Args:
        snapshot_path: Path to the ``.json`` artifact

    Returns:
        Path to the created ``.zip`` archive
    """
    snapshot_path = Path(snapshot_path)
    archive_path = snapshot_path.with_suffix(".zip")
    tmp_path = archive_path.with_name(f".{archive_path.name}{TEMP_SUFFIX}")

    logger.info(f"Compressing backup: {snapshot_path}")

    try:
        with zipfile.ZipFile(tmp_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            zf.write(snapshot_path, arcname=snapshot_path.name)
        os.replace(tmp_path, archive_path)
    except BaseException:
        if tmp_path.exists():
            tmp_path.unlink()
        raise

    snapshot_path.unlink()

    archive_size = archive_path.stat().st_size
    logger.info(f"Archive created: {archive_path} ({archive_size:,} bytes)")
    return archive_path


def _read_payload(path: Path) -> Dict[str, Any]:
    if path.suffix == ".zip":
        with zipfile.ZipFile(path) as zf:
            members = [n for n in zf.namelist() if n.endswith(".json")]
            if not members:
                raise RestoreError(f"No JSON artifact inside {path}")
            with zf.open(members[0]) as f:
                return json.loads(f.read().decode("utf-8"))

    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


async def load_artifact(path: Path) -> SnapshotArtifact:
    """Read a ``.json`` or ``.zip`` artifact.

    Identifiers stay in their serialized form; decoding happens at restore.

    Raises:
        RestoreError: unreadable payload, or a format version that is not an
            integer or is newer than supported
    """
    path = Path(path)
    try:
        data = _read_payload(path)
    except (OSError, ValueError, zipfile.BadZipFile) as e:
        raise RestoreError(f"Cannot read backup {path}: {e}") from e

    if not isinstance(data, dict):
        raise RestoreError(f"Backup {path} is not a JSON object")

    version = data.get("format_version", ARTIFACT_FORMAT_VERSION)
    if not isinstance(version, int) or isinstance(version, bool):
        raise RestoreError(f"Backup {path} has an invalid format_version: {version!r}")
    if version > ARTIFACT_FORMAT_VERSION:
        raise RestoreError(
            f"Backup format version {version} is newer than supported ({ARTIFACT_FORMAT_VERSION})"
        )

    try:
        artifact = SnapshotArtifact.model_validate(data)
    except ValidationError as e:
        raise RestoreError(f"Malformed backup {path}: {e}") from e
    logger.debug(f"Backup loaded: {path}")
    return artifact
