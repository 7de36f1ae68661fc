"""Capture a whole database into a single snapshot artifact."""

import json
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from pymongo.errors import PyMongoError

from .._utils import logger
from .codec import json_default
from .errors import CaptureError
from .models import CollectionRecord, SnapshotArtifact
from .tree import TEMP_SUFFIX


class SnapshotWriter:
    """Read every collection of a database and write one JSON artifact."""

    def __init__(self, gateway: Any):
        """Initialize writer.

        Args:
            gateway: Connection exposing ``connect``, ``close``,
                ``list_collections`` and ``find_all`` (see MongoGateway)
        """
        self.gateway = gateway

    async def capture(
        self,
        db_name: str,
        path: Path,
        now: Optional[datetime] = None,
    ) -> Path:
        """Snapshot ``db_name`` into ``path``.

        The connection is closed on every exit path. On failure nothing is
        left at ``path``.

        Args:
            db_name: Source database
            path: Target artifact path (from ``next_snapshot_path``)
            now: Capture instant recorded in the artifact

        Returns:
            ``path`` once the artifact is fully written

        Raises:
            CaptureError: connectivity or query failure, or a document value
                with no Extended JSON representation
        """
        now = now or datetime.now()
        path = Path(path)

        try:
            await self.gateway.connect()
            artifact = await self._read_database(db_name, now)
        except (PyMongoError, OSError) as e:
            logger.error(f"Error creating backup of {db_name}: {e}")
            raise CaptureError(db_name, str(e)) from e
        finally:
            await self.gateway.close()

        try:
            write_artifact(artifact, path)
        except TypeError as e:
            logger.error(f"Unserializable value in {db_name}: {e}")
            raise CaptureError(db_name, str(e)) from e
        logger.info(f"Backup created: {path}")
        logger.info(f"Total collections: {len(artifact.collections)}")
        return path

    async def _read_database(self, db_name: str, now: datetime) -> SnapshotArtifact:
        collections: Dict[str, CollectionRecord] = {}

        for name in await self.gateway.list_collections(db_name):
            logger.info(f"Backing up collection: {name}")
            documents = await self.gateway.find_all(db_name, name)
            collections[name] = CollectionRecord(count=len(documents), documents=documents)

        return SnapshotArtifact(database=db_name, timestamp=now, collections=collections)


def write_artifact(artifact: SnapshotArtifact, path: Path) -> None:
    """Serialize ``artifact`` next to ``path`` and move it into place.

    Readers never observe a partially written file: the JSON is written to a
    temporary file in the same directory and renamed over ``path``.
    """
    payload = json.dumps(artifact.to_json_dict(), indent=2, default=json_default)

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}.", suffix=TEMP_SUFFIX)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
