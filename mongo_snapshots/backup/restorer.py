"""Replace live collections with the contents of a snapshot."""

from typing import Any, Iterable, Optional

from pymongo.errors import PyMongoError

from .._utils import logger
from .codec import decode
from .errors import RestoreError
from .models import CollectionRestoreResult, RestoreReport, SnapshotArtifact


class SnapshotRestorer:
    """Restore a snapshot collection by collection.

    Destructive: every collection named in the artifact is emptied before its
    documents are inserted. Callers must obtain confirmation first.
    Collections absent from the artifact are not touched.
    """

    def __init__(self, gateway: Any, id_fields: Optional[Iterable[str]] = None):
        """Initialize restorer.

        Args:
            gateway: Connection exposing ``connect``, ``close``,
                ``delete_all`` and ``insert_many`` (see MongoGateway)
            id_fields: Optional allowlist of identifier keys for decoding
        """
        self.gateway = gateway
        self.id_fields = frozenset(id_fields) if id_fields is not None else None

    async def restore(self, artifact: SnapshotArtifact, db_name: str) -> RestoreReport:
        """Restore every collection of ``artifact`` into ``db_name``.

        Raises:
            RestoreError: connectivity failure or a failed delete/insert call.
                Per-document insert failures are reported, not raised.
        """
        report = RestoreReport(database=db_name)

        try:
            await self.gateway.connect()
            for name, record in artifact.collections.items():
                report.collections.append(await self._restore_collection(db_name, name, record))
        except PyMongoError as e:
            logger.error(f"Error during restore: {e}")
            raise RestoreError(f"Restore into '{db_name}' failed: {e}") from e
        finally:
            await self.gateway.close()
            logger.info("Connection closed")

        logger.info(
            f"Restore completed: {report.inserted} documents restored, {report.failed} failed"
        )
        return report

    async def _restore_collection(self, db_name: str, name: str, record) -> CollectionRestoreResult:
        logger.info(f"Processing {name}...")
        result = CollectionRestoreResult(collection=name)

        result.deleted = await self.gateway.delete_all(db_name, name)
        logger.info(f"  {result.deleted} documents deleted")

        if record.count > 0:
            documents = [decode(doc, self.id_fields) for doc in record.documents]
            result.inserted, result.failed = await self.gateway.insert_many(
                db_name, name, documents
            )
            logger.info(f"  {result.inserted} documents restored")
            if result.failed:
                logger.warning(f"  {result.failed} documents could not be inserted")
        else:
            logger.info("  Empty collection, nothing to restore")

        return result
