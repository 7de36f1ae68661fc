"""Async MongoDB access used by capture and restore."""

from typing import Any, Callable, Dict, List, Optional, Tuple

from pymongo import AsyncMongoClient
from pymongo.errors import BulkWriteError, ConnectionFailure, ServerSelectionTimeoutError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from .._utils import logger


class MongoGateway:
    """Thin wrapper around one ``AsyncMongoClient`` connection.

    Exposes only the operations the snapshot lifecycle needs: list
    collections, read a whole collection, empty a collection and bulk insert.
    """

    def __init__(
        self,
        uri: str,
        connect_attempts: int = 3,
        client_factory: Callable[..., Any] = AsyncMongoClient,
    ):
        """Initialize gateway.

        Args:
            uri: MongoDB connection string
            connect_attempts: Connection attempts before giving up
            client_factory: Callable creating the driver client from ``uri``
        """
        self.uri = uri
        self.connect_attempts = connect_attempts
        self._client_factory = client_factory
        self._client = None

    def _get_retry_decorator(self):
        return retry(
            stop=stop_after_attempt(self.connect_attempts),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type((ConnectionFailure, ServerSelectionTimeoutError)),
            reraise=True,
        )

    async def connect(self) -> None:
        """Open the connection and verify it with a ping."""
        if self._client is not None:
            return
        await self._get_retry_decorator()(self._connect_once)()
        logger.info("Connected to MongoDB")

    async def _connect_once(self) -> None:
        client = self._client_factory(self.uri)
        try:
            await client.admin.command("ping")
        except Exception:
            await client.close()
            raise
        self._client = client

    async def close(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        await client.close()
        logger.debug("MongoDB connection closed")

    async def __aenter__(self) -> "MongoGateway":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _database(self, db_name: str):
        if self._client is None:
            raise ConnectionFailure("MongoGateway is not connected")
        return self._client[db_name]

    async def list_collections(self, db_name: str) -> List[str]:
        return await self._database(db_name).list_collection_names()

    async def find_all(self, db_name: str, collection: str) -> List[Dict[str, Any]]:
        cursor = self._database(db_name)[collection].find({})
        return await cursor.to_list(None)

    async def delete_all(self, db_name: str, collection: str) -> int:
        result = await self._database(db_name)[collection].delete_many({})
        return result.deleted_count

    async def insert_many(
        self,
        db_name: str,
        collection: str,
        documents: List[Dict[str, Any]],
    ) -> Tuple[int, int]:
        """Unordered bulk insert.

        Returns:
            ``(inserted, failed)``. Per-document write errors are counted,
            not raised.
        """
        if not documents:
            return 0, 0
        try:
            result = await self._database(db_name)[collection].insert_many(
                documents, ordered=False
            )
            return len(result.inserted_ids), 0
        except BulkWriteError as e:
            details: Optional[Dict[str, Any]] = e.details or {}
            inserted = details.get("nInserted", 0)
            failed = len(details.get("writeErrors", []))
            logger.warning(
                f"Partial insert into {collection}: {inserted} inserted, {failed} failed"
            )
            return inserted, failed
