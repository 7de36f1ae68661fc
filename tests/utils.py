"""Test utilities for mongo-snapshots tests."""
import copy
from typing import Any, Dict, List, Optional, Tuple

from pymongo.errors import ConnectionFailure, OperationFailure

from mongo_snapshots.config import BackupConfig, MirrorConfig


def create_test_config(backup_dir, **overrides) -> BackupConfig:
    """Create test config with sensible defaults."""
    config_kwargs = {
        "mongo_uri": "mongodb://fake:27017",
        "db_name": "shop",
        "backup_dir": str(backup_dir),
        "days_to_keep": 7,
        "connect_attempts": 1,
        "mirror": MirrorConfig(),
    }
    config_kwargs.update(overrides)
    return BackupConfig(**config_kwargs)


class FakeGateway:
    """In-memory stand-in for MongoGateway.

    ``databases`` maps database name -> collection name -> list of documents.
    Inserting a document whose ``_id`` already exists in the collection counts
    as a per-document failure, like a duplicate key error in an unordered
    bulk insert.
    """

    def __init__(
        self,
        databases: Optional[Dict[str, Dict[str, List[Dict[str, Any]]]]] = None,
        fail_connect: bool = False,
        fail_on_collection: Optional[str] = None,
    ):
        self.databases = databases if databases is not None else {}
        self.fail_connect = fail_connect
        self.fail_on_collection = fail_on_collection
        self.connected = False
        self.connect_calls = 0
        self.close_calls = 0
        self.calls: List[Tuple[str, str]] = []

    async def connect(self) -> None:
        self.connect_calls += 1
        if self.fail_connect:
            raise ConnectionFailure("connection refused")
        self.connected = True

    async def close(self) -> None:
        self.close_calls += 1
        self.connected = False

    def _collection(self, db_name: str, name: str) -> List[Dict[str, Any]]:
        assert self.connected, "gateway used while disconnected"
        return self.databases.setdefault(db_name, {}).setdefault(name, [])

    async def list_collections(self, db_name: str) -> List[str]:
        assert self.connected, "gateway used while disconnected"
        return list(self.databases.get(db_name, {}).keys())

    async def find_all(self, db_name: str, name: str) -> List[Dict[str, Any]]:
        self.calls.append(("find", name))
        if name == self.fail_on_collection:
            raise OperationFailure(f"query on {name} failed")
        return copy.deepcopy(self._collection(db_name, name))

    async def delete_all(self, db_name: str, name: str) -> int:
        self.calls.append(("delete", name))
        if name == self.fail_on_collection:
            raise OperationFailure(f"delete on {name} failed")
        documents = self._collection(db_name, name)
        deleted = len(documents)
        documents.clear()
        return deleted

    async def insert_many(self, db_name: str, name: str, documents) -> Tuple[int, int]:
        self.calls.append(("insert", name))
        target = self._collection(db_name, name)
        existing = {doc.get("_id") for doc in target}
        inserted = failed = 0
        for doc in documents:
            if "_id" in doc and doc["_id"] in existing:
                failed += 1
                continue
            target.append(copy.deepcopy(doc))
            existing.add(doc.get("_id"))
            inserted += 1
        return inserted, failed
