"""Data models for snapshot artifacts and lifecycle reports."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from .._utils import format_kilobytes, format_megabytes

ARTIFACT_FORMAT_VERSION = 1


def format_timestamp(moment: datetime) -> str:
    """Render an instant as UTC ISO-8601 with millisecond precision and a Z suffix."""
    if moment.tzinfo is None:
        moment = moment.astimezone()
    moment = moment.astimezone(timezone.utc)
    return f"{moment:%Y-%m-%dT%H:%M:%S}.{moment.microsecond // 1000:03d}Z"


class CollectionRecord(BaseModel):
    """Documents of one collection at capture time."""

    count: int = Field(..., ge=0, description="Number of documents captured")
    documents: List[Dict[str, Any]] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_count(self) -> "CollectionRecord":
        if self.count != len(self.documents):
            raise ValueError(
                f"count {self.count} does not match {len(self.documents)} documents"
            )
        return self


class SnapshotArtifact(BaseModel):
    """One complete snapshot of a database."""

    database: str = Field(..., description="Source database name")
    timestamp: datetime = Field(..., description="Capture instant")
    format_version: int = Field(default=ARTIFACT_FORMAT_VERSION)
    collections: Dict[str, CollectionRecord] = Field(default_factory=dict)

    def to_json_dict(self) -> Dict[str, Any]:
        """Build the on-disk layout. ObjectIds are left for the JSON encoder."""
        return {
            "database": self.database,
            "timestamp": format_timestamp(self.timestamp),
            "format_version": self.format_version,
            "collections": {
                name: {"count": record.count, "documents": record.documents}
                for name, record in self.collections.items()
            },
        }


class SnapshotEntry(BaseModel):
    """Catalog row describing one artifact on disk."""

    path: Path
    relative_path: str
    size_bytes: int
    modified_at: datetime

    @property
    def size_kb(self) -> str:
        return format_kilobytes(self.size_bytes)


class StorageStatistics(BaseModel):
    """Totals for the snapshot storage tree."""

    backup_count: int = 0
    total_bytes: int = 0
    location: str

    @property
    def total_mb(self) -> str:
        return format_megabytes(self.total_bytes)


class SweepResult(BaseModel):
    """Outcome of a retention sweep."""

    deleted_files: int = 0
    removed_directories: int = 0
    error: Optional[str] = None


class CollectionRestoreResult(BaseModel):
    """Outcome of restoring one collection."""

    collection: str
    deleted: int = 0
    inserted: int = 0
    failed: int = 0


class RestoreReport(BaseModel):
    """Outcome of a full restore."""

    database: str
    collections: List[CollectionRestoreResult] = Field(default_factory=list)

    @property
    def inserted(self) -> int:
        return sum(c.inserted for c in self.collections)

    @property
    def failed(self) -> int:
        return sum(c.failed for c in self.collections)


class BackupRunResult(BaseModel):
    """Outcome of a scheduled backup run."""

    snapshot_path: Path
    sweep: SweepResult
    mirrored: bool = False
    statistics: StorageStatistics
