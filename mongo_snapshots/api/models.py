"""Pydantic models for API requests and responses."""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class BackupEntryResponse(BaseModel):
    index: int = Field(..., ge=1, description="1-based position in the listing")
    path: str
    size_bytes: int
    modified_at: datetime


class StatisticsResponse(BaseModel):
    backup_count: int
    total_bytes: int
    total_mb: str
    location: str


class RestoreRequest(BaseModel):
    index: int = Field(..., description="1-based position from GET /backups")
    confirm: bool = False
    database: Optional[str] = None


class CreatedBackupResponse(BaseModel):
    path: str
    size_bytes: int
