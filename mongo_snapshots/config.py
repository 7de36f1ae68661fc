"""Configuration management for mongo-snapshots."""

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass(frozen=True)
class MirrorConfig:
    """Remote mirror (rclone) configuration."""
    enabled: bool = False
    remote: Optional[str] = None  # e.g. "gdrive:backups/mongo"
    transfers: int = 4
    checkers: int = 8
    rclone_binary: str = "rclone"
    max_attempts: int = 3

    @classmethod
    def from_env(cls) -> 'MirrorConfig':
        """Create config from environment variables."""
        return cls(
            enabled=_env_flag("ENABLE_SYNC"),
            remote=os.getenv("RCLONE_REMOTE") or None,
            transfers=int(os.getenv("RCLONE_TRANSFERS", "4")),
            checkers=int(os.getenv("RCLONE_CHECKERS", "8")),
            rclone_binary=os.getenv("RCLONE_BINARY", "rclone"),
            max_attempts=int(os.getenv("RCLONE_MAX_ATTEMPTS", "3"))
        )

    def __post_init__(self):
        """Validate configuration."""
        if self.enabled and not self.remote:
            raise ValueError("RCLONE_REMOTE is required when sync is enabled")
        if self.transfers <= 0:
            raise ValueError(f"transfers must be positive, got {self.transfers}")
        if self.checkers <= 0:
            raise ValueError(f"checkers must be positive, got {self.checkers}")
        if self.max_attempts <= 0:
            raise ValueError(f"max_attempts must be positive, got {self.max_attempts}")


@dataclass(frozen=True)
class BackupConfig:
    """Main backup configuration, built once at startup and passed down."""
    mongo_uri: str = "mongodb://localhost:27017"
    db_name: Optional[str] = None
    backup_dir: str = "./backups"
    days_to_keep: int = 30
    compress: bool = False
    date_partitioned: bool = True
    # None keeps the naming-convention heuristic for identifier fields
    id_fields: Optional[Tuple[str, ...]] = None
    connect_attempts: int = 3
    mirror: MirrorConfig = field(default_factory=MirrorConfig)

    @classmethod
    def from_env(cls) -> 'BackupConfig':
        """Create config from environment variables."""
        id_fields_str = os.getenv("ID_FIELDS", "")
        if id_fields_str and id_fields_str.strip():
            id_fields = tuple(f.strip() for f in id_fields_str.split(",") if f.strip())
        else:
            id_fields = None

        return cls(
            mongo_uri=os.getenv("MONGO_URI", "mongodb://localhost:27017"),
            db_name=os.getenv("DB_NAME") or None,
            backup_dir=os.getenv("BACKUP_DIR", "./backups"),
            days_to_keep=int(os.getenv("DAYS_TO_KEEP", "30")),
            compress=_env_flag("ENABLE_COMPRESSION"),
            date_partitioned=_env_flag("DATE_PARTITIONED", "true"),
            id_fields=id_fields or None,
            connect_attempts=int(os.getenv("MONGO_CONNECT_ATTEMPTS", "3")),
            mirror=MirrorConfig.from_env()
        )

    def __post_init__(self):
        """Validate configuration."""
        if not self.mongo_uri:
            raise ValueError("mongo_uri must not be empty")
        if not self.backup_dir:
            raise ValueError("backup_dir must not be empty")
        if self.days_to_keep < 0:
            raise ValueError(f"days_to_keep must be non-negative, got {self.days_to_keep}")
        if self.connect_attempts <= 0:
            raise ValueError(f"connect_attempts must be positive, got {self.connect_attempts}")
