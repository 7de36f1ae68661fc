"""Backup and restore orchestration for a MongoDB database."""

from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable, List, Optional, Union

from .._utils import logger
from ..config import BackupConfig
from .archive import compress_snapshot, load_artifact
from .catalog import get_statistics, list_snapshots
from .database import MongoGateway
from .mirror import RcloneMirror
from .models import (
    BackupRunResult,
    RestoreReport,
    SnapshotArtifact,
    SnapshotEntry,
    StorageStatistics,
    SweepResult,
)
from .naming import next_snapshot_path
from .restorer import SnapshotRestorer
from .retention import sweep
from .writer import SnapshotWriter


class BackupManager:
    """Orchestrate capture, retention, mirroring and restore."""

    def __init__(
        self,
        config: BackupConfig,
        gateway_factory: Optional[Callable[[], Any]] = None,
        mirror: Optional[RcloneMirror] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """Initialize backup manager.

        Args:
            config: Backup configuration
            gateway_factory: Creates a fresh database connection per operation.
                Defaults to a MongoGateway on ``config.mongo_uri``.
            mirror: Remote mirror, defaults to rclone with ``config.mirror``
            clock: Source of the current instant
        """
        self.config = config
        self.backup_dir = Path(config.backup_dir)
        self.backup_dir.mkdir(parents=True, exist_ok=True)
        self.gateway_factory = gateway_factory or (
            lambda: MongoGateway(config.mongo_uri, connect_attempts=config.connect_attempts)
        )
        self.mirror = mirror or RcloneMirror(config.mirror)
        self.clock = clock

    async def create_backup(self) -> Path:
        """Capture the configured database into a new artifact.

        Returns:
            Path of the artifact (``.zip`` when compression is enabled)
        """
        db_name = self._require_db_name()
        now = self.clock()
        path = next_snapshot_path(now, self.backup_dir, self.config.date_partitioned)

        writer = SnapshotWriter(self.gateway_factory())
        path = await writer.capture(db_name, path, now=now)

        if self.config.compress:
            path = await compress_snapshot(path)

        return path

    def clean_old_backups(self, now: Optional[datetime] = None) -> SweepResult:
        """Delete artifacts past the retention window."""
        return sweep(
            self.backup_dir,
            timedelta(days=self.config.days_to_keep),
            now or self.clock(),
        )

    async def sync_to_remote(self) -> bool:
        """Mirror the backup directory if enabled. Returns whether it ran."""
        if not self.config.mirror.enabled:
            logger.info("Remote sync disabled")
            return False
        await self.mirror.sync(self.backup_dir)
        return True

    def get_statistics(self) -> StorageStatistics:
        stats = get_statistics(self.backup_dir)
        logger.info("Backup statistics:")
        logger.info(f"   Total backups: {stats.backup_count}")
        logger.info(f"   Space used: {stats.total_mb} MB")
        logger.info(f"   Location: {stats.location}")
        return stats

    async def run(self) -> BackupRunResult:
        """Full scheduled run: capture, sweep, mirror, report.

        Capture and mirror failures propagate. Sweep failures are logged
        and the run still succeeds.
        """
        logger.info("Starting backup process...")
        logger.info(f"Database: {self.config.db_name}")
        logger.info(f"Directory: {self.backup_dir}")
        logger.info(f"Retention: {self.config.days_to_keep} days")
        logger.info(f"Remote sync: {'enabled' if self.config.mirror.enabled else 'disabled'}")

        snapshot_path = await self.create_backup()

        logger.info("Cleaning old backups...")
        sweep_result = self.clean_old_backups()

        mirrored = await self.sync_to_remote()
        statistics = self.get_statistics()

        logger.info("Backup process completed successfully")
        return BackupRunResult(
            snapshot_path=snapshot_path,
            sweep=sweep_result,
            mirrored=mirrored,
            statistics=statistics,
        )

    def list_backups(self) -> List[SnapshotEntry]:
        """List available backups, newest first."""
        return list_snapshots(self.backup_dir)

    async def load_backup(self, path: Union[str, Path]) -> SnapshotArtifact:
        return await load_artifact(Path(path))

    async def restore_backup(
        self,
        artifact: SnapshotArtifact,
        db_name: Optional[str] = None,
    ) -> RestoreReport:
        """Restore ``artifact`` into ``db_name``.

        The target defaults to the configured database, then to the database
        recorded in the artifact. Destructive; callers confirm beforehand.
        """
        target = db_name or self.config.db_name or artifact.database
        logger.info(f"Starting restore into {target}")

        restorer = SnapshotRestorer(self.gateway_factory(), id_fields=self.config.id_fields)
        return await restorer.restore(artifact, target)

    def _require_db_name(self) -> str:
        if not self.config.db_name:
            raise ValueError("DB_NAME must be configured to create a backup")
        return self.config.db_name
