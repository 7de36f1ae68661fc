"""Tests for BackupManager."""

import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from bson import Decimal128, ObjectId

from mongo_snapshots.backup.errors import CaptureError
from mongo_snapshots.backup.manager import BackupManager
from mongo_snapshots.config import MirrorConfig
from tests.utils import FakeGateway, create_test_config

CLOCK = datetime(2024, 5, 10, 12, 0, 0)


def make_manager(config, gateway, mirror=None):
    return BackupManager(config, gateway_factory=lambda: gateway, mirror=mirror, clock=lambda: CLOCK)


@pytest.mark.asyncio
async def test_backup_manager_initialization(backup_root):
    target = backup_root / "nested" / "dir"
    manager = BackupManager(create_test_config(target))

    assert manager.backup_dir == target
    assert target.is_dir()


@pytest.mark.asyncio
async def test_create_backup(test_config, shop_gateway, backup_root, user_id):
    manager = make_manager(test_config, shop_gateway)

    path = await manager.create_backup()

    assert path.parent == backup_root / "2024" / "05" / "10"
    assert path.name.startswith("12_00_00_")
    data = json.loads(path.read_text())
    assert data["collections"]["users"]["documents"][0]["_id"] == {"$oid": str(user_id)}


@pytest.mark.asyncio
async def test_create_backup_compressed(backup_root, shop_gateway):
    config = create_test_config(backup_root, compress=True)
    manager = make_manager(config, shop_gateway)

    path = await manager.create_backup()

    assert path.suffix == ".zip"
    assert path.exists()
    assert not path.with_suffix(".json").exists()


@pytest.mark.asyncio
async def test_create_backup_requires_database_name(backup_root, shop_gateway):
    manager = make_manager(create_test_config(backup_root, db_name=None), shop_gateway)

    with pytest.raises(ValueError, match="DB_NAME"):
        await manager.create_backup()


@pytest.mark.asyncio
async def test_run_reports_every_step(test_config, shop_gateway):
    manager = make_manager(test_config, shop_gateway)

    result = await manager.run()

    assert result.snapshot_path.exists()
    assert result.sweep.deleted_files == 0
    assert result.mirrored is False
    assert result.statistics.backup_count == 1


@pytest.mark.asyncio
async def test_run_survives_sweep_failure(test_config, shop_gateway):
    manager = make_manager(test_config, shop_gateway)

    with patch(
        "mongo_snapshots.backup.retention.visit_artifacts",
        side_effect=PermissionError("permission denied"),
    ):
        result = await manager.run()

    assert result.sweep.error == "permission denied"
    assert result.snapshot_path.exists()


@pytest.mark.asyncio
async def test_run_mirrors_when_enabled(backup_root, shop_gateway):
    config = create_test_config(
        backup_root, mirror=MirrorConfig(enabled=True, remote="gdrive:backups")
    )
    mirror = MagicMock()
    mirror.sync = AsyncMock()
    manager = make_manager(config, shop_gateway, mirror=mirror)

    result = await manager.run()

    assert result.mirrored is True
    mirror.sync.assert_awaited_once_with(backup_root)


@pytest.mark.asyncio
async def test_run_propagates_capture_failure(test_config):
    mirror = MagicMock()
    mirror.sync = AsyncMock()
    manager = make_manager(test_config, FakeGateway(fail_connect=True), mirror=mirror)

    with pytest.raises(CaptureError):
        await manager.run()

    mirror.sync.assert_not_awaited()
    assert manager.list_backups() == []


@pytest.mark.asyncio
async def test_backup_then_restore_round_trip(backup_root, user_id):
    source = FakeGateway({"shop": {"users": [{"_id": user_id, "name": "Ana"}]}})
    await make_manager(create_test_config(backup_root), source).create_backup()

    target = FakeGateway({})
    manager = make_manager(create_test_config(backup_root, db_name="restored"), target)
    (entry,) = manager.list_backups()
    artifact = await manager.load_backup(entry.path)
    report = await manager.restore_backup(artifact)

    assert report.database == "restored"
    (doc,) = target.databases["restored"]["users"]
    assert isinstance(doc["_id"], ObjectId)
    assert doc == {"_id": user_id, "name": "Ana"}


@pytest.mark.asyncio
async def test_round_trip_keeps_bson_types(backup_root, user_id):
    created = datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc)
    source = FakeGateway({"shop": {"orders": [
        {"_id": user_id, "createdAt": created, "total": Decimal128("42.50")},
    ]}})
    await make_manager(create_test_config(backup_root), source).create_backup()

    target = FakeGateway({})
    manager = make_manager(create_test_config(backup_root), target)
    artifact = await manager.load_backup(manager.list_backups()[0].path)
    await manager.restore_backup(artifact)

    (doc,) = target.databases["shop"]["orders"]
    assert doc["_id"] == user_id
    assert isinstance(doc["createdAt"], datetime)
    assert doc["createdAt"].replace(tzinfo=None) == datetime(2024, 5, 1, 8, 30)
    assert doc["total"] == Decimal128("42.50")


@pytest.mark.asyncio
async def test_restore_defaults_to_artifact_database(backup_root, shop_gateway):
    await make_manager(create_test_config(backup_root), shop_gateway).create_backup()

    target = FakeGateway({})
    manager = make_manager(create_test_config(backup_root, db_name=None), target)
    artifact = await manager.load_backup(manager.list_backups()[0].path)
    report = await manager.restore_backup(artifact)

    assert report.database == "shop"
    assert "users" in target.databases["shop"]
