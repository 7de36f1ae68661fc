"""Tests for configuration management."""

import os
import pytest
from unittest.mock import patch

from mongo_snapshots.config import BackupConfig, MirrorConfig


class TestMirrorConfig:
    """Test rclone mirror configuration."""

    def test_defaults(self):
        config = MirrorConfig()
        assert config.enabled is False
        assert config.remote is None
        assert config.transfers == 4
        assert config.checkers == 8
        assert config.rclone_binary == "rclone"

    def test_from_env(self):
        """Test creating from environment variables."""
        with patch.dict(os.environ, {
            "ENABLE_SYNC": "true",
            "RCLONE_REMOTE": "gdrive:backups/mongo",
            "RCLONE_TRANSFERS": "2",
            "RCLONE_CHECKERS": "16",
            "RCLONE_BINARY": "/usr/bin/rclone",
        }):
            config = MirrorConfig.from_env()
            assert config.enabled is True
            assert config.remote == "gdrive:backups/mongo"
            assert config.transfers == 2
            assert config.checkers == 16
            assert config.rclone_binary == "/usr/bin/rclone"

    def test_validation(self):
        """Test validation errors."""
        with pytest.raises(ValueError, match="RCLONE_REMOTE is required"):
            MirrorConfig(enabled=True)

        with pytest.raises(ValueError, match="transfers must be positive"):
            MirrorConfig(transfers=0)

        with pytest.raises(ValueError, match="checkers must be positive"):
            MirrorConfig(checkers=-1)


class TestBackupConfig:
    """Test main backup configuration."""

    def test_defaults(self):
        config = BackupConfig()
        assert config.mongo_uri == "mongodb://localhost:27017"
        assert config.db_name is None
        assert config.backup_dir == "./backups"
        assert config.days_to_keep == 30
        assert config.compress is False
        assert config.date_partitioned is True
        assert config.id_fields is None
        assert config.mirror.enabled is False

    def test_from_env(self):
        """Test creating from environment variables."""
        with patch.dict(os.environ, {
            "MONGO_URI": "mongodb://db.internal:27017",
            "DB_NAME": "shop",
            "BACKUP_DIR": "/var/backups/mongo",
            "DAYS_TO_KEEP": "14",
            "ENABLE_COMPRESSION": "true",
            "DATE_PARTITIONED": "false",
            "ENABLE_SYNC": "false",
        }):
            config = BackupConfig.from_env()
            assert config.mongo_uri == "mongodb://db.internal:27017"
            assert config.db_name == "shop"
            assert config.backup_dir == "/var/backups/mongo"
            assert config.days_to_keep == 14
            assert config.compress is True
            assert config.date_partitioned is False

    def test_id_fields_from_env(self):
        with patch.dict(os.environ, {"ID_FIELDS": " _id, ownerRef ,,parent "}):
            config = BackupConfig.from_env()
            assert config.id_fields == ("_id", "ownerRef", "parent")

    def test_blank_id_fields_keep_heuristic(self):
        with patch.dict(os.environ, {"ID_FIELDS": "   "}):
            assert BackupConfig.from_env().id_fields is None

    def test_validation(self):
        """Test validation errors."""
        with pytest.raises(ValueError, match="mongo_uri must not be empty"):
            BackupConfig(mongo_uri="")

        with pytest.raises(ValueError, match="days_to_keep must be non-negative"):
            BackupConfig(days_to_keep=-1)

        with pytest.raises(ValueError, match="connect_attempts must be positive"):
            BackupConfig(connect_attempts=0)

    def test_config_is_frozen(self):
        config = BackupConfig()
        with pytest.raises(AttributeError):
            config.days_to_keep = 1
