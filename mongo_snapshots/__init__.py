from .config import BackupConfig, MirrorConfig
from .backup import BackupManager

__version__ = "0.1.0"
__author__ = "mongo-snapshots contributors"
__url__ = "https://github.com/mongo-snapshots/mongo-snapshots"

__all__ = ["BackupConfig", "MirrorConfig", "BackupManager"]
