"""Command-line entry point.

Usage:
    mongo-snapshots backup      # capture, sweep, mirror, report
    mongo-snapshots restore     # choose a backup interactively and restore it
    mongo-snapshots list
    mongo-snapshots sweep
    mongo-snapshots stats
"""

import argparse
import asyncio
import logging
from typing import List, Optional

from dotenv import load_dotenv

from ._utils import logger, setup_logging
from .backup import BackupManager, InvalidSelectionError, SnapshotError
from .backup.catalog import resolve_selection
from .backup.models import SnapshotArtifact, SnapshotEntry
from .config import BackupConfig

CONFIRM_ANSWERS = {"s", "y", "yes", "si"}
ABORT_ANSWER = "q"


def print_backups(entries: List[SnapshotEntry]) -> None:
    print("\nAvailable backups:\n")
    for index, entry in enumerate(entries, start=1):
        print(
            f"{index}. {entry.relative_path} ({entry.size_kb} KB) - "
            f"{entry.modified_at:%Y-%m-%d %H:%M:%S}"
        )
    print("")


def print_artifact_summary(artifact: SnapshotArtifact) -> None:
    print("\nBackup information:")
    print(f"   Database: {artifact.database}")
    print(f"   Date: {artifact.timestamp.astimezone():%Y-%m-%d %H:%M:%S}")
    print("   Collections:")
    for name, record in artifact.collections.items():
        print(f"   - {name}: {record.count} documents")
    print("")


def select_backup(manager: BackupManager) -> Optional[SnapshotEntry]:
    """Prompt for a backup. Returns None when the user aborts or nothing exists.

    Raises:
        InvalidSelectionError: the answer does not name a listed backup
    """
    entries = manager.list_backups()
    if not entries:
        print("No backups found")
        return None

    print_backups(entries)
    answer = input(f'Select the backup number to restore (or "{ABORT_ANSWER}" to quit): ')
    if answer.strip().lower() == ABORT_ANSWER:
        return None

    return resolve_selection(entries, answer)


async def restore_interactive(manager: BackupManager) -> int:
    try:
        entry = select_backup(manager)
    except InvalidSelectionError as e:
        print(f"Invalid selection: {e}")
        return 1

    if entry is None:
        print("\nGoodbye")
        return 0

    artifact = await manager.load_backup(entry.path)
    print_artifact_summary(artifact)

    confirm = input("Confirm restore? This will delete current data (s/n): ")
    if confirm.strip().lower() not in CONFIRM_ANSWERS:
        print("Restore cancelled")
        return 0

    report = await manager.restore_backup(artifact)
    print(f"\nRestore completed: {report.inserted} documents restored")
    if report.failed:
        print(f"Warning: {report.failed} documents could not be inserted")
    return 0


async def _dispatch(args: argparse.Namespace, manager: BackupManager) -> int:
    if args.command == "backup":
        await manager.run()
    elif args.command == "restore":
        return await restore_interactive(manager)
    elif args.command == "list":
        entries = manager.list_backups()
        if entries:
            print_backups(entries)
        else:
            print("No backups found")
    elif args.command == "sweep":
        manager.clean_old_backups()
    elif args.command == "stats":
        manager.get_statistics()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mongo-snapshots",
        description="Scheduled MongoDB snapshot backup and restore",
    )
    parser.add_argument("--env-file", default=None, help="Path to a .env file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "command",
        choices=["backup", "restore", "list", "sweep", "stats"],
        help="Operation to run",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    load_dotenv(args.env_file)

    try:
        config = BackupConfig.from_env()
        manager = BackupManager(config)
        return asyncio.run(_dispatch(args, manager))
    except (SnapshotError, ValueError, OSError) as e:
        logger.error(f"Error in process: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
