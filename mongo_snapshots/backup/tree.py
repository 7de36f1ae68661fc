"""Bottom-up traversal of the snapshot storage tree.

Shared by retention, catalog and statistics so that all three agree on what
counts as an artifact.
"""

import os
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

# Artifacts are plain JSON or a JSON file zipped by the compression step.
ARTIFACT_SUFFIXES = (".json", ".zip")
# Left behind when a capture or compression is interrupted before its rename.
TEMP_SUFFIX = ".tmp"

FileVisitor = Callable[[Path, os.stat_result], bool]
DirectoryVisitor = Callable[[Path, int], None]


def is_artifact(name: str, suffixes: Iterable[str] = ARTIFACT_SUFFIXES) -> bool:
    return any(name.endswith(suffix) for suffix in suffixes)


def visit_artifacts(
    root: Union[str, Path],
    on_file: FileVisitor,
    after_directory: Optional[DirectoryVisitor] = None,
    suffixes: Iterable[str] = ARTIFACT_SUFFIXES,
) -> int:
    """Walk every artifact under ``root``, children before parents.

    Args:
        root: Directory to walk. A missing root is treated as empty.
        on_file: Called with each artifact path and its stat result. Returns
            True when it removed the file.
        after_directory: Called for every subdirectory once its own subtree
            has been visited, with the number of files removed inside it.
            Never called for ``root`` itself.
        suffixes: File name suffixes that identify artifacts

    Returns:
        Number of files ``on_file`` reported as removed
    """
    root = Path(root)
    if not root.is_dir():
        return 0
    return _visit(root, on_file, after_directory, tuple(suffixes))


def _visit(directory, on_file, after_directory, suffixes) -> int:
    removed = 0

    with os.scandir(directory) as it:
        entries = sorted(it, key=lambda e: e.name)

    for entry in entries:
        path = Path(entry.path)
        if entry.is_dir(follow_symlinks=False):
            child_removed = _visit(path, on_file, after_directory, suffixes)
            if after_directory is not None:
                after_directory(path, child_removed)
            removed += child_removed
        elif entry.is_file() and is_artifact(entry.name, suffixes):
            if on_file(path, entry.stat()):
                removed += 1

    return removed
