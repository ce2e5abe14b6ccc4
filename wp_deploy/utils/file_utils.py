# wp_deploy/utils/file_utils.py
"""File operation utilities"""

import atexit
import filecmp
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from ..constants import VCS_METADATA_DIRS

logger = logging.getLogger(__name__)


def relative_posix(path: Path, base: Path) -> str:
    """
    Get a forward-slash relative path

    Args:
        path: Path inside base
        base: Base directory

    Returns:
        Relative path string
    """
    return path.relative_to(base).as_posix()


def _is_metadata(path: Path, root: Path, keep: Iterable[str]) -> bool:
    keep = set(keep)
    return any(part in keep for part in path.relative_to(root).parts)


def remove_path(path: Path) -> None:
    """
    Remove a file, symlink or directory tree

    Args:
        path: Path to remove
    """
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.is_dir():
        shutil.rmtree(path)


def clear_tree(root: Path, keep: Iterable[str] = VCS_METADATA_DIRS) -> List[str]:
    """
    Remove every regular file below a directory

    Files inside version-control metadata directories are left alone.

    Args:
        root: Directory to clear
        keep: Directory names whose contents must survive

    Returns:
        Relative paths of the removed files
    """
    keep = set(keep)
    removed = []

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if d not in keep]
        current = Path(dirpath)
        for name in filenames + [d for d in dirnames if (current / d).is_symlink()]:
            path = current / name
            path.unlink()
            removed.append(relative_posix(path, root))

    return sorted(removed)


def prune_empty_dirs(root: Path, keep: Iterable[str] = VCS_METADATA_DIRS) -> List[str]:
    """
    Remove empty directories below a directory, deepest first

    The root itself and metadata directories are never removed.

    Args:
        root: Directory to prune
        keep: Directory names that must survive

    Returns:
        Relative paths of the removed directories
    """
    keep = set(keep)
    removed = []

    for dirpath, dirnames, _ in os.walk(root, topdown=False):
        current = Path(dirpath)
        if current == root or _is_metadata(current, root, keep):
            continue
        if not any(current.iterdir()):
            current.rmdir()
            removed.append(relative_posix(current, root))

    return removed


def mirror_tree(source: Path, destination: Path,
                keep: Iterable[str] = VCS_METADATA_DIRS) -> Tuple[List[str], List[str]]:
    """
    Make a destination directory an exact copy of a source directory

    Equivalent to ``rsync -a --delete source/ destination/`` except that
    metadata directories in the destination are preserved.

    Args:
        source: Directory to copy from
        destination: Directory to copy into (created if needed)
        keep: Directory names never deleted from the destination

    Returns:
        Tuple of (copied relative paths, removed relative paths)
    """
    keep = set(keep)
    destination.mkdir(parents=True, exist_ok=True)
    copied = []
    removed = []

    # Delete destination entries absent from source
    for dirpath, dirnames, filenames in os.walk(destination, topdown=True):
        dirnames[:] = [d for d in dirnames if d not in keep]
        current = Path(dirpath)
        rel_dir = current.relative_to(destination)
        for name in list(dirnames) + filenames:
            src = source / rel_dir / name
            dst = current / name
            if not src.exists() or src.is_dir() != dst.is_dir():
                remove_path(dst)
                removed.append(relative_posix(dst, destination))
                if name in dirnames:
                    dirnames.remove(name)

    # Copy new and changed files
    for src in sorted(source.rglob('*')):
        rel = src.relative_to(source)
        dst = destination / rel
        if src.is_dir():
            dst.mkdir(parents=True, exist_ok=True)
            continue
        if dst.exists() and filecmp.cmp(src, dst, shallow=False):
            continue
        dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, dst)
        copied.append(rel.as_posix())

    return copied, sorted(removed)


class TemporaryWorkspace:
    """Temporary root removed on every exit path

    Removal happens when the context exits and, as a fallback, from an
    ``atexit`` handler in case the interpreter is torn down first.
    """

    def __init__(self, prefix: str = "wp-deploy-", keep: bool = False):
        self.prefix = prefix
        self.keep = keep
        self.path: Optional[Path] = None

    def __enter__(self) -> Path:
        self.path = Path(tempfile.mkdtemp(prefix=self.prefix))
        atexit.register(self.cleanup)
        logger.debug(f"Created temporary workspace {self.path}")
        return self.path

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.cleanup()
        atexit.unregister(self.cleanup)

    def cleanup(self) -> None:
        """Remove the temporary root unless asked to keep it"""
        if self.path is None:
            return
        if self.keep:
            logger.info(f"Keeping temporary workspace {self.path}")
            return
        shutil.rmtree(self.path, ignore_errors=True)
        logger.debug(f"Removed temporary workspace {self.path}")
        self.path = None
