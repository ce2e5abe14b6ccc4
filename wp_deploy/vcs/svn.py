"""Subversion command-line client"""

import logging
from pathlib import Path
from typing import List, Sequence

from .base import CentralizedVCS, StatusCode, StatusEntry, run_command
from ..api.exceptions import CommandError

logger = logging.getLogger(__name__)

# `svn status` prints seven flag columns and a space before the path
STATUS_PATH_COLUMN = 8


def parse_status(output: str, base_dir: Path) -> List[StatusEntry]:
    """
    Parse ``svn status`` output

    Args:
        output: Raw command output
        base_dir: Directory the command ran against; relative paths are joined to it

    Returns:
        Status entries in output order
    """
    entries = []
    for line in output.splitlines():
        if len(line) <= STATUS_PATH_COLUMN or line.startswith(('Performing', '>', '---')):
            continue
        # Tree-conflict detail lines are indented
        if line.startswith(' ') and not line[:STATUS_PATH_COLUMN].strip():
            continue
        path = Path(line[STATUS_PATH_COLUMN:].strip())
        if not path.is_absolute():
            path = base_dir / path
        entries.append(StatusEntry(StatusCode.from_char(line[0]), path))
    return entries


class SvnClient(CentralizedVCS):
    """Subprocess-backed Subversion implementation"""

    def __init__(self, non_interactive: bool = False):
        """
        Initialize Subversion client

        Args:
            non_interactive: Pass --non-interactive so svn never prompts
        """
        self.non_interactive = non_interactive

    def _svn(self, *args: str, step: str, **kwargs):
        argv = ['svn', *args]
        if self.non_interactive:
            argv.append('--non-interactive')
        return run_command(argv, step=step, **kwargs)

    def checkout(self, url: str, local_dir: Path) -> None:
        logger.info(f"Checking out {url}")
        self._svn('checkout', '--quiet', url, str(local_dir), step="svn checkout")

    def remote_path_exists(self, url: str) -> bool:
        result = self._svn('info', url, step="svn info", check=False)
        return result.returncode == 0

    def list_directory(self, url: str) -> List[str]:
        try:
            result = self._svn('list', url, step="svn list")
        except CommandError:
            return []
        return [line.rstrip('/') for line in result.stdout.splitlines() if line.strip()]

    def status(self, local_dir: Path) -> List[StatusEntry]:
        result = self._svn('status', str(local_dir), step="svn status")
        return parse_status(result.stdout, Path(local_dir))

    def add(self, path: Path) -> None:
        self._svn('add', '--quiet', '--parents', str(path), step="svn add")

    def delete(self, path: Path, force: bool = True) -> None:
        args = ['delete', '--quiet']
        if force:
            args.append('--force')
        self._svn(*args, str(path), step="svn delete")

    def set_ignore_property(self, directory: Path, patterns: Sequence[str]) -> None:
        self._svn(
            'propset', 'svn:ignore', '\n'.join(patterns), str(directory),
            step="svn propset"
        )

    def diff(self, local_dir: Path) -> str:
        result = self._svn('diff', str(local_dir), step="svn diff")
        return result.stdout

    def commit(self, local_dir: Path, username: str, message: str) -> None:
        logger.info(f"Committing {local_dir}")
        self._svn(
            'commit', str(local_dir), '--username', username, '-m', message,
            step="svn commit",
            interactive=True
        )

    def copy(self, src_url: str, dst_url: str, message: str, username: str) -> None:
        logger.info(f"Copying {src_url} {dst_url}")
        self._svn(
            'copy', src_url, dst_url, '-m', message, '--username', username,
            step="svn copy",
            interactive=True
        )
