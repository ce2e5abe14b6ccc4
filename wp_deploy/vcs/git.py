"""Git command-line client"""

import io
import logging
import tarfile
from pathlib import Path, PurePosixPath
from typing import List, Optional

from .base import DistributedVCS, run_command
from ..api.exceptions import CommandError, SnapshotError
from ..constants import DEFAULT_GIT_REMOTE

logger = logging.getLogger(__name__)


def find_repository_root(path: Path) -> Optional[Path]:
    """
    Find the top level of the Git repository containing a path

    Args:
        path: Any directory inside the repository

    Returns:
        Repository root or None if not inside a repository
    """
    try:
        result = run_command(
            ['git', 'rev-parse', '--show-toplevel'],
            step="git rev-parse",
            cwd=path
        )
    except CommandError:
        return None
    return Path(result.stdout.strip())


class GitClient(DistributedVCS):
    """Subprocess-backed Git implementation"""

    def __init__(self, repo_root: Path, remote: str = DEFAULT_GIT_REMOTE):
        """
        Initialize Git client

        Args:
            repo_root: Repository root directory
            remote: Remote that receives the branch and tag
        """
        self.repo_root = Path(repo_root)
        self.remote = remote

    def _git(self, *args: str, step: str, **kwargs):
        return run_command(['git', *args], step=step, cwd=self.repo_root, **kwargs)

    def current_branch(self) -> Optional[str]:
        try:
            result = self._git('rev-parse', '--abbrev-ref', 'HEAD', step="git rev-parse")
        except CommandError:
            return None
        return result.stdout.strip() or None

    def is_working_tree_clean(self) -> bool:
        result = self._git('status', '--porcelain', step="git status")
        return not result.stdout.strip()

    def tag_exists(self, name: str) -> bool:
        result = self._git(
            'rev-parse', '--verify', '--quiet', f'refs/tags/{name}',
            step="git rev-parse",
            check=False
        )
        return result.returncode == 0

    def create_annotated_tag(self, name: str, message: str) -> None:
        logger.info(f"Creating git tag {name}")
        self._git('tag', '-a', name, '-m', message, step="git tag")

    def push_refs(self, branch: str, tag: str) -> None:
        logger.info(f"Pushing {branch} and {tag} to {self.remote}")
        self._git('push', self.remote, branch, step="git push branch", interactive=True)
        self._git('push', self.remote, tag, step="git push tag", interactive=True)

    def export_revision(self, ref: str, target_dir: Path) -> List[str]:
        """Export via ``git archive`` so only committed content is written"""
        result = self._git('archive', '--format=tar', ref, step="git archive", binary=True)

        written = []
        try:
            with tarfile.open(fileobj=io.BytesIO(result.stdout), mode='r:') as tar:
                for member in tar.getmembers():
                    if member.type == tarfile.XGLTYPE:
                        continue
                    name = PurePosixPath(member.name)
                    if name.is_absolute() or '..' in name.parts:
                        raise SnapshotError(f"Refusing unsafe archive member: {member.name}")
                    tar.extract(member, target_dir, filter='data')
                    if member.isfile():
                        written.append(name.as_posix())
        except tarfile.TarError as e:
            # Includes members rejected by the data filter
            raise SnapshotError(f"Cannot extract {ref}: {e}")

        logger.debug(f"Exported {len(written)} files from {ref}")
        return written
