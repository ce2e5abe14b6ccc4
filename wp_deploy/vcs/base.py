"""Version-control capability interfaces"""

import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence

from ..api.exceptions import CommandError

logger = logging.getLogger(__name__)


class StatusCode(Enum):
    """Working copy path status as reported by the centralized VCS"""
    NORMAL = " "
    MODIFIED = "M"
    ADDED = "A"
    DELETED = "D"
    REPLACED = "R"
    MISSING = "!"
    UNTRACKED = "?"
    IGNORED = "I"
    CONFLICTED = "C"
    OBSTRUCTED = "~"

    @classmethod
    def from_char(cls, char: str) -> 'StatusCode':
        """Map the first status column to a code (unknown flags read as normal)"""
        for code in cls:
            if code.value == char:
                return code
        return cls.NORMAL


@dataclass(frozen=True)
class StatusEntry:
    """One line of working copy status"""
    code: StatusCode
    path: Path


def run_command(argv: Sequence[str],
                step: str,
                cwd: Optional[Path] = None,
                interactive: bool = False,
                binary: bool = False,
                check: bool = True) -> subprocess.CompletedProcess:
    """
    Run an external command

    Args:
        argv: Command and arguments
        step: Human-readable step name used in diagnostics
        cwd: Working directory
        interactive: Inherit the terminal so the command can prompt
        binary: Capture stdout as bytes instead of text
        check: Raise CommandError on non-zero exit

    Returns:
        Completed process

    Raises:
        CommandError: If the command cannot be run or fails with check=True
    """
    argv = [str(a) for a in argv]
    logger.debug("Running %s: %s", step, " ".join(argv))

    try:
        if interactive:
            result = subprocess.run(argv, cwd=cwd)
        else:
            result = subprocess.run(
                argv,
                cwd=cwd,
                capture_output=True,
                text=not binary
            )
    except FileNotFoundError as e:
        raise CommandError(step, argv, 127, str(e))

    if check and result.returncode != 0:
        stderr = result.stderr if not interactive else ""
        if isinstance(stderr, bytes):
            stderr = stderr.decode("utf-8", errors="replace")
        raise CommandError(step, argv, result.returncode, stderr or "")

    return result


class DistributedVCS(ABC):
    """Source repository capabilities used by a release"""

    @abstractmethod
    def current_branch(self) -> Optional[str]:
        """Get the checked-out branch name"""
        pass

    @abstractmethod
    def is_working_tree_clean(self) -> bool:
        """Check that there are no uncommitted or untracked changes"""
        pass

    @abstractmethod
    def tag_exists(self, name: str) -> bool:
        """Check if a tag already exists locally"""
        pass

    @abstractmethod
    def create_annotated_tag(self, name: str, message: str) -> None:
        """Create an annotated tag at HEAD"""
        pass

    @abstractmethod
    def push_refs(self, branch: str, tag: str) -> None:
        """Push the branch and then the tag to the remote"""
        pass

    @abstractmethod
    def export_revision(self, ref: str, target_dir: Path) -> List[str]:
        """
        Write the file tree of an immutable revision into a directory

        Args:
            ref: Tag or commit to export
            target_dir: Existing destination directory

        Returns:
            Relative paths of the files written
        """
        pass


class CentralizedVCS(ABC):
    """Centralized repository capabilities used by a release"""

    @abstractmethod
    def checkout(self, url: str, local_dir: Path) -> None:
        """Check out a repository URL into a local directory"""
        pass

    @abstractmethod
    def remote_path_exists(self, url: str) -> bool:
        """Check if a URL exists in the remote repository"""
        pass

    @abstractmethod
    def list_directory(self, url: str) -> List[str]:
        """List immediate child names of a remote directory"""
        pass

    @abstractmethod
    def status(self, local_dir: Path) -> List[StatusEntry]:
        """Get the status of every non-normal path under a directory"""
        pass

    @abstractmethod
    def add(self, path: Path) -> None:
        """Schedule an unversioned path (recursively) for addition"""
        pass

    @abstractmethod
    def delete(self, path: Path, force: bool = True) -> None:
        """Schedule a versioned path for deletion"""
        pass

    @abstractmethod
    def set_ignore_property(self, directory: Path, patterns: Sequence[str]) -> None:
        """Set the ignore property of a directory"""
        pass

    @abstractmethod
    def diff(self, local_dir: Path) -> str:
        """Get a textual diff of local changes"""
        pass

    @abstractmethod
    def commit(self, local_dir: Path, username: str, message: str) -> None:
        """Commit all scheduled changes under a directory atomically"""
        pass

    @abstractmethod
    def copy(self, src_url: str, dst_url: str, message: str, username: str) -> None:
        """Copy one remote path to another in a single server-side commit"""
        pass
