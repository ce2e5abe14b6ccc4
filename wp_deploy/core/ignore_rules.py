"""Ignore-rule loading and evaluation"""

import fnmatch
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Optional, Sequence, Tuple

from ..constants import ALWAYS_EXCLUDED
from ..utils.file_utils import relative_posix, remove_path

logger = logging.getLogger(__name__)


def parse_rule_lines(lines: Iterable[str]) -> Tuple[List[str], List[str]]:
    """
    Parse ignore-file lines

    Blank lines and ``#`` comments are skipped. Negations (``!pattern``)
    are returned separately and are never used to re-include a path.
    One leading ``/`` is stripped from root-anchored patterns and a
    trailing ``/`` directory marker is dropped.

    Args:
        lines: Raw lines

    Returns:
        Tuple of (patterns, negations)
    """
    patterns = []
    negations = []

    for raw in lines:
        line = raw.strip()
        if not line or line.startswith('#'):
            continue
        if line.startswith('!'):
            negations.append(line[1:])
            continue
        if line.startswith('/'):
            line = line[1:]
        line = line.rstrip('/')
        if line:
            patterns.append(line)

    return patterns, negations


@dataclass
class IgnoreRules:
    """Ordered exclusion patterns aggregated from rule files

    A path is excluded when any of its components matches a pattern with
    shell-style name matching. Patterns containing ``/`` are matched
    against the whole relative path instead.
    """

    patterns: List[str] = field(default_factory=list)
    negations: List[str] = field(default_factory=list)
    always_excluded: List[str] = field(default_factory=lambda: list(ALWAYS_EXCLUDED))
    sources: List[str] = field(default_factory=list)

    @classmethod
    def from_files(cls, rule_files: Sequence[Path],
                   always_excluded: Optional[Sequence[str]] = None) -> 'IgnoreRules':
        """
        Load and union rules from files, in order

        Missing files are skipped.
        """
        rules = cls(always_excluded=list(always_excluded if always_excluded is not None
                                         else ALWAYS_EXCLUDED))

        for rule_file in rule_files:
            rule_file = Path(rule_file)
            if not rule_file.is_file():
                logger.debug(f"Ignore file not found, skipping: {rule_file}")
                continue

            with open(rule_file, 'r', encoding='utf-8', errors='replace') as f:
                patterns, negations = parse_rule_lines(f)

            for pattern in patterns:
                if pattern not in rules.patterns:
                    rules.patterns.append(pattern)
            rules.negations.extend(negations)
            rules.sources.append(str(rule_file))

            if negations:
                logger.warning(
                    f"{rule_file}: negation patterns are not supported and do not "
                    f"re-include files: {', '.join('!' + n for n in negations)}"
                )

        return rules

    @property
    def all_patterns(self) -> List[str]:
        """Rule-file patterns followed by the fixed exclusions"""
        return self.patterns + [p for p in self.always_excluded if p not in self.patterns]

    def is_excluded(self, relative_path: str) -> bool:
        """
        Check if a path relative to the snapshot root is excluded

        Args:
            relative_path: Forward- or OS-separated relative path

        Returns:
            True if any pattern matches
        """
        path = PurePosixPath(str(relative_path).replace(os.sep, '/'))
        parts = [p for p in path.parts if p not in ('', '.')]
        if not parts:
            return False
        full = '/'.join(parts)

        for pattern in self.all_patterns:
            if '/' in pattern:
                if fnmatch.fnmatchcase(full, pattern):
                    return True
            elif any(fnmatch.fnmatchcase(part, pattern) for part in parts):
                return True
        return False

    def apply(self, root: Path) -> List[str]:
        """
        Delete every excluded file and directory below a root

        Args:
            root: Snapshot directory

        Returns:
            Relative paths removed (directories are not descended into)
        """
        removed = []

        for dirpath, dirnames, filenames in os.walk(root):
            current = Path(dirpath)
            for name in sorted(dirnames):
                path = current / name
                if self.is_excluded(relative_posix(path, root)):
                    remove_path(path)
                    removed.append(relative_posix(path, root))
                    dirnames.remove(name)
            for name in sorted(filenames):
                path = current / name
                if self.is_excluded(relative_posix(path, root)):
                    remove_path(path)
                    removed.append(relative_posix(path, root))

        if removed:
            logger.info(f"Removed {len(removed)} ignored path(s) from snapshot")
        return removed
