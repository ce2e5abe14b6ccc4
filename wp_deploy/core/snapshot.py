"""Snapshot materialization of an immutable revision"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from .ignore_rules import IgnoreRules
from ..api.exceptions import SnapshotError
from ..constants import VCS_METADATA_DIRS
from ..utils.file_utils import clear_tree, prune_empty_dirs
from ..vcs.base import DistributedVCS

logger = logging.getLogger(__name__)


@dataclass
class Snapshot:
    """What a materialization did to its target directory"""
    revision: str
    target: Path
    cleared: List[str] = field(default_factory=list)
    pruned: List[str] = field(default_factory=list)
    exported: List[str] = field(default_factory=list)
    excluded: List[str] = field(default_factory=list)

    @property
    def files(self) -> List[str]:
        """Exported files that survived exclusion"""
        excluded = set(self.excluded)
        return [
            f for f in self.exported
            if not any(f == e or f.startswith(e + '/') for e in excluded)
        ]


class SnapshotMaterializer:
    """Produces an exact, filtered file tree for a revision

    The target is emptied of every regular file outside version-control
    metadata and then pruned of empty directories before export, so a
    non-empty target ends up byte-identical to an empty one.
    """

    def __init__(self, git: DistributedVCS, rules: IgnoreRules):
        self.git = git
        self.rules = rules

    def materialize(self, revision: str, target: Path) -> Snapshot:
        """
        Materialize a revision into a directory

        Args:
            revision: Immutable revision (tag) to export
            target: Destination directory (created if needed)

        Returns:
            Snapshot describing the result

        Raises:
            SnapshotError: If the target is not a directory
            CommandError: If the export fails
        """
        target = Path(target)
        if target.exists() and not target.is_dir():
            raise SnapshotError(f"Snapshot target is not a directory: {target}")
        target.mkdir(parents=True, exist_ok=True)

        snapshot = Snapshot(revision=revision, target=target)
        snapshot.cleared = clear_tree(target, VCS_METADATA_DIRS)
        snapshot.pruned = prune_empty_dirs(target, VCS_METADATA_DIRS)
        if snapshot.cleared:
            logger.debug(f"Cleared {len(snapshot.cleared)} stale files from {target}")

        snapshot.exported = self.git.export_revision(revision, target)
        snapshot.excluded = self.rules.apply(target)

        logger.info(
            f"Materialized {revision}: {len(snapshot.files)} files "
            f"({len(snapshot.excluded)} excluded)"
        )
        return snapshot
