"""Working copy reconciliation against a fresh snapshot

The reconciler walks a Subversion-style working copy through a fixed
sequence of states::

    CLEAN -> DIFFED -> STAGED -> COMMITTED
       \\        \\        \\
        +--------+--------+--> ABORTED

A snapshot is written over ``trunk`` in place, the VCS status then
classifies every discrepancy, missing paths are deleted and untracked
paths added. The distribution asset subtree is moved out of trunk into
its sibling directory and reconciled the same way. Trunk and assets are
committed together and trunk is finally copied to ``tags/<version>``.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, FrozenSet, List, Optional

from .snapshot import Snapshot, SnapshotMaterializer
from ..api.exceptions import AssetIntegrityError, CommandError, DeployToolError, ReconcileStateError
from ..constants import SVN_TAGS_DIR, SVN_TRUNK_DIR
from ..models.config import AssetConfig
from ..models.result import PathFailure, ReconcileResult
from ..utils.file_utils import mirror_tree, relative_posix, remove_path
from ..vcs.base import CentralizedVCS, StatusCode

logger = logging.getLogger(__name__)


class ReconcileState(Enum):
    """Reconciliation lifecycle"""
    CLEAN = "clean"
    DIFFED = "diffed"
    STAGED = "staged"
    COMMITTED = "committed"
    ABORTED = "aborted"


@dataclass(frozen=True)
class ChangeSet:
    """Status classification of a directory

    A path carries exactly one status code, so ``missing`` and
    ``untracked`` can never overlap.
    """
    missing: FrozenSet[Path]
    untracked: FrozenSet[Path]
    modified: FrozenSet[Path]

    @classmethod
    def from_status(cls, vcs: CentralizedVCS, directory: Path) -> 'ChangeSet':
        missing, untracked, modified = set(), set(), set()
        for entry in vcs.status(directory):
            if entry.code == StatusCode.MISSING:
                missing.add(entry.path)
            elif entry.code == StatusCode.UNTRACKED:
                untracked.add(entry.path)
            elif entry.code in (StatusCode.MODIFIED, StatusCode.REPLACED):
                modified.add(entry.path)
        return cls(frozenset(missing), frozenset(untracked), frozenset(modified))

    @property
    def is_empty(self) -> bool:
        return not (self.missing or self.untracked or self.modified)


def _outermost(paths) -> List[Path]:
    """Drop paths whose ancestor is also present"""
    result = []
    for path in sorted(paths, key=lambda p: (len(p.parts), str(p))):
        if not any(parent in result for parent in path.parents):
            result.append(path)
    return sorted(result)


class Reconciler:
    """Reconciles a centralized-repository working copy with a snapshot"""

    def __init__(self,
                 svn: CentralizedVCS,
                 working_copy: Path,
                 repo_url: str,
                 assets: Optional[AssetConfig] = None,
                 confirm_missing_banner: Optional[Callable[[Path], bool]] = None):
        """
        Initialize reconciler

        Args:
            svn: Centralized VCS client
            working_copy: Root of the checked-out repository
            repo_url: Remote URL of that root
            assets: Asset relocation settings
            confirm_missing_banner: Asked whether to continue when the asset
                subtree has no banner; declining (or no callback) aborts
        """
        self.svn = svn
        self.working_copy = Path(working_copy)
        self.repo_url = repo_url.rstrip('/')
        self.assets = assets or AssetConfig()
        self.confirm_missing_banner = confirm_missing_banner
        self.state = ReconcileState.CLEAN
        self.changes: Optional[ChangeSet] = None
        self.result = ReconcileResult()

    @property
    def trunk(self) -> Path:
        return self.working_copy / SVN_TRUNK_DIR

    @property
    def asset_source(self) -> Path:
        return self.trunk / self.assets.source_dir

    @property
    def asset_target(self) -> Path:
        return self.working_copy / self.assets.target_dir

    def _require(self, *states: ReconcileState) -> None:
        if self.state not in states:
            expected = ' or '.join(s.value for s in states)
            raise ReconcileStateError(
                f"Reconciler is {self.state.value}, expected {expected}"
            )

    def _rel(self, path: Path) -> str:
        return relative_posix(path, self.working_copy)

    def abort(self, reason: str) -> None:
        """Move to the terminal aborted state"""
        logger.warning(f"Reconciliation aborted: {reason}")
        self.state = ReconcileState.ABORTED

    # CLEAN -> DIFFED

    def apply_snapshot(self, materializer: SnapshotMaterializer, revision: str) -> Snapshot:
        """
        Write a revision over trunk and classify the result

        Args:
            materializer: Snapshot materializer
            revision: Revision to export

        Returns:
            The materialized snapshot
        """
        self._require(ReconcileState.CLEAN)
        snapshot = materializer.materialize(revision, self.trunk)
        self.detect_changes()
        return snapshot

    def detect_changes(self) -> ChangeSet:
        """Classify trunk after the snapshot has been written"""
        self._require(ReconcileState.CLEAN)
        self.changes = ChangeSet.from_status(self.svn, self.trunk)
        self.result.modified = sorted(self._rel(p) for p in self.changes.modified)
        self.state = ReconcileState.DIFFED
        logger.info(
            f"Detected {len(self.changes.missing)} missing, "
            f"{len(self.changes.untracked)} untracked, "
            f"{len(self.changes.modified)} modified path(s) in trunk"
        )
        return self.changes

    # DIFFED -> STAGED

    def _sweep(self, changes: ChangeSet, deleted: List[str], added: List[str]) -> None:
        """Delete missing and add untracked paths, one at a time

        A failing path is recorded and the sweep carries on.
        """
        for path in _outermost(changes.missing):
            try:
                self.svn.delete(path, force=True)
                deleted.append(self._rel(path))
            except CommandError as e:
                logger.warning(f"Could not delete {self._rel(path)}: {e}")
                self.result.failures.append(PathFailure(self._rel(path), "delete", str(e)))

        for path in _outermost(changes.untracked):
            try:
                self.svn.add(path)
                added.append(self._rel(path))
            except CommandError as e:
                logger.warning(f"Could not add {self._rel(path)}: {e}")
                self.result.failures.append(PathFailure(self._rel(path), "add", str(e)))

    def stage(self) -> ReconcileResult:
        """
        Register every add and delete with the VCS, then relocate assets

        Returns:
            Reconciliation result; per-path failures are in ``failures``

        Raises:
            AssetIntegrityError: Asset subtree has no banner and continuing
                was not confirmed
            CommandError: Removing the asset subtree from trunk failed

        Any error from asset relocation leaves the reconciler aborted.
        """
        self._require(ReconcileState.DIFFED)
        self._sweep(self.changes, self.result.deleted, self.result.added)

        try:
            self.relocate_assets()
        except DeployToolError as e:
            self.abort(str(e))
            raise

        self.state = ReconcileState.STAGED
        if self.result.failures:
            logger.warning(f"{len(self.result.failures)} path operation(s) failed during staging")
        return self.result

    def _has_banner(self) -> bool:
        return any(self.asset_source.glob(self.assets.banner_pattern))

    def relocate_assets(self) -> bool:
        """
        Move the asset subtree out of trunk into its sibling directory

        Returns:
            True if an asset subtree was found and relocated
        """
        source = self.asset_source
        if not source.is_dir():
            return False

        if not self._has_banner():
            self.result.banner_missing = True
            logger.warning(f"No '{self.assets.banner_pattern}' asset found in {self._rel(source)}")
            if self.confirm_missing_banner is None or not self.confirm_missing_banner(source):
                raise AssetIntegrityError(self._rel(source), self.assets.banner_pattern)

        copied, removed = mirror_tree(source, self.asset_target)
        logger.info(
            f"Mirrored {self._rel(source)} to {self._rel(self.asset_target)}: "
            f"{len(copied)} copied, {len(removed)} removed"
        )

        asset_changes = ChangeSet.from_status(self.svn, self.asset_target)
        self._sweep(asset_changes, self.result.assets_deleted, self.result.assets_added)

        # Added paths are reverted, committed ones scheduled for deletion
        failed_adds = {f.path for f in self.result.failures if f.action == "add"}
        try:
            self.svn.delete(source, force=True)
        except CommandError:
            # Never versioned, so removing it from disk is enough
            if self._rel(source) not in failed_adds:
                raise
        if source.exists():
            remove_path(source)
        self.result.added = [
            p for p in self.result.added
            if not (p == self._rel(source) or p.startswith(self._rel(source) + '/'))
        ]

        self.result.assets_relocated = True
        return True

    # STAGED -> COMMITTED

    def commit(self, username: str, message: str, version: str) -> str:
        """
        Commit trunk and assets in one revision, then tag trunk

        Args:
            username: Centralized repository user
            message: Commit message
            version: Release version; the tag path is ``tags/<version>``

        Returns:
            URL of the created tag
        """
        self._require(ReconcileState.STAGED)
        self.svn.commit(self.working_copy, username, message)

        tag_url = f"{self.repo_url}/{SVN_TAGS_DIR}/{version}"
        self.svn.copy(
            f"{self.repo_url}/{SVN_TRUNK_DIR}",
            tag_url,
            f"Tag {version}",
            username
        )
        self.state = ReconcileState.COMMITTED
        logger.info(f"Tagged {version} at {tag_url}")
        return tag_url
