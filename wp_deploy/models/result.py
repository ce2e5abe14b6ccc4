"""Operation result models"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class PathFailure:
    """A single add/delete that the centralized VCS rejected"""
    path: str
    action: str  # "add" or "delete"
    error: str

    def __str__(self) -> str:
        return f"{self.action} {self.path}: {self.error}"


@dataclass
class ReconcileResult:
    """Outcome of reconciling a working copy against a snapshot"""
    added: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    modified: List[str] = field(default_factory=list)
    assets_added: List[str] = field(default_factory=list)
    assets_deleted: List[str] = field(default_factory=list)
    assets_relocated: bool = False
    banner_missing: bool = False
    failures: List[PathFailure] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        """Check if any per-path operation failed"""
        return bool(self.failures)

    @property
    def change_count(self) -> int:
        """Total number of staged or detected changes"""
        return (len(self.added) + len(self.deleted) + len(self.modified)
                + len(self.assets_added) + len(self.assets_deleted))


@dataclass
class CheckResult:
    """Outcome of a single release precondition check"""
    name: str
    passed: bool
    message: str


@dataclass
class ReleaseResult:
    """Release operation result"""
    slug: str
    version: Optional[str] = None
    git_tag: Optional[str] = None
    svn_tag_url: Optional[str] = None
    committed: bool = False
    dry_run: bool = False
    reconcile: Optional[ReconcileResult] = None
    warnings: List[str] = field(default_factory=list)
    duration: float = 0.0
