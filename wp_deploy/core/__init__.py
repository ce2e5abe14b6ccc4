"""Core functionality for wp-deploy"""

from .version_extractor import ReleaseVersion, extract_field, resolve_version, read_release_version
from .ignore_rules import IgnoreRules, parse_rule_lines
from .snapshot import Snapshot, SnapshotMaterializer
from .reconciler import ChangeSet, Reconciler, ReconcileState

__all__ = [
    "ReleaseVersion",
    "extract_field",
    "resolve_version",
    "read_release_version",
    "IgnoreRules",
    "parse_rule_lines",
    "Snapshot",
    "SnapshotMaterializer",
    "ChangeSet",
    "Reconciler",
    "ReconcileState",
]
