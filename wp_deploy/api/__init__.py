"""API layer for wp-deploy"""

from .exceptions import (
    DeployToolError,
    ConfigError,
    PreconditionError,
    SourceFileMissingError,
    DirtyWorkingTreeError,
    BranchNotAllowedError,
    DuplicateTagError,
    VersionError,
    VersionNotFound,
    PlaceholderVersion,
    VersionMismatch,
    AssetIntegrityError,
    SnapshotError,
    ReconcileStateError,
    CommandError,
    UserCancelledError,
)

__all__ = [
    "DeployToolError",
    "ConfigError",
    "PreconditionError",
    "SourceFileMissingError",
    "DirtyWorkingTreeError",
    "BranchNotAllowedError",
    "DuplicateTagError",
    "VersionError",
    "VersionNotFound",
    "PlaceholderVersion",
    "VersionMismatch",
    "AssetIntegrityError",
    "SnapshotError",
    "ReconcileStateError",
    "CommandError",
    "UserCancelledError",
]
