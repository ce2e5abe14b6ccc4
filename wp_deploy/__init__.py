"""wp-deploy - Release WordPress plugins from Git to the plugin SVN repository.

The release tags the Git repository, checks out the plugin's SVN repository,
reconciles trunk against the tagged tree, relocates distribution assets,
and commits and tags the result in a single reviewed step.
"""

from .__version__ import __version__, __version_info__, __license__

# Core
from .core import (
    IgnoreRules,
    Reconciler,
    ReconcileState,
    ReleaseVersion,
    SnapshotMaterializer,
    resolve_version,
)
from .services import ReleaseOptions, ReleaseService

# Data models
from .models import DeployConfig, AssetConfig, ReconcileResult, ReleaseResult, PathFailure

# Exceptions
from .api.exceptions import (
    DeployToolError,
    ConfigError,
    PreconditionError,
    VersionNotFound,
    PlaceholderVersion,
    VersionMismatch,
    DuplicateTagError,
    AssetIntegrityError,
    CommandError,
    UserCancelledError,
)

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__license__",

    # Core
    "IgnoreRules",
    "Reconciler",
    "ReconcileState",
    "ReleaseVersion",
    "SnapshotMaterializer",
    "resolve_version",
    "ReleaseOptions",
    "ReleaseService",

    # Data models
    "DeployConfig",
    "AssetConfig",
    "ReconcileResult",
    "ReleaseResult",
    "PathFailure",

    # Exceptions
    "DeployToolError",
    "ConfigError",
    "PreconditionError",
    "VersionNotFound",
    "PlaceholderVersion",
    "VersionMismatch",
    "DuplicateTagError",
    "AssetIntegrityError",
    "CommandError",
    "UserCancelledError",
]
