"""Data models for wp-deploy"""

from .config import DeployConfig, AssetConfig
from .result import PathFailure, ReconcileResult, CheckResult, ReleaseResult

__all__ = [
    # Config models
    "DeployConfig",
    "AssetConfig",

    # Result models
    "PathFailure",
    "ReconcileResult",
    "CheckResult",
    "ReleaseResult",
]
