# wp_deploy/cli/commands/__init__.py
"""CLI commands"""

from . import release
from . import check

__all__ = [
    "release",
    "check",
]
