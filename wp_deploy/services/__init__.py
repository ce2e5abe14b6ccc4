"""Business logic services for wp-deploy"""

from .config_service import ConfigService
from .prompter import Prompter
from .release_service import Preflight, ReleaseOptions, ReleaseService

__all__ = [
    "ConfigService",
    "Prompter",
    "Preflight",
    "ReleaseOptions",
    "ReleaseService",
]
