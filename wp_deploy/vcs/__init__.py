"""Version-control collaborators for wp-deploy"""

from .base import CentralizedVCS, DistributedVCS, StatusCode, StatusEntry, run_command
from .git import GitClient, find_repository_root
from .svn import SvnClient, parse_status
from .memory import MemoryGit, MemorySvn

__all__ = [
    'CentralizedVCS',
    'DistributedVCS',
    'StatusCode',
    'StatusEntry',
    'run_command',
    'GitClient',
    'find_repository_root',
    'SvnClient',
    'parse_status',
    'MemoryGit',
    'MemorySvn',
]
