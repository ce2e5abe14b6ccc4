"""Utility functions for wp-deploy"""

from .file_utils import (
    relative_posix,
    remove_path,
    clear_tree,
    prune_empty_dirs,
    mirror_tree,
    TemporaryWorkspace,
)

__all__ = [
    'relative_posix',
    'remove_path',
    'clear_tree',
    'prune_empty_dirs',
    'mirror_tree',
    'TemporaryWorkspace',
]
