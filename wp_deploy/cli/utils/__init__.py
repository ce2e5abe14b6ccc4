"""CLI utility functions"""

from .interactive import RichPrompter
from .output import (
    show_reconcile_summary,
    format_release_result,
    format_checks,
    format_error,
)

__all__ = [
    'RichPrompter',
    'show_reconcile_summary',
    'format_release_result',
    'format_checks',
    'format_error',
]
