"""Command line interface for wp-deploy"""

from .main import cli, main

__all__ = ["cli", "main"]
