# wp_deploy/cli/main.py
"""Main CLI entry point for wp-deploy"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

import click
from rich.console import Console
from rich.logging import RichHandler

from ..__version__ import __version__
from ..api.exceptions import DeployToolError, PreconditionError
from ..constants import APP_NAME, ENV_LOG_LEVEL, ErrorCode, LOG_FORMAT
from ..models.config import DeployConfig
from ..services.config_service import ConfigService
from ..vcs.git import find_repository_root

# Import all commands
from .commands import release, check

console = Console()


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Setup logging configuration

    Args:
        verbose: Enable verbose output (INFO level)
        debug: Enable debug output (DEBUG level)
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = getattr(logging, os.environ.get(ENV_LOG_LEVEL, "WARNING").upper(), logging.WARNING)

    # Configure rich handler
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            RichHandler(
                console=console,
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
                tracebacks_suppress=[click]
            )
        ],
        force=True
    )


class Context:
    """CLI context object with lazy repository initialization"""

    def __init__(self, repo: Optional[Path] = None, config_path: Optional[Path] = None):
        self._repo = repo
        self._config_path = config_path
        self._repo_root: Optional[Path] = None
        self._config_service: Optional[ConfigService] = None
        self.verbose: bool = False
        self.debug: bool = False

    @property
    def repo_root(self) -> Path:
        """Get the Git repository root (lazy loading)

        Raises:
            PreconditionError: Not inside a Git repository
        """
        if self._repo_root is None:
            start = self._repo or Path.cwd()
            root = find_repository_root(start)
            if root is None:
                raise PreconditionError(
                    f"Not inside a Git repository: {start}", ErrorCode.SOURCE_NOT_FOUND
                )
            self._repo_root = root
            if self.debug:
                console.print(f"[dim]Repository root: {root}[/dim]")
        return self._repo_root

    def load_config(self, allowed_branches: Sequence[str] = ()) -> DeployConfig:
        """Load configuration for the repository with overrides applied"""
        if self._config_service is None:
            self._config_service = ConfigService(self.repo_root, self._config_path)
        return self._config_service.with_overrides(allowed_branches)


@click.group(name=APP_NAME)
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('-d', '--debug', is_flag=True, help='Enable debug output')
@click.option('-q', '--quiet', is_flag=True, help='Suppress all output except errors')
@click.option('--repo', type=click.Path(exists=True, file_okay=False, path_type=Path),
              default=None, help='Git repository (default: current directory)')
@click.option('--config', 'config_path', type=click.Path(dir_okay=False, path_type=Path),
              default=None, help='Configuration file (default: <repo>/.wp-deploy.yaml)')
@click.version_option(version=__version__, prog_name=APP_NAME)
@click.pass_context
def cli(ctx, verbose, debug, quiet, repo, config_path):
    """wp-deploy - Release a WordPress plugin from Git to SVN

    Tags the release in Git, checks out the plugin's wordpress.org SVN
    repository, syncs trunk with the tagged tree, moves distribution
    assets to the assets directory, and commits and tags the release
    after you review the changes.
    """
    # Setup logging
    if quiet:
        logging.disable(logging.CRITICAL)
    else:
        setup_logging(verbose=verbose, debug=debug)

    ctx.obj = Context(repo=repo, config_path=config_path)
    ctx.obj.verbose = verbose
    ctx.obj.debug = debug


# Register commands
cli.add_command(release.release)
cli.add_command(check.check)


def main():
    """Main entry point for the CLI application

    This function handles:
    - Keyboard interrupts
    - Release errors not handled by a command
    - Unexpected exceptions with proper error display
    """
    try:
        cli(prog_name=APP_NAME)

    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)

    except DeployToolError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    except Exception as e:
        console.print(f"[red]Unexpected error: {e}[/red]")
        if '--debug' in sys.argv or '-d' in sys.argv:
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
