"""Release precondition check command"""

import sys

import click
from rich.console import Console

from .release import build_service
from ..utils.output import format_checks, format_error, print_warning
from ...api.exceptions import DeployToolError

console = Console()


@click.command()
@click.option('--slug', '-s', required=True, help='Plugin slug')
@click.option('--allowed-branch', '-b', multiple=True,
              help='Branch allowed to release from (repeatable, overrides config)')
@click.option('--offline', is_flag=True, help='Skip the SVN tag lookup')
@click.pass_context
def check(ctx, slug, allowed_branch, offline):
    """Check that the repository is ready to release

    Runs every precondition the release command enforces and reports
    all of them. Nothing is tagged, pushed or checked out.

    Examples:

        # Check everything
        wp-deploy check --slug my-plugin

        # Without network access
        wp-deploy check --slug my-plugin --offline
    """
    try:
        service = build_service(ctx, allowed_branch, non_interactive=True)
        preflight = service.preflight(slug, stop_on_failure=False, check_remote=not offline)
    except DeployToolError as e:
        format_error(e)
        sys.exit(1)

    format_checks(preflight.checks, title=f"Release Checks: {slug}")
    for warning in preflight.warnings:
        print_warning(warning)

    if not preflight.passed:
        failed = sum(1 for c in preflight.checks if not c.passed)
        console.print(f"\n[red]{failed} check(s) failed[/red]")
        sys.exit(1)

    console.print(f"\n[green]Ready to release {slug} {preflight.version}[/green]")
