"""Release command"""

import sys

import click
from rich.console import Console

from ..utils.interactive import RichPrompter
from ..utils.output import format_error, format_release_result
from ...api.exceptions import DeployToolError, UserCancelledError
from ...constants import ENV_SVN_USER
from ...services.release_service import ReleaseOptions, ReleaseService
from ...vcs.git import GitClient
from ...vcs.svn import SvnClient

console = Console()


def build_service(ctx, allowed_branches=(), non_interactive: bool = False) -> ReleaseService:
    """Create a release service for the repository in the CLI context"""
    config = ctx.obj.load_config(allowed_branches)
    repo_root = ctx.obj.repo_root
    return ReleaseService(
        config=config,
        repo_root=repo_root,
        git=GitClient(repo_root, remote=config.git_remote),
        svn=SvnClient(non_interactive=non_interactive),
        prompter=RichPrompter(console)
    )


@click.command()
@click.option('--slug', '-s', default=None, help='Plugin slug (prompted if omitted)')
@click.option('--svn-user', '-u', default=None, envvar=ENV_SVN_USER,
              help='wordpress.org SVN username (prompted if omitted)')
@click.option('--message', '-m', default=None, help='Release commit message (prompted if omitted)')
@click.option('--yes', '-y', 'assume_yes', is_flag=True,
              help='Commit without the final confirmation prompt')
@click.option('--allow-missing-banner', is_flag=True,
              help='Sync assets even if no banner-* image is present')
@click.option('--allowed-branch', '-b', multiple=True,
              help='Branch allowed to release from (repeatable, overrides config)')
@click.option('--dry-run', is_flag=True,
              help='Reconcile locally and show changes without tagging or committing')
@click.option('--keep-workdir', is_flag=True,
              help='Keep the temporary SVN working copy for inspection')
@click.option('--non-interactive', is_flag=True,
              help='Never let svn prompt (credentials must be cached)')
@click.pass_context
def release(ctx, slug, svn_user, message, assume_yes, allow_missing_banner,
            allowed_branch, dry_run, keep_workdir, non_interactive):
    """Release the current version to the plugin SVN repository

    Checks that readme.txt "Stable tag:" and the plugin header "Version:"
    agree, tags and pushes the release in Git, then syncs SVN trunk with
    the tagged tree. After showing the pending changes it asks for
    confirmation, commits trunk and assets together and creates
    tags/<version>.

    Examples:

        # Fully interactive
        wp-deploy release

        # Scripted
        wp-deploy release --slug my-plugin -u me -m "Release 1.2.0" --yes

        # Preview what would change
        wp-deploy release --slug my-plugin -u me -m test --dry-run
    """
    options = ReleaseOptions(
        slug=slug,
        svn_user=svn_user,
        message=message,
        assume_yes=assume_yes,
        allow_missing_banner=allow_missing_banner,
        dry_run=dry_run,
        keep_workdir=keep_workdir
    )

    try:
        service = build_service(ctx, allowed_branch, non_interactive)
        result = service.run(options)

    except UserCancelledError as e:
        console.print(f"[yellow]{e}[/yellow]")
        sys.exit(1)

    except DeployToolError as e:
        format_error(e)
        if ctx.obj.debug:
            console.print_exception()
        sys.exit(1)

    format_release_result(result)
