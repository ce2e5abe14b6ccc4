# wp_deploy/cli/utils/output.py
"""Output formatting utilities"""

from pathlib import Path
from typing import List

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from ...api.exceptions import DeployToolError
from ...constants import EMOJI_ERROR, EMOJI_SUCCESS, EMOJI_WARNING
from ...models.result import CheckResult, ReconcileResult, ReleaseResult

console = Console()


def show_reconcile_summary(result: ReconcileResult,
                           diff: str,
                           working_copy: Path,
                           console: Console = console) -> None:
    """Show pending SVN changes before the commit gate"""
    console.print(f"\n[bold]SVN diff for trunk:[/bold] [dim]{working_copy}[/dim]")
    if diff.strip():
        console.print(Syntax(diff, "diff", theme="monokai", line_numbers=False))
    else:
        console.print("[dim]No content changes in tracked trunk files[/dim]")

    table = Table(title="Pending Changes", box=box.SIMPLE)
    table.add_column("Change", style="cyan")
    table.add_column("Path")

    rows = (
        [("[green]add[/green]", p) for p in result.added]
        + [("[red]delete[/red]", p) for p in result.deleted]
        + [("[yellow]modify[/yellow]", p) for p in result.modified]
        + [("[green]asset add[/green]", p) for p in result.assets_added]
        + [("[red]asset delete[/red]", p) for p in result.assets_deleted]
    )
    for change, path in rows:
        table.add_row(change, path)

    if rows:
        console.print(table)
    else:
        console.print("[yellow]No changes detected[/yellow]")

    if result.banner_missing:
        console.print(f"[yellow]{EMOJI_WARNING} Assets are being synced without a banner[/yellow]")

    if result.failures:
        console.print(f"\n[bold red]{EMOJI_ERROR} {len(result.failures)} path operation(s) failed:[/bold red]")
        for failure in result.failures:
            console.print(f"  • {failure}")


def format_release_result(result: ReleaseResult) -> None:
    """Format and display release operation result"""
    if result.dry_run:
        title = "Dry Run"
        headline = f"[yellow]{EMOJI_WARNING}[/yellow] Dry run complete, nothing was committed"
    else:
        title = "Release Result"
        headline = f"[green]{EMOJI_SUCCESS}[/green] Deployment complete!"

    lines = [
        headline,
        "",
        f"[bold]Plugin:[/bold] {result.slug}",
        f"[bold]Version:[/bold] {result.version}",
    ]
    if result.git_tag and not result.dry_run:
        lines.append(f"[bold]Git tag:[/bold] {result.git_tag}")
    if result.svn_tag_url:
        lines.append(f"[bold]SVN tag:[/bold] {result.svn_tag_url}")
    if result.reconcile:
        lines.append(f"[bold]Changes:[/bold] {result.reconcile.change_count}")
        if result.reconcile.assets_relocated:
            lines.append("[bold]Assets:[/bold] synced")
    lines.append(f"[bold]Duration:[/bold] {result.duration:.1f}s")

    console.print(Panel("\n".join(lines), title=title,
                        border_style="yellow" if result.dry_run else "green"))

    for warning in result.warnings:
        print_warning(warning)


def format_checks(checks: List[CheckResult], title: str = "Release Checks") -> None:
    """Display precondition check results"""
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("Check", style="cyan")
    table.add_column("Status", justify="center")
    table.add_column("Details")

    for check in checks:
        status = f"[green]{EMOJI_SUCCESS} PASS[/green]" if check.passed else f"[red]{EMOJI_ERROR} FAIL[/red]"
        table.add_row(check.name, status, check.message)

    console.print(table)


def format_error(error: DeployToolError) -> None:
    """Display a release failure with the step it happened in"""
    lines = [f"[red]{EMOJI_ERROR} {error}[/red]"]
    if error.step:
        lines.append("")
        lines.append(f"[bold]Step:[/bold] {error.step}")
    if error.error_code:
        lines.append(f"[bold]Code:[/bold] {error.error_code}")

    console.print(Panel("\n".join(lines), title="Release Error", border_style="red"))


def print_warning(message: str) -> None:
    """Print warning message"""
    console.print(f"[yellow]Warning:[/yellow] {message}")
