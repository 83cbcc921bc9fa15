"""CLI commands for treesnap."""

from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from treesnap import logging as treesnap_logging
from treesnap.exceptions import RestoreError, TreesnapError
from treesnap.repository import Repository

console = Console()
err_console = Console(stderr=True)


def get_repository(ctx: click.Context) -> Repository:
    """Get the repository selected with --repo (or the current directory)."""
    return Repository(ctx.obj.get("repo_path"))


@click.group()
@click.option(
    "--repo", "-C",
    "repo_path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Repository to operate on (defaults to the current directory)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show snapshot progress")
@click.pass_context
def cli(ctx: click.Context, repo_path: Path | None, verbose: bool) -> None:
    """Treesnap: restorable snapshots of a git index and working tree."""
    ctx.ensure_object(dict)
    ctx.obj["repo_path"] = repo_path
    if verbose:
        treesnap_logging.set_level("INFO")


@cli.command("snapshot")
@click.option("--message", "-m", default="", help="Snapshot commit message")
@click.option(
    "--working-tree/--no-working-tree",
    default=None,
    help="Also capture uncommitted changes (default from settings)",
)
@click.option(
    "--untracked/--no-untracked",
    default=None,
    help="Include untracked files in the working tree capture",
)
@click.option("--prefix", help="Reference namespace root (e.g. refs/treesnap/snapshot)")
@click.pass_context
def snapshot(
    ctx: click.Context,
    message: str,
    working_tree: bool | None,
    untracked: bool | None,
    prefix: str | None,
) -> None:
    """Snapshot the index and working tree.

    Example:
        treesnap snapshot
        treesnap snapshot -m "before rebase" --no-untracked
    """
    repo = get_repository(ctx)

    try:
        result = repo.snapshot(
            message,
            include_working_tree=working_tree,
            include_untracked=untracked,
            ref_prefix=prefix,
        )
    except RestoreError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        err_console.print("[red]Your working tree was NOT restored.[/red]")
        if e.reference:
            err_console.print(
                f"Recover your changes with: [cyan]git stash apply {e.reference}[/cyan]"
            )
        else:
            err_console.print("Recover your changes with: [cyan]git stash apply[/cyan]")
        raise click.Abort() from e
    except (TreesnapError, ValidationError) as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise click.Abort() from e

    console.print(f"[green]✓[/green] Index snapshot: [cyan]{result.index_ref}[/cyan]")
    if result.wtree_ref:
        console.print(f"[green]✓[/green] Working tree snapshot: [cyan]{result.wtree_ref}[/cyan]")
    else:
        console.print("[yellow]No working tree changes to snapshot[/yellow]")


@cli.command("status")
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show branch and working tree state."""
    repo = get_repository(ctx)

    if not repo.state.is_git_repository():
        err_console.print(f"[red]Error:[/red] not a git repository: {escape(str(repo.path))}")
        raise click.Abort()

    head = repo.state.current_head()

    table = Table(title=f"Repository: {escape(str(repo.path))}")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Branch", escape(head.branch) if head and head.branch else "(detached)")
    table.add_row("HEAD", f"{head.hash[:8]} {escape(head.message)}" if head else "(no commits)")
    table.add_row("Clean", "yes" if repo.is_clean() else "no")
    table.add_row("Untracked files", "yes" if repo.state.has_untracked_files() else "no")

    console.print(table)


@cli.command("list")
@click.pass_context
def list_snapshots(ctx: click.Context) -> None:
    """List snapshot references."""
    repo = get_repository(ctx)
    refs = repo.list_snapshots()

    if not refs:
        console.print("[yellow]No snapshots found.[/yellow]")
        console.print("Create one with: [cyan]treesnap snapshot[/cyan]")
        return

    table = Table(title="Snapshots")
    table.add_column("Reference", style="cyan")
    table.add_column("Commit", style="dim")

    for ref in refs:
        table.add_row(ref.name, ref.hash[:8])

    console.print(table)


@cli.command("drop")
@click.argument("name")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
def drop(ctx: click.Context, name: str, yes: bool) -> None:
    """Delete a snapshot reference."""
    repo = get_repository(ctx)

    if not yes:
        click.confirm(f"Delete snapshot '{name}'?", abort=True)

    try:
        repo.delete_snapshot(name)
        console.print(f"[green]✓[/green] Deleted '{name}'")
    except TreesnapError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise click.Abort() from e
