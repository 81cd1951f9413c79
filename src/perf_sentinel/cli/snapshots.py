"""Snapshot commands: list stored snapshots and prune old ones."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from ._common import ExitCode, console, fail, resolve_config
from .baseline import format_timestamp
from ..exceptions import StorageError
from ..snapshot.store import SnapshotStore

snapshots_app = typer.Typer(help="List and prune stored snapshots.", no_args_is_help=True)


@snapshots_app.command("list")
def list_snapshots(
    snapshots_dir: Optional[str] = typer.Option(None, "--snapshots-dir", help="Snapshot store directory"),
    limit: int = typer.Option(20, "--last", "-n", help="Number of recent snapshots to show", min=1),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c",
        help="Configuration file path (TOML format)",
    ),
):
    """List snapshots, newest first."""
    settings = resolve_config(config, snapshots_dir=snapshots_dir)
    try:
        snapshots = SnapshotStore(settings.snapshots_dir).list_snapshots()
    except StorageError as e:
        fail(str(e), ExitCode.INTERNAL_ERROR)

    if not snapshots:
        console.print("[yellow]No snapshots found.[/yellow]")
        raise typer.Exit(ExitCode.SUCCESS)

    table = Table(show_header=True, show_lines=False, pad_edge=True)
    table.add_column("Snapshot")
    table.add_column("Taken")
    table.add_column("Branch")
    table.add_column("Commit")
    table.add_column("Files", justify="right")
    table.add_column("Issues", justify="right")
    table.add_column("Avg score", justify="right")

    for snapshot in snapshots[:limit]:
        table.add_row(
            snapshot.id,
            format_timestamp(snapshot.timestamp),
            escape(snapshot.branch),
            snapshot.commit[:8],
            str(snapshot.metrics.total_files),
            str(snapshot.metrics.total_issues),
            f"{snapshot.metrics.average_score:.2f}",
        )
    console.print(table)


@snapshots_app.command("cleanup")
def cleanup(
    max_age_days: Optional[int] = typer.Option(
        None, "--max-age-days", help="Delete snapshots older than this (default: 7)", min=0
    ),
    snapshots_dir: Optional[str] = typer.Option(None, "--snapshots-dir", help="Snapshot store directory"),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c",
        help="Configuration file path (TOML format)",
    ),
):
    """Delete old snapshots. Baselines are never removed."""
    settings = resolve_config(
        config, snapshots_dir=snapshots_dir, snapshot_max_age_days=max_age_days
    )
    try:
        removed = SnapshotStore(settings.snapshots_dir).cleanup_old_snapshots(
            settings.snapshot_max_age_ms
        )
    except StorageError as e:
        fail(str(e), ExitCode.INTERNAL_ERROR)

    console.print(f"[green]Removed {len(removed)} snapshot(s).[/green]")
