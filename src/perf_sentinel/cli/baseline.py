"""Baseline commands: save the current tree as a branch baseline, or show one."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from ._common import ExitCode, console, fail, require_path, resolve_config
from ..ci import CIChecker
from ..environment import detect_commit
from ..exceptions import MalformedRecordError, StorageError
from ..snapshot.models import Snapshot
from ..snapshot.store import SnapshotStore

baseline_app = typer.Typer(help="Save or inspect per-branch baselines.", no_args_is_help=True)


def format_timestamp(millis: int) -> str:
    return datetime.fromtimestamp(millis / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def _print_snapshot(snapshot: Snapshot, title: str) -> None:
    m = snapshot.metrics
    console.print(f"[bold cyan]{escape(title)}[/bold cyan]")
    console.print(f"  Snapshot:  {snapshot.id}")
    console.print(f"  Taken:     {format_timestamp(snapshot.timestamp)}")
    console.print(f"  Branch:    {escape(snapshot.branch)}  Commit: {escape(snapshot.commit)}")
    console.print()

    table = Table(show_header=True, show_lines=False, pad_edge=True)
    table.add_column("Metric", min_width=24)
    table.add_column("Value", justify="right")
    table.add_row("Files", str(m.total_files))
    table.add_row("Total issues", str(m.total_issues))
    table.add_row("High severity", str(m.high_severity_issues))
    table.add_row("Medium severity", str(m.medium_severity_issues))
    table.add_row("Low severity", str(m.low_severity_issues))
    table.add_row("Average score", f"{m.average_score:.2f}")
    table.add_row("Memory safety", f"{m.memory_score:.2f}")
    table.add_row("Performance", f"{m.performance_score:.2f}")
    table.add_row("Code quality", f"{m.code_quality_score:.2f}")
    console.print(table)


@baseline_app.command("save")
def save(
    path: Path = typer.Argument(Path("."), help="Root of the codebase to analyze"),
    branch: str = typer.Option("main", "--branch", "-b", help="Branch to store the baseline under"),
    snapshots_dir: Optional[str] = typer.Option(None, "--snapshots-dir", help="Snapshot store directory"),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c",
        help="Configuration file path (TOML format)",
    ),
):
    """Analyze the tree, snapshot it and store it as the baseline for BRANCH."""
    require_path(path)
    settings = resolve_config(config, snapshots_dir=snapshots_dir)

    try:
        checker = CIChecker(settings, root=path)
        analyses = checker.analyze_codebase()
        if not analyses:
            console.print("[yellow]No files found to analyze; baseline not saved.[/yellow]")
            raise typer.Exit(ExitCode.SUCCESS)
        snapshot = checker.store.create_snapshot(analyses, branch, detect_commit(path))
        checker.store.save_baseline(snapshot, branch)
    except StorageError as e:
        fail(str(e), ExitCode.INTERNAL_ERROR)

    console.print(
        f"[green]Baseline for {escape(branch)} saved[/green] "
        f"({snapshot.metrics.total_files} files, average score "
        f"{snapshot.metrics.average_score:.2f})"
    )


@baseline_app.command("show")
def show(
    branch: str = typer.Option("main", "--branch", "-b", help="Branch whose baseline to show"),
    snapshots_dir: Optional[str] = typer.Option(None, "--snapshots-dir", help="Snapshot store directory"),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c",
        help="Configuration file path (TOML format)",
    ),
):
    """Show the stored baseline for BRANCH."""
    settings = resolve_config(config, snapshots_dir=snapshots_dir)
    try:
        baseline = SnapshotStore(settings.snapshots_dir).load_baseline(branch)
    except (StorageError, MalformedRecordError) as e:
        fail(str(e), ExitCode.INTERNAL_ERROR)

    if baseline is None:
        console.print(f"[yellow]No baseline found for branch {escape(branch)}.[/yellow]")
        raise typer.Exit(ExitCode.SUCCESS)
    _print_snapshot(baseline, f"Baseline ({branch})")
