"""CI command: analyze, snapshot, compare against the baseline branch, gate."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from . import app
from ._common import ExitCode, console, fail, require_path, resolve_config, split_csv
from ..alerts.formatters import print_alert_report
from ..ci import CIChecker
from ..exceptions import MalformedRecordError, StorageError


@app.command()
def ci(
    path: Path = typer.Argument(Path("."), help="Root of the codebase to check"),
    baseline_branch: Optional[str] = typer.Option(
        None, "--baseline-branch", "-b", help="Branch to compare against (default: main)"
    ),
    snapshots_dir: Optional[str] = typer.Option(
        None, "--snapshots-dir", help="Snapshot store directory (default: .performance-snapshots)"
    ),
    max_score_regression: Optional[float] = typer.Option(
        None, "--max-score-regression", help="Maximum allowed average-score drop (default: 5)"
    ),
    max_high_severity_increase: Optional[float] = typer.Option(
        None, "--max-high-severity-increase", help="Maximum allowed high severity increase (default: 2)"
    ),
    max_total_issues_increase: Optional[float] = typer.Option(
        None, "--max-total-issues-increase", help="Maximum allowed total issues increase (default: 10)"
    ),
    min_score_improvement: Optional[float] = typer.Option(
        None, "--min-score-improvement", help="Minimum score improvement to highlight (default: 2)"
    ),
    output: Optional[str] = typer.Option(
        None, "--output", help="Output formats: console,json,github-comment (default: console)"
    ),
    no_fail_on_regression: bool = typer.Option(
        False, "--no-fail-on-regression", help="Don't fail CI on performance regression"
    ),
    no_warn_on_regression: bool = typer.Option(
        False, "--no-warn-on-regression", help="Don't warn on performance regression"
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c",
        help="Configuration file path (TOML format)",
    ),
):
    """
    Run the CI performance gate.

    Exits 1 when the alert status is [red]fail[/red] (unless
    --no-fail-on-regression), 0 otherwise.

    [bold cyan]Examples:[/bold cyan]

      perf-sentinel ci

      perf-sentinel ci --baseline-branch develop --output console,github-comment
    """
    require_path(path)
    settings = resolve_config(
        config,
        baseline_branch=baseline_branch,
        snapshots_dir=snapshots_dir,
        output_formats=split_csv(output),
        fail_on_regression=False if no_fail_on_regression else None,
        warn_on_regression=False if no_warn_on_regression else None,
        max_score_regression=max_score_regression,
        max_high_severity_increase=max_high_severity_increase,
        max_total_issues_increase=max_total_issues_increase,
        min_score_improvement=min_score_improvement,
    )

    try:
        result = CIChecker(settings, root=path).run()
    except (StorageError, MalformedRecordError) as e:
        fail(str(e), ExitCode.INTERNAL_ERROR)

    console.print(f"Branch: [bold]{escape(result.branch)}[/bold]  Commit: {escape(result.commit)}")
    if result.report is None:
        console.print("[yellow]No files found to analyze.[/yellow]")
        raise typer.Exit(ExitCode.SUCCESS)

    console.print(f"Analyzed {result.files_analyzed} files, snapshot {result.snapshot.id}")
    if "console" in settings.output_formats:
        print_alert_report(result.report, console)
    for written in result.written:
        console.print(f"Report saved to {escape(str(written))}")

    if result.blocked and settings.fail_on_regression:
        console.print("[red]Performance regression detected - failing CI[/red]")
    elif result.warned and settings.warn_on_regression:
        console.print("[yellow]Performance regression detected - CI will continue with warning[/yellow]")

    raise typer.Exit(result.exit_code)
