"""Single-file and project-wide analysis commands."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from . import app
from ._common import ExitCode, console, fail, normalize_extensions, require_path, resolve_config, split_csv
from ..alerts.formatters import grade_emoji, kind_icon, score_interpretation, severity_label
from ..analyzer import PerformanceAnalyzer
from ..discovery import analyze_paths, find_source_files
from ..exceptions import FileAccessError
from ..models import FileAnalysis, Severity
from ..scoring import project_score


def _print_file_report(analysis: FileAnalysis) -> None:
    summary = analysis.summary
    score = analysis.score

    console.print()
    console.rule("[bold cyan]Performance Analysis[/bold cyan]")
    console.print(f"File: [bold]{escape(analysis.file_path)}[/bold]")
    console.print(
        f"Issues: {summary.total_issues} "
        f"({severity_label(Severity.HIGH)} {summary.high_severity}, "
        f"{severity_label(Severity.MEDIUM)} {summary.medium_severity}, "
        f"{severity_label(Severity.LOW)} {summary.low_severity})"
    )
    console.print()
    console.print(f"Overall score:  [bold]{score.total}[/bold]/100 ({score.grade})")
    console.print(f"Memory safety:  {score.breakdown.memory_leaks}/100")
    console.print(f"Performance:    {score.breakdown.performance}/100")
    console.print(f"Code quality:   {score.breakdown.code_quality}/100")
    console.print(f"\n{grade_emoji(score.total)} Grade: {score.grade}  {score_interpretation(score.total)}")

    if not analysis.issues:
        console.print("\n[green]No performance issues found.[/green]")
        return

    for severity in (Severity.HIGH, Severity.MEDIUM, Severity.LOW):
        issues = analysis.issues_with(severity)
        if not issues:
            continue
        console.print(f"\n[bold]{severity_label(severity)} priority[/bold]")
        for issue in issues:
            console.print(f"  {kind_icon(issue.kind)} Line {issue.line}: {escape(issue.message)}")
            console.print(f"     [dim]{escape(issue.suggestion)}[/dim]")


@app.command()
def analyze(
    file: Path = typer.Argument(..., help="Source file to analyze"),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    Analyze a single file and print its issues, score and grade.

    [bold cyan]Examples:[/bold cyan]

      perf-sentinel analyze src/App.tsx

      perf-sentinel analyze src/App.tsx --json
    """
    require_path(file)
    try:
        analysis = PerformanceAnalyzer().analyze_file(file)
    except FileAccessError as e:
        fail(f"{e.filepath}: {e.reason}", ExitCode.PATH_NOT_FOUND)

    if json_output:
        print(json.dumps(analysis.to_dict(), indent=2))
        return
    _print_file_report(analysis)


@app.command()
def bulk(
    directory: Path = typer.Argument(Path("."), help="Directory to scan"),
    extensions: Optional[str] = typer.Option(
        None, "--extensions", "-e", help="Comma-separated file extensions (e.g. .ts,.tsx)"
    ),
    exclude: Optional[list[str]] = typer.Option(
        None, "--exclude", "-x", help="Glob pattern to exclude (repeatable)"
    ),
    max_files: Optional[int] = typer.Option(None, "--max-files", help="Maximum files to analyze", min=1),
    summary_only: bool = typer.Option(False, "--summary-only", help="Only print the project score"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write results as JSON to this file"),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c",
        help="Configuration file path (TOML format)",
    ),
):
    """
    Analyze every matching file under DIRECTORY and grade the project.

    [bold cyan]Examples:[/bold cyan]

      perf-sentinel bulk src

      perf-sentinel bulk . --extensions .tsx,.jsx --summary-only
    """
    require_path(directory)
    settings = resolve_config(
        config,
        extensions=normalize_extensions(split_csv(extensions)),
        max_files=max_files,
    )
    patterns = list(settings.exclude_patterns) + list(exclude or [])

    paths = find_source_files(directory, settings.extensions, patterns, settings.max_files)
    analyses = analyze_paths(paths, PerformanceAnalyzer())
    project = project_score(analyses)

    if output is not None:
        payload = {
            "projectScore": {
                "total": project.total,
                "grade": project.grade,
                "bestFile": project.best_file,
                "worstFile": project.worst_file,
                "totalFiles": project.total_files,
                "averageScore": project.average_score,
                "filesWithIssues": project.files_with_issues,
            },
            "files": [a.to_dict() for a in analyses],
        }
        try:
            output.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as e:
            fail(f"Cannot write {output}: {e}", ExitCode.INTERNAL_ERROR)
        console.print(f"[green]Results written to {escape(str(output))}[/green]")

    if not summary_only and analyses:
        table = Table(show_header=True, show_lines=False, pad_edge=True)
        table.add_column("File", min_width=30)
        table.add_column("Issues", justify="right")
        table.add_column("High", justify="right", style="red")
        table.add_column("Medium", justify="right", style="yellow")
        table.add_column("Low", justify="right", style="green")
        table.add_column("Score", justify="right")
        table.add_column("Grade")

        for a in sorted(analyses, key=lambda a: a.summary.total_issues, reverse=True):
            table.add_row(
                escape(a.file_path),
                str(a.summary.total_issues),
                str(a.summary.high_severity),
                str(a.summary.medium_severity),
                str(a.summary.low_severity),
                str(a.score.total),
                a.score.grade,
            )
        console.print()
        console.print(table)

    console.print()
    console.rule("[bold cyan]Project Quality Score[/bold cyan]")
    console.print(f"Overall score:    [bold]{project.total}[/bold]/100 ({project.grade})")
    console.print(f"Files analyzed:   {project.total_files}")
    console.print(f"Files with issues: {project.files_with_issues}")
    console.print(f"Best file:        {escape(project.best_file)}")
    console.print(f"Worst file:       {escape(project.worst_file)}")
    console.print(
        f"\n{grade_emoji(project.total)} Project grade: {project.grade}  "
        f"{score_interpretation(project.total)}"
    )
