"""Presentation of alert reports and scores.

Everything here is display-only. Severity and status stay enums in the data
model; emoji and labels are attached at render time.
"""

from __future__ import annotations

import json
from typing import Optional

from rich.console import Console
from rich.markup import escape

from ..models import IssueKind, Severity
from .models import STATUS_MESSAGES, AlertReport, AlertStatus

STATUS_EMOJI = {
    AlertStatus.PASS: "✅",
    AlertStatus.WARNING: "⚠️",
    AlertStatus.FAIL: "❌",
}

STATUS_TEXT = {
    AlertStatus.PASS: "PASSED",
    AlertStatus.WARNING: "PASSED WITH WARNINGS",
    AlertStatus.FAIL: "FAILED",
}

STATUS_STYLE = {
    AlertStatus.PASS: "green",
    AlertStatus.WARNING: "yellow",
    AlertStatus.FAIL: "red",
}

SEVERITY_LABELS = {
    Severity.HIGH: "\U0001f534 HIGH",
    Severity.MEDIUM: "\U0001f7e1 MEDIUM",
    Severity.LOW: "\U0001f7e2 LOW",
}

KIND_ICONS = {
    IssueKind.ERROR: "❌",
    IssueKind.WARNING: "⚠️",
    IssueKind.INFO: "ℹ️",
}

# (lower bound, emoji, interpretation), best first
_SCORE_BANDS = (
    (90, "\U0001f3c6", "Excellent! Production-ready."),
    (80, "\U0001f947", "Great job! Minor improvements needed."),
    (70, "\U0001f948", "Good work! Some optimizations recommended."),
    (60, "\U0001f949", "Decent, but needs attention."),
    (50, "\U0001f4da", "Below average. Consider refactoring."),
    (40, "⚠️", "Poor quality. Significant improvements needed."),
    (30, "\U0001f6a8", "Critical issues! Immediate action required."),
)
_LOWEST_BAND = ("\U0001f480", "Critical issues! Immediate action required.")


def status_message(status: AlertStatus) -> str:
    status = AlertStatus(status)
    return f"{STATUS_EMOJI[status]} {STATUS_MESSAGES[status]}"


def severity_label(severity: Severity) -> str:
    return SEVERITY_LABELS[Severity(severity)]


def kind_icon(kind: IssueKind) -> str:
    return KIND_ICONS[IssueKind(kind)]


def _band(score: float) -> tuple[str, str]:
    for cutoff, emoji, text in _SCORE_BANDS:
        if score >= cutoff:
            return emoji, text
    return _LOWEST_BAND


def grade_emoji(score: float) -> str:
    return _band(score)[0]


def score_interpretation(score: float) -> str:
    return _band(score)[1]


def render_github_comment(report: AlertReport, pr_number: Optional[str] = None) -> str:
    """Markdown body for a pull-request comment."""
    status = report.status
    details = report.details
    lines = [
        f"## Performance Check {STATUS_EMOJI[status]}",
        "",
        f"**Status:** {STATUS_TEXT[status]}",
        f"**Score:** {report.summary.score}/100",
        "",
    ]

    if report.critical_issues:
        lines.append("### ❌ Critical Issues")
        lines.extend(f"- {issue}" for issue in report.critical_issues)
        lines.append("")

    if report.warnings:
        lines.append("### ⚠️ Warnings")
        lines.extend(f"- {warning}" for warning in report.warnings)
        lines.append("")

    if report.has_improvements:
        lines.append("### ✅ Improvements")
        lines.append(
            f"- Performance score improved by {details.improvement.average_score:.2f} points"
        )
        lines.append(
            f"- {len(details.improvement.files_with_improvements)} files show improvements"
        )
        lines.append("")

    if report.recommendations:
        lines.append("### \U0001f4a1 Recommendations")
        lines.extend(f"- {rec}" for rec in report.recommendations)
        lines.append("")

    lines.append("### \U0001f4ca Metrics")
    lines.append(
        f"- Files with regressions: {len(details.regression.files_with_regressions)}"
    )
    lines.append(
        f"- Files with improvements: {len(details.improvement.files_with_improvements)}"
    )
    lines.append(f"- Unchanged files: {details.unchanged.total_files}")

    if pr_number:
        lines.append("")
        lines.append("---")
        lines.append(f"*Generated by perf-sentinel for PR #{pr_number}*")

    return "\n".join(lines) + "\n"


def report_to_json(report: AlertReport) -> str:
    return json.dumps(report.to_dict(), indent=2)


def print_alert_report(report: AlertReport, console: Console) -> None:
    """Render a report on a rich console."""
    status = report.status
    style = STATUS_STYLE[status]
    details = report.details

    console.print()
    console.rule("[bold blue]Performance Alert Report[/bold blue]")
    console.print()
    console.print(f"Status:  [{style}]{status.value.upper()}[/{style}]")
    console.print(f"Score:   [bold]{report.summary.score}[/bold]/100")
    console.print(f"Message: {escape(report.summary.message)}")

    if report.critical_issues:
        console.print("\n[bold red]Critical issues[/bold red]")
        for issue in report.critical_issues:
            console.print(f"  • [red]{escape(issue)}[/red]")

    if report.warnings:
        console.print("\n[bold yellow]Warnings[/bold yellow]")
        for warning in report.warnings:
            console.print(f"  • [yellow]{escape(warning)}[/yellow]")

    if report.has_improvements:
        console.print("\n[bold green]Improvements[/bold green]")
        console.print(
            f"  • Performance score improved by "
            f"[green]{details.improvement.average_score:.2f}[/green] points"
        )
        console.print(
            f"  • [green]{len(details.improvement.files_with_improvements)}[/green] "
            "files show improvements"
        )

    if report.recommendations:
        console.print("\n[bold blue]Recommendations[/bold blue]")
        for rec in report.recommendations:
            console.print(f"  • [blue]{escape(rec)}[/blue]")

    console.print("\n[bold]Detailed metrics[/bold]")
    console.print(
        f"  Files with regressions:  [red]{len(details.regression.files_with_regressions)}[/red]"
    )
    console.print(
        f"  Files with improvements: [green]{len(details.improvement.files_with_improvements)}[/green]"
    )
    console.print(f"  Unchanged files:         [dim]{details.unchanged.total_files}[/dim]")
    console.print()
