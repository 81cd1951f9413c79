"""Alert decisions: thresholds applied to snapshot comparisons, and their presentation."""

from .engine import AlertSystem, decide, no_baseline_report, should_block, should_warn
from .formatters import print_alert_report, render_github_comment, report_to_json, status_message
from .models import AlertDetails, AlertReport, AlertStatus, AlertSummary

__all__ = [
    "AlertSystem",
    "decide",
    "no_baseline_report",
    "should_block",
    "should_warn",
    "print_alert_report",
    "render_github_comment",
    "report_to_json",
    "status_message",
    "AlertDetails",
    "AlertReport",
    "AlertStatus",
    "AlertSummary",
]
