"""CI gate: analyze the tree, snapshot it, compare against the baseline branch.

The checker never prints. It returns a :class:`CIResult` and leaves console
output and process exit to the caller (the ``ci`` CLI command).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from .alerts.engine import AlertSystem, should_block, should_warn
from .alerts.formatters import render_github_comment, report_to_json
from .alerts.models import AlertReport
from .analyzer import PerformanceAnalyzer
from .config import SentinelConfig
from .discovery import analyze_paths, find_source_files
from .environment import detect_branch, detect_commit
from .exceptions import StorageError
from .logging_config import get_logger
from .models import FileAnalysis
from .snapshot.models import Snapshot
from .snapshot.store import SnapshotStore
from .timing import PerformanceTimer

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_REGRESSION = 1


@dataclass
class CIResult:
    """Outcome of one CI run."""

    branch: str
    commit: str
    files_analyzed: int = 0
    snapshot: Optional[Snapshot] = None
    report: Optional[AlertReport] = None
    written: list[Path] = field(default_factory=list)
    blocked: bool = False
    warned: bool = False
    exit_code: int = EXIT_OK


class CIChecker:
    """Run the full analyze / snapshot / compare / decide pipeline once."""

    def __init__(
        self,
        config: Optional[SentinelConfig] = None,
        root: Union[str, Path] = ".",
        store: Optional[SnapshotStore] = None,
        analyzer: Optional[PerformanceAnalyzer] = None,
    ) -> None:
        self.config = config or SentinelConfig()
        self.root = Path(root)
        # A relative snapshots_dir resolves against the working directory.
        self.store = store or SnapshotStore(self.config.snapshots_dir)
        self.alerts = AlertSystem(self.store, self.config.thresholds)
        self.analyzer = analyzer or PerformanceAnalyzer()
        self.timer = PerformanceTimer()

    def analyze_codebase(self) -> list[FileAnalysis]:
        paths = find_source_files(
            self.root,
            self.config.extensions,
            self.config.exclude_patterns,
            self.config.max_files,
        )
        analyses = analyze_paths(paths, self.analyzer)
        # Snapshot paths are relative to the scanned root.
        return [self._relativize(a) for a in analyses]

    def _relativize(self, analysis: FileAnalysis) -> FileAnalysis:
        try:
            rel = Path(analysis.file_path).relative_to(self.root).as_posix()
        except ValueError:
            return analysis
        return FileAnalysis(
            file_path=rel,
            issues=analysis.issues,
            summary=analysis.summary,
            score=analysis.score,
            total_lines=analysis.total_lines,
        )

    def run(self) -> CIResult:
        result = CIResult(branch=detect_branch(self.root), commit=detect_commit(self.root))
        logger.info(f"CI check on branch {result.branch} at {result.commit}")

        self.timer.start("analysis")
        analyses = self.analyze_codebase()
        elapsed = self.timer.end("analysis")
        result.files_analyzed = len(analyses)
        logger.info(f"Analyzed {len(analyses)} files in {elapsed:.2f}s")

        if not analyses:
            logger.warning("No files found to analyze")
            return result

        result.snapshot = self.store.create_snapshot(analyses, result.branch, result.commit)
        result.report = self.alerts.generate_alert_report(
            result.snapshot, self.config.baseline_branch
        )
        result.written = self.write_outputs(result.report, result.snapshot)

        result.blocked = should_block(result.report)
        result.warned = should_warn(result.report)
        if result.blocked and self.config.fail_on_regression:
            result.exit_code = EXIT_REGRESSION

        self.write_github_output(result.report)
        return result

    def write_outputs(self, report: AlertReport, snapshot: Snapshot) -> list[Path]:
        """Write the file-based formats; console output is left to the caller."""
        written: list[Path] = []
        for fmt in self.config.output_formats:
            if fmt == "json":
                path = self.store.root / f"report-{snapshot.id}.json"
                content = report_to_json(report)
            elif fmt == "github-comment":
                path = self.store.root / f"comment-{snapshot.id}.md"
                content = render_github_comment(report)
            else:
                continue
            try:
                path.write_text(content, encoding="utf-8")
            except OSError as e:
                raise StorageError(path, f"write failed: {e}")
            logger.info(f"Wrote {fmt} report to {path}")
            written.append(path)
        return written

    def write_github_output(self, report: AlertReport) -> None:
        """Append step outputs when running under GitHub Actions."""
        output_path = os.environ.get("GITHUB_OUTPUT")
        if not output_path:
            return
        lines = [
            f"status={report.status.value}",
            f"score={report.summary.score}",
            f"has_regressions={str(report.has_regressions).lower()}",
            f"has_improvements={str(report.has_improvements).lower()}",
            f"critical_issues_count={len(report.critical_issues)}",
            f"warnings_count={len(report.warnings)}",
        ]
        try:
            with open(output_path, "a", encoding="utf-8") as f:
                f.write("\n".join(lines) + "\n")
        except OSError as e:
            raise StorageError(output_path, f"write failed: {e}")
