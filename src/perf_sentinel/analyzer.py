"""File analyzer: runs the rule table over one file and scores the result."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from .cache import MemoCache
from .exceptions import FileAccessError
from .logging_config import get_logger
from .models import FileAnalysis, Issue, IssueSummary, Score
from .rules import check_file, check_line
from .scoring import score_counts

logger = get_logger(__name__)


class PerformanceAnalyzer:
    """Analyze source files one at a time.

    Args:
        cache: Optional memoization cache. Only score computation is
            memoized, keyed by ``(high, medium, low, total_lines)``; files
            are always re-read and re-scanned.
    """

    def __init__(self, cache: Optional[MemoCache] = None) -> None:
        self.cache = cache
        if cache is not None:
            self._score = cache.memoize(
                key_fn=lambda high, medium, low, lines: ("score", high, medium, low, lines)
            )(score_counts)
        else:
            self._score = score_counts

    def analyze_text(self, content: str, file_path: str) -> FileAnalysis:
        """Analyze already-loaded source text."""
        lines = content.split("\n")

        issues: list[Issue] = []
        for number, line in enumerate(lines, start=1):
            issues.extend(check_line(line, number, file_path))
        issues.extend(check_file(content, file_path))

        summary = IssueSummary.from_issues(issues)
        score: Score = self._score(
            summary.high_severity, summary.medium_severity, summary.low_severity, len(lines)
        )
        logger.debug(f"{file_path}: {summary.total_issues} issues, score {score.total}")

        return FileAnalysis(
            file_path=file_path,
            issues=tuple(issues),
            summary=summary,
            score=score,
            total_lines=len(lines),
        )

    def analyze_file(self, path: Union[str, Path]) -> FileAnalysis:
        """Read and analyze one file.

        Raises:
            FileAccessError: If the file is missing, unreadable or not UTF-8.
        """
        path = Path(path)
        if not path.is_file():
            raise FileAccessError(path, "file not found")
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FileAccessError(path, str(e))
        return self.analyze_text(content, str(path))
