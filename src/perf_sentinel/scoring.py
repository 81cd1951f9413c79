"""Score engine: issue counts -> 0-100 score, letter grade and breakdown.

Deterministic and side-effect free. Weights:

    high   -15 total, -20 memory-safety axis
    medium  -8 total, -10 performance axis
    low     -2 total,  -5 code-quality axis

A file with no issues earns a +10 clean-code bonus; files under 100 lines
get +5, files over 500 lines get -10. The total is clamped to [0, 100].
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence

from .models import FileAnalysis, Issue, IssueSummary, Score, ScoreBreakdown

BASE_SCORE = 100
HIGH_DEDUCTION = 15
MEDIUM_DEDUCTION = 8
LOW_DEDUCTION = 2
CLEAN_CODE_BONUS = 10
SMALL_FILE_LINES = 100
SMALL_FILE_BONUS = 5
LARGE_FILE_LINES = 500
LARGE_FILE_PENALTY = -10

# Lower bound (inclusive) for each grade, best first. Anything below is "F".
GRADE_CUTOFFS: tuple[tuple[int, str], ...] = (
    (90, "A+"),
    (85, "A"),
    (80, "A-"),
    (75, "B+"),
    (70, "B"),
    (65, "B-"),
    (60, "C+"),
    (55, "C"),
    (50, "C-"),
    (45, "D+"),
    (40, "D"),
    (35, "D-"),
)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def grade_for(total: float) -> str:
    """Map a numeric score to its letter grade."""
    for cutoff, grade in GRADE_CUTOFFS:
        if total >= cutoff:
            return grade
    return "F"


def size_bonus(total_lines: int) -> int:
    if total_lines < SMALL_FILE_LINES:
        return SMALL_FILE_BONUS
    if total_lines > LARGE_FILE_LINES:
        return LARGE_FILE_PENALTY
    return 0


def score_counts(high: int, medium: int, low: int, total_lines: int) -> Score:
    """Score a file from its per-severity issue counts."""
    deductions = high * HIGH_DEDUCTION + medium * MEDIUM_DEDUCTION + low * LOW_DEDUCTION
    clean_bonus = CLEAN_CODE_BONUS if high + medium + low == 0 else 0

    raw = BASE_SCORE - deductions + clean_bonus + size_bonus(total_lines)
    total = round_half_up(max(0, min(100, raw)))

    breakdown = ScoreBreakdown(
        memory_leaks=round_half_up(max(0, 100 - high * 20)),
        performance=round_half_up(max(0, 100 - medium * 10)),
        code_quality=round_half_up(max(0, 100 - low * 5)),
    )
    return Score(total=total, grade=grade_for(total), breakdown=breakdown)


def compute_score(issues: Iterable[Issue], total_lines: int) -> Score:
    """Score a file from its detected issues and line count."""
    summary = IssueSummary.from_issues(issues)
    return score_counts(
        summary.high_severity, summary.medium_severity, summary.low_severity, total_lines
    )


@dataclass(frozen=True)
class ProjectScore:
    """Aggregate grade for a whole scan."""

    total: int
    grade: str
    best_file: str
    worst_file: str
    total_files: int
    average_score: int
    files_with_issues: int


def project_score(analyses: Sequence[FileAnalysis]) -> ProjectScore:
    """Average the file scores of one scan into a project-level grade."""
    if not analyses:
        return ProjectScore(
            total=100,
            grade="A+",
            best_file="N/A",
            worst_file="N/A",
            total_files=0,
            average_score=100,
            files_with_issues=0,
        )

    average = sum(a.score.total for a in analyses) / len(analyses)
    # max/min keep the first file on ties, matching scan order
    best = max(analyses, key=lambda a: a.score.total)
    worst = min(analyses, key=lambda a: a.score.total)

    return ProjectScore(
        total=round_half_up(average),
        grade=grade_for(average),
        best_file=best.file_path,
        worst_file=worst.file_path,
        total_files=len(analyses),
        average_score=round_half_up(average),
        files_with_issues=sum(1 for a in analyses if a.summary.total_issues > 0),
    )
