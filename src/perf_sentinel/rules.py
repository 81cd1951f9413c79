"""Detection rules: literal substring and regex tests over source text.

Line rules are independent of one another; each one that matches a line
contributes one issue for that line. File rules look at the whole text and
always report on line 1. There is no parsing: a rule that fires inside a
string literal is a false positive the table accepts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional

from .models import Issue, IssueKind, Severity

LARGE_FILE_LINES = 500
MAX_IMPORTS = 20
MAX_COMPONENTS = 3

REACT_MARKERS = (".tsx", ".jsx")

MAIN_REACT_HOOKS = (
    "useState",
    "useEffect",
    "useReducer",
    "useCallback",
    "useMemo",
    "useContext",
    "useRef",
    "useImperativeHandle",
    "useLayoutEffect",
    "useDebugValue",
)

_IMPORT_LINE = re.compile(r"^import.*$", re.MULTILINE)
_COMPONENT_DEF = re.compile(r"function\s+\w+|const\s+\w+\s*=\s*\(")
_MAIN_HOOK_CALL = re.compile(r"\b(" + "|".join(MAIN_REACT_HOOKS) + r")\s*\(")
_HOOK_FILE = re.compile("hook", re.IGNORECASE)


def is_react_file(file_path: str) -> bool:
    return any(marker in file_path for marker in REACT_MARKERS)


def _all(*needles: str) -> Callable[[str], bool]:
    return lambda line: all(n in line for n in needles)


def _any(*needles: str) -> Callable[[str], bool]:
    return lambda line: any(n in line for n in needles)


def _without(needle: str, absent: str) -> Callable[[str], bool]:
    return lambda line: needle in line and absent not in line


@dataclass(frozen=True)
class LineRule:
    """One row of the line-rule table."""

    name: str
    message: str
    suggestion: str
    severity: Severity
    kind: IssueKind
    matches: Callable[[str], bool]
    react_only: bool = False

    def check(self, line: str, line_number: int) -> Optional[Issue]:
        if not self.matches(line):
            return None
        return Issue(
            line=line_number,
            message=self.message,
            suggestion=self.suggestion,
            severity=self.severity,
            kind=self.kind,
        )


LINE_RULES: tuple[LineRule, ...] = (
    # expensive operations
    LineRule(
        "map-filter-chain",
        "Multiple array operations",
        "Consider combining .map() and .filter() into a single operation or use .reduce()",
        Severity.MEDIUM,
        IssueKind.WARNING,
        _all(".map(", ".filter("),
    ),
    LineRule(
        "foreach-push",
        "Inefficient array building",
        "Consider using .map() instead of .forEach() with push()",
        Severity.MEDIUM,
        IssueKind.WARNING,
        _all(".forEach(", "push("),
    ),
    LineRule(
        "string-concatenation",
        "String concatenation",
        "Consider using template literals (backticks) for better readability",
        Severity.LOW,
        IssueKind.INFO,
        _all("+", '"'),
    ),
    LineRule(
        "object-keys-length",
        "Object keys length check",
        "Consider using Object.keys(obj).length === 0 for empty object check",
        Severity.LOW,
        IssueKind.INFO,
        _all("Object.keys(", ".length"),
    ),
    # memory leaks
    LineRule(
        "event-listener-leak",
        "Potential memory leak",
        "Make sure to remove event listeners in cleanup functions",
        Severity.HIGH,
        IssueKind.ERROR,
        _without("addEventListener(", "removeEventListener("),
    ),
    LineRule(
        "interval-leak",
        "Potential memory leak",
        "Make sure to clear intervals in cleanup functions",
        Severity.HIGH,
        IssueKind.ERROR,
        _without("setInterval(", "clearInterval("),
    ),
    LineRule(
        "timeout-leak",
        "Potential memory leak",
        "Consider clearing timeouts if component unmounts",
        Severity.MEDIUM,
        IssueKind.WARNING,
        _without("setTimeout(", "clearTimeout("),
    ),
    # inefficient patterns
    LineRule(
        "loop",
        "Loop detected",
        "Check if nested loops can be optimized or replaced with more efficient algorithms",
        Severity.LOW,
        IssueKind.INFO,
        _all("for", "{"),
    ),
    LineRule(
        "dom-query",
        "DOM query",
        "Consider caching DOM queries if used multiple times",
        Severity.MEDIUM,
        IssueKind.WARNING,
        _any("document.querySelector(", "document.getElementById("),
    ),
    LineRule(
        "inline-function",
        "Inline function",
        "Consider moving functions outside render to prevent recreation on each render",
        Severity.LOW,
        IssueKind.INFO,
        _any("function(", "=>"),
    ),
    # React
    LineRule(
        "usestate-empty-array",
        "useState initialization",
        "Consider if empty array is the best initial state",
        Severity.LOW,
        IssueKind.INFO,
        _all("useState(", "[]"),
        react_only=True,
    ),
    LineRule(
        "useeffect-empty-deps",
        "useEffect dependencies",
        "Check if empty dependency array is intentional",
        Severity.MEDIUM,
        IssueKind.WARNING,
        _all("useEffect(", "[]"),
        react_only=True,
    ),
    LineRule(
        "inline-style",
        "Inline styles/classes",
        "Consider extracting styles and classes to constants",
        Severity.LOW,
        IssueKind.INFO,
        _any("style={{", 'className="'),
        react_only=True,
    ),
)


def is_skipped_line(line: str) -> bool:
    """Blank lines and lines opening a comment are never checked."""
    stripped = line.strip()
    return not stripped or stripped.startswith("//") or stripped.startswith("/*")


def check_line(line: str, line_number: int, file_path: str) -> list[Issue]:
    if is_skipped_line(line):
        return []
    react = is_react_file(file_path)
    issues = []
    for rule in LINE_RULES:
        if rule.react_only and not react:
            continue
        issue = rule.check(line, line_number)
        if issue is not None:
            issues.append(issue)
    return issues


def check_file(content: str, file_path: str) -> list[Issue]:
    """Whole-file checks. Every issue is reported on line 1."""
    issues: list[Issue] = []

    line_count = len(content.split("\n"))
    if line_count > LARGE_FILE_LINES:
        issues.append(
            Issue(
                line=1,
                message="Large file",
                suggestion=f"File has {line_count} lines. Consider splitting into smaller components/modules",
                severity=Severity.MEDIUM,
                kind=IssueKind.WARNING,
            )
        )

    import_count = len(_IMPORT_LINE.findall(content))
    if import_count > MAX_IMPORTS:
        issues.append(
            Issue(
                line=1,
                message="Many imports",
                suggestion=f"File has {import_count} imports. Consider organizing imports or splitting the file",
                severity=Severity.LOW,
                kind=IssueKind.INFO,
            )
        )

    if not is_react_file(file_path):
        return issues

    component_count = len(_COMPONENT_DEF.findall(content))
    if component_count > MAX_COMPONENTS:
        issues.append(
            Issue(
                line=1,
                message="Multiple components",
                suggestion=f"File contains {component_count} components. Consider splitting into separate files",
                severity=Severity.MEDIUM,
                kind=IssueKind.WARNING,
            )
        )

    if not _HOOK_FILE.search(file_path) and _MAIN_HOOK_CALL.search(content):
        issues.append(
            Issue(
                line=1,
                message=(
                    "Main React hooks (useState, useEffect, ...) are used directly in a "
                    "component file. Move hook logic and state to a separate .hook file."
                ),
                suggestion=(
                    "Move hook logic to a .hook file (e.g., my-feature.hook.ts) for better "
                    "separation of concerns and testability."
                ),
                severity=Severity.HIGH,
                kind=IssueKind.ERROR,
            )
        )

    return issues
