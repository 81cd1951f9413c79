"""Source file discovery and sequential batch analysis."""

from __future__ import annotations

import fnmatch
import os
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from .analyzer import PerformanceAnalyzer
from .exceptions import FileAccessError
from .logging_config import get_logger
from .models import FileAnalysis

logger = get_logger(__name__)

# Directories never descended into, whatever the exclude patterns say.
SKIP_DIRS = frozenset({"node_modules", "dist", "build", "coverage", "__pycache__"})


def should_skip_file(relpath: Path, exclude_patterns: Sequence[str]) -> bool:
    """
    Check if a file should be skipped based on exclusion patterns.

    Patterns are tried against the path relative to the scan root and
    against the bare file name, so both ``dist/*`` and ``*.test.*`` work.
    """
    posix = relpath.as_posix()
    for pattern in exclude_patterns:
        if relpath.match(pattern) or fnmatch.fnmatch(posix, pattern):
            return True
        if fnmatch.fnmatch(relpath.name, pattern):
            return True
    return False


def _skip_dir(name: str) -> bool:
    return name in SKIP_DIRS or name.startswith(".")


def find_source_files(
    root: Union[str, Path],
    extensions: Iterable[str],
    exclude_patterns: Sequence[str] = (),
    max_files: Optional[int] = None,
) -> list[Path]:
    """
    Collect analyzable files under ``root`` in one walk.

    Args:
        root: Directory to scan (a single file is returned as-is)
        extensions: File suffixes to include (e.g. ['.ts', '.tsx'])
        exclude_patterns: Glob patterns to exclude
        max_files: Stop after this many files

    Returns:
        Sorted list of file paths
    """
    root = Path(root)
    ext_set = set(extensions)

    if root.is_file():
        return [root]

    found: list[Path] = []
    skipped = 0
    for dirpath, dirnames, filenames in os.walk(root):
        # Prune in place so os.walk never enters vendored or hidden trees
        dirnames[:] = sorted(d for d in dirnames if not _skip_dir(d))
        for name in sorted(filenames):
            path = Path(dirpath) / name
            if path.suffix not in ext_set:
                continue
            if should_skip_file(path.relative_to(root), exclude_patterns):
                skipped += 1
                logger.debug(f"Skipped (pattern): {path}")
                continue
            if max_files is not None and len(found) >= max_files:
                logger.warning(f"Reached max files limit ({max_files})")
                return sorted(found)
            found.append(path)

    logger.info(f"Discovery complete: {len(found)} files, {skipped} skipped")
    return sorted(found)


def analyze_paths(
    paths: Iterable[Union[str, Path]], analyzer: Optional[PerformanceAnalyzer] = None
) -> list[FileAnalysis]:
    """Analyze files one after another, skipping any that cannot be read."""
    analyzer = analyzer or PerformanceAnalyzer()
    results: list[FileAnalysis] = []
    errored = 0

    for path in paths:
        try:
            results.append(analyzer.analyze_file(path))
        except FileAccessError as e:
            errored += 1
            logger.warning(f"Access error for {path}: {e.reason}")

    logger.info(f"Analysis complete: {len(results)} analyzed, {errored} errors")
    return results
