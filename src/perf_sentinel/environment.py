"""Run-context discovery: git branch/commit and the runtime that produced a snapshot.

Git is queried first. When the working tree is not a repository (or git is
not installed), the CI provider's environment variables are used instead:

    GITHUB_REF_NAME / CI_COMMIT_REF_NAME   branch
    GITHUB_SHA      / CI_COMMIT_SHA        commit

Example:
    >>> detect_branch(Path("."))
    'main'
"""

from __future__ import annotations

import os
import platform
import subprocess
import sys
from pathlib import Path
from typing import Optional, Union

from .logging_config import get_logger
from .snapshot.models import SnapshotEnvironment

logger = get_logger(__name__)

UNKNOWN = "unknown"

BRANCH_ENV_VARS = ("GITHUB_REF_NAME", "CI_COMMIT_REF_NAME")
COMMIT_ENV_VARS = ("GITHUB_SHA", "CI_COMMIT_SHA")


def _git(root: Union[str, Path], *args: str) -> Optional[str]:
    """Run a git command under ``root`` and return stripped stdout, or None on any failure."""
    try:
        result = subprocess.run(
            ["git", "-C", str(root), *args],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (subprocess.TimeoutExpired, FileNotFoundError):
        return None
    if result.returncode != 0:
        return None
    output = result.stdout.strip()
    return output or None


def _from_env(names: tuple[str, ...]) -> Optional[str]:
    for name in names:
        value = os.environ.get(name)
        if value:
            return value
    return None


def detect_branch(root: Union[str, Path] = ".") -> str:
    """Current branch name, or ``"unknown"``.

    A detached HEAD reports ``HEAD`` from git; that case falls through to
    the CI variables, which is what CI checkouts usually need.
    """
    branch = _git(root, "rev-parse", "--abbrev-ref", "HEAD")
    if branch and branch != "HEAD":
        return branch
    branch = _from_env(BRANCH_ENV_VARS)
    if branch:
        logger.debug(f"Branch taken from CI environment: {branch}")
        return branch
    return UNKNOWN


def detect_commit(root: Union[str, Path] = ".") -> str:
    """Full commit SHA of HEAD, or ``"unknown"``."""
    commit = _git(root, "rev-parse", "HEAD")
    if commit:
        return commit
    commit = _from_env(COMMIT_ENV_VARS)
    if commit:
        logger.debug(f"Commit taken from CI environment: {commit}")
        return commit
    return UNKNOWN


def runtime_environment() -> SnapshotEnvironment:
    """Describe the interpreter and package version recorded in each snapshot."""
    from . import __version__

    return SnapshotEnvironment(
        runtime_version=platform.python_version(),
        package_version=__version__,
        platform=sys.platform,
    )
