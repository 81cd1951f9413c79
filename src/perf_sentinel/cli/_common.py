"""Shared CLI helpers."""

from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..config import SentinelConfig, load_config
from ..exceptions import ConfigurationError

console = Console()


class ExitCode:
    """Semantic exit codes for CI observability.

    Ranges:
      0: Success
      1-9: Regression failures
      80-89: User errors (bad input)
      100+: Internal errors
    """

    SUCCESS = 0
    REGRESSION = 1
    CONFIG_ERROR = 81
    PATH_NOT_FOUND = 82
    INTERNAL_ERROR = 100


def fail(message: str, code: int) -> NoReturn:
    console.print(f"[red]Error:[/red] {escape(message)}")
    raise typer.Exit(code)


def split_csv(value: Optional[str]) -> Optional[list[str]]:
    """``"a, b"`` -> ``["a", "b"]``; None stays None so config values win."""
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


def normalize_extensions(values: Optional[list[str]]) -> Optional[list[str]]:
    if values is None:
        return None
    return [v if v.startswith(".") else f".{v}" for v in values]


def resolve_config(config: Optional[Path] = None, **overrides) -> SentinelConfig:
    """Build config from CLI options, exiting with CONFIG_ERROR on bad input."""
    try:
        return load_config(config_file=config, **overrides)
    except ConfigurationError as e:
        fail(str(e), ExitCode.CONFIG_ERROR)


def require_path(path: Path) -> Path:
    if not path.exists():
        fail(f"Path not found: {path}", ExitCode.PATH_NOT_FOUND)
    return path
