"""CLI entry point: registers all subcommands."""

from typing import Optional

import typer

from .. import __version__
from ..logging_config import setup_logging
from ._common import console

app = typer.Typer(
    name="perf-sentinel",
    help="perf-sentinel - static performance scanner with snapshot regression tracking",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"perf-sentinel {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable DEBUG logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Also write logs to this file"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """Scan sources for performance patterns and gate CI on score regressions."""
    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)


# Import subcommands to register them
from .analyze import analyze as _analyze, bulk as _bulk  # noqa: F401, E402
from .ci import ci as _ci  # noqa: F401, E402
from .baseline import baseline_app  # noqa: E402
from .snapshots import snapshots_app  # noqa: E402

app.add_typer(baseline_app, name="baseline")
app.add_typer(snapshots_app, name="snapshots")
