"""Configuration loading and management for perf-sentinel.

Configuration sources are merged in priority order:
    1. Defaults (defined in SentinelConfig)
    2. Project config (./perf-sentinel.toml)
    3. Explicit config file (--config)
    4. Environment variables (PERF_SENTINEL_* prefix)
    5. CLI overrides (passed as kwargs)

Alert thresholds live in a ``[thresholds]`` table:

    [thresholds]
    max_score_regression = 5
    max_high_severity_increase = 2
    max_total_issues_increase = 10
    min_score_improvement = 2

Example:
    >>> config = load_config(baseline_branch="develop")
    >>> config.thresholds.max_score_regression
    5.0
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

PROJECT_CONFIG_NAME = "perf-sentinel.toml"
ENV_PREFIX = "PERF_SENTINEL_"

OUTPUT_FORMATS = ("console", "json", "github-comment")


@dataclass(frozen=True)
class AlertThresholds:
    """Limits the alert engine applies to a snapshot comparison.

    Attributes:
        max_score_regression: Average-score drop (points) above which a run fails
        max_high_severity_increase: Allowed growth in high-severity issues
        max_total_issues_increase: Allowed growth in total issues
        min_score_improvement: Average-score gain worth calling out
    """

    max_score_regression: float = 5.0
    max_high_severity_increase: float = 2.0
    max_total_issues_increase: float = 10.0
    min_score_improvement: float = 2.0

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidConfigError(f.name, value, "must be a number")
            if value < 0:
                raise InvalidConfigError(f.name, value, "must be non-negative")

    def to_dict(self) -> dict[str, float]:
        return {
            "maxScoreRegression": self.max_score_regression,
            "maxHighSeverityIncrease": self.max_high_severity_increase,
            "maxTotalIssuesIncrease": self.max_total_issues_increase,
            "minScoreImprovement": self.min_score_improvement,
        }


DEFAULT_THRESHOLDS = AlertThresholds()


@dataclass(frozen=True)
class SentinelConfig:
    """Settings for scanning, snapshot storage and the CI gate.

    Attributes:
        Storage:
            snapshots_dir: Root of the snapshot store
            baseline_branch: Branch whose baseline the CI run compares against
            snapshot_max_age_days: Age after which ``snapshots cleanup`` deletes a snapshot

        File filtering:
            extensions: File suffixes to analyze
            exclude_patterns: Glob patterns to exclude from analysis
            max_files: Maximum number of files to analyze

        CI behavior:
            output_formats: Any of console, json, github-comment
            fail_on_regression: Exit non-zero when the alert status is fail
            warn_on_regression: Print the report when the alert status is warning
    """

    # Storage
    snapshots_dir: str = ".performance-snapshots"
    baseline_branch: str = "main"
    snapshot_max_age_days: int = 7

    # File filtering
    extensions: list[str] = field(default_factory=lambda: [".ts", ".tsx", ".js", ".jsx"])
    exclude_patterns: list[str] = field(
        default_factory=lambda: [
            "node_modules/*",
            "dist/*",
            "build/*",
            ".git/*",
            "*.test.*",
            "*.spec.*",
        ]
    )
    max_files: int = 1000

    # CI behavior
    output_formats: list[str] = field(default_factory=lambda: ["console"])
    fail_on_regression: bool = True
    warn_on_regression: bool = True

    thresholds: AlertThresholds = field(default_factory=AlertThresholds)

    def __post_init__(self) -> None:
        if not self.snapshots_dir:
            raise InvalidConfigError("snapshots_dir", self.snapshots_dir, "must not be empty")
        if not self.baseline_branch:
            raise InvalidConfigError("baseline_branch", self.baseline_branch, "must not be empty")
        if self.snapshot_max_age_days < 0:
            raise InvalidConfigError(
                "snapshot_max_age_days", self.snapshot_max_age_days, "must be non-negative"
            )
        if self.max_files < 1:
            raise InvalidConfigError("max_files", self.max_files, "must be at least 1")
        if not self.extensions:
            raise InvalidConfigError("extensions", self.extensions, "must not be empty")
        for fmt in self.output_formats:
            if fmt not in OUTPUT_FORMATS:
                raise InvalidConfigError(
                    "output_formats", fmt, f"must be one of {', '.join(OUTPUT_FORMATS)}"
                )

    @property
    def snapshot_max_age_ms(self) -> int:
        return self.snapshot_max_age_days * 24 * 60 * 60 * 1000


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> SentinelConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options do not mask file values.
            Threshold fields may be passed flat (``max_score_regression=3``).

    Returns:
        Validated SentinelConfig instance

    Raises:
        ConfigurationError: If a config file is missing or invalid, or a
            value has the wrong type.
    """
    merged: dict[str, Any] = {}
    thresholds: dict[str, Any] = {}

    def absorb(source: dict[str, Any], origin: str) -> None:
        table = source.pop("thresholds", None)
        if table is not None:
            if not isinstance(table, dict):
                raise ConfigurationError(f"Invalid [thresholds] in {origin}: expected a table")
            thresholds.update(table)
        merged.update(source)

    # 1. Project config
    project_config = Path.cwd() / PROJECT_CONFIG_NAME
    if project_config.exists():
        absorb(_load_toml_file(project_config), str(project_config))

    # 2. Explicit config file
    if config_file is not None:
        config_file = Path(config_file)
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        absorb(_load_toml_file(config_file), str(config_file))

    # 3. Environment variables
    merged.update(_load_env_vars(SentinelConfig, ENV_PREFIX))
    thresholds.update(_load_env_vars(AlertThresholds, ENV_PREFIX))

    # 4. CLI overrides
    threshold_names = {f.name for f in fields(AlertThresholds)}
    for key, value in overrides.items():
        if value is None:
            continue
        if key in threshold_names:
            thresholds[key] = value
        elif key == "thresholds" and isinstance(value, AlertThresholds):
            thresholds.update({f.name: getattr(value, f.name) for f in fields(value)})
        else:
            merged[key] = value

    try:
        merged["thresholds"] = AlertThresholds(**thresholds)
    except TypeError as e:
        raise ConfigurationError(f"Invalid [thresholds] config: {e}")

    try:
        return SentinelConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars(target: type, prefix: str) -> dict[str, Any]:
    """Load fields of ``target`` from ``<prefix><FIELD_NAME>`` environment variables.

    Examples:
        PERF_SENTINEL_BASELINE_BRANCH=develop
        PERF_SENTINEL_FAIL_ON_REGRESSION=false
        PERF_SENTINEL_MAX_SCORE_REGRESSION=3.5
        PERF_SENTINEL_OUTPUT_FORMATS=console,json
    """
    type_hints = get_type_hints(target)
    result: dict[str, Any] = {}

    for f in fields(target):
        env_key = f"{prefix}{f.name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        type_hint = type_hints.get(f.name)
        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}")
        if parsed is not None:
            result[f.name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string into the field's type.

    Returns None for types that cannot come from the environment (nested
    dataclasses).

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Comma-separated lists
    if origin is list:
        return [item.strip() for item in value.split(",") if item.strip()]

    # Bool: accept true/false/1/0/yes/no
    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str:
        return value

    return None


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If tomllib/tomli is unavailable or parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            # Fallback to tomli for Python 3.9-3.10
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")
