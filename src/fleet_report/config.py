"""Configuration loading and management for Fleet Report.

Configuration sources are merged in priority order:
    1. Defaults (defined in ReportConfig)
    2. Global config (~/.fleet-report.toml)
    3. Project config (./fleet-report.toml)
    4. Explicit config file
    5. Environment variables (FLEET_REPORT_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(include_fleet_instances=False)
    >>> config.include_fleet_instances
    False
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

ENV_PREFIX = "FLEET_REPORT_"


@dataclass(frozen=True)
class ReportConfig:
    """Defaults for report views and their rendering.

    Attributes:
        Filter defaults:
            include_fleet_instances, include_sole_tenant_instances: tenancy toggles
            include_windows_instances, include_linux_instances,
            include_unknown_os_instances: OS toggles
            include_spla_instances, include_byol_instances,
            include_unknown_licensed_instances: license toggles

        Output control:
            histogram_max_rows: Maximum histogram rows printed by the CLI
            verbosity: Logging verbosity level
    """

    # Filter defaults
    include_fleet_instances: bool = True
    include_sole_tenant_instances: bool = True
    include_windows_instances: bool = True
    include_linux_instances: bool = True
    include_unknown_os_instances: bool = True
    include_spla_instances: bool = True
    include_byol_instances: bool = True
    include_unknown_licensed_instances: bool = True

    # Output control
    histogram_max_rows: int = 90
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        if self.histogram_max_rows < 1:
            raise ValueError("histogram_max_rows must be at least 1")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be one of quiet, normal, verbose")


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> ReportConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated ReportConfig instance

    Raises:
        ConfigurationError: If a config file is missing or unreadable
        InvalidConfigError: If a value fails validation
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / ".fleet-report.toml"
    if global_config.exists():
        merged.update(_load_toml_section(global_config))

    project_config = Path.cwd() / "fleet-report.toml"
    if project_config.exists():
        merged.update(_load_toml_section(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_section(config_file))

    merged.update(_load_env_vars())

    # Convert verbosity boolean flags to string
    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"
    merged.update({k: v for k, v in overrides.items() if v is not None})

    unknown = sorted(set(merged) - set(ReportConfig.__dataclass_fields__))
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")

    merged = _check_types(merged)

    try:
        return ReportConfig(**merged)
    except ValueError as e:
        key = next(iter(_failing_keys(merged, str(e))), "config")
        raise InvalidConfigError(key, merged.get(key), str(e)) from e


def _check_types(merged: dict[str, Any]) -> dict[str, Any]:
    """Coerce merged values to their field types; strings go through the env parser."""
    type_hints = get_type_hints(ReportConfig)
    checked: dict[str, Any] = {}

    for key, value in merged.items():
        expected = type_hints[key]
        expected_type = str if getattr(expected, "__origin__", None) is Literal else expected

        if expected_type is int and isinstance(value, bool):
            raise InvalidConfigError(key, value, "expected an integer, got a boolean")
        if isinstance(value, expected_type):
            checked[key] = value
            continue
        if not isinstance(value, str):
            raise InvalidConfigError(
                key, value, f"expected {expected_type.__name__}, got {type(value).__name__}"
            )

        try:
            checked[key] = _parse_env_value(value, expected)
        except ValueError as e:
            raise InvalidConfigError(key, value, str(e)) from e

    return checked


def _failing_keys(merged: dict[str, Any], message: str) -> list[str]:
    return [k for k in merged if message.startswith(k)]


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from FLEET_REPORT_* environment variables.

    Example: FLEET_REPORT_INCLUDE_FLEET_INSTANCES=false
    """
    type_hints = get_type_hints(ReportConfig)
    result: dict[str, Any] = {}

    for field_name in ReportConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        try:
            result[field_name] = _parse_env_value(env_value, type_hints[field_name])
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e)) from e

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type."""
    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    # String (including Literal types like Verbosity)
    return value


def _load_toml_section(path: Path) -> dict[str, Any]:
    """Load a TOML file, returning its [report] table if present."""
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        # Fallback to tomli for Python 3.9-3.10
        import tomli as tomllib  # type: ignore

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}") from e

    section = data.get("report", data)
    if not isinstance(section, dict):
        raise ConfigurationError(f"Invalid config file '{path}': [report] must be a table")
    return section
