"""
TOML-based settings file loading for confload.

Searches for `.confload.toml`, `confload.toml`, or `pyproject.toml [tool.confload]`
walking up from the current directory. Settings are merged with CLI flags using
three-way precedence: explicit CLI flags > settings file > built-in defaults.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

logger = logging.getLogger(__name__)


@dataclass
class ConfloadSettings:
    """
    Parsed settings from a TOML file. Fields are `None` when not set in the file,
    allowing the merge logic to distinguish "not configured" from "explicitly set
    to default value".
    """

    # Lookup
    paths: list[str] | None = None
    env: str | None = None
    resource_type: str | None = None
    # Import behavior
    exclude: list[str] | None = None
    ignore_errors: bool | None = None
    # Output
    format: str | None = None


# Per-directory precedence, highest first
_SETTINGS_FILENAMES = [".confload.toml", "confload.toml", "pyproject.toml"]

# Mapping from TOML kebab-case keys to Python snake_case field names
_KEBAB_TO_SNAKE: dict[str, str] = {
    "resource-type": "resource_type",
    "ignore-errors": "ignore_errors",
}

_VALID_FIELDS = {f.name for f in fields(ConfloadSettings)}


def find_settings_file(start_dir: Path) -> Path | None:
    """
    Return the nearest settings file at or above `start_dir`, or `None`.
    """
    start = start_dir.resolve()
    for directory in (start, *start.parents):
        found = _settings_file_in(directory)
        if found is not None:
            return found
    return None


def _settings_file_in(directory: Path) -> Path | None:
    """
    The settings file for `directory` itself. `.confload.toml` wins over
    `confload.toml`, which wins over a `pyproject.toml` declaring `[tool.confload]`.
    """
    for filename in _SETTINGS_FILENAMES:
        candidate = directory / filename
        if not candidate.is_file():
            continue
        if filename != "pyproject.toml" or _declares_confload_table(candidate):
            return candidate
    return None


def _declares_confload_table(pyproject: Path) -> bool:
    try:
        data = tomllib.loads(pyproject.read_text())
    except (tomllib.TOMLDecodeError, OSError):
        return False
    tool = data.get("tool")
    return isinstance(tool, dict) and "confload" in tool


def load_settings(settings_path: Path) -> ConfloadSettings:
    """
    Load `ConfloadSettings` from a TOML file. Supports both standalone
    `confload.toml` / `.confload.toml` and `pyproject.toml` (extracts
    `[tool.confload]`). Malformed files log a warning and yield empty settings.
    Relative `paths` are resolved against the settings file's directory.
    """
    try:
        data = tomllib.loads(settings_path.read_text())
    except tomllib.TOMLDecodeError as e:
        logger.warning("ignoring malformed settings file %s: %s", settings_path, e)
        return ConfloadSettings()

    if settings_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("confload", {})

    settings = _parse_settings_data(data)
    if settings.paths is not None:
        base = settings_path.resolve().parent
        settings.paths = [str(base / p) for p in settings.paths]
    return settings


def _parse_settings_data(data: dict[str, Any]) -> ConfloadSettings:
    """Parse a flat or sectioned TOML dict into ConfloadSettings."""
    # Flatten sections: [lookup] and [import] merge into top level
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            for sub_key, sub_value in cast(dict[str, Any], value).items():
                flat[sub_key] = sub_value
        else:
            flat[key] = value

    # Map kebab-case to snake_case
    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        snake_key = _KEBAB_TO_SNAKE.get(key, key.replace("-", "_"))
        if snake_key in _VALID_FIELDS:
            mapped[snake_key] = value
        else:
            logger.warning("unrecognized config key: %s", key)

    # A single exclude pattern or search path may be given as a plain string
    for list_field in ("paths", "exclude"):
        if isinstance(mapped.get(list_field), str):
            mapped[list_field] = [mapped[list_field]]

    return ConfloadSettings(**mapped)


_T = TypeVar("_T")


def merge_cli_with_settings(
    cli_opts: _T,
    settings: ConfloadSettings | None,
    explicit_flags: set[str],
) -> _T:
    """
    Fill the options the user didn't pass on the command line (anything not in
    `explicit_flags`) from `settings`. Options the settings file leaves unset
    keep their built-in defaults.
    """
    if settings is None:
        return cli_opts

    overrides = {
        name: value
        for name, value in vars(settings).items()
        if value is not None and name not in explicit_flags and hasattr(cli_opts, name)
    }
    for name, value in overrides.items():
        setattr(cli_opts, name, value)
    return cli_opts
