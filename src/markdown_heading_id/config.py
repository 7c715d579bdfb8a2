"""
Config files for the markdown-heading-id CLI.

The nearest `.markdown-heading-id.toml`, `markdown-heading-id.toml` or
`pyproject.toml` with a `[tool.markdown-heading-id]` table supplies defaults.
Flags given on the command line still win over anything in the file.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

TOOL_NAME = "markdown-heading-id"


@dataclass
class HeadingIdConfig:
    """
    Settings read from a config file. `None` means the file left the setting out,
    so the CLI value (default or explicit) stays in force.
    """

    gfm: bool | None = None
    heading_ids: bool | None = None
    extensions: list[str] | None = None


# Checked in this order in each directory, nearest directory first.
_CONFIG_FILENAMES = [f".{TOOL_NAME}.toml", f"{TOOL_NAME}.toml", "pyproject.toml"]

_VALID_FIELDS = {f.name for f in fields(HeadingIdConfig)}


def _is_config_file(path: Path) -> bool:
    if not path.is_file():
        return False
    if path.name != "pyproject.toml":
        return True
    try:
        data = tomllib.loads(path.read_text())
    except (tomllib.TOMLDecodeError, OSError):
        return False
    return TOOL_NAME in data.get("tool", {})


def find_config_file(start_dir: Path) -> Path | None:
    """
    Nearest config file at or above `start_dir`. A `pyproject.toml` is skipped
    unless it has a `[tool.markdown-heading-id]` table.
    """
    start = start_dir.resolve()
    for directory in (start, *start.parents):
        for filename in _CONFIG_FILENAMES:
            candidate = directory / filename
            if _is_config_file(candidate):
                return candidate
    return None


def load_config(config_path: Path) -> HeadingIdConfig:
    """
    Load a `HeadingIdConfig` from a TOML file, either standalone or the
    `[tool.markdown-heading-id]` table of a `pyproject.toml`. A malformed file
    is reported on stderr and treated as empty.
    """
    try:
        data = tomllib.loads(config_path.read_text())
    except tomllib.TOMLDecodeError as e:
        print(f"Warning: ignoring malformed config file {config_path}: {e}", file=sys.stderr)
        return HeadingIdConfig()

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get(TOOL_NAME, {})

    return _parse_config_data(data)


def _parse_config_data(data: dict[str, Any]) -> HeadingIdConfig:
    """Parse a flat or sectioned TOML dict. Unknown keys are reported and skipped."""
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            for sub_key, sub_value in cast(dict[str, Any], value).items():
                flat[sub_key] = sub_value
        else:
            flat[key] = value

    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        snake_key = key.replace("-", "_")
        if snake_key in _VALID_FIELDS:
            mapped[snake_key] = value
        else:
            print(f"Warning: unrecognized config key: {key}", file=sys.stderr)

    extensions = mapped.get("extensions")
    if extensions is not None and not isinstance(extensions, list):
        raise ValueError(f"`extensions` must be a list of names, got: {extensions!r}")

    return HeadingIdConfig(**mapped)


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: HeadingIdConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Copy config settings onto `cli_opts`, except for options given explicitly
    on the command line.
    """
    if config is None:
        return cli_opts

    for name in sorted(_VALID_FIELDS - explicit_flags):
        value = getattr(config, name)
        if value is not None and hasattr(cli_opts, name):
            setattr(cli_opts, name, value)

    return cli_opts
