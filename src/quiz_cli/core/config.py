"""TOML helpers shared by the quiz configuration loaders."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Mapping, MutableMapping

__all__ = [
    "TomlConfigError",
    "load_toml",
    "merge_defaults",
    "write_toml_template",
]


class TomlConfigError(RuntimeError):
    """Raised when a TOML document cannot be read or does not fit."""


def load_toml(path: Path) -> Mapping[str, Any]:
    """Parse the TOML document at ``path``.

    Both missing files and syntax errors surface as :class:`TomlConfigError`
    so callers only need to translate a single exception type.
    """

    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except FileNotFoundError as exc:
        raise TomlConfigError(f"Config file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise TomlConfigError(f"Invalid TOML in {path}: {exc}") from exc


def merge_defaults(
    base: MutableMapping[str, Any],
    override: Mapping[str, Any],
    *,
    path: str = "",
) -> None:
    """Merge ``override`` into ``base`` in place, rejecting unknown keys."""

    for key, value in override.items():
        dotted = f"{path}{key}"
        if key not in base:
            raise TomlConfigError(f"Unknown configuration key '{dotted}'.")
        current = base[key]
        if isinstance(current, MutableMapping):
            if not isinstance(value, Mapping):
                raise TomlConfigError(
                    f"Expected table for '{dotted}', "
                    f"found {type(value).__name__}."
                )
            merge_defaults(current, value, path=f"{dotted}.")
        else:
            base[key] = value


def write_toml_template(
    path: Path,
    *,
    template: str,
    overwrite: bool = False,
    mode: int = 0o600,
) -> Path:
    """Write ``template`` to ``path`` unless it already exists."""

    if path.exists() and not overwrite:
        raise TomlConfigError(f"Config already exists: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(template, encoding="utf-8")
    try:
        path.chmod(mode)
    except PermissionError:  # pragma: no cover - depends on filesystem
        pass
    return path
