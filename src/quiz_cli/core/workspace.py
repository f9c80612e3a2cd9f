"""Per-user workspace holding quiz config, logs and data files."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

WORKSPACE_ENV = "QUIZ_CLI_DATA_HOME"
DEFAULT_WORKSPACE = Path.home() / ".quiz-cli-data"

_SUBDIRS = ("config", "logs", "data")


class WorkspaceError(RuntimeError):
    """Raised when the workspace layout cannot be prepared."""


@dataclass(frozen=True)
class WorkspaceLayout:
    """Resolved workspace paths and whether each was created just now."""

    home: Path
    directories: Mapping[str, Path]
    created: Mapping[str, bool]

    def path_for(self, key: str) -> Path:
        try:
            return self.directories[key]
        except KeyError as exc:
            raise KeyError(f"Unknown workspace directory '{key}'.") from exc

    def items(self) -> tuple[tuple[str, Path], ...]:
        return tuple(self.directories.items())


def ensure_workspace(
    *,
    env: Mapping[str, str] | None = None,
    path: Path | None = None,
) -> WorkspaceLayout:
    """Create the workspace directories if needed and return their layout.

    An explicit ``path`` wins over ``QUIZ_CLI_DATA_HOME``, which wins over
    ``~/.quiz-cli-data``. Only the implicit default falls back to the temp
    directory when it cannot be created.
    """

    env_map = os.environ if env is None else env
    base, explicit = _resolve_base(env_map, path)

    candidates = [base]
    if not explicit:
        candidates.append(Path(tempfile.gettempdir()) / "quiz-cli-data")

    error: PermissionError | None = None
    for candidate in candidates:
        try:
            return _materialize(candidate)
        except PermissionError as exc:
            error = exc
    raise WorkspaceError(f"Unable to prepare workspace at {base}") from error


def _resolve_base(
    env: Mapping[str, str], override: Path | None
) -> tuple[Path, bool]:
    if override is not None:
        return override.expanduser().absolute(), True
    custom = (env.get(WORKSPACE_ENV) or "").strip()
    if custom:
        return Path(custom).expanduser().absolute(), True
    return DEFAULT_WORKSPACE, False


def _materialize(base: Path) -> WorkspaceLayout:
    if base.exists() and not base.is_dir():
        raise WorkspaceError(
            f"Configured workspace exists and is not a directory: {base}"
        )

    created = {"home": _ensure_dir(base)}
    directories: dict[str, Path] = {}
    for name in _SUBDIRS:
        target = base / name
        if target.exists() and not target.is_dir():
            raise WorkspaceError(
                f"Expected workspace directory for '{name}' but found a "
                f"file: {target}"
            )
        created[name] = _ensure_dir(target)
        directories[name] = target

    return WorkspaceLayout(
        home=base,
        directories=MappingProxyType(directories),
        created=MappingProxyType(created),
    )


def _ensure_dir(path: Path) -> bool:
    existed = path.is_dir()
    path.mkdir(parents=True, exist_ok=True)
    try:
        path.chmod(0o700)
    except (PermissionError, NotImplementedError):  # pragma: no cover
        pass
    return not existed
