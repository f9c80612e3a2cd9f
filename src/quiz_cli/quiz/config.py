"""Configuration loader for the interactive quiz shell."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, MutableMapping, Optional

from quiz_cli.core import config as core_config
from quiz_cli.core import workspace as workspace_mod

CONFIG_FILENAME = "quiz.toml"
CONFIG_ENV = "QUIZ_CLI_CONFIG"
ENV_PREFIX = "QUIZ_CLI_"
DATA_FILENAME = "quizzes.json"

_DEFAULT_PROMPT = "quiz >"
_DEFAULT_CREDITS = ("Jose Ignacio Villegas Villegas",)
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class QuizConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


@dataclass(frozen=True)
class QuizConfig:
    """Fully resolved settings for a shell run."""

    data_file: Path
    seed_defaults: bool
    prompt: str
    credits: tuple[str, ...]
    log_level: str
    verbose: bool


@dataclass(frozen=True)
class ConfigOverrides:
    """Values taken from command-line flags."""

    data_file: Optional[Path] = None
    log_level: Optional[str] = None
    verbose: Optional[bool] = None


@dataclass(frozen=True)
class LoadResult:
    config: QuizConfig
    layout: workspace_mod.WorkspaceLayout
    config_path: Optional[Path]


def load_config(
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
    workspace_path: Optional[Path] = None,
) -> LoadResult:
    """Resolve settings with precedence CLI > env > TOML file > defaults.

    The workspace config file is optional. A file requested explicitly via
    ``config_path`` or ``QUIZ_CLI_CONFIG`` must exist.
    """

    overrides = overrides or ConfigOverrides()
    env_map = os.environ if env is None else env

    layout = workspace_mod.ensure_workspace(env=env_map, path=workspace_path)
    explicit = config_path or _env_path(env_map, CONFIG_ENV)
    requested = explicit or layout.path_for("config") / CONFIG_FILENAME

    table = _default_table()
    loaded_path: Optional[Path] = None
    if requested.exists():
        try:
            core_config.merge_defaults(
                table, core_config.load_toml(requested)
            )
        except core_config.TomlConfigError as exc:
            raise QuizConfigError(str(exc)) from exc
        loaded_path = requested
    elif explicit is not None:
        raise QuizConfigError(f"Config file not found: {requested}")

    storage = table["storage"]
    shell = table["shell"]
    logging_table = table["logging"]

    data_file = _resolve_data_file(
        _first(
            overrides.data_file,
            _env_path(env_map, f"{ENV_PREFIX}DATA_FILE"),
            _optional_path(storage["data_file"], "storage.data_file"),
        ),
        layout,
    )
    seed_defaults = _first(
        _env_bool(env_map, f"{ENV_PREFIX}SEED_DEFAULTS"),
        _require_bool(storage["seed_defaults"], "storage.seed_defaults"),
    )
    log_level = _normalize_level(
        _first(
            overrides.log_level,
            _env_string(env_map, f"{ENV_PREFIX}LOG_LEVEL"),
            logging_table["level"],
        )
    )
    verbose = _first(
        overrides.verbose,
        _require_bool(logging_table["verbose"], "logging.verbose"),
    )

    config = QuizConfig(
        data_file=data_file,
        seed_defaults=seed_defaults,
        prompt=_require_string(shell["prompt"], "shell.prompt"),
        credits=_require_credits(shell["credits"]),
        log_level=log_level,
        verbose=verbose,
    )
    return LoadResult(config=config, layout=layout, config_path=loaded_path)


def _default_table() -> MutableMapping[str, MutableMapping[str, object]]:
    return {
        "storage": {"data_file": "", "seed_defaults": True},
        "shell": {
            "prompt": _DEFAULT_PROMPT,
            "credits": list(_DEFAULT_CREDITS),
        },
        "logging": {"level": "INFO", "verbose": False},
    }


def _resolve_data_file(
    candidate: Optional[Path], layout: workspace_mod.WorkspaceLayout
) -> Path:
    if candidate is None:
        return layout.path_for("data") / DATA_FILENAME
    candidate = candidate.expanduser()
    if not candidate.is_absolute():
        candidate = layout.home / candidate
    return candidate.resolve()


def _optional_path(value: object, key: str) -> Optional[Path]:
    if not isinstance(value, str):
        raise QuizConfigError(f"{key} must be a string.")
    value = value.strip()
    return Path(value) if value else None


def _require_bool(value: object, key: str) -> bool:
    if not isinstance(value, bool):
        raise QuizConfigError(f"{key} must be true or false.")
    return value


def _require_string(value: object, key: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise QuizConfigError(f"{key} must be a non-empty string.")
    return value.strip()


def _require_credits(value: object) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(
        isinstance(item, str) for item in value
    ):
        raise QuizConfigError("shell.credits must be a list of strings.")
    return tuple(value)


def _normalize_level(value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise QuizConfigError("logging.level must be a non-empty string.")
    return value.strip().upper()


def _env_string(env_map: Mapping[str, str], key: str) -> Optional[str]:
    raw = env_map.get(key)
    if raw is None:
        return None
    return raw.strip() or None


def _env_path(env_map: Mapping[str, str], key: str) -> Optional[Path]:
    raw = _env_string(env_map, key)
    return Path(raw).expanduser() if raw else None


def _env_bool(env_map: Mapping[str, str], key: str) -> Optional[bool]:
    raw = _env_string(env_map, key)
    if raw is None:
        return None
    lowered = raw.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise QuizConfigError(f"{key} must be a boolean value, got '{raw}'.")


def _first(*candidates):
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None
