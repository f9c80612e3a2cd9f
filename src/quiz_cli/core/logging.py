"""Logging helpers for the quiz shell and its subcommands."""

from __future__ import annotations

import json
import logging
import os
import sys
import tempfile
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

__all__ = [
    "JsonLogFormatter",
    "configure_logger",
    "release_logger",
]

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}

_FILE_MARKER = "_quiz_cli_file"
_CONSOLE_MARKER = "_quiz_cli_console"


class JsonLogFormatter(logging.Formatter):
    """Render each record as a single JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extras = {
            key: _jsonable(value)
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS
        }
        if extras:
            payload["extra"] = extras
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logger(
    name: str,
    *,
    log_dir: Path,
    level: str = "INFO",
    verbose: bool = False,
    filename: str | None = None,
    max_bytes: int = 1024 * 1024,
    backup_count: int = 3,
) -> tuple[logging.Logger, Path]:
    """Attach a JSON file handler (and optionally stderr) to ``name``.

    Calling this repeatedly for the same logger reuses the existing handlers
    instead of stacking new ones; a different ``log_dir`` or ``filename``
    swaps the file handler for one writing to the new location. Returns the
    logger and the active log path, which may live under the temp directory
    when ``log_dir`` is not writable.
    """

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    log_name = filename or f"{name.rsplit('.', 1)[-1]}.log"
    handler = _find_handler(logger, _FILE_MARKER)
    if handler is not None and not _writes_to(handler, log_dir / log_name):
        logger.removeHandler(handler)
        handler.close()
        handler = None
    if handler is None:
        handler, path = _open_file_handler(
            log_dir, log_name, max_bytes, backup_count
        )
        handler.setFormatter(JsonLogFormatter())
        setattr(handler, _FILE_MARKER, True)
        logger.addHandler(handler)
    else:
        path = Path(handler.baseFilename)  # type: ignore[attr-defined]
    handler.setLevel(logging.DEBUG if verbose else _coerce_level(level))

    console = _find_handler(logger, _CONSOLE_MARKER)
    if verbose and console is None:
        console = logging.StreamHandler(stream=sys.stderr)
        console.setLevel(logging.DEBUG)
        console.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
        setattr(console, _CONSOLE_MARKER, True)
        logger.addHandler(console)
    elif not verbose and console is not None:
        logger.removeHandler(console)
        console.close()

    return logger, path


def release_logger(logger: logging.Logger) -> None:
    """Close and detach every handler attached to ``logger``."""

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def _find_handler(
    logger: logging.Logger, marker: str
) -> logging.Handler | None:
    for handler in logger.handlers:
        if getattr(handler, marker, False):
            return handler
    return None


def _writes_to(handler: logging.Handler, path: Path) -> bool:
    current = getattr(handler, "baseFilename", None)
    return current == os.path.abspath(path)


def _open_file_handler(
    log_dir: Path, filename: str, max_bytes: int, backup_count: int
) -> tuple[RotatingFileHandler, Path]:
    for directory in (log_dir, _fallback_log_dir()):
        path = directory / filename
        try:
            directory.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(
                path,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
        except PermissionError:
            continue
        try:
            path.chmod(0o600)
        except PermissionError:  # pragma: no cover - depends on filesystem
            pass
        return handler, path
    raise PermissionError(f"Unable to open a log file under {log_dir}")


def _coerce_level(level: str) -> int:
    numeric = logging.getLevelName(level.strip().upper())
    if isinstance(numeric, int):
        return numeric
    return logging.INFO


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, dict):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_jsonable(item) for item in value]
    return repr(value)


def _fallback_log_dir() -> Path:
    return Path(tempfile.gettempdir()) / "quiz-cli-logs"
