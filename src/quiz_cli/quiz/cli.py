"""CLI entry points for the interactive quiz shell and its config file."""

from __future__ import annotations

import argparse
import random
import sys
from pathlib import Path
from typing import Sequence

from rich.console import Console

from quiz_cli.core import config_templates
from quiz_cli.core import workspace as workspace_mod
from quiz_cli.core.config_templates import ConfigTemplateError
from quiz_cli.core.logging import configure_logger
from quiz_cli.core.workspace import WorkspaceError

from .config import (
    CONFIG_FILENAME,
    ConfigOverrides,
    QuizConfigError,
    load_config,
)
from .model import QuizStore
from .shell import QuizShell
from .storage import QuizStorage, QuizStorageError
from .view import RichPrompt

LOGGER_NAME = "quiz_cli"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quiz shell",
        description=(
            "Open the interactive quiz shell to list, add, edit, delete, "
            "test and play quizzes."
        ),
        epilog=(
            "Run `quiz config init` to scaffold the default quiz.toml "
            "template."
        ),
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to a TOML config file (defaults to the workspace config).",
    )
    parser.add_argument(
        "--workspace",
        type=Path,
        help="Override the workspace root (defaults to QUIZ_CLI_DATA_HOME).",
    )
    parser.add_argument(
        "--data-file",
        type=Path,
        help="JSON file holding the quizzes.",
    )
    parser.add_argument(
        "--log-level",
        help="Logging level for the JSON log file (defaults to INFO).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=None,
        help="Echo log records to stderr.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed the random order used by `play`.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    overrides = ConfigOverrides(
        data_file=args.data_file,
        log_level=args.log_level,
        verbose=args.verbose,
    )
    try:
        load_result = load_config(
            config_path=args.config,
            overrides=overrides,
            workspace_path=args.workspace,
        )
    except (QuizConfigError, WorkspaceError) as exc:
        _print_error(str(exc))
        return 1

    config = load_result.config
    logger, log_path = configure_logger(
        LOGGER_NAME,
        log_dir=load_result.layout.path_for("logs"),
        level=config.log_level,
        verbose=config.verbose,
        filename="quiz.log",
    )

    storage = QuizStorage(config.data_file, seed_defaults=config.seed_defaults)
    try:
        records = storage.load()
    except QuizStorageError as exc:
        logger.error("Failed to load quiz data", exc_info=True)
        _print_error(str(exc))
        return 1

    logger.info(
        "Quiz shell started",
        extra={
            "data_file": config.data_file,
            "count": len(records),
            "config_path": load_result.config_path,
            "log_path": log_path,
        },
    )
    console = Console(highlight=False)
    shell = QuizShell(
        QuizStore(records, sink=storage),
        console,
        RichPrompt(console),
        prompt_text=config.prompt,
        credits=config.credits,
        rng=random.Random(args.seed) if args.seed is not None else None,
    )
    code = shell.run()
    logger.info("Quiz shell stopped", extra={"exit_code": code})
    return code


def config_main(argv: Sequence[str] | None = None) -> int:
    parser = _build_config_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        target = _resolve_config_target(args)
    except WorkspaceError as exc:
        _print_error(str(exc))
        return 1

    template = config_templates.get_template("quiz")
    try:
        written = template.write(target, overwrite=args.force)
    except ConfigTemplateError as exc:
        _print_error(str(exc))
        return 1

    sys.stdout.write(f"Wrote quiz config to {written}\n")
    return 0


def _build_config_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quiz config",
        description="Manage the quiz shell configuration file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    init_parser = subparsers.add_parser(
        "init", help="Write the default quiz.toml template."
    )
    init_parser.add_argument(
        "--path",
        type=Path,
        help="Destination (defaults to the workspace config directory).",
    )
    init_parser.add_argument(
        "--workspace",
        type=Path,
        help="Workspace root used to resolve the default destination.",
    )
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite the destination if it already exists.",
    )
    return parser


def _resolve_config_target(args: argparse.Namespace) -> Path:
    if args.path is not None:
        candidate = args.path.expanduser()
        if not candidate.is_absolute():
            candidate = (Path.cwd() / candidate).resolve()
        return candidate
    layout = workspace_mod.ensure_workspace(path=args.workspace)
    return layout.path_for("config") / CONFIG_FILENAME


def _print_error(message: str) -> None:
    sys.stderr.write(f"Error: {message}\n")


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
