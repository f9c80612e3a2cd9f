"""Unified ``quiz`` entry point."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from importlib import import_module, metadata
from typing import Callable, Mapping, Optional, Sequence

CommandHandler = Callable[[Sequence[str]], int]


@dataclass(frozen=True)
class CommandSpec:
    """A ``quiz`` subcommand and the module function that implements it."""

    name: str
    summary: str
    module: str
    func: str = "main"
    is_interactive: bool = False

    def run(self, argv: Sequence[str]) -> int:
        return _run_module_command(
            self.module, self.func, f"quiz {self.name}", argv
        )


_COMMAND_SPECS: Sequence[CommandSpec] = (
    CommandSpec(
        name="init",
        summary="Bootstrap the quiz workspace directories.",
        module="quiz_cli.workspace.cli",
    ),
    CommandSpec(
        name="config",
        summary="Write the default quiz.toml configuration.",
        module="quiz_cli.quiz.cli",
        func="config_main",
    ),
    CommandSpec(
        name="shell",
        summary="Open the interactive quiz shell.",
        module="quiz_cli.quiz.cli",
        is_interactive=True,
    ),
)

COMMANDS: Mapping[str, CommandSpec] = {
    spec.name: spec for spec in _COMMAND_SPECS
}


def format_command_table() -> str:
    width = max(len(spec.name) for spec in _COMMAND_SPECS)
    lines = ["Available commands:"]
    for spec in _COMMAND_SPECS:
        suffix = " (interactive)" if spec.is_interactive else ""
        lines.append(f"  {spec.name.ljust(width)}  {spec.summary}{suffix}")
    return "\n".join(lines)


def format_usage() -> str:
    return "\n".join(
        [
            "Usage: quiz <command> [args...]",
            "Run `quiz list` for commands or `quiz help <name>` for details.",
            "",
            format_command_table(),
        ]
    )


def _print(
    text: str, *, stream: Optional[Callable[[str], object]] = None
) -> None:
    target = stream if stream is not None else sys.stdout.write
    if text:
        target(text + "\n")


def _print_error(text: str) -> None:
    _print(text, stream=sys.stderr.write)


def _handle_version() -> int:
    try:
        version = metadata.version("quiz-cli")
    except metadata.PackageNotFoundError:
        version = "unknown"
    _print(version)
    return 0


def _handle_help(argv: Sequence[str]) -> int:
    if not argv:
        _print(format_usage())
        return 0
    spec = COMMANDS.get(argv[0])
    if spec is None:
        _print_error(f"Unknown command '{argv[0]}'.")
        _print_error(format_command_table())
        return 2
    _print(f"{spec.name}: {spec.summary}")
    _print(f"Run `quiz {spec.name} --help` for command options.")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(argv if argv is not None else sys.argv[1:])

    if not args:
        _print(format_usage())
        return 2

    head, *tail = args
    if head in ("-h", "--help"):
        _print(format_usage())
        return 0
    if head in ("-V", "--version", "version"):
        return _handle_version()
    if head == "list":
        _print(format_command_table())
        return 0
    if head == "help":
        return _handle_help(tail)

    spec = COMMANDS.get(head)
    if spec is None:
        _print_error(f"Unknown command '{head}'.")
        _print_error(format_command_table())
        return 2
    return spec.run(tail)


def _run_module_command(
    module_name: str,
    func_name: str,
    prog_name: str,
    argv: Sequence[str],
) -> int:
    target = getattr(import_module(module_name), func_name)
    old_argv = sys.argv
    sys.argv = [prog_name, *argv]
    try:
        result = target(list(argv))
    except SystemExit as exc:
        return _normalize_system_exit(exc)
    finally:
        sys.argv = old_argv
    return result if isinstance(result, int) else 0


def _normalize_system_exit(exc: SystemExit) -> int:
    code = exc.code
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    _print_error(str(code))
    return 1


if __name__ == "__main__":  # pragma: no cover - manual invocation guard
    raise SystemExit(main())
