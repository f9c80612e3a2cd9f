"""Rich rendering helpers and the interactive prompt used by the shell.

User supplied questions and answers are always wrapped in ``Text`` so that
square brackets in a question are never interpreted as Rich markup.
"""

from __future__ import annotations

import sys
from types import ModuleType

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.text import Text

from .model import QuizRecord

__all__ = [
    "RichPrompt",
    "banner",
    "colorize",
    "error",
    "log",
    "question_prompt",
    "record_line",
]


def colorize(value: object, color: str | None = None) -> Text:
    return Text(str(value), style=color or "")


def log(
    console: Console, message: str | Text, color: str | None = None
) -> None:
    if isinstance(message, str):
        message = colorize(message, color)
    console.print(message)


def error(console: Console, message: str) -> None:
    console.print(
        Text.assemble(
            ("Error", "bold red"),
            ": ",
            (message, "red on bright_yellow"),
        )
    )


def banner(console: Console, message: object, color: str = "green") -> None:
    """Large, boxed rendering used for verdicts and scores."""

    console.print(
        Panel(
            Text(str(message), style=f"bold {color}", justify="center"),
            box=box.HEAVY,
            border_style=color,
            expand=False,
            padding=(1, 4),
        )
    )


def record_line(
    index: int, record: QuizRecord, *, with_answer: bool = True
) -> Text:
    line = Text.assemble(" [", (str(index), "magenta"), "]: ", record.question)
    if with_answer:
        line.append(" ")
        line.append("=>", style="magenta")
        line.append(f" {record.answer}")
    return line


def question_prompt(question: str) -> Text:
    return Text(f"{question}?", style="red")


class _InlinePrompt(Prompt):
    prompt_suffix = " "


class RichPrompt:
    """Blocking line reader backed by ``rich.prompt.Prompt``.

    When ``default`` is given and stdin is a terminal with line editing, the
    text is typed into the input line before the user starts, so it can be
    kept, amended or erased. Otherwise the reply is returned as typed.
    """

    def __init__(self, console: Console) -> None:
        self._console = console

    def __call__(
        self, message: str | Text, default: str | None = None
    ) -> str:
        editor = _line_editor() if default is not None else None
        if editor is None:
            return _InlinePrompt.ask(message, console=self._console)
        editor.set_startup_hook(lambda: editor.insert_text(default))
        try:
            return _InlinePrompt.ask(message, console=self._console)
        finally:
            editor.set_startup_hook()


def _line_editor() -> ModuleType | None:
    """Return ``readline`` when reading from an interactive terminal."""

    if sys.stdin is None or not sys.stdin.isatty():
        return None
    try:
        import readline
    except ImportError:  # pragma: no cover - platforms without readline
        return None
    return readline
