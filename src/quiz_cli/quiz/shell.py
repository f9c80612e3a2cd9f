"""Interactive command loop mapping typed lines onto store operations."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Sequence

from rich.console import Console
from rich.text import Text

from . import view
from .model import MISSING_ID_MESSAGE, NotFoundError, QuizRecord, QuizStore
from .play import PlayResult, is_correct_answer, run_play_session
from .storage import QuizStorageError

__all__ = [
    "COMMANDS",
    "Prompter",
    "QuizShell",
    "ShellCommand",
]

# Called as ``prompt(message)`` or ``prompt(message, default)``.
Prompter = Callable[..., str]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShellCommand:
    """A shell command, its aliases and its help line."""

    names: tuple[str, ...]
    usage: str
    summary: str
    action: str
    takes_id: bool = False


_COMMAND_TABLE: Sequence[ShellCommand] = (
    ShellCommand(("h", "help"), "h|help", "Muestra esta ayuda.", "help"),
    ShellCommand(
        ("list",), "list", "Listar los quizzes existentes.", "list"
    ),
    ShellCommand(
        ("show",),
        "show <id>",
        "Muestra la pregunta y la respuesta el quiz indicado.",
        "show",
        takes_id=True,
    ),
    ShellCommand(
        ("add",), "add", "Añadir un nuevo quiz interactivamente.", "add"
    ),
    ShellCommand(
        ("delete",),
        "delete <id>",
        "Borrar el quiz indicado.",
        "delete",
        takes_id=True,
    ),
    ShellCommand(
        ("edit",), "edit <id>", "Editar el quiz indicado.", "edit", True
    ),
    ShellCommand(
        ("test",), "test <id>", "Probar el quiz indicado.", "test", True
    ),
    ShellCommand(
        ("p", "play"),
        "p|play",
        "Jugar a preguntar aleatoriamente todos los quizzes.",
        "play",
    ),
    ShellCommand(("credits",), "credits", "Créditos.", "credits"),
    ShellCommand(("q", "quit"), "q|quit", "Salir del programa.", "quit"),
)

COMMANDS: Mapping[str, ShellCommand] = {
    name: command for command in _COMMAND_TABLE for name in command.names
}


class QuizShell:
    """Read commands from ``prompt`` and run them against ``store``.

    ``NotFoundError`` and storage failures are reported on the console and
    the loop carries on; only ``quit``, end of input or Ctrl-C stop it.
    """

    def __init__(
        self,
        store: QuizStore,
        console: Console,
        prompt: Prompter,
        *,
        prompt_text: str = "quiz >",
        credits: Sequence[str] = (),
        rng: Optional[random.Random] = None,
    ) -> None:
        self.store = store
        self.console = console
        self._prompt = prompt
        self._prompt_text = prompt_text
        self._credits = tuple(credits)
        self._rng = rng

    def run(self) -> int:
        while True:
            try:
                line = self._prompt(Text(self._prompt_text, style="blue"))
                if not self.handle_line(line):
                    break
            except EOFError:
                self.console.print()
                break
            except KeyboardInterrupt:
                self.console.print()
                logger.info(
                    "Shell interrupted", extra={"event": "shell.abort"}
                )
                view.log(self.console, "¡Adiós!")
                return 130
        view.log(self.console, "¡Adiós!")
        return 0

    def handle_line(self, line: str) -> bool:
        """Run one command line. Returns ``False`` once the user quits."""

        words = line.split()
        if not words:
            return True
        name, argument = words[0].lower(), (words[1:2] or [None])[0]
        command = COMMANDS.get(name)
        if command is None:
            self._unknown(words[0])
            return True
        if command.action == "quit":
            return False

        logger.debug(
            "Running shell command",
            extra={"event": "shell.command", "command": command.action},
        )
        handler = getattr(self, command.action)
        try:
            if command.takes_id:
                handler(argument)
            else:
                handler()
        except NotFoundError as exc:
            logger.info(
                "Invalid quiz id",
                extra={"event": "shell.not_found", "index": exc.index},
            )
            view.error(self.console, exc.message)
        except QuizStorageError as exc:
            logger.error("Quiz data could not be saved", exc_info=True)
            view.error(self.console, str(exc))
        return True

    def list(self) -> None:
        for index, record in self.store.get_all():
            line = view.record_line(index, record, with_answer=False)
            view.log(self.console, line)

    def show(self, index: Optional[str]) -> None:
        key = _require_id(index)
        record = self.store.get_by_index(key)
        view.log(self.console, view.record_line(int(key), record))

    def add(self) -> int:
        question = self._prompt(_field_prompt("pregunta"))
        answer = self._prompt(_field_prompt("respuesta"))
        position = self.store.add(question, answer)
        view.log(
            self.console,
            Text.assemble(
                ("Se ha añadido", "magenta"),
                f": {question} ",
                ("=>", "magenta"),
                f" {answer}",
            ),
        )
        return position

    def delete(self, index: Optional[str]) -> None:
        key = _require_id(index)
        record = self.store.get_by_index(key)
        view.log(
            self.console,
            Text.assemble(
                f"El quiz '{record.question} ",
                ("=>", "magenta"),
                f" {record.answer}' ha sido borrado satisfactoriamente.",
            ),
        )
        self.store.delete_by_index(key)

    def edit(self, index: Optional[str]) -> None:
        key = _require_id(index)
        before = self.store.get_by_index(key)
        question = self._prompt(_field_prompt("pregunta"), before.question)
        answer = self._prompt(_field_prompt("respuesta"), before.answer)
        after = self.store.update(key, question, answer)
        view.log(
            self.console,
            Text.assemble(
                "Se ha cambiado el quiz '",
                _summary(key, before),
                "' por: '",
                _summary(key, after),
                "'",
            ),
        )

    def test(self, index: Optional[str]) -> bool:
        record = self.store.get_by_index(_require_id(index))
        given = self._prompt(view.question_prompt(record.question))
        correct = is_correct_answer(record.answer, given)
        if correct:
            view.banner(self.console, "CORRECTO", "green")
        else:
            view.banner(self.console, "INCORRECTO", "red")
        return correct

    def play(self) -> PlayResult:
        return run_play_session(
            self.store, self.console, self._prompt, rng=self._rng
        )

    def help(self) -> None:
        width = max(len(command.usage) for command in _COMMAND_TABLE)
        view.log(self.console, "Comandos:")
        for command in _COMMAND_TABLE:
            view.log(
                self.console,
                f"   {command.usage.ljust(width)} - {command.summary}",
            )

    def credits(self) -> None:
        view.log(self.console, "Autores de la práctica: ")
        for author in self._credits:
            view.log(self.console, f"   {author}", "green")

    def _unknown(self, name: str) -> None:
        view.log(
            self.console,
            Text.assemble("Comando desconocido: '", (name, "red"), "'"),
        )
        view.log(
            self.console,
            Text.assemble(
                "Use ", ("help", "green"), " para ver todos los comandos "
                "disponibles.",
            ),
        )


def _require_id(index: Optional[str]) -> str:
    if index is None:
        raise NotFoundError(MISSING_ID_MESSAGE)
    return index


def _field_prompt(field: str) -> Text:
    return Text(f"Introduzca una {field}:", style="red")


def _summary(key: str, record: QuizRecord) -> Text:
    return Text.assemble(
        "[", (key, "magenta"), f"] {record.question} ", ("=>", "magenta"),
        f" {record.answer}",
    )
