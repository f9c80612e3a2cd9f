"""Randomized "play all" session over the quiz store.

The session is a small state machine. ``start_play``, ``draw`` and
``submit_answer`` are pure transitions over a frozen :class:`PlayState`;
``run_play_session`` drives them against a prompt callable and renders the
outcome. Questions are drawn uniformly among the indices not yet answered
and the session ends on the first wrong answer or once every question has
been answered correctly.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable

from rich.console import Console
from rich.text import Text

from . import view
from .model import QuizStore

__all__ = [
    "PlayPhase",
    "PlayResult",
    "PlayState",
    "draw",
    "is_correct_answer",
    "run_play_session",
    "start_play",
    "submit_answer",
]

AnswerPrompt = Callable[[Text], str]

logger = logging.getLogger(__name__)


class PlayPhase(Enum):
    SELECTING = "selecting"
    AWAITING_ANSWER = "awaiting_answer"
    CORRECT = "correct"
    INCORRECT = "incorrect"
    EXHAUSTED = "exhausted"

    @property
    def is_terminal(self) -> bool:
        return self in (PlayPhase.INCORRECT, PlayPhase.EXHAUSTED)


@dataclass(frozen=True)
class PlayState:
    """Snapshot of a play session between two transitions."""

    unresolved: tuple[int, ...]
    score: int = 0
    phase: PlayPhase = PlayPhase.SELECTING
    current: int | None = None


@dataclass(frozen=True)
class PlayResult:
    """Final score and terminal phase returned by ``run_play_session``."""

    score: int
    phase: PlayPhase
    asked: tuple[int, ...]


def is_correct_answer(expected: str, given: str | None) -> bool:
    """Trimmed, case-sensitive exact match."""

    return (given or "").strip() == expected


def start_play(count: int) -> PlayState:
    return PlayState(unresolved=tuple(range(count)))


def draw(state: PlayState, rng: random.Random) -> PlayState:
    """Pick the next question, or finish when nothing is left."""

    if state.phase not in (PlayPhase.SELECTING, PlayPhase.CORRECT):
        raise ValueError(f"Cannot draw a question while {state.phase.value}.")
    if not state.unresolved:
        return replace(state, phase=PlayPhase.EXHAUSTED, current=None)
    current = state.unresolved[rng.randrange(len(state.unresolved))]
    return replace(state, phase=PlayPhase.AWAITING_ANSWER, current=current)


def submit_answer(
    state: PlayState, expected: str, given: str | None
) -> PlayState:
    if state.phase is not PlayPhase.AWAITING_ANSWER or state.current is None:
        raise ValueError(f"No question pending while {state.phase.value}.")
    if not is_correct_answer(expected, given):
        return replace(state, phase=PlayPhase.INCORRECT)
    remaining = tuple(i for i in state.unresolved if i != state.current)
    return replace(
        state,
        unresolved=remaining,
        score=state.score + 1,
        phase=PlayPhase.CORRECT,
    )


def run_play_session(
    store: QuizStore,
    console: Console,
    prompt: AnswerPrompt,
    *,
    rng: random.Random | None = None,
) -> PlayResult:
    """Ask every quiz in random order until a miss or until none remain."""

    rng = rng or random.Random()
    state = start_play(store.count())
    asked: list[int] = []
    logger.info(
        "Play session started",
        extra={"event": "play.start", "count": len(state.unresolved)},
    )

    while True:
        state = draw(state, rng)
        if state.phase is PlayPhase.EXHAUSTED:
            view.log(console, "No hay preguntas para responder.")
            view.log(console, "La puntuación obtenida es de: ")
            view.banner(console, state.score, "red")
            break

        record = store.get_by_index(state.current)
        asked.append(state.current)
        given = prompt(view.question_prompt(record.question))
        state = submit_answer(state, record.answer, given)

        if state.phase is PlayPhase.INCORRECT:
            view.banner(console, "INCORRECTO", "red")
            view.log(console, "Se acabó el juego, su puntuación ha sido: ")
            view.banner(console, state.score, "yellow")
            break

        view.banner(console, "CORRECTO", "green")
        view.log(console, "Tu puntuación es: ")
        view.banner(console, state.score, "yellow")

    logger.info(
        "Play session finished",
        extra={
            "event": "play.finish",
            "phase": state.phase.value,
            "score": state.score,
        },
    )
    return PlayResult(
        score=state.score, phase=state.phase, asked=tuple(asked)
    )
