from __future__ import annotations

import random

import pytest

from quiz_cli.quiz.model import QuizRecord, QuizStore
from quiz_cli.quiz.play import (
    PlayPhase,
    PlayState,
    draw,
    is_correct_answer,
    run_play_session,
    start_play,
    submit_answer,
)


class Oracle:
    """Answer each posed question from a lookup, recording what was asked."""

    def __init__(self, answers: dict[str, str], wrong_on: str | None = None):
        self.answers = answers
        self.wrong_on = wrong_on
        self.asked: list[str] = []

    def __call__(self, message, default=None):
        question = message.plain.rstrip("?")
        self.asked.append(question)
        if question == self.wrong_on:
            return "definitely wrong"
        return f"  {self.answers[question]} "


def _store(size: int) -> QuizStore:
    return QuizStore(QuizRecord(f"q{i}", f"a{i}") for i in range(size))


def test_is_correct_answer_trims_but_keeps_case():
    assert is_correct_answer("Paris", "  Paris\n")
    assert not is_correct_answer("Paris", "paris")
    assert not is_correct_answer("Paris", "")
    assert not is_correct_answer("Paris", None)
    assert is_correct_answer("", "   ")


def test_start_play_covers_every_index_once():
    state = start_play(3)

    assert state == PlayState(unresolved=(0, 1, 2))
    assert state.phase is PlayPhase.SELECTING
    assert state.score == 0


def test_draw_on_empty_working_set_exhausts():
    state = draw(start_play(0), random.Random(1))

    assert state.phase is PlayPhase.EXHAUSTED
    assert state.phase.is_terminal
    assert state.score == 0


def test_draw_picks_from_unresolved_only():
    rng = random.Random(7)
    state = PlayState(unresolved=(4, 9))

    picks = {draw(state, rng).current for _ in range(50)}

    assert picks == {4, 9}


def test_correct_answer_scores_and_removes_index():
    state = PlayState(
        unresolved=(0, 1), phase=PlayPhase.AWAITING_ANSWER, current=1
    )

    after = submit_answer(state, "Paris", " Paris ")

    assert after.phase is PlayPhase.CORRECT
    assert after.score == 1
    assert after.unresolved == (0,)
    assert state.unresolved == (0, 1)


def test_wrong_answer_is_terminal_and_keeps_score():
    state = PlayState(
        unresolved=(0,), score=3, phase=PlayPhase.AWAITING_ANSWER, current=0
    )

    after = submit_answer(state, "4", "")

    assert after.phase is PlayPhase.INCORRECT
    assert after.phase.is_terminal
    assert after.score == 3


def test_transitions_reject_wrong_phase():
    with pytest.raises(ValueError):
        submit_answer(start_play(1), "a", "a")
    terminal = PlayState(unresolved=(0,), phase=PlayPhase.INCORRECT)
    with pytest.raises(ValueError):
        draw(terminal, random.Random())


def test_all_correct_exhausts_with_full_score(store, console):
    oracle = Oracle({"2+2": "4", "capital of France": "Paris"})

    result = run_play_session(store, console, oracle, rng=random.Random(3))

    assert result.phase is PlayPhase.EXHAUSTED
    assert result.score == 2
    assert sorted(result.asked) == [0, 1]
    assert sorted(oracle.asked) == ["2+2", "capital of France"]
    output = console.export_text()
    assert output.count("CORRECTO") == 2
    assert "No hay preguntas para responder." in output
    assert "La puntuación obtenida es de:" in output


@pytest.mark.parametrize("seed", range(10))
def test_never_draws_an_index_twice(seed, console):
    store = _store(8)
    oracle = Oracle({f"q{i}": f"a{i}" for i in range(8)})

    result = run_play_session(store, console, oracle, rng=random.Random(seed))

    assert len(result.asked) == 8
    assert len(set(result.asked)) == 8
    assert result.score == 8


def test_first_wrong_answer_stops_immediately(store, console):
    oracle = Oracle(
        {"2+2": "4", "capital of France": "Paris"}, wrong_on="2+2"
    )

    result = run_play_session(store, console, oracle, rng=random.Random(0))

    assert result.phase is PlayPhase.INCORRECT
    assert oracle.asked[-1] == "2+2"
    assert result.score == len(oracle.asked) - 1
    output = console.export_text()
    assert "INCORRECTO" in output
    assert "Se acabó el juego, su puntuación ha sido:" in output


def test_wrong_first_answer_scores_zero(console):
    store = QuizStore([QuizRecord("2+2", "4")])

    result = run_play_session(
        store, console, lambda message: "wrong", rng=random.Random(0)
    )

    assert result.score == 0
    assert result.phase is PlayPhase.INCORRECT
    assert result.asked == (0,)


def test_empty_store_reports_no_questions(console):
    def never_called(message):
        raise AssertionError("no question should be posed")

    result = run_play_session(QuizStore(), console, never_called)

    assert result.phase is PlayPhase.EXHAUSTED
    assert result.score == 0
    assert result.asked == ()
    assert "No hay preguntas para responder." in console.export_text()


def test_session_never_mutates_store(store, console):
    before = store.get_all()

    run_play_session(
        store, console, lambda message: "nope", rng=random.Random(1)
    )

    assert store.get_all() == before


def test_question_is_posed_with_question_mark(console):
    store = QuizStore([QuizRecord("Capital de Italia", "Roma")])
    seen = []

    def prompt(message):
        seen.append(message.plain)
        return "Roma"

    run_play_session(store, console, prompt)

    assert seen == ["Capital de Italia?"]
