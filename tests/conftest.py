from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Iterator

import pytest

TESTS_DIR = Path(__file__).resolve().parent
ROOT = TESTS_DIR.parent
for extra in (TESTS_DIR, ROOT / "src"):
    path_str = str(extra)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from fixtures import ScriptedPrompt, make_console  # noqa: E402
from quiz_cli.core.logging import release_logger  # noqa: E402
from quiz_cli.quiz.model import QuizRecord, QuizStore  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch, tmp_path) -> Iterator[None]:
    """Keep host QUIZ_CLI_* settings and the home workspace out of tests."""

    for key in list(os.environ):
        if key.startswith("QUIZ_CLI_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("QUIZ_CLI_DATA_HOME", str(tmp_path / "workspace"))
    yield
    release_logger(logging.getLogger("quiz_cli"))


@pytest.fixture
def store() -> QuizStore:
    return QuizStore(
        [
            QuizRecord("2+2", "4"),
            QuizRecord("capital of France", "Paris"),
        ]
    )


@pytest.fixture
def console():
    return make_console()


@pytest.fixture
def scripted():
    """Build a prompt that replays the given replies in order."""

    return ScriptedPrompt
