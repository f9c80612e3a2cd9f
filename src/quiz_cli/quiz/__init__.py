from .model import (
    INVALID_ID_MESSAGE,
    MISSING_ID_MESSAGE,
    NotFoundError,
    QuizRecord,
    QuizStore,
)
from .play import (
    PlayPhase,
    PlayResult,
    PlayState,
    draw,
    is_correct_answer,
    run_play_session,
    start_play,
    submit_answer,
)
from .shell import QuizShell
from .storage import DEFAULT_QUIZZES, QuizStorage, QuizStorageError

__all__ = [
    "INVALID_ID_MESSAGE",
    "MISSING_ID_MESSAGE",
    "NotFoundError",
    "QuizRecord",
    "QuizStore",
    "PlayPhase",
    "PlayResult",
    "PlayState",
    "draw",
    "is_correct_answer",
    "run_play_session",
    "start_play",
    "submit_answer",
    "QuizShell",
    "DEFAULT_QUIZZES",
    "QuizStorage",
    "QuizStorageError",
]
