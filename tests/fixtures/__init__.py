"""Shared testing helpers for the quiz_cli test suite."""

from .prompts import ScriptedPrompt, make_console  # noqa: F401

__all__ = [
    "ScriptedPrompt",
    "make_console",
]
