from __future__ import annotations

import json
from dataclasses import dataclass, field

import pytest

from quiz_cli.quiz import cli as quiz_cli
from quiz_cli.quiz.storage import DEFAULT_QUIZZES

from fixtures import ScriptedPrompt


@dataclass
class ScriptedInput:
    replies: list = field(default_factory=list)
    prompts: list[ScriptedPrompt] = field(default_factory=list)


@pytest.fixture
def scripted_input(monkeypatch) -> ScriptedInput:
    """Swap the Rich prompt for scripted ones fed from ``replies``."""

    state = ScriptedInput()

    def factory(console):
        prompt = ScriptedPrompt(state.replies)
        state.prompts.append(prompt)
        return prompt

    monkeypatch.setattr(quiz_cli, "RichPrompt", factory)
    return state


def test_shell_session_persists_changes(tmp_path, scripted_input, capsys):
    data_file = tmp_path / "quizzes.json"
    scripted_input.replies.extend(
        ["add", "2+2", "4", "delete 0", "list", "quit"]
    )

    code = quiz_cli.main(
        ["--workspace", str(tmp_path / "ws"), "--data-file", str(data_file)]
    )

    assert code == 0
    saved = json.loads(data_file.read_text(encoding="utf-8"))
    assert saved[0]["question"] == DEFAULT_QUIZZES[1].question
    assert saved[-1] == {"question": "2+2", "answer": "4"}
    out = capsys.readouterr().out
    assert "Se ha añadido" in out
    assert "¡Adiós!" in out


def test_shell_writes_json_log(tmp_path, scripted_input):
    scripted_input.replies.extend(["show 0", "quit"])
    workspace = tmp_path / "ws"

    code = quiz_cli.main(["--workspace", str(workspace)])

    assert code == 0
    log_path = workspace / "logs" / "quiz.log"
    entries = [
        json.loads(line)
        for line in log_path.read_text(encoding="utf-8").splitlines()
    ]
    messages = [entry["message"] for entry in entries]
    assert "Quiz shell started" in messages
    assert "Quiz shell stopped" in messages
    assert all(entry["logger"].startswith("quiz_cli") for entry in entries)


def test_seeded_play_is_reproducible(tmp_path, scripted_input, capsys):
    outputs = []
    for _ in range(2):
        scripted_input.replies.clear()
        scripted_input.replies.extend(["play", "quit"])
        code = quiz_cli.main(
            [
                "--workspace",
                str(tmp_path / "ws"),
                "--data-file",
                str(tmp_path / "missing.json"),
                "--seed",
                "42",
            ]
        )
        assert code == 0
        outputs.append(capsys.readouterr().out)

    first, second = scripted_input.prompts
    assert outputs[0] == outputs[1]
    assert first.messages == second.messages
    assert first.messages[1].endswith("?")
    assert "INCORRECTO" in outputs[0]


def test_unreadable_data_file_fails(tmp_path, scripted_input, capsys):
    data_file = tmp_path / "quizzes.json"
    data_file.write_text("{broken", encoding="utf-8")

    code = quiz_cli.main(
        ["--workspace", str(tmp_path / "ws"), "--data-file", str(data_file)]
    )

    assert code == 1
    assert "Unable to read quiz data" in capsys.readouterr().err


def test_bad_config_fails(tmp_path, scripted_input, capsys):
    bad = tmp_path / "bad.toml"
    bad.write_text("[nope]\n", encoding="utf-8")

    code = quiz_cli.main(
        ["--workspace", str(tmp_path / "ws"), "--config", str(bad)]
    )

    assert code == 1
    assert "Unknown configuration key 'nope'" in capsys.readouterr().err


def test_config_init_writes_template(tmp_path, capsys):
    workspace = tmp_path / "ws"

    code = quiz_cli.config_main(["init", "--workspace", str(workspace)])

    target = workspace / "config" / "quiz.toml"
    assert code == 0
    assert target.exists()
    assert "[storage]" in target.read_text(encoding="utf-8")
    assert str(target) in capsys.readouterr().out


def test_config_init_refuses_overwrite_without_force(tmp_path, capsys):
    target = tmp_path / "quiz.toml"
    target.write_text("# mine\n", encoding="utf-8")

    code = quiz_cli.config_main(["init", "--path", str(target)])
    assert code == 1
    assert "already exists" in capsys.readouterr().err
    assert target.read_text(encoding="utf-8") == "# mine\n"

    code = quiz_cli.config_main(["init", "--path", str(target), "--force"])
    assert code == 0
    assert "[shell]" in target.read_text(encoding="utf-8")
