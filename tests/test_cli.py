import logging
import os
import subprocess
import sys
from pathlib import Path

import pytest

from tictactoe_ai.cli import main

SRC = Path(__file__).resolve().parents[1] / "src"


def _run_cli(args: list[str], cwd: Path) -> subprocess.CompletedProcess:
    env = dict(os.environ)
    env["PYTHONPATH"] = str(SRC) + os.pathsep + env.get("PYTHONPATH", "")
    exe = [sys.executable, "-m", "tictactoe_ai.cli"]
    return subprocess.run(exe + args, cwd=cwd, capture_output=True, text=True, env=env)


def test_cli_symmetry_and_solve(tmp_path: Path):
    r = _run_cli(["symmetry", "--board", "100020000"], cwd=tmp_path)
    assert r.returncode == 0
    assert "canonical_form=" in r.stdout + r.stderr
    r = _run_cli(["solve", "--board", "220010000"], cwd=tmp_path)
    assert r.returncode == 0
    s = r.stdout + r.stderr
    assert "value=" in s and "best=(0, 2)" in s


@pytest.mark.parametrize("bad", ["abc", "012345678", "0123456789", "12345678x"])
def test_cli_error_invalid_boards(bad: str):
    assert main(["symmetry", "--board", bad]) == 2
    assert main(["solve", "--board", bad]) == 2


def test_cli_error_unreachable_state():
    assert main(["solve", "--board", "111222000"]) == 2
    assert main(["symmetry", "--board", "110000000"]) == 2


def test_solve_reports_first_best_move(caplog):
    caplog.set_level(logging.INFO)
    assert main(["solve", "--board", "020221011", "--player", "x"]) == 0
    assert "best=(0, 0)" in caplog.text
    assert "to_move=X value=1" in caplog.text


def test_solve_finished_board(caplog):
    caplog.set_level(logging.INFO)
    assert main(["solve", "--board", "111220200"]) == 0
    assert "game is over" in caplog.text


def test_solve_stdin(monkeypatch, capsys):
    import io

    monkeypatch.setattr(sys, "stdin", io.StringIO("220010000\nnot-a-board\n111220200\n"))
    assert main(["solve", "--stdin"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "board,to_move,value,best_move"
    assert out[1] == "220010000,X,0,0 2"
    assert len(out) == 2


def test_symmetry_stdin(monkeypatch, capsys):
    import io

    monkeypatch.setattr(sys, "stdin", io.StringIO("100000000\n"))
    assert main(["symmetry", "--stdin"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[1].startswith("100000000,000000001,4,")


def test_selfplay(caplog):
    caplog.set_level(logging.INFO)
    assert main(["--seed", "2", "selfplay", "--games", "3", "--cross", "random", "--circle", "random"]) == 0
    assert "games=3" in caplog.text
    assert main(["selfplay", "--games", "0"]) == 2


def test_bad_env_is_reported(monkeypatch):
    monkeypatch.setenv("TTT_THINK_DELAY", "later")
    assert main(["selfplay", "--games", "1", "--cross", "random", "--circle", "random"]) == 2


def test_play_uses_console(monkeypatch):
    seen = {}

    async def fake_play(difficulty, automated_first, delay, seed):
        seen.update(difficulty=difficulty, automated_first=automated_first, delay=delay, seed=seed)
        return None

    monkeypatch.delenv("TTT_THINK_DELAY", raising=False)
    monkeypatch.delenv("TTT_AUTOMATED_FIRST", raising=False)
    monkeypatch.setattr("tictactoe_ai.console.play_console", fake_play)
    assert main(["--seed", "9", "play", "--difficulty", "random", "--ai-first", "--delay", "0"]) == 0
    assert seen == {"difficulty": "random", "automated_first": True, "delay": 0.0, "seed": 9}


def test_version_and_help(capsys):
    assert main(["--version"]) == 0
    assert main([]) == 0
    assert "usage" in capsys.readouterr().out
