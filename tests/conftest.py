import os
import sys
from typing import Any, Callable, List

import pytest

# Add src to path for direct import
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
SRC = os.path.join(ROOT, 'src')
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from tictactoe_ai.game_basics import Board, Coord, PlayerId  # noqa: E402


class _Handle:
    def __init__(self, delay: float, callback: Callable[..., Any], args: tuple) -> None:
        self.delay = delay
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Queues callbacks until the test releases them."""

    def __init__(self) -> None:
        self.pending: List[_Handle] = []

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> _Handle:
        handle = _Handle(delay, callback, args)
        self.pending.append(handle)
        return handle

    def run_pending(self) -> None:
        while self.pending:
            handle = self.pending.pop(0)
            if not handle.cancelled:
                handle.callback(*handle.args)


class ScriptedStrategy:
    """Plays a fixed list of moves, in order."""

    def __init__(self, moves: List[Coord]) -> None:
        self.moves = list(moves)
        self.seen: List[Board] = []

    def select_move(self, board: Board, player: PlayerId) -> Coord:
        self.seen.append(board.copy())
        return self.moves.pop(0)


class RecordingListener:
    def __init__(self) -> None:
        self.started = 0
        self.results: List[int] = []

    def on_game_started(self) -> None:
        self.started += 1

    def on_game_over(self, result: int) -> None:
        self.results.append(result)


class RecordingHandle:
    def __init__(self) -> None:
        self.calls: List[tuple] = []

    def render_move(self, coord: Coord, player: PlayerId) -> None:
        self.calls.append(("render", coord, player))

    def set_input_enabled(self, coord: Coord, enabled: bool) -> None:
        self.calls.append(("input", coord, enabled))


@pytest.fixture
def manual_scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()
