"""
Terminal front-end for a game against the automated player.

The view only learns about the board through the controller's collaborator
calls: ``render_move`` paints a mark, ``set_input_enabled`` tracks which cells
still accept input, and the listener callbacks report the game lifecycle.
"""
from __future__ import annotations

import asyncio
from typing import Callable, Dict, Optional, Union

from .config import DEFAULT_THINK_DELAY
from .controller import GameResult, TurnController, TurnState
from .errors import GameError
from .game_basics import GRID_SIZE, Coord, PlayerId
from .scheduling import AsyncioScheduler
from .solver import Difficulty

RESULT_MESSAGES = {
    GameResult.TIE: "It's a tie!",
    GameResult.HUMAN: "You win!",
    GameResult.AUTOMATED: "The computer wins!",
}


class ConsoleCell:
    """Rendering and input handle for one board cell."""

    def __init__(self, view: "ConsoleView") -> None:
        self.view = view

    def render_move(self, coord: Coord, player: PlayerId) -> None:
        self.view.marks[coord] = player.cell.symbol
        self.view.notify()

    def set_input_enabled(self, coord: Coord, enabled: bool) -> None:
        self.view.enabled[coord] = enabled


class ConsoleView:
    def __init__(self, write: Callable[[str], None] = print) -> None:
        self.write = write
        self.marks: Dict[Coord, str] = {}
        self.enabled: Dict[Coord, bool] = {}
        self.result: Optional[GameResult] = None
        self._changed = asyncio.Event()

    def attach(self, controller: TurnController) -> None:
        for row in range(GRID_SIZE):
            for col in range(GRID_SIZE):
                controller.register_cell_handle((row, col), ConsoleCell(self))
        controller.add_listener(self)

    def notify(self) -> None:
        self._changed.set()

    async def wait_for_change(self) -> None:
        await self._changed.wait()
        self._changed.clear()

    def draw(self) -> str:
        lines = ["  0 1 2"]
        for row in range(GRID_SIZE):
            lines.append(f"{row} " + " ".join(self.marks.get((row, col), ".") for col in range(GRID_SIZE)))
        return "\n".join(lines)

    def on_game_started(self) -> None:
        self.marks.clear()
        self.result = None
        self.write("New game. You are O; enter moves as 'row col'.")

    def on_game_over(self, result: int) -> None:
        self.result = GameResult(result)
        self.write(self.draw())
        self.write(RESULT_MESSAGES[self.result])
        self.notify()


def parse_coord(raw: str) -> Coord:
    parts = raw.replace(",", " ").split()
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Expected 'row col', got {raw!r}")
    return int(parts[0]), int(parts[1])


async def play_console(
    difficulty: Union[Difficulty, int, str] = Difficulty.OPTIMAL,
    automated_first: bool = False,
    think_delay: float = DEFAULT_THINK_DELAY,
    seed: Optional[int] = None,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> Optional[GameResult]:
    """Play one game in the terminal; returns the result, or None if the player quits."""
    loop = asyncio.get_running_loop()
    controller = TurnController(
        scheduler=AsyncioScheduler(loop),
        think_delay=think_delay,
        automated_first=automated_first,
        rng=seed,
    )
    view = ConsoleView(write)
    view.attach(controller)
    controller.start_game(difficulty)

    while controller.state is not TurnState.GAME_OVER:
        if controller.state is TurnState.AUTOMATED_THINKING:
            write("Computer is thinking...")
            while controller.state is TurnState.AUTOMATED_THINKING:
                await view.wait_for_change()
            continue
        write(view.draw())
        raw = (await loop.run_in_executor(None, read, "Your move: ")).strip()
        if raw.lower() in ("q", "quit", "exit"):
            return None
        try:
            controller.submit_human_move(parse_coord(raw))
        except (GameError, ValueError) as exc:
            write(f"Rejected: {exc}")
    return view.result
