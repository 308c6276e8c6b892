"""
Turn state machine alternating the human and the automated player.

The controller owns the board. Human moves come in through
``submit_human_move``; the automated reply is computed straight away and
applied once the scheduler resumes the controller after the thinking delay.
All acceptance decisions derive from ``TurnState``: the human can only move
in ``AWAITING_HUMAN``, which is entered only after the automated move has
been applied and checked.

Rendering, per-cell input and lifecycle observers are collaborators reached
through ``CellHandle`` and ``GameListener``.
"""
from __future__ import annotations

import logging
from enum import Enum, IntEnum
from typing import Callable, Dict, List, Optional, Protocol, Union

import numpy as np

from .config import DEFAULT_THINK_DELAY
from .errors import IllegalStateCall, InvalidMove
from .game_basics import (
    TIE,
    Board,
    Coord,
    GameOutcome,
    OutcomeKind,
    PlayerId,
    from_index,
    game_outcome,
    has_won,
    to_index,
    win_for,
)
from .scheduling import Cancellable, ImmediateScheduler, Scheduler
from .solver import Difficulty, MoveStrategy, RngLike, strategy_for


class TurnState(Enum):
    IDLE = "idle"
    AWAITING_HUMAN = "awaiting_human"
    AUTOMATED_THINKING = "automated_thinking"
    GAME_OVER = "game_over"


class GameResult(IntEnum):
    """Codes passed to ``GameListener.on_game_over``."""

    TIE = -1
    HUMAN = 0
    AUTOMATED = 1

    @classmethod
    def from_outcome(cls, outcome: GameOutcome) -> "GameResult":
        if outcome.kind is OutcomeKind.TIE:
            return cls.TIE
        if outcome.kind is OutcomeKind.WIN:
            return cls.HUMAN if outcome.winner is PlayerId.HUMAN else cls.AUTOMATED
        raise ValueError("Game is still in progress")


class CellHandle(Protocol):
    def render_move(self, coord: Coord, player: PlayerId) -> None: ...

    def set_input_enabled(self, coord: Coord, enabled: bool) -> None: ...


class GameListener(Protocol):
    def on_game_started(self) -> None: ...

    def on_game_over(self, result: int) -> None: ...


StrategyFactory = Callable[[Difficulty, RngLike], MoveStrategy]


class TurnController:
    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        think_delay: float = DEFAULT_THINK_DELAY,
        automated_first: bool = False,
        rng: RngLike = None,
        strategy_factory: StrategyFactory = strategy_for,
    ) -> None:
        self.scheduler = scheduler if scheduler is not None else ImmediateScheduler()
        self.think_delay = think_delay
        self.automated_first = automated_first
        # shared by the strategies of every game this controller starts
        self.rng = rng if isinstance(rng, np.random.Generator) else np.random.default_rng(rng)
        self.strategy_factory = strategy_factory

        self._board = Board()
        self._state = TurnState.IDLE
        self._difficulty: Optional[Difficulty] = None
        self._strategy: Optional[MoveStrategy] = None
        self._handles: Dict[Coord, CellHandle] = {}
        self._listeners: List[GameListener] = []
        self._pending: Optional[Cancellable] = None
        self._generation = 0

    # -- queries ---------------------------------------------------------

    @property
    def state(self) -> TurnState:
        return self._state

    @property
    def board(self) -> Board:
        """A snapshot of the board; the controller keeps the original."""
        return self._board.copy()

    @property
    def difficulty(self) -> Optional[Difficulty]:
        return self._difficulty

    @property
    def outcome(self) -> GameOutcome:
        return game_outcome(self._board)

    # -- collaborators ---------------------------------------------------

    def register_cell_handle(self, coord: Coord, handle: CellHandle) -> None:
        to_index(coord)
        self._handles[(coord[0], coord[1])] = handle

    def add_listener(self, listener: GameListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: GameListener) -> None:
        self._listeners.remove(listener)

    # -- lifecycle -------------------------------------------------------

    def start_game(
        self,
        difficulty: Union[Difficulty, int, str] = Difficulty.OPTIMAL,
        automated_first: Optional[bool] = None,
    ) -> None:
        level = Difficulty.parse(difficulty)
        if automated_first is not None:
            self.automated_first = automated_first
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        self._generation += 1
        self._difficulty = level
        self._strategy = self.strategy_factory(level, self.rng)
        self._board = Board()
        self._state = TurnState.IDLE
        for coord, handle in self._handles.items():
            handle.set_input_enabled(coord, True)
        logging.info("New game: difficulty=%s automated_first=%s", level.name, self.automated_first)
        for listener in list(self._listeners):
            listener.on_game_started()
        if self.automated_first:
            self._begin_automated_turn()
        else:
            self._state = TurnState.AWAITING_HUMAN

    def submit_human_move(self, coord: Coord) -> None:
        if self._state is TurnState.IDLE:
            raise IllegalStateCall("No game in progress; call start_game first")
        if self._state is TurnState.GAME_OVER:
            raise IllegalStateCall("Game is already over")
        if self._state is not TurnState.AWAITING_HUMAN:
            logging.debug("Rejected human move %s during %s", coord, self._state.value)
            raise InvalidMove("It is not the human's turn")
        self._play(from_index(to_index(coord)), PlayerId.HUMAN)

    # -- turn handling ---------------------------------------------------

    def _play(self, coord: Coord, player: PlayerId) -> None:
        self._board.set(coord, player.cell)
        logging.debug("%s played %s", player.value, coord)
        handle = self._handles.get(coord)
        try:
            if handle is not None:
                handle.set_input_enabled(coord, False)
                handle.render_move(coord, player)
        finally:
            # the mark is on the board, so the turn advances even if a handle fails
            self._after_move(player)

    def _after_move(self, player: PlayerId) -> None:
        if has_won(self._board, player):
            self._finish(win_for(player))
        elif self._board.is_full():
            self._finish(TIE)
        elif player is PlayerId.HUMAN:
            self._begin_automated_turn()
        else:
            self._state = TurnState.AWAITING_HUMAN

    def _begin_automated_turn(self) -> None:
        if self._strategy is None:
            raise IllegalStateCall("No game in progress; call start_game first")
        self._state = TurnState.AUTOMATED_THINKING
        move = self._strategy.select_move(self._board, PlayerId.AUTOMATED)
        logging.debug("Automated player chose %s; applying in %.2fs", move, self.think_delay)
        generation = self._generation
        handle = self.scheduler.call_later(self.think_delay, self._resume_automated, generation, move)
        # a synchronous scheduler has already resumed by now
        if generation == self._generation and self._state is TurnState.AUTOMATED_THINKING:
            self._pending = handle

    def _resume_automated(self, generation: int, move: Coord) -> None:
        if generation != self._generation or self._state is not TurnState.AUTOMATED_THINKING:
            logging.debug("Dropping stale automated move %s", move)
            return
        self._pending = None
        self._play(move, PlayerId.AUTOMATED)

    def _finish(self, outcome: GameOutcome) -> None:
        self._state = TurnState.GAME_OVER
        result = GameResult.from_outcome(outcome)
        logging.info("Game over: %s", result.name.lower())
        for listener in list(self._listeners):
            listener.on_game_over(int(result))
