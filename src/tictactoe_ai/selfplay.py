"""
Strategy-vs-strategy games on a bare board, without the turn controller.

X is always the automated mark and O the human mark; either side can be
played by any strategy, which is how minimax is checked against itself and
against random play.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from .game_basics import Board, Cell, Coord, GameOutcome, PlayerId, game_outcome
from .solver import MinimaxStrategy, MoveStrategy, RandomStrategy, RngLike

STRATEGY_NAMES = ("random", "minimax", "optimal")


def make_strategy(name: str, rng: RngLike = None) -> MoveStrategy:
    """``minimax`` searches every position; ``optimal`` opens randomly like the Optimal tier."""
    if name == "random":
        return RandomStrategy(rng)
    if name == "minimax":
        return MinimaxStrategy()
    if name == "optimal":
        return MinimaxStrategy(opening=RandomStrategy(rng))
    raise ValueError(f"Unknown strategy: {name!r}")


@dataclass
class GameRecord:
    moves: List[Coord]
    outcome: GameOutcome
    board: Board


def play_game(
    cross: MoveStrategy,
    circle: MoveStrategy,
    first: Cell = Cell.CROSS,
    board: Optional[Board] = None,
) -> GameRecord:
    board = Board() if board is None else board.copy()
    strategies = {PlayerId.AUTOMATED: cross, PlayerId.HUMAN: circle}
    player = PlayerId.for_cell(first)
    moves: List[Coord] = []
    outcome = game_outcome(board)
    while not outcome.is_terminal:
        mv = strategies[player].select_move(board, player)
        board.set(mv, player.cell)
        moves.append(mv)
        outcome = game_outcome(board)
        player = player.opponent()
    return GameRecord(moves=moves, outcome=outcome, board=board)


@dataclass
class ArenaStats:
    games: int = 0
    results: Counter = field(default_factory=Counter)
    lengths: List[int] = field(default_factory=list)

    def record(self, game: GameRecord) -> None:
        self.games += 1
        if game.outcome.winner is None:
            self.results["tie"] += 1
        else:
            self.results[game.outcome.winner.cell.symbol] += 1
        self.lengths.append(len(game.moves))

    def summary(self) -> Dict[str, float]:
        lengths = np.asarray(self.lengths, dtype=float)
        return {
            "games": self.games,
            "x_wins": self.results["X"],
            "o_wins": self.results["O"],
            "ties": self.results["tie"],
            "mean_length": float(lengths.mean()) if self.games else 0.0,
        }


def run_arena(
    cross: str,
    circle: str,
    games: int,
    seed: Optional[int] = None,
    alternate_first: bool = False,
) -> ArenaStats:
    rng = np.random.default_rng(seed)
    x_strategy = make_strategy(cross, rng)
    o_strategy = make_strategy(circle, rng)
    stats = ArenaStats()
    for n in range(games):
        first = Cell.CIRCLE if alternate_first and n % 2 else Cell.CROSS
        stats.record(play_game(x_strategy, o_strategy, first=first))
    return stats
