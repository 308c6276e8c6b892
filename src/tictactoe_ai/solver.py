"""
Move selection for the automated player: uniform random play and exhaustive negamax.

Negamax scores a position from the perspective of the player being scored:
+1 if that player already has a line, -1 if the opponent does, 0 for a full
board, otherwise the best negated score over its moves. Search mutates the
board in place and restores every cell before returning.

Tie-break policy:
- Moves are tried in canonical row-major order.
- A move replaces the current best only on a strictly higher score, so the
  first best move in canonical order is kept.
- There is no depth term: a slow forced win scores the same as a fast one.
"""
from __future__ import annotations

import logging
from enum import IntEnum
from typing import List, Optional, Protocol, Tuple, Union

import numpy as np

from .game_basics import Board, Coord, PlayerId, has_won


class Difficulty(IntEnum):
    RANDOM = 0
    OPTIMAL = 1

    @classmethod
    def parse(cls, value: Union["Difficulty", int, str]) -> "Difficulty":
        if isinstance(value, str):
            key = value.strip().upper()
            if key.isdigit():
                return cls(int(key))
            try:
                return cls[key]
            except KeyError:
                raise ValueError(f"Unknown difficulty: {value!r}") from None
        return cls(value)


class MoveStrategy(Protocol):
    def select_move(self, board: Board, player: PlayerId) -> Coord: ...


RngLike = Union[np.random.Generator, int, None]


class RandomStrategy:
    """Picks uniformly among the empty cells."""

    def __init__(self, rng: RngLike = None) -> None:
        self.rng = rng if isinstance(rng, np.random.Generator) else np.random.default_rng(rng)

    def select_move(self, board: Board, player: PlayerId) -> Coord:
        moves = board.available_moves()
        if not moves:
            raise ValueError("No moves available on a full board")
        return moves[int(self.rng.integers(len(moves)))]


def negamax(board: Board, player: PlayerId) -> int:
    if has_won(board, player):
        return 1
    opponent = player.opponent()
    if has_won(board, opponent):
        return -1
    moves = board.available_moves()
    if not moves:
        return 0
    mark = player.cell
    best = -2
    for mv in moves:
        board.set(mv, mark)
        try:
            score = -negamax(board, opponent)
        finally:
            board.clear(mv)
        if score > best:
            best = score
    return best


def score_moves(board: Board, player: PlayerId) -> List[Tuple[Coord, int]]:
    """Score every legal move for ``player`` in canonical order."""
    scored: List[Tuple[Coord, int]] = []
    mark = player.cell
    opponent = player.opponent()
    for mv in board.available_moves():
        board.set(mv, mark)
        try:
            scored.append((mv, -negamax(board, opponent)))
        finally:
            board.clear(mv)
    return scored


class MinimaxStrategy:
    """Exhaustive negamax search with a first-in-canonical-order tie-break.

    When ``opening`` is given, an empty board is handed to it instead of
    being searched.
    """

    def __init__(self, opening: Optional[MoveStrategy] = None) -> None:
        self.opening = opening

    def select_move(self, board: Board, player: PlayerId) -> Coord:
        if board.is_full():
            raise ValueError("No moves available on a full board")
        if self.opening is not None and board.is_empty():
            mv = self.opening.select_move(board, player)
            logging.debug("Opening move %s for %s", mv, player.value)
            return mv
        scored = score_moves(board, player)
        best_score = float("-inf")
        best_move = scored[0][0]
        for mv, score in scored:
            if score > best_score:
                best_score = score
                best_move = mv
        logging.debug("Minimax picked %s for %s (score %s)", best_move, player.value, best_score)
        return best_move


def strategy_for(difficulty: Union[Difficulty, int, str], rng: RngLike = None) -> MoveStrategy:
    level = Difficulty.parse(difficulty)
    if level is Difficulty.RANDOM:
        return RandomStrategy(rng)
    return MinimaxStrategy(opening=RandomStrategy(rng))
