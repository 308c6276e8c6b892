"""
Board symmetries.
Notes:
- There are 8 symmetries (the dihedral group of the square).
- Swapping the X and O labels composes with any of them; a player who owns a
  line on a board owns the image of that line on the transformed board.
- The canonical form of a board is the lexicographically smallest serialized
  image among all symmetries.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Callable, Dict, List, Tuple

import numpy as np

from .game_basics import GRID_SIZE, NUM_CELLS, Board, Cell, Coord, from_index, to_index

ALL_SYMS = ['id', 'rot90', 'rot180', 'rot270', 'hflip', 'vflip', 'd1', 'd2']

_OPS: Dict[str, Callable[[np.ndarray], np.ndarray]] = {
    'id': lambda a: a,
    'rot90': lambda a: np.rot90(a, -1),
    'rot180': lambda a: np.rot90(a, 2),
    'rot270': lambda a: np.rot90(a, 1),
    'hflip': np.fliplr,
    'vflip': np.flipud,
    'd1': np.transpose,
    'd2': lambda a: np.rot90(a, 2).T,
}


def _grid(board: Board) -> np.ndarray:
    return np.array([int(c) for c in board.cells], dtype=np.int8).reshape(GRID_SIZE, GRID_SIZE)


def transform_board(board: Board, kind: str) -> Board:
    if kind not in _OPS:
        raise ValueError(f"Unknown transformation: {kind}")
    return Board(_OPS[kind](_grid(board)).ravel().tolist())


def relabel(board: Board) -> Board:
    """Swap X and O marks."""
    swap = {Cell.EMPTY: Cell.EMPTY, Cell.CROSS: Cell.CIRCLE, Cell.CIRCLE: Cell.CROSS}
    return Board(swap[c] for c in board.cells)


def _index_map(kind: str) -> List[int]:
    grid = np.arange(NUM_CELLS).reshape(GRID_SIZE, GRID_SIZE)
    image = _OPS[kind](grid).ravel()
    mapping = [0] * NUM_CELLS
    for new_idx, old_idx in enumerate(image):
        mapping[int(old_idx)] = new_idx
    return mapping


SYMM_INDEX_MAPS = {k: _index_map(k) for k in ALL_SYMS}


def apply_action_transform(coord: Coord, kind: str) -> Coord:
    """Where the cell at ``coord`` lands after applying ``kind`` to the board."""
    return from_index(SYMM_INDEX_MAPS[kind][to_index(coord)])


@lru_cache(maxsize=None)
def _symmetry_info_str(board_str: str) -> Tuple[str, str, int]:
    board = Board.from_string(board_str)
    images = sorted((transform_board(board, k).serialize(), k) for k in ALL_SYMS)
    canonical_str, canonical_op = images[0]
    orbit_size = len({s for s, _ in images})
    return canonical_str, canonical_op, orbit_size


def symmetry_info(board: Board) -> Dict:
    canonical_str, canonical_op, orbit_size = _symmetry_info_str(board.serialize())
    return {
        'canonical_form': canonical_str,
        'canonical_op': canonical_op,
        'orbit_size': orbit_size,
    }


def canonical_form(board: Board) -> Board:
    return Board.from_string(symmetry_info(board)['canonical_form'])
