"""
Game basics: board representation, serialization, rules, winner/tie checks, validity.
Notes:
- The board is a flat row-major list of 9 cells: 0=empty, 1=X (cross), 2=O (circle).
- The automated player always plays X, the human always plays O; either may start.
- Coordinates are (row, col) pairs; the canonical index of a cell is row * 3 + col.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterable, List, Optional, Sequence, Tuple

from .errors import InvalidMove

GRID_SIZE = 3
NUM_CELLS = GRID_SIZE * GRID_SIZE

Coord = Tuple[int, int]

WIN_PATTERNS = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)


class Cell(IntEnum):
    EMPTY = 0
    CROSS = 1
    CIRCLE = 2

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]


_SYMBOLS = {Cell.EMPTY: ".", Cell.CROSS: "X", Cell.CIRCLE: "O"}
_PARSE = {"0": Cell.EMPTY, ".": Cell.EMPTY, "-": Cell.EMPTY,
          "1": Cell.CROSS, "X": Cell.CROSS, "x": Cell.CROSS,
          "2": Cell.CIRCLE, "O": Cell.CIRCLE, "o": Cell.CIRCLE}


class PlayerId(Enum):
    HUMAN = "human"
    AUTOMATED = "automated"

    @property
    def cell(self) -> Cell:
        return Cell.CIRCLE if self is PlayerId.HUMAN else Cell.CROSS

    def opponent(self) -> "PlayerId":
        return PlayerId.AUTOMATED if self is PlayerId.HUMAN else PlayerId.HUMAN

    @classmethod
    def for_cell(cls, cell: Cell) -> "PlayerId":
        if cell == Cell.CROSS:
            return cls.AUTOMATED
        if cell == Cell.CIRCLE:
            return cls.HUMAN
        raise ValueError("An empty cell has no player")


def to_index(coord: Coord) -> int:
    try:
        row, col = coord
    except (TypeError, ValueError):
        raise InvalidMove(f"Invalid position {coord!r}. Must be a (row, col) pair.") from None
    if not (0 <= row < GRID_SIZE and 0 <= col < GRID_SIZE):
        raise InvalidMove(f"Invalid position ({row}, {col}). Must be 0-{GRID_SIZE - 1}.")
    return row * GRID_SIZE + col


def from_index(index: int) -> Coord:
    if not 0 <= index < NUM_CELLS:
        raise InvalidMove(f"Invalid cell index {index}. Must be 0-{NUM_CELLS - 1}.")
    return divmod(index, GRID_SIZE)


class Board:
    """The 3x3 grid of cells.

    Cells only go from empty to a mark through ``set``; ``clear`` exists so a
    search can undo its own hypothetical moves.
    """

    __slots__ = ("_cells",)

    def __init__(self, cells: Optional[Iterable[int]] = None) -> None:
        if cells is None:
            self._cells: List[Cell] = [Cell.EMPTY] * NUM_CELLS
        else:
            self._cells = [Cell(c) for c in cells]
            if len(self._cells) != NUM_CELLS:
                raise ValueError(f"A board needs exactly {NUM_CELLS} cells, got {len(self._cells)}")

    @classmethod
    def from_string(cls, raw: str) -> "Board":
        """Parse a 9-character board string such as ``100020000`` or ``X...O....``."""
        raw = raw.strip()
        if len(raw) != NUM_CELLS or any(c not in _PARSE for c in raw):
            raise ValueError("Invalid board string. Must be 9 chars of 0/1/2 (or ./X/O).")
        return cls(_PARSE[c] for c in raw)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "Board":
        return cls(cell for row in rows for cell in row)

    @property
    def cells(self) -> Tuple[Cell, ...]:
        return tuple(self._cells)

    def get(self, coord: Coord) -> Cell:
        return self._cells[to_index(coord)]

    def set(self, coord: Coord, cell: Cell) -> None:
        if cell == Cell.EMPTY:
            raise ValueError("Use clear() to empty a cell")
        idx = to_index(coord)
        current = self._cells[idx]
        if current != Cell.EMPTY:
            raise InvalidMove(f"Cell {coord} is already occupied by {current.symbol}")
        self._cells[idx] = Cell(cell)

    def clear(self, coord: Coord) -> None:
        self._cells[to_index(coord)] = Cell.EMPTY

    def available_moves(self) -> List[Coord]:
        return [divmod(i, GRID_SIZE) for i, c in enumerate(self._cells) if c == Cell.EMPTY]

    def num_empty(self) -> int:
        return self._cells.count(Cell.EMPTY)

    def count(self, cell: Cell) -> int:
        return self._cells.count(cell)

    def is_full(self) -> bool:
        return Cell.EMPTY not in self._cells

    def is_empty(self) -> bool:
        return self.num_empty() == NUM_CELLS

    def copy(self) -> "Board":
        return Board(self._cells)

    def serialize(self) -> str:
        return "".join(str(int(c)) for c in self._cells)

    def render(self) -> str:
        lines = ["  0 1 2"]
        for row in range(GRID_SIZE):
            marks = " ".join(c.symbol for c in self._cells[row * GRID_SIZE:(row + 1) * GRID_SIZE])
            lines.append(f"{row} {marks}")
        return "\n".join(lines)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._cells == other._cells

    def __hash__(self) -> int:
        return hash(tuple(self._cells))

    def __repr__(self) -> str:
        return f"Board({self.serialize()!r})"


def _line_owner(cells: Sequence[Cell], pattern: Tuple[int, int, int]) -> Cell:
    a, b, c = pattern
    v = cells[a]
    if v != Cell.EMPTY and v == cells[b] and v == cells[c]:
        return v
    return Cell.EMPTY


def has_won(board: Board, player: PlayerId) -> bool:
    target = player.cell
    cells = board._cells
    for a, b, c in WIN_PATTERNS:
        if cells[a] == target and cells[b] == target and cells[c] == target:
            return True
    return False


def winning_line(board: Board) -> Optional[List[Coord]]:
    cells = board._cells
    for pattern in WIN_PATTERNS:
        if _line_owner(cells, pattern) != Cell.EMPTY:
            return [from_index(i) for i in pattern]
    return None


class OutcomeKind(Enum):
    IN_PROGRESS = "in_progress"
    WIN = "win"
    TIE = "tie"


@dataclass(frozen=True)
class GameOutcome:
    kind: OutcomeKind
    winner: Optional[PlayerId] = None

    @property
    def is_terminal(self) -> bool:
        return self.kind is not OutcomeKind.IN_PROGRESS


IN_PROGRESS = GameOutcome(OutcomeKind.IN_PROGRESS)
TIE = GameOutcome(OutcomeKind.TIE)


def win_for(player: PlayerId) -> GameOutcome:
    return GameOutcome(OutcomeKind.WIN, player)


def game_outcome(board: Board) -> GameOutcome:
    for player in (PlayerId.HUMAN, PlayerId.AUTOMATED):
        if has_won(board, player):
            return win_for(player)
    if board.is_full():
        return TIE
    return IN_PROGRESS


def is_valid_state(board: Board, first: Optional[Cell] = None) -> bool:
    """True if the board can arise from alternating play.

    ``first`` pins which mark moved first; when omitted either side may have
    started.
    """
    x_count, o_count = board.count(Cell.CROSS), board.count(Cell.CIRCLE)
    if abs(x_count - o_count) > 1:
        return False
    if first == Cell.CROSS and x_count < o_count:
        return False
    if first == Cell.CIRCLE and o_count < x_count:
        return False
    x_won = has_won(board, PlayerId.AUTOMATED)
    o_won = has_won(board, PlayerId.HUMAN)
    if x_won and o_won:
        return False
    # the winner made the last move, so it cannot be behind on marks
    if x_won and x_count < o_count:
        return False
    if o_won and o_count < x_count:
        return False
    return True


def side_to_move(board: Board, first: Cell = Cell.CROSS) -> PlayerId:
    x_count, o_count = board.count(Cell.CROSS), board.count(Cell.CIRCLE)
    if x_count == o_count:
        return PlayerId.for_cell(first)
    return PlayerId.AUTOMATED if x_count < o_count else PlayerId.HUMAN
