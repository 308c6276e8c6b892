"""tictactoe_ai package.

Board model, win detection, random and minimax move selection, and the turn
controller that plays them against a human.

Convenience imports are exposed for common workflows.
"""

from .controller import GameResult, TurnController, TurnState
from .errors import GameError, IllegalStateCall, InvalidMove
from .game_basics import Board, Cell, PlayerId, game_outcome, has_won
from .solver import Difficulty, MinimaxStrategy, RandomStrategy, strategy_for

__all__ = [
    "Board",
    "Cell",
    "PlayerId",
    "has_won",
    "game_outcome",
    "Difficulty",
    "RandomStrategy",
    "MinimaxStrategy",
    "strategy_for",
    "TurnController",
    "TurnState",
    "GameResult",
    "GameError",
    "InvalidMove",
    "IllegalStateCall",
]
