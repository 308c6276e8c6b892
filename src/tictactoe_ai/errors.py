"""Errors raised by the game core when a request is rejected."""


class GameError(Exception):
    """Base class for recoverable, rejected game actions."""


class InvalidMove(GameError):
    """Occupied cell, out-of-range coordinate, or a move out of turn."""


class IllegalStateCall(GameError):
    """Request that the current game state cannot accept, e.g. a move after game over."""
