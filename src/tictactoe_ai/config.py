"""Game settings.

Environment-first, falling back to defaults; command-line flags override
whatever is collected here.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .solver import Difficulty

DEFAULT_THINK_DELAY = 0.5

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def think_delay() -> float:
    raw = os.getenv("TTT_THINK_DELAY")
    if raw is None:
        return DEFAULT_THINK_DELAY
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"TTT_THINK_DELAY must be a number of seconds, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"TTT_THINK_DELAY must not be negative, got {raw!r}")
    return value


def automated_first() -> bool:
    raw = os.getenv("TTT_AUTOMATED_FIRST", "").strip().lower()
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise ValueError(f"TTT_AUTOMATED_FIRST must be a boolean, got {raw!r}")


def default_difficulty() -> Difficulty:
    raw = os.getenv("TTT_DIFFICULTY")
    if raw is None:
        return Difficulty.OPTIMAL
    try:
        return Difficulty.parse(raw)
    except ValueError:
        raise ValueError(f"TTT_DIFFICULTY must be random/optimal/0/1, got {raw!r}") from None


def seed() -> Optional[int]:
    raw = os.getenv("TTT_SEED")
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"TTT_SEED must be an integer, got {raw!r}") from None


@dataclass
class GameSettings:
    think_delay: float = DEFAULT_THINK_DELAY
    automated_first: bool = False
    difficulty: Difficulty = Difficulty.OPTIMAL
    seed: Optional[int] = None

    @classmethod
    def from_env(cls) -> "GameSettings":
        return cls(
            think_delay=think_delay(),
            automated_first=automated_first(),
            difficulty=default_difficulty(),
            seed=seed(),
        )
