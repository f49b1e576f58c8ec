"""
Events the engine emits to its listeners.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Union

from .settings import Difficulty


class Outcome(Enum):
    """How a finished game ended."""

    WON = auto()
    LOST = auto()


@dataclass(frozen=True)
class GameStarted:
    """First cell of a game was opened."""

    difficulty: Difficulty


@dataclass(frozen=True)
class GameFinished:
    """
    A game reached a terminal state.

    Attributes:
        difficulty: Tier the game was played on.
        outcome: Won or lost.
        moves: Opens and flag toggles made during the game.
        elapsed_seconds: Timer value when the game ended.
    """

    difficulty: Difficulty
    outcome: Outcome
    moves: int
    elapsed_seconds: int

    @property
    def won(self) -> bool:
        """Check if the game was won."""
        return self.outcome is Outcome.WON


GameEvent = Union[GameStarted, GameFinished]
Listener = Callable[[GameEvent], None]
