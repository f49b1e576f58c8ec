"""
Game engine for the sweeper core.

Drives one game at a time: forwards open/flag actions to the board,
keeps the move/flag/time counters, applies first-click safety, decides
win and loss, and notifies listeners when a game starts and ends.
"""
import logging
import random
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, List, Optional

import numpy as np

from .board import Board
from .cell import Cell
from .errors import ConfigurationError
from .events import GameEvent, GameFinished, GameStarted, Listener, Outcome
from .settings import Difficulty, GameSettings
from .stats import StatsRecorder
from .storage import KeyValueStore

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

class GameStatus(Enum):
    """Possible states of a game."""

    NOT_STARTED = auto()
    IN_PROGRESS = auto()
    WON = auto()
    LOST = auto()


# ============================================================================
# Session State
# ============================================================================

@dataclass
class GameSession:
    """
    Counters of a single playthrough.

    Attributes:
        moves: Opens and flag toggles that took effect.
        flagged_count: Cells currently flagged.
        elapsed_seconds: Timer ticks since the first reveal.
        is_first_move: True until the first cell is opened.
        is_finished: True once the game is won or lost.
        outcome: Result of a finished game.
    """

    moves: int = 0
    flagged_count: int = 0
    elapsed_seconds: int = 0
    is_first_move: bool = True
    is_finished: bool = False
    outcome: Optional[Outcome] = None

    @property
    def status(self) -> GameStatus:
        """Derive the game status from the counters."""
        if self.outcome is Outcome.WON:
            return GameStatus.WON
        if self.outcome is Outcome.LOST:
            return GameStatus.LOST
        if self.is_first_move:
            return GameStatus.NOT_STARTED
        return GameStatus.IN_PROGRESS


# ============================================================================
# Engine
# ============================================================================

class GameEngine:
    """
    Owns the board and session of the game being played.

    Mines are placed when a game is created. On the first reveal a mine
    under the clicked cell is moved elsewhere and the adjacency counts
    are computed, so the first reveal can never lose.
    """

    def __init__(
        self,
        settings: Optional[GameSettings] = None,
        store: Optional[KeyValueStore] = None,
        rng: Optional[random.Random] = None,
        mine_layout: Optional[Iterable[int]] = None,
    ) -> None:
        """
        Create an engine and start its first game.

        Args:
            settings: Difficulty and board config (default: beginner).
            store: If given, a ``StatsRecorder`` over it is subscribed.
            rng: Random source for mine placement and relocation.
            mine_layout: Forced mine indices, debug tier only.
        """
        self.settings = settings or GameSettings()
        self._rng = rng or random.Random()
        self._listeners: List[Listener] = []
        self.recorder: Optional[StatsRecorder] = None
        if store is not None:
            self.recorder = StatsRecorder(store)
            self.subscribe(self.recorder)

        self.board: Board
        self.session: GameSession
        self.new_game(mine_layout=mine_layout)

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def subscribe(self, listener: Listener) -> None:
        """Register a callable to receive ``GameStarted``/``GameFinished``."""
        self._listeners.append(listener)

    def new_game(
        self,
        settings: Optional[GameSettings] = None,
        mine_layout: Optional[Iterable[int]] = None,
    ) -> None:
        """
        Discard the current game and set up a fresh board and session.

        Args:
            settings: New difficulty/config; keeps the current one if None.
            mine_layout: Forced mine indices, debug tier only.
        """
        if settings is not None:
            self.settings = settings

        board = Board(self.settings.config, rng=self._rng)
        if mine_layout is not None:
            if self.settings.difficulty is not Difficulty.DEBUG:
                raise ConfigurationError(
                    "A forced mine layout is only allowed in debug games"
                )
            board.place_mines_at(mine_layout)
        else:
            board.place_mines()

        self.board = board
        self.session = GameSession()
        logger.debug(
            "New %s game: %dx%d with %d mines",
            self.settings.difficulty.value,
            self.settings.config.columns,
            self.settings.config.rows,
            self.settings.config.mine_count,
        )

    def _emit(self, event: GameEvent) -> None:
        """Send ``event`` to every subscribed listener."""
        for listener in self._listeners:
            listener(event)

    # ========================================================================
    # Player Actions
    # ========================================================================

    def open_cell(self, index: int) -> bool:
        """
        Open the cell at ``index``.

        Opening a zero cell floods outward through its neighbors, clearing
        any flags in the way. Opening a mine loses; opening the last safe
        cell wins.

        Args:
            index: Cell index in column-major order.

        Returns:
            True if the action took effect, False for a no-op.
        """
        cell = self.board.get_cell(index)
        if self.session.is_finished or cell.is_opened or cell.is_flagged:
            return False

        if self.session.is_first_move:
            self._start(cell)

        cell.open()
        self.session.moves += 1

        if cell.has_mine:
            self._finish(Outcome.LOST)
            return True

        if cell.adjacent_mines == 0:
            self._flood_from(cell)

        if self.board.unopened_safe_count() == 0:
            self._finish(Outcome.WON)
        return True

    def toggle_flag(self, index: int) -> bool:
        """
        Flag or unflag the cell at ``index``.

        Args:
            index: Cell index in column-major order.

        Returns:
            True if the flag changed, False for a no-op.
        """
        cell = self.board.get_cell(index)
        if self.session.is_finished or not cell.toggle_flag():
            return False

        self.session.flagged_count += 1 if cell.is_flagged else -1
        self.session.moves += 1
        return True

    def tick(self) -> None:
        """Advance the game timer by one second while the game is running."""
        if self.status is GameStatus.IN_PROGRESS:
            self.session.elapsed_seconds += 1

    # ========================================================================
    # Game Flow (Low-level)
    # ========================================================================

    def _start(self, cell: Cell) -> None:
        """First reveal: make the cell safe and compute adjacency counts."""
        self.session.is_first_move = False
        if cell.has_mine:
            self.board.relocate_mine(cell.index, cell.index)
        self.board.recompute_adjacency()
        logger.info("Game started on %s", self.settings.difficulty.value)
        self._emit(GameStarted(self.settings.difficulty))

    def _flood_from(self, origin: Cell) -> None:
        """Open every cell reachable from ``origin`` through zero cells."""
        stack = [origin]
        opened = 0
        while stack:
            current = stack.pop()
            if current.adjacent_mines != 0:
                continue
            for neighbor in self.board.neighbors_of(current):
                if neighbor.is_opened:
                    continue
                if neighbor.is_flagged:
                    self.session.flagged_count -= 1
                neighbor.open()
                opened += 1
                stack.append(neighbor)
        logger.debug("Flood from cell %d opened %d cells", origin.index, opened)

    def _finish(self, outcome: Outcome) -> None:
        """Enter a terminal state and reveal the board."""
        self.session.is_finished = True
        self.session.outcome = outcome
        self.session.flagged_count -= self.board.open_all()
        logger.info(
            "Game %s after %d moves in %ds",
            outcome.name.lower(), self.session.moves, self.session.elapsed_seconds,
        )
        self._emit(
            GameFinished(
                difficulty=self.settings.difficulty,
                outcome=outcome,
                moves=self.session.moves,
                elapsed_seconds=self.session.elapsed_seconds,
            )
        )

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def status(self) -> GameStatus:
        """Get current game status."""
        return self.session.status

    @property
    def outcome(self) -> Optional[Outcome]:
        """Get result of a finished game, or None."""
        return self.session.outcome

    @property
    def is_finished(self) -> bool:
        """Check if the game is won or lost."""
        return self.session.is_finished

    @property
    def mines_remaining(self) -> int:
        """Mine counter shown to the player: mines minus flags."""
        return self.settings.config.mine_count - self.session.flagged_count

    def cell(self, index: int) -> Cell:
        """Get cell by index."""
        return self.board.get_cell(index)

    def cell_at(self, column: int, row: int) -> Cell:
        """Get cell by coordinates."""
        return self.board.cell_at(column, row)

    def observation(self) -> np.ndarray:
        """Board state as an int8 ``(rows, columns)`` array."""
        return self.board.get_observation()
