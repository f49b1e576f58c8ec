"""
Cell module for the sweeper core.

Represents individual board positions with their identity
(index and coordinates), their content (mine/number) and their
visible state (hidden/opened/flagged).
"""
from enum import Enum, auto
from dataclasses import dataclass
from typing import Tuple


# ============================================================================
# Constants
# ============================================================================

class CellState(Enum):
    """Possible visible states of a cell."""

    HIDDEN = auto()
    OPENED = auto()
    FLAGGED = auto()


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass
class Cell:
    """
    A single addressable position on the board.

    A single state field holds hidden/opened/flagged, so a cell can
    never be opened and flagged at the same time.

    Attributes:
        index: Sequential id assigned in column-major generation order.
        column: Column coordinate.
        row: Row coordinate.
        has_mine: Whether this cell contains a mine.
        adjacent_mines: Mines in the 3x3 block centered on this cell.
        state: Current visible state.
    """

    index: int
    column: int
    row: int
    has_mine: bool = False
    adjacent_mines: int = 0
    state: CellState = CellState.HIDDEN

    def open(self) -> bool:
        """
        Open this cell, clearing its flag if it had one.

        Returns:
            True if the cell was opened, False if it already was.
        """
        if self.state == CellState.OPENED:
            return False
        self.state = CellState.OPENED
        return True

    def toggle_flag(self) -> bool:
        """
        Toggle flag on this cell.

        Returns:
            True if flag was toggled, False if cell is opened.
        """
        if self.state == CellState.OPENED:
            return False
        if self.state == CellState.HIDDEN:
            self.state = CellState.FLAGGED
        else:
            self.state = CellState.HIDDEN
        return True

    @property
    def position(self) -> Tuple[int, int]:
        """Get (column, row) coordinates."""
        return self.column, self.row

    @property
    def is_hidden(self) -> bool:
        """Check if cell is hidden and unflagged."""
        return self.state == CellState.HIDDEN

    @property
    def is_opened(self) -> bool:
        """Check if cell is opened."""
        return self.state == CellState.OPENED

    @property
    def is_flagged(self) -> bool:
        """Check if cell is flagged."""
        return self.state == CellState.FLAGGED

    def to_observation(self) -> int:
        """
        Convert cell to the value a renderer draws.

        Returns:
            -1: Hidden cell
            -2: Flagged cell
            0-8: Opened cell with adjacent mine count
            9: Opened mine
        """
        if self.state == CellState.HIDDEN:
            return -1
        if self.state == CellState.FLAGGED:
            return -2
        if self.has_mine:
            return 9
        return self.adjacent_mines
