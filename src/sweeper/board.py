"""
Board module for the sweeper core.

Implements the board model: cell generation in column-major order,
mine placement, first-click mine relocation and adjacency counting.
Game rules (moves, flags, win/loss) live in the engine.
"""
import logging
import random
from dataclasses import dataclass
from typing import Iterable, List, Optional

import numpy as np

from .cell import Cell
from .errors import ConfigurationError, InvalidOperation

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration
# ============================================================================

@dataclass(frozen=True)
class BoardConfig:
    """
    Configuration for a board.

    Attributes:
        columns: Number of columns.
        rows: Number of rows.
        mine_count: Total mines to place.
    """

    columns: int = 9
    rows: int = 9
    mine_count: int = 10

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.columns < 1 or self.rows < 1:
            raise ConfigurationError("Board dimensions must be positive")
        if self.mine_count < 1:
            raise ConfigurationError("A board needs at least one mine")
        max_mines = self.cell_count - 1
        if self.mine_count > max_mines:
            raise ConfigurationError(f"Too many mines (max {max_mines})")

    @property
    def cell_count(self) -> int:
        """Total number of cells on the board."""
        return self.columns * self.rows


# Preset difficulty levels
BEGINNER = BoardConfig(9, 9, 10)
INTERMEDIATE = BoardConfig(16, 16, 40)
EXPERT = BoardConfig(30, 16, 99)


# ============================================================================
# Board Class
# ============================================================================

class Board:
    """
    Grid of cells with mine placement and neighbor counting.

    Cells are generated column by column, so index ``i`` sits at
    column ``i // rows`` and row ``i % rows``. Neighbors are always
    found by coordinate range, never by stepping the index.
    """

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Create a board with all cells hidden and no mines.

        Args:
            config: Board configuration (default: 9x9 with 10 mines).
            rng: Random source for mine placement (default: module random).
        """
        self.config = config or BoardConfig()
        self._rng = rng or random.Random()
        self._cells: List[Cell] = []
        self.configure(self.config)

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def configure(self, config: BoardConfig) -> None:
        """Discard all cells and generate a fresh grid for ``config``."""
        self.config = config
        self._cells = []
        index = 0
        for column in range(config.columns):
            for row in range(config.rows):
                self._cells.append(Cell(index, column, row))
                index += 1

    def place_mines(self, forbidden_index: Optional[int] = None) -> List[int]:
        """
        Place ``mine_count`` mines uniformly at random.

        Args:
            forbidden_index: Optional cell index to keep mine-free.

        Returns:
            Sorted indices of the mined cells.
        """
        candidates = [
            cell.index for cell in self._cells if cell.index != forbidden_index
        ]
        if self.config.mine_count > len(candidates):
            raise ConfigurationError(
                f"Cannot place {self.config.mine_count} mines in "
                f"{len(candidates)} eligible cells"
            )
        chosen = self._rng.sample(candidates, self.config.mine_count)
        self._set_mines(chosen)
        logger.debug(
            "Placed %d mines on %dx%d board",
            len(chosen), self.config.columns, self.config.rows,
        )
        return sorted(chosen)

    def place_mines_at(self, indices: Iterable[int]) -> List[int]:
        """
        Place mines on exactly the given cells.

        Args:
            indices: Cell indices that hold a mine.

        Returns:
            Sorted indices of the mined cells.
        """
        chosen = list(indices)
        if len(set(chosen)) != len(chosen):
            raise ConfigurationError("Mine layout contains duplicate cells")
        if len(chosen) != self.config.mine_count:
            raise ConfigurationError(
                f"Mine layout has {len(chosen)} mines, "
                f"expected {self.config.mine_count}"
            )
        for index in chosen:
            if not self.is_valid_index(index):
                raise ConfigurationError(f"Mine index {index} is off the board")
        self._set_mines(chosen)
        return sorted(chosen)

    def _set_mines(self, indices: Iterable[int]) -> None:
        """Clear all mines, then mine exactly ``indices``."""
        for cell in self._cells:
            cell.has_mine = False
        for index in indices:
            self._cells[index].has_mine = True

    def relocate_mine(self, from_index: int, exclude_index: int) -> int:
        """
        Move the mine at ``from_index`` to a random mine-free cell.

        Retries until it draws an index that is neither ``exclude_index``
        nor already mined. ``mine_count < cell_count`` guarantees such a
        cell exists.

        Returns:
            Index of the cell that received the mine.
        """
        source = self.get_cell(from_index)
        if not source.has_mine:
            raise InvalidOperation(f"Cell {from_index} has no mine to relocate")
        source.has_mine = False

        while True:
            target = self._rng.randrange(self.config.cell_count)
            if target == exclude_index:
                continue
            if not self._cells[target].has_mine:
                self._cells[target].has_mine = True
                break

        logger.debug("Relocated mine from cell %d to cell %d", from_index, target)
        return target

    def recompute_adjacency(self) -> None:
        """
        Count mines in every cell's 3x3 block.

        The block includes the cell itself. A cell that is opened without
        losing never holds a mine, so its count matches the classic
        eight-neighbor count.
        """
        for cell in self._cells:
            cell.adjacent_mines = sum(
                1 for neighbor in self.neighbors_of(cell) if neighbor.has_mine
            )

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def neighbors_of(self, cell: Cell) -> List[Cell]:
        """
        Get the cells in the 3x3 block centered on ``cell``.

        The block is clipped at the board edges and includes ``cell``.
        Order is column-major, matching index order.
        """
        neighbors = []
        for column in range(cell.column - 1, cell.column + 2):
            for row in range(cell.row - 1, cell.row + 2):
                if self.is_valid_position(column, row):
                    neighbors.append(self.cell_at(column, row))
        return neighbors

    def is_valid_position(self, column: int, row: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= column < self.config.columns and 0 <= row < self.config.rows

    def is_valid_index(self, index: int) -> bool:
        """Check if index refers to a cell on this board."""
        return 0 <= index < self.config.cell_count

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def cells(self) -> List[Cell]:
        """All cells in index order."""
        return list(self._cells)

    def __len__(self) -> int:
        """Number of cells."""
        return len(self._cells)

    def get_cell(self, index: int) -> Cell:
        """Get cell by index, raising ``InvalidOperation`` if out of range."""
        if not self.is_valid_index(index):
            raise InvalidOperation(
                f"Cell index {index} out of range 0..{self.config.cell_count - 1}"
            )
        return self._cells[index]

    def cell_at(self, column: int, row: int) -> Cell:
        """Get cell by coordinates, raising ``InvalidOperation`` if off-board."""
        if not self.is_valid_position(column, row):
            raise InvalidOperation(f"Position ({column}, {row}) is off the board")
        return self._cells[column * self.config.rows + row]

    def mine_indices(self) -> List[int]:
        """Get indices of all mined cells in index order."""
        return [cell.index for cell in self._cells if cell.has_mine]

    def unopened_safe_count(self) -> int:
        """Count cells that are neither mined nor opened."""
        return sum(
            1 for cell in self._cells if not cell.has_mine and not cell.is_opened
        )

    def open_all(self) -> int:
        """
        Open every cell, as done when the game ends.

        Returns:
            Number of flags cleared by opening.
        """
        cleared = 0
        for cell in self._cells:
            if cell.is_flagged:
                cleared += 1
            cell.open()
        return cleared

    def get_observation(self) -> np.ndarray:
        """
        Get board state as numpy array for a renderer.

        Returns:
            2D ``(rows, columns)`` array where:
                -1 = hidden
                -2 = flagged
                0-8 = opened with adjacent count
                9 = opened mine
        """
        obs = np.zeros((self.config.rows, self.config.columns), dtype=np.int8)
        for cell in self._cells:
            obs[cell.row, cell.column] = cell.to_observation()
        return obs

    def mine_mask(self) -> np.ndarray:
        """Boolean ``(rows, columns)`` array of mine positions."""
        mask = np.zeros((self.config.rows, self.config.columns), dtype=bool)
        for cell in self._cells:
            mask[cell.row, cell.column] = cell.has_mine
        return mask
