"""
Pytest configuration and shared fixtures.
"""
import random
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sweeper import (
    Board,
    BoardConfig,
    Cell,
    Difficulty,
    GameEngine,
    GameSettings,
    InMemoryStore,
)


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for repeatable placement."""
    return random.Random(1234)


@pytest.fixture
def default_board(rng: random.Random) -> Board:
    """Create a default 9x9 board with 10 mines."""
    return Board(rng=rng)


@pytest.fixture
def small_board(rng: random.Random) -> Board:
    """Create a small 3x3 board with 1 mine for testing."""
    return Board(BoardConfig(3, 3, 1), rng=rng)


@pytest.fixture
def wide_board(rng: random.Random) -> Board:
    """Create a 4x2 board so columns and rows differ."""
    return Board(BoardConfig(4, 2, 1), rng=rng)


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden cell."""
    return Cell(0, 0, 0)


@pytest.fixture
def mine_cell() -> Cell:
    """Create a cell containing a mine."""
    return Cell(0, 0, 0, has_mine=True)


# ============================================================================
# Engine Fixtures
# ============================================================================

def debug_engine(columns, rows, mines, store=None, rng=None) -> GameEngine:
    """Engine on an untracked board with mines at the given indices."""
    settings = GameSettings.debug(BoardConfig(columns, rows, len(mines)))
    return GameEngine(settings, store=store, rng=rng, mine_layout=mines)


@pytest.fixture
def make_engine():
    """Factory for debug engines with a fixed mine layout."""
    return debug_engine


@pytest.fixture
def store() -> InMemoryStore:
    """Empty key-value store."""
    return InMemoryStore()


@pytest.fixture
def corner_engine(rng: random.Random) -> GameEngine:
    """
    5x5 debug board with a single mine in the far corner (index 24).

    Opening index 0 floods everything except the mine.
    """
    return debug_engine(5, 5, [24], rng=rng)


@pytest.fixture
def beginner_engine(store: InMemoryStore, rng: random.Random) -> GameEngine:
    """Tracked beginner engine recording into ``store``."""
    return GameEngine(
        GameSettings.for_tier(Difficulty.BEGINNER), store=store, rng=rng
    )
