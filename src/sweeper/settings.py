"""
Difficulty tiers and the settings loader.

Settings live in the key-value store under ``level`` and, for the
custom tier, ``columns``/``rows``/``mines``. The loader repairs bad
stored values and writes the corrected values back, so the engine only
ever sees a valid ``BoardConfig``.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .board import BEGINNER, EXPERT, INTERMEDIATE, BoardConfig
from .storage import KeyValueStore, to_int

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

MIN_SIDE = 7
MAX_SIDE = 58

DEFAULT_CUSTOM_COLUMNS = 9
DEFAULT_CUSTOM_ROWS = 9
DEFAULT_CUSTOM_MINES = 10


class Difficulty(Enum):
    """Named board configurations."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    EXPERT = "expert"
    CUSTOM = "custom"
    DEBUG = "debug"

    @property
    def is_tracked(self) -> bool:
        """Only the preset tiers feed aggregate statistics."""
        return self in TRACKED_TIERS

    @property
    def preset(self) -> BoardConfig:
        """Fixed config of a preset tier."""
        try:
            return PRESETS[self]
        except KeyError:
            raise ValueError(f"{self.value} has no preset board") from None


TRACKED_TIERS = (Difficulty.BEGINNER, Difficulty.INTERMEDIATE, Difficulty.EXPERT)

PRESETS = {
    Difficulty.BEGINNER: BEGINNER,
    Difficulty.INTERMEDIATE: INTERMEDIATE,
    Difficulty.EXPERT: EXPERT,
}

# Tiers a stored ``level`` may name; debug is only reachable from code.
SELECTABLE_LEVELS = {
    tier.value: tier
    for tier in (*TRACKED_TIERS, Difficulty.CUSTOM)
}


# ============================================================================
# Settings
# ============================================================================

@dataclass(frozen=True)
class GameSettings:
    """
    A difficulty tier together with its board configuration.

    Attributes:
        difficulty: Tier the game counts towards.
        config: Board dimensions and mine count.
    """

    difficulty: Difficulty = Difficulty.BEGINNER
    config: BoardConfig = BEGINNER

    @classmethod
    def for_tier(cls, difficulty: Difficulty) -> "GameSettings":
        """Settings for one of the preset tiers."""
        return cls(difficulty, difficulty.preset)

    @classmethod
    def custom(cls, columns: int, rows: int, mines: int) -> "GameSettings":
        """Custom settings, clamped to the allowed ranges."""
        columns = clamp(columns, MIN_SIDE, MAX_SIDE)
        rows = clamp(rows, MIN_SIDE, MAX_SIDE)
        mines = clamp(mines, 1, columns * rows - 1)
        return cls(Difficulty.CUSTOM, BoardConfig(columns, rows, mines))

    @classmethod
    def debug(cls, config: BoardConfig) -> "GameSettings":
        """Untracked settings that accept a forced mine layout."""
        return cls(Difficulty.DEBUG, config)


def clamp(value: int, low: int, high: int) -> int:
    """Limit ``value`` to the range [low, high]."""
    return max(low, min(high, value))


# ============================================================================
# Store Loading
# ============================================================================

def load_settings(store: KeyValueStore) -> GameSettings:
    """
    Read the active settings from ``store``.

    An unknown ``level`` falls back to beginner. For the custom tier,
    missing or non-numeric values take their defaults and out-of-range
    values are clamped. Every repaired value is written back.

    Args:
        store: Store holding ``level`` and the custom fields.

    Returns:
        Settings ready to start a game with.
    """
    level = store.get("level")
    difficulty = SELECTABLE_LEVELS.get(level) if isinstance(level, str) else None
    if difficulty is None:
        if level is not None:
            logger.warning("Unknown level %r, falling back to beginner", level)
        store.set("level", Difficulty.BEGINNER.value)
        difficulty = Difficulty.BEGINNER

    if difficulty is not Difficulty.CUSTOM:
        return GameSettings.for_tier(difficulty)

    columns = _load_side(store, "columns", DEFAULT_CUSTOM_COLUMNS)
    rows = _load_side(store, "rows", DEFAULT_CUSTOM_ROWS)
    mines = _load_field(
        store, "mines", DEFAULT_CUSTOM_MINES, 1, columns * rows - 1
    )
    return GameSettings(Difficulty.CUSTOM, BoardConfig(columns, rows, mines))


def _load_side(store: KeyValueStore, key: str, default: int) -> int:
    """Read a board side clamped to [MIN_SIDE, MAX_SIDE]."""
    return _load_field(store, key, default, MIN_SIDE, MAX_SIDE)


def _load_field(
    store: KeyValueStore, key: str, default: int, low: int, high: int
) -> int:
    """Read one numeric field, repairing and persisting bad values."""
    raw: Any = store.get(key)
    value = to_int(raw, default=None)
    if value is None:
        value = default
    else:
        value = clamp(value, low, high)

    if raw is None or str(value) != str(raw):
        if raw is not None:
            logger.warning("Stored %s=%r corrected to %d", key, raw, value)
        store.set(key, value)
    return value


def save_level(store: KeyValueStore, difficulty: Difficulty) -> None:
    """Persist the tier that ``load_settings`` should pick next time."""
    if difficulty.value not in SELECTABLE_LEVELS:
        raise ValueError(f"{difficulty.value} cannot be stored as a level")
    store.set("level", difficulty.value)


def save_custom(store: KeyValueStore, columns: int, rows: int, mines: int) -> GameSettings:
    """Persist clamped custom dimensions and select the custom tier."""
    settings = GameSettings.custom(columns, rows, mines)
    store.set("columns", settings.config.columns)
    store.set("rows", settings.config.rows)
    store.set("mines", settings.config.mine_count)
    save_level(store, Difficulty.CUSTOM)
    return settings
