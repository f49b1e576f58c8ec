"""
Sweeper core.

Board model, game engine and statistics for a single-player
grid-deduction mine game. Rendering and input handling are left to
the embedding UI.
"""
from .cell import Cell, CellState
from .board import Board, BoardConfig, BEGINNER, INTERMEDIATE, EXPERT
from .errors import SweeperError, ConfigurationError, InvalidOperation
from .events import GameStarted, GameFinished, Outcome
from .engine import GameEngine, GameSession, GameStatus
from .settings import (
    Difficulty,
    GameSettings,
    load_settings,
    save_custom,
    save_level,
)
from .stats import DifficultyStats, RecordResult, StatsRecorder
from .storage import KeyValueStore, InMemoryStore, JsonFileStore

__all__ = [
    "Cell",
    "CellState",
    "Board",
    "BoardConfig",
    "BEGINNER",
    "INTERMEDIATE",
    "EXPERT",
    "SweeperError",
    "ConfigurationError",
    "InvalidOperation",
    "GameStarted",
    "GameFinished",
    "Outcome",
    "GameEngine",
    "GameSession",
    "GameStatus",
    "Difficulty",
    "GameSettings",
    "load_settings",
    "save_custom",
    "save_level",
    "DifficultyStats",
    "RecordResult",
    "StatsRecorder",
    "KeyValueStore",
    "InMemoryStore",
    "JsonFileStore",
]
