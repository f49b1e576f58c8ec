"""
Per-difficulty statistics kept in a key-value store.

Each tracked tier owns seven fields named ``{tier}Played``,
``{tier}Won``, ``{tier}BestMoves``, ``{tier}BestTime``,
``{tier}TotalMoves``, ``{tier}TotalTime`` and ``{tier}WinPercentage``.
A best of zero or a missing best counts as unset.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from .events import GameEvent, GameFinished, GameStarted
from .settings import Difficulty
from .storage import KeyValueStore, to_float, to_int

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

FIELD_SUFFIXES: Dict[str, str] = {
    "played": "Played",
    "won": "Won",
    "best_moves": "BestMoves",
    "best_time_seconds": "BestTime",
    "total_moves": "TotalMoves",
    "total_time_seconds": "TotalTime",
    "win_percentage": "WinPercentage",
}

NEW_BEST_MOVES_KEY = "newBestMoves"
NEW_BEST_TIME_KEY = "newBestTime"


def field_key(difficulty: Difficulty, field_name: str) -> str:
    """Store key of one statistic, e.g. ``beginnerBestMoves``."""
    return f"{difficulty.value}{FIELD_SUFFIXES[field_name]}"


# ============================================================================
# Statistics Records
# ============================================================================

@dataclass
class DifficultyStats:
    """Aggregate results for one difficulty tier."""

    played: int = 0
    won: int = 0
    best_moves: int = 0
    best_time_seconds: int = 0
    total_moves: int = 0
    total_time_seconds: int = 0
    win_percentage: Optional[float] = None

    @property
    def average_moves(self) -> Optional[float]:
        """Mean moves per played game, unset while nothing was played."""
        if self.played == 0:
            return None
        return self.total_moves / self.played

    @property
    def average_time_seconds(self) -> Optional[float]:
        """Mean seconds per played game, unset while nothing was played."""
        if self.played == 0:
            return None
        return self.total_time_seconds / self.played

    def update_win_percentage(self) -> None:
        """Recompute ``won / played``; stays unset while nothing was played."""
        if self.played != 0:
            self.win_percentage = self.won / self.played


@dataclass
class RecordResult:
    """What a finished game changed for the UI to announce."""

    stats: DifficultyStats
    new_best_moves: bool = False
    new_best_time: bool = False

    @property
    def new_personal_best(self) -> bool:
        """Check if either record fell."""
        return self.new_best_moves or self.new_best_time


def is_better(value: int, best: int) -> bool:
    """True if ``value`` beats ``best``, or ``best`` is unset."""
    return best <= 0 or value < best


# ============================================================================
# Recorder
# ============================================================================

class StatsRecorder:
    """
    Update tier statistics in response to engine events.

    ``played`` is counted when a game starts, everything else when it
    finishes. Custom and debug games are ignored.
    """

    def __init__(self, store: KeyValueStore) -> None:
        """
        Create a recorder writing to ``store``.

        Args:
            store: Persistent key-value store.
        """
        self.store = store
        self.last_result: Optional[RecordResult] = None

    def __call__(self, event: GameEvent) -> None:
        """Let the recorder be subscribed directly as a listener."""
        self.handle_event(event)

    def handle_event(self, event: GameEvent) -> None:
        """Dispatch an engine event."""
        if isinstance(event, GameStarted):
            self.game_started(event.difficulty)
        elif isinstance(event, GameFinished):
            self.game_finished(event)

    def load(self, difficulty: Difficulty) -> DifficultyStats:
        """Read a tier's record, treating absent fields as zero/unset."""
        return DifficultyStats(
            played=to_int(self.store.get(field_key(difficulty, "played"))),
            won=to_int(self.store.get(field_key(difficulty, "won"))),
            best_moves=to_int(self.store.get(field_key(difficulty, "best_moves"))),
            best_time_seconds=to_int(
                self.store.get(field_key(difficulty, "best_time_seconds"))
            ),
            total_moves=to_int(self.store.get(field_key(difficulty, "total_moves"))),
            total_time_seconds=to_int(
                self.store.get(field_key(difficulty, "total_time_seconds"))
            ),
            win_percentage=to_float(
                self.store.get(field_key(difficulty, "win_percentage"))
            ),
        )

    def save(self, difficulty: Difficulty, stats: DifficultyStats) -> None:
        """Write every field of ``stats``; an unset percentage is removed."""
        for field_name in FIELD_SUFFIXES:
            value = getattr(stats, field_name)
            key = field_key(difficulty, field_name)
            if value is None:
                self.store.remove(key)
            else:
                self.store.set(key, value)

    def reset(self, difficulty: Difficulty) -> None:
        """Clear all statistics of a tier."""
        for field_name in FIELD_SUFFIXES:
            self.store.remove(field_key(difficulty, field_name))
        logger.info("Statistics for %s cleared", difficulty.value)

    def game_started(self, difficulty: Difficulty) -> Optional[DifficultyStats]:
        """Count a game as played on its first reveal."""
        self.last_result = None
        if not difficulty.is_tracked:
            return None
        stats = self.load(difficulty)
        stats.played += 1
        self.save(difficulty, stats)
        return stats

    def game_finished(self, event: GameFinished) -> Optional[RecordResult]:
        """
        Fold a finished game into its tier's record.

        Args:
            event: Final counters of the game.

        Returns:
            The updated record with new-best flags, or None for an
            untracked tier.
        """
        if not event.difficulty.is_tracked:
            return None

        stats = self.load(event.difficulty)
        result = RecordResult(stats)

        if event.won:
            stats.won += 1
            if is_better(event.moves, stats.best_moves):
                stats.best_moves = event.moves
                result.new_best_moves = True
            if is_better(event.elapsed_seconds, stats.best_time_seconds):
                stats.best_time_seconds = event.elapsed_seconds
                result.new_best_time = True

        stats.total_moves += event.moves
        stats.total_time_seconds += event.elapsed_seconds
        stats.update_win_percentage()
        self.save(event.difficulty, stats)

        if result.new_best_moves:
            self.store.set(NEW_BEST_MOVES_KEY, True)
        if result.new_best_time:
            self.store.set(NEW_BEST_TIME_KEY, True)
        if result.new_personal_best:
            logger.info(
                "New personal best on %s: %d moves, %ds",
                event.difficulty.value, event.moves, event.elapsed_seconds,
            )

        self.last_result = result
        return result
