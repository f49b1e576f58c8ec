"""
Unit tests for StatsRecorder.

Tests per-tier counters, personal bests, win percentage and the
engine integration.
"""
import pytest
from sweeper import (
    Difficulty,
    DifficultyStats,
    GameEngine,
    GameFinished,
    GameSettings,
    InMemoryStore,
    Outcome,
    StatsRecorder,
)

BEGINNER = Difficulty.BEGINNER


def finished(outcome: Outcome, moves: int, seconds: int, tier=BEGINNER) -> GameFinished:
    return GameFinished(tier, outcome, moves, seconds)


def play(recorder: StatsRecorder, outcome: Outcome, moves: int, seconds: int, tier=BEGINNER):
    """Feed one complete game into the recorder."""
    recorder.game_started(tier)
    return recorder.game_finished(finished(outcome, moves, seconds, tier))


def win_game(engine: GameEngine, ticks: int = 0) -> None:
    """Open every safe cell of the engine's board."""
    engine.open_cell(0)
    for _ in range(ticks):
        engine.tick()
    for cell in engine.board.cells:
        if not cell.has_mine and not cell.is_opened:
            engine.open_cell(cell.index)


@pytest.fixture
def recorder(store: InMemoryStore) -> StatsRecorder:
    return StatsRecorder(store)


# ============================================================================
# Record Loading Tests
# ============================================================================

class TestLoad:
    """Test reading tier records from the store."""

    def test_empty_store_reads_zero(self, recorder: StatsRecorder) -> None:
        stats = recorder.load(BEGINNER)
        assert stats == DifficultyStats()
        assert stats.win_percentage is None
        assert stats.average_moves is None

    def test_string_values_are_parsed(self) -> None:
        store = InMemoryStore(
            {"expertPlayed": "4", "expertWon": "1", "expertBestTime": "88",
             "expertWinPercentage": "0.25", "expertTotalMoves": "bogus"}
        )
        stats = StatsRecorder(store).load(Difficulty.EXPERT)
        assert stats.played == 4
        assert stats.won == 1
        assert stats.best_time_seconds == 88
        assert stats.win_percentage == 0.25
        assert stats.total_moves == 0

    def test_averages(self) -> None:
        stats = DifficultyStats(played=4, total_moves=100, total_time_seconds=60)
        assert stats.average_moves == 25
        assert stats.average_time_seconds == 15


# ============================================================================
# Recording Tests
# ============================================================================

class TestRecording:
    """Test counters and personal bests."""

    def test_start_counts_played(self, recorder: StatsRecorder, store) -> None:
        recorder.game_started(BEGINNER)
        assert store.get("beginnerPlayed") == 1
        assert store.get("beginnerWon") == 0

    def test_first_win_sets_bests(self, recorder: StatsRecorder, store) -> None:
        result = play(recorder, Outcome.WON, 30, 12)

        assert result.new_best_moves is True
        assert result.new_best_time is True
        assert result.new_personal_best is True
        assert store.get("beginnerPlayed") == 1
        assert store.get("beginnerWon") == 1
        assert store.get("beginnerBestMoves") == 30
        assert store.get("beginnerBestTime") == 12
        assert store.get("beginnerWinPercentage") == 1.0
        assert store.get("newBestMoves") is True
        assert store.get("newBestTime") is True

    def test_only_strictly_better_values_replace_bests(
        self, recorder: StatsRecorder
    ) -> None:
        play(recorder, Outcome.WON, 30, 12)
        result = play(recorder, Outcome.WON, 40, 10)

        assert result.new_best_moves is False
        assert result.new_best_time is True
        assert result.stats.best_moves == 30
        assert result.stats.best_time_seconds == 10

        tie = play(recorder, Outcome.WON, 30, 10)
        assert tie.new_personal_best is False

    def test_loss_counts_totals_but_not_bests(
        self, recorder: StatsRecorder
    ) -> None:
        play(recorder, Outcome.WON, 30, 12)
        play(recorder, Outcome.WON, 40, 10)
        result = play(recorder, Outcome.LOST, 5, 3)

        stats = result.stats
        assert result.new_personal_best is False
        assert stats.played == 3
        assert stats.won == 2
        assert stats.best_moves == 30
        assert stats.best_time_seconds == 10
        assert stats.total_moves == 75
        assert stats.total_time_seconds == 25
        assert stats.win_percentage == pytest.approx(2 / 3)

    def test_percentage_unset_without_played(
        self, recorder: StatsRecorder, store
    ) -> None:
        recorder.game_finished(finished(Outcome.LOST, 3, 1))
        assert "beginnerWinPercentage" not in store.data

    def test_tiers_are_independent(self, recorder: StatsRecorder) -> None:
        play(recorder, Outcome.WON, 30, 12, tier=Difficulty.EXPERT)
        assert recorder.load(Difficulty.EXPERT).won == 1
        assert recorder.load(BEGINNER).played == 0

    @pytest.mark.parametrize("tier", [Difficulty.CUSTOM, Difficulty.DEBUG])
    def test_untracked_tiers_ignored(self, recorder: StatsRecorder, store, tier) -> None:
        assert recorder.game_started(tier) is None
        assert recorder.game_finished(finished(Outcome.WON, 3, 1, tier)) is None
        assert store.data == {}

    def test_reset_clears_tier(self, recorder: StatsRecorder, store) -> None:
        play(recorder, Outcome.WON, 30, 12)
        recorder.reset(BEGINNER)
        assert recorder.load(BEGINNER) == DifficultyStats()
        assert not any(key.startswith("beginner") for key in store.data)


# ============================================================================
# Engine Integration Tests
# ============================================================================

class TestEngineIntegration:
    """Test the recorder wired to a live engine."""

    def test_played_counted_on_first_reveal(
        self, beginner_engine: GameEngine, store
    ) -> None:
        assert store.get("beginnerPlayed") is None
        beginner_engine.toggle_flag(5)
        assert store.get("beginnerPlayed") is None
        beginner_engine.open_cell(0)
        assert store.get("beginnerPlayed") == 1

    def test_win_is_recorded(self, beginner_engine: GameEngine, store) -> None:
        win_game(beginner_engine, ticks=3)

        assert beginner_engine.outcome is Outcome.WON
        assert store.get("beginnerWon") == 1
        assert store.get("beginnerBestMoves") == beginner_engine.session.moves
        assert store.get("beginnerBestTime") == 3
        assert beginner_engine.recorder.last_result.new_personal_best is True

    def test_loss_is_recorded(self, beginner_engine: GameEngine, store) -> None:
        beginner_engine.open_cell(0)
        mine = beginner_engine.board.mine_indices()[0]
        beginner_engine.open_cell(mine)

        assert beginner_engine.outcome is Outcome.LOST
        assert store.get("beginnerPlayed") == 1
        assert store.get("beginnerWon") == 0
        assert store.get("beginnerWinPercentage") == 0.0
        assert store.get("beginnerTotalMoves") == 2

    def test_custom_games_not_recorded(self, store) -> None:
        engine = GameEngine(GameSettings.custom(9, 9, 10), store=store)
        engine.open_cell(0)
        assert store.data == {}

    def test_new_game_counts_again(self, beginner_engine: GameEngine, store) -> None:
        beginner_engine.open_cell(0)
        beginner_engine.new_game()
        beginner_engine.open_cell(0)
        assert store.get("beginnerPlayed") == 2
