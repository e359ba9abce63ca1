from __future__ import annotations

import logging
import random
from typing import Callable, List, Optional, Sequence

from memorymatch.core.cards import Card, generate_cards
from memorymatch.core.collaborators import (
    FeedbackSink,
    HighScoreStore,
    InMemoryHighScoreStore,
    LoggingFeedbackSink,
    NullProfileService,
    ProfileService,
)
from memorymatch.core.engine import MatchEngine, SelectionResult
from memorymatch.core.levels import GameMode, LevelConfig, resolve_level
from memorymatch.core.rules import DEFAULT_RULES, GameRules
from memorymatch.core.scheduler import Scheduler
from memorymatch.core.scoring import RoundOutcome, build_outcome, calculate_score
from memorymatch.core.state import GameSnapshot, GameState, GameStats
from memorymatch.core.timing import RoundTimers

logger = logging.getLogger(__name__)

StateObserver = Callable[[GameSnapshot], None]


class GameSession:
    """Drives a single player's game from the menu through levels and back.

    All mutation goes through the public entry points (taps, start, advance,
    retry, pause, menu) and through timer callbacks delivered by the injected
    scheduler. Observers registered with :meth:`subscribe` get a fresh
    :class:`GameSnapshot` after every change.

    Lifecycle::

        MENU -> PEEKING -> PLAYING <-> PAUSED
                              |
                         WON / LOST -> (auto-progress) -> PEEKING ...

    When the round makes the high-score table, auto-progress waits for
    :meth:`record_high_score` or :meth:`skip_high_score`.

    Round results are handed to the profile service on a later scheduler
    turn so a slow or failing service never holds up the round-end screen.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        palette: Sequence[object],
        rules: GameRules = DEFAULT_RULES,
        profile: Optional[ProfileService] = None,
        high_scores: Optional[HighScoreStore] = None,
        feedback: Optional[FeedbackSink] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        if not palette or len(set(palette)) != len(palette):
            raise ValueError("Palette must be a non-empty sequence of distinct colors")
        self._scheduler = scheduler
        self._palette = list(palette)
        self._rules = rules
        self._profile = profile or NullProfileService()
        self._high_scores = high_scores or InMemoryHighScoreStore()
        self._feedback = feedback or LoggingFeedbackSink()
        self._rng = rng or random.Random()
        self._timers = RoundTimers(scheduler, rules.tick_seconds)
        self._observers: List[StateObserver] = []

        self._state = GameState.MENU
        self._stats = GameStats(bonus_lives=rules.starting_bonus_lives)
        self._requested_mode: Optional[GameMode] = None
        self._config = resolve_level(1, None, rules)
        self._engine = MatchEngine([], self._config, self._stats, self._rng)
        self._last_outcome: Optional[RoundOutcome] = None
        self._is_high_score = False

    # -- read side ---------------------------------------------------------

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def stats(self) -> GameStats:
        return self._stats

    @property
    def level_config(self) -> LevelConfig:
        return self._config

    @property
    def cards(self) -> List[Card]:
        return self._engine.cards

    @property
    def last_outcome(self) -> Optional[RoundOutcome]:
        return self._last_outcome

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            cards=tuple(card.copy() for card in self._engine.cards),
            game_state=self._state,
            stats=self._stats.copy(),
            level_config=self._config,
            auto_progress_remaining=self._timers.auto_progress_remaining,
            is_resolving=self._engine.is_resolving,
            is_high_score=self._is_high_score,
            last_outcome=self._last_outcome,
        )

    def subscribe(self, observer: StateObserver) -> Callable[[], None]:
        """Register ``observer``; returns a callable that unregisters it."""
        self._observers.append(observer)

        def _unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return _unsubscribe

    # -- entry points ------------------------------------------------------

    def start_new_game(self, level: int = 1, mode: Optional[GameMode] = None) -> None:
        self._timers.new_generation()
        self._requested_mode = mode
        self._config = resolve_level(level, mode, self._rules)
        self._stats.reset_round()
        self._stats.current_level = level
        if self._config.mode.is_timed and self._config.max_time is not None:
            self._stats.time_remaining = self._config.max_time

        cards = generate_cards(self._config.grid_size, self._palette, self._rng)
        self._engine = MatchEngine(cards, self._config, self._stats, self._rng)
        self._last_outcome = None
        self._is_high_score = False

        self._engine.reveal_all(True)
        self._state = GameState.PEEKING
        logger.info(
            "Starting level %d in %s (%dx%d grid)",
            level,
            self._config.mode.description,
            self._config.grid_size,
            self._config.grid_size,
        )
        self._timers.schedule_once(self._rules.peek_seconds, self._end_peek)
        self._notify()

    def select_card(self, index: int) -> SelectionResult:
        if self._state is not GameState.PLAYING:
            return SelectionResult.IGNORED
        result = self._engine.select_card(index)
        if result is SelectionResult.IGNORED:
            return result

        self._emit("on_tap", index)
        if result is SelectionResult.MATCH:
            self._emit("on_match", index)
            if self._engine.is_won():
                self._finish_round(is_win=True)
                return result
        elif result is SelectionResult.MISMATCH:
            self._emit("on_mismatch", index)
            self._timers.schedule_once(self._rules.mismatch_delay, self._settle_mismatch)
        self._notify()
        return result

    def advance_to_next_level(self) -> None:
        if self._state is GameState.MENU:
            logger.debug("Ignoring advance request from the menu")
            return
        self._stats.bonus_lives = self._rules.starting_bonus_lives
        self.start_new_game(self._stats.current_level + 1, self._requested_mode)

    def restart_current_level(self) -> None:
        if self._state is GameState.MENU:
            logger.debug("Ignoring restart request from the menu")
            return
        self._stats.bonus_lives = self._rules.starting_bonus_lives
        self.start_new_game(self._stats.current_level, self._requested_mode)

    def return_to_menu(self) -> None:
        self._timers.new_generation()
        self._engine.enabled = False
        self._stats = GameStats(bonus_lives=self._rules.starting_bonus_lives)
        self._requested_mode = None
        self._config = resolve_level(1, None, self._rules)
        self._engine = MatchEngine([], self._config, self._stats, self._rng)
        self._last_outcome = None
        self._is_high_score = False
        self._state = GameState.MENU
        logger.info("Returned to menu")
        self._notify()

    def pause(self) -> None:
        if self._state is not GameState.PLAYING:
            return
        self._engine.enabled = False
        # The countdown keeps running; ticks are skipped while paused.
        self._state = GameState.PAUSED
        logger.info("Paused level %d", self._stats.current_level)
        self._notify()

    def resume(self) -> None:
        if self._state is not GameState.PAUSED:
            return
        self._engine.enabled = True
        self._state = GameState.PLAYING
        logger.info("Resumed level %d", self._stats.current_level)
        if self._config.mode.is_timed and not self._timers.countdown_active:
            self._timers.start_countdown(self._on_countdown_tick)
        if not self._engine.is_resolving and self._engine.is_out_of_turns():
            self._handle_round_failure()
            return
        self._notify()

    def record_high_score(self, name: str) -> bool:
        """Store the last round's score under ``name`` if it made the table.

        Auto-progress is held while a high score waits for a name and starts
        once this is called, whether or not the score could be saved.
        """
        if self._last_outcome is None or not self._is_high_score:
            return False
        outcome = self._last_outcome
        self._is_high_score = False
        try:
            self._high_scores.record_high_score(name, outcome.score, outcome.level)
        except Exception as e:
            logger.warning("Could not record high score for %s: %s", name, e)
            self._emit("on_error", "Could not save high score")
            self._start_auto_progress()
            return False
        self._start_auto_progress()
        return True

    def skip_high_score(self) -> None:
        """Decline the name prompt and let auto-progress run."""
        if self._last_outcome is None or not self._is_high_score:
            return
        self._is_high_score = False
        logger.info("High score entry declined")
        self._start_auto_progress()

    # -- lifecycle ---------------------------------------------------------

    def _end_peek(self) -> None:
        self._engine.reveal_all(False)
        self._engine.enabled = True
        self._state = GameState.PLAYING
        if self._config.mode.is_timed:
            self._timers.start_countdown(self._on_countdown_tick)
        self._notify()

    def _on_countdown_tick(self) -> None:
        if self._state is not GameState.PLAYING:
            return
        if self._stats.time_remaining > 0:
            self._stats.time_remaining -= 1
        if self._stats.time_remaining <= 0:
            logger.info("Time ran out on level %d", self._stats.current_level)
            self._handle_round_failure()
            return
        self._notify()

    def _settle_mismatch(self) -> None:
        self._engine.settle_mismatch()
        if self._state is GameState.PLAYING and self._engine.is_out_of_turns():
            logger.info("Turn limit exceeded on level %d", self._stats.current_level)
            self._handle_round_failure()
            return
        self._notify()

    def _handle_round_failure(self) -> None:
        """Spend the bonus life if one is left for this round, else lose."""
        if self._stats.bonus_lives > 0 and not self._stats.bonus_life_used:
            self._stats.bonus_lives -= 1
            self._stats.bonus_life_used = True
            if self._config.mode is GameMode.SCORE:
                self._stats.extra_turns += self._rules.bonus_extra_turns
            else:
                self._stats.time_remaining += self._rules.bonus_extra_seconds
                if not self._timers.countdown_active:
                    self._timers.start_countdown(self._on_countdown_tick)
            logger.info("Bonus life used on level %d", self._stats.current_level)
            self._notify()
            return
        self._finish_round(is_win=False)

    def _finish_round(self, is_win: bool) -> None:
        self._engine.enabled = False
        self._timers.cancel_countdown()
        self._timers.cancel_one_shots()
        if is_win and self._engine.is_perfect() and self._config.mode is GameMode.SCORE:
            self._stats.bonus_lives += 1

        self._stats.total_score = calculate_score(self._stats, self._config, self._rules)
        outcome = build_outcome(self._stats, self._config, is_win, self._rules)
        self._last_outcome = outcome
        self._is_high_score = self._check_high_score(outcome.score)
        self._state = GameState.WON if is_win else GameState.LOST
        logger.info(
            "Level %d %s with score %d",
            outcome.level,
            "won" if is_win else "lost",
            outcome.score,
        )

        self._emit("on_win" if is_win else "on_loss", outcome)
        self._scheduler.call_later(0, lambda: self._report(outcome))
        if self._is_high_score:
            logger.debug("Holding auto-progress for the high score name")
            self._notify()
        else:
            self._start_auto_progress()

    def _start_auto_progress(self) -> None:
        is_win = self._state is GameState.WON
        self._timers.start_auto_progress(
            self._rules.auto_progress_seconds,
            on_tick=lambda _remaining: self._notify(),
            on_done=self.advance_to_next_level if is_win else self.restart_current_level,
        )
        self._notify()

    # -- collaborators -----------------------------------------------------

    def _check_high_score(self, score: int) -> bool:
        try:
            return bool(self._high_scores.is_high_score(score))
        except Exception as e:
            logger.warning("High score lookup failed: %s", e)
            return False

    def _report(self, outcome: RoundOutcome) -> None:
        try:
            self._profile.report_round_result(outcome)
        except Exception as e:
            logger.warning("Could not report round result for level %d: %s", outcome.level, e)
            self._emit("on_error", "Could not save your progress")

    def _emit(self, hook: str, *args: object) -> None:
        try:
            getattr(self._feedback, hook)(*args)
        except Exception:
            logger.warning("Feedback hook %s failed", hook, exc_info=True)

    def _notify(self) -> None:
        if not self._observers:
            return
        snapshot = self.snapshot()
        for observer in list(self._observers):
            observer(snapshot)
