"""Tests for memorymatch.ui.models – card views and status text."""

from __future__ import annotations

from typing import Optional

import pytest

from memorymatch.core.cards import BONUS_COLOR_INDEX, Card
from memorymatch.core.levels import GameMode, resolve_level
from memorymatch.core.scoring import RoundOutcome
from memorymatch.core.state import GameSnapshot, GameState, GameStats
from memorymatch.ui.colors import GameColors, blend_hex, card_color
from memorymatch.ui.models import build_card_views, round_end_message, status_line


def _snapshot(
    state: GameState = GameState.PLAYING,
    mode: GameMode = GameMode.SCORE,
    resolving: bool = False,
    outcome: Optional[RoundOutcome] = None,
    auto_progress: Optional[int] = None,
    **stats,
) -> GameSnapshot:
    cards = (
        Card(color_index=0),
        Card(color_index=0, is_flipped=True),
        Card(color_index=1, is_flipped=True, is_matched=True),
        Card(color_index=BONUS_COLOR_INDEX, is_flipped=True, is_matched=True, is_bonus=True),
    )
    return GameSnapshot(
        cards=cards,
        game_state=state,
        stats=GameStats(**stats),
        level_config=resolve_level(stats.get("current_level", 1), mode),
        auto_progress_remaining=auto_progress,
        is_resolving=resolving,
        last_outcome=outcome,
    )


def _outcome(is_win: bool, is_perfect: bool = False, score: int = 650) -> RoundOutcome:
    return RoundOutcome(
        score=score,
        level=1,
        mode=GameMode.SCORE,
        is_win=is_win,
        turns_used=4,
        time_remaining=0,
        used_bonus_life=False,
        is_perfect=is_perfect,
    )


# ===========================================================================
# build_card_views
# ===========================================================================

class TestBuildCardViews:
    def test_face_down_card(self):
        view = build_card_views(_snapshot())[0]
        assert view.index == 0
        assert view.color == GameColors.CARD_BACK
        assert not view.face_up
        assert view.enabled

    def test_flipped_card_shows_pair_color(self):
        view = build_card_views(_snapshot())[1]
        assert view.color == card_color(0)
        assert view.face_up
        assert not view.enabled

    def test_matched_card_is_tinted(self):
        view = build_card_views(_snapshot())[2]
        assert view.color == blend_hex(card_color(1), GameColors.MATCHED_TINT, 0.5)
        assert not view.enabled

    def test_bonus_card(self):
        view = build_card_views(_snapshot())[3]
        assert view.label == "★"
        assert view.color == GameColors.CARD_BONUS
        assert view.face_up

    @pytest.mark.parametrize("state", [GameState.PEEKING, GameState.PAUSED, GameState.WON, GameState.MENU])
    def test_taps_disabled_outside_play(self, state: GameState):
        assert not build_card_views(_snapshot(state=state))[0].enabled

    def test_taps_disabled_while_resolving(self):
        assert not build_card_views(_snapshot(resolving=True))[0].enabled


# ===========================================================================
# status_line
# ===========================================================================

class TestStatusLine:
    def test_score_mode_shows_turns(self):
        text = status_line(_snapshot(turns=3, matches_found=1))
        assert text == "Level 1  ·  Score Mode  ·  Turns 3/10  ·  Matches 1/4  ·  Lives 1"

    def test_extra_turns_widen_budget(self):
        text = status_line(_snapshot(turns=5, extra_turns=2, current_level=7))
        assert "Turns 5/6" in text

    def test_timed_mode_shows_clock(self):
        text = status_line(_snapshot(mode=GameMode.TIME, time_remaining=12, bonus_lives=0))
        assert "Time Mode" in text
        assert "Time 12s" in text
        assert "Lives 0" in text


# ===========================================================================
# round_end_message
# ===========================================================================

class TestRoundEndMessage:
    def test_empty_without_outcome(self):
        assert round_end_message(_snapshot()) == ""

    def test_perfect_win(self):
        snapshot = _snapshot(state=GameState.WON, outcome=_outcome(True, is_perfect=True), auto_progress=3)
        assert round_end_message(snapshot) == "PERFECT GAME! Bonus life earned!\nScore: 650\nNext level in 3s"

    def test_plain_win(self):
        snapshot = _snapshot(state=GameState.WON, outcome=_outcome(True, score=550))
        assert round_end_message(snapshot) == "Level Complete!\nScore: 550"

    def test_score_mode_loss(self):
        snapshot = _snapshot(state=GameState.LOST, outcome=_outcome(False, score=350), auto_progress=5)
        assert round_end_message(snapshot) == "Turn limit exceeded\nScore: 350\nRetry in 5s"

    def test_timed_loss(self):
        snapshot = _snapshot(state=GameState.LOST, mode=GameMode.TIME, outcome=_outcome(False, score=50))
        assert round_end_message(snapshot).startswith("Time's up!")
