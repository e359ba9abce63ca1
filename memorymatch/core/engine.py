from __future__ import annotations

import logging
import random
from enum import Enum
from typing import List, Optional, Tuple

from memorymatch.core.cards import Card
from memorymatch.core.levels import GameMode, LevelConfig
from memorymatch.core.state import GameStats

logger = logging.getLogger(__name__)


class EnginePhase(Enum):
    AWAITING_FIRST_PICK = "awaiting_first_pick"
    AWAITING_SECOND_PICK = "awaiting_second_pick"
    RESOLVING = "resolving"


class SelectionResult(Enum):
    IGNORED = "ignored"
    FIRST_PICK = "first_pick"
    MATCH = "match"
    MISMATCH = "mismatch"


class MatchEngine:
    """Card selection and pair evaluation for one level attempt.

    The engine only reacts to taps while :attr:`enabled` is set; the session
    turns it on for the playing phase. A mismatch leaves the engine
    ``RESOLVING`` until :meth:`settle_mismatch` is called; the pair is looked
    up again by card id at that point. Win and loss are reported through
    :meth:`is_won` and :meth:`is_out_of_turns`, the session decides what
    happens next.
    """

    def __init__(
        self,
        cards: List[Card],
        config: LevelConfig,
        stats: GameStats,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._cards = cards
        self._config = config
        self._stats = stats
        self._rng = rng or random.Random()
        self._phase = EnginePhase.AWAITING_FIRST_PICK
        self._first_pick: Optional[int] = None
        self._pending_mismatch: Optional[Tuple[str, str]] = None
        self.enabled = False

    @property
    def cards(self) -> List[Card]:
        return self._cards

    @property
    def phase(self) -> EnginePhase:
        return self._phase

    @property
    def is_resolving(self) -> bool:
        return self._phase is EnginePhase.RESOLVING

    @property
    def pending_mismatch(self) -> Optional[Tuple[str, str]]:
        return self._pending_mismatch

    def select_card(self, index: int) -> SelectionResult:
        if not self.enabled or self.is_resolving:
            return SelectionResult.IGNORED
        if not 0 <= index < len(self._cards):
            logger.debug("Ignoring tap on out-of-range index %d", index)
            return SelectionResult.IGNORED
        card = self._cards[index]
        if card.is_flipped or card.is_matched or card.is_bonus:
            return SelectionResult.IGNORED

        card.is_flipped = True
        if self._first_pick is None:
            self._first_pick = index
            self._phase = EnginePhase.AWAITING_SECOND_PICK
            return SelectionResult.FIRST_PICK

        self._stats.turns += 1
        first = self._cards[self._first_pick]
        if first.color_index == card.color_index:
            first.is_matched = True
            card.is_matched = True
            self._stats.matches_found += 1
            self._first_pick = None
            self._phase = EnginePhase.AWAITING_FIRST_PICK
            if self._config.mode is GameMode.DIFFICULT:
                self.reshuffle_colors()
            return SelectionResult.MATCH

        self._pending_mismatch = (first.card_id, card.card_id)
        self._phase = EnginePhase.RESOLVING
        return SelectionResult.MISMATCH

    def settle_mismatch(self) -> None:
        """Flip the mismatched pair back face down and accept taps again."""
        if self._pending_mismatch is None:
            return
        for card_id in self._pending_mismatch:
            card = self.find_card(card_id)
            if card is not None and not card.is_matched:
                card.is_flipped = False
        self._pending_mismatch = None
        self._first_pick = None
        self._phase = EnginePhase.AWAITING_FIRST_PICK

    def find_card(self, card_id: str) -> Optional[Card]:
        for card in self._cards:
            if card.card_id == card_id:
                return card
        return None

    def reshuffle_colors(self) -> None:
        """Permute the colors of every unsolved card in place."""
        self._stats.color_shuffles += 1
        positions = [i for i, c in enumerate(self._cards) if not c.is_matched and not c.is_bonus]
        colors = [self._cards[i].color_index for i in positions]
        self._rng.shuffle(colors)
        for position, color_index in zip(positions, colors):
            self._cards[position].color_index = color_index
        logger.debug("Reshuffled %d unsolved cards", len(positions))

    def reveal_all(self, face_up: bool) -> None:
        for card in self._cards:
            if not card.is_bonus and not card.is_matched:
                card.is_flipped = face_up

    def is_won(self) -> bool:
        return self._stats.matches_found >= self._config.pair_count

    def is_out_of_turns(self) -> bool:
        if self._config.mode is not GameMode.SCORE or self._config.max_turns is None:
            return False
        return self._stats.turns > self._config.max_turns + self._stats.extra_turns

    def is_perfect(self) -> bool:
        return self.is_won() and self._stats.turns == self._config.perfect_turns
