"""Session phase, per-round statistics and the snapshot handed to observers."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple, TYPE_CHECKING

from memorymatch.core.cards import Card
from memorymatch.core.levels import LevelConfig

if TYPE_CHECKING:
    from memorymatch.core.scoring import RoundOutcome


class GameState(str, Enum):
    MENU = "menu"
    PEEKING = "peeking"
    PLAYING = "playing"
    PAUSED = "paused"
    WON = "won"
    LOST = "lost"

    @property
    def is_round_over(self) -> bool:
        return self in (GameState.WON, GameState.LOST)


@dataclass
class GameStats:
    turns: int = 0
    matches_found: int = 0
    time_remaining: int = 0
    bonus_lives: int = 1
    current_level: int = 1
    total_score: int = 0
    color_shuffles: int = 0
    extra_turns: int = 0
    bonus_life_used: bool = False

    def reset_round(self) -> None:
        """Clear everything that belongs to a single level attempt."""
        self.turns = 0
        self.matches_found = 0
        self.time_remaining = 0
        self.total_score = 0
        self.color_shuffles = 0
        self.extra_turns = 0
        self.bonus_life_used = False

    def copy(self) -> "GameStats":
        return replace(self)


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view of a session, safe to keep after the session moves on."""

    cards: Tuple[Card, ...]
    game_state: GameState
    stats: GameStats
    level_config: LevelConfig
    auto_progress_remaining: Optional[int] = None
    is_resolving: bool = False
    is_high_score: bool = False
    last_outcome: Optional["RoundOutcome"] = None
