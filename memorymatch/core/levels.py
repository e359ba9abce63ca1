from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from memorymatch.core.rules import DEFAULT_RULES, GameRules


class GameMode(str, Enum):
    SCORE = "score"
    TIME = "time"
    DIFFICULT = "difficult"

    @property
    def description(self) -> str:
        return f"{self.value.capitalize()} Mode"

    @property
    def is_timed(self) -> bool:
        return self is not GameMode.SCORE


@dataclass(frozen=True)
class LevelConfig:
    level: int
    mode: GameMode
    grid_size: int
    max_turns: Optional[int] = None
    max_time: Optional[int] = None

    @property
    def pair_count(self) -> int:
        return (self.grid_size * self.grid_size) // 2

    @property
    def perfect_turns(self) -> int:
        """Turns used when every pair is found without a single mismatch."""
        return self.pair_count


def resolve_level(
    level: int,
    mode: Optional[GameMode] = None,
    rules: GameRules = DEFAULT_RULES,
) -> LevelConfig:
    """Build the configuration for ``level``.

    Without an explicit mode, early levels play as Score mode and later ones
    as Time mode. Difficult mode grows the grid with the level tier.
    """
    if level < 1:
        raise ValueError(f"Level must be at least 1, got {level}")

    if mode is None:
        mode = GameMode.SCORE if level < rules.time_mode_from_level else GameMode.TIME

    if mode is GameMode.SCORE:
        max_turns = max(rules.min_turn_cap, rules.turn_cap_base - level)
        return LevelConfig(level=level, mode=mode, grid_size=rules.base_grid_size, max_turns=max_turns)
    if mode is GameMode.TIME:
        return LevelConfig(level=level, mode=mode, grid_size=rules.base_grid_size, max_time=rules.time_limit)
    return LevelConfig(
        level=level,
        mode=mode,
        grid_size=rules.difficult_grid_size(level),
        max_time=rules.difficult_time_limit,
    )
