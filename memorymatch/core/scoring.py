from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import yaml

from memorymatch.core.levels import GameMode, LevelConfig
from memorymatch.core.rules import DEFAULT_RULES, GameRules
from memorymatch.core.state import GameStats

PERFECT_GAME = "perfect_game"
TIME_WIZARD = "time_wizard"
SURVIVOR = "survivor"

ACHIEVEMENT_TYPES = ("round", "profile")


@dataclass(frozen=True)
class Achievement:
    id: str
    title: str
    description: str
    icon: str
    requirement: int
    type: str


@dataclass(frozen=True)
class RoundOutcome:
    """Facts about a finished round, reported to the profile collaborator."""

    score: int
    level: int
    mode: GameMode
    is_win: bool
    turns_used: int
    time_remaining: int
    used_bonus_life: bool
    is_perfect: bool
    matches_found: int = 0
    color_shuffles: int = 0
    achievement_ids: Tuple[str, ...] = ()


def calculate_score(stats: GameStats, config: LevelConfig, rules: GameRules = DEFAULT_RULES) -> int:
    """Score for the round that just ended. Replaces any previous round score."""
    base = stats.matches_found * rules.match_points
    bonus = 0
    if config.mode is GameMode.SCORE:
        if config.max_turns is not None:
            if stats.turns == config.pair_count:
                bonus = rules.perfect_bonus
            elif stats.turns < config.max_turns:
                bonus = (config.max_turns - stats.turns) * rules.turn_bonus
    else:
        bonus = stats.time_remaining * rules.time_bonus
    level_bonus = stats.current_level * rules.level_bonus
    return base + bonus + level_bonus


def qualifying_achievements(
    stats: GameStats,
    config: LevelConfig,
    is_win: bool,
    rules: GameRules = DEFAULT_RULES,
) -> Tuple[str, ...]:
    if not is_win:
        return ()
    earned: List[str] = []
    if config.mode is GameMode.SCORE and stats.turns == config.perfect_turns:
        earned.append(PERFECT_GAME)
    if config.mode.is_timed and stats.time_remaining >= rules.time_wizard_seconds:
        earned.append(TIME_WIZARD)
    if stats.bonus_life_used:
        earned.append(SURVIVOR)
    return tuple(earned)


def build_outcome(
    stats: GameStats,
    config: LevelConfig,
    is_win: bool,
    rules: GameRules = DEFAULT_RULES,
) -> RoundOutcome:
    return RoundOutcome(
        score=stats.total_score,
        level=stats.current_level,
        mode=config.mode,
        is_win=is_win,
        turns_used=stats.turns,
        time_remaining=stats.time_remaining,
        used_bonus_life=stats.bonus_life_used,
        is_perfect=is_win and config.mode is GameMode.SCORE and stats.turns == config.perfect_turns,
        matches_found=stats.matches_found,
        color_shuffles=stats.color_shuffles,
        achievement_ids=qualifying_achievements(stats, config, is_win, rules),
    )


class AchievementCatalog:
    """Static achievement definitions loaded from ``data/achievements.yaml``."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path or Path(__file__).resolve().parent.parent / "data" / "achievements.yaml"
        self._achievements = self._load()

    def all(self) -> List[Achievement]:
        return list(self._achievements.values())

    def get(self, achievement_id: str) -> Achievement:
        return self._achievements[achievement_id]

    def with_unlocked(self, unlocked_ids: Iterable[str]) -> List[Tuple[Achievement, bool]]:
        unlocked = set(unlocked_ids)
        return [(a, a.id in unlocked) for a in self._achievements.values()]

    def _load(self) -> Dict[str, Achievement]:
        if not self._path.exists():
            raise FileNotFoundError(f"Achievements file not found: {self._path}")
        raw = yaml.safe_load(self._path.read_text(encoding="utf-8"))
        if not raw or not isinstance(raw, list):
            raise ValueError(f"{self._path.name}: expected a list of achievements")

        achievements: Dict[str, Achievement] = {}
        for entry in raw:
            if not isinstance(entry, dict):
                raise ValueError(f"{self._path.name}: each achievement must be a mapping")
            achievement_id = entry.get("id")
            if not achievement_id or not isinstance(achievement_id, str):
                raise ValueError(f"{self._path.name}: missing or invalid 'id'")
            if achievement_id in achievements:
                raise ValueError(f"{self._path.name}: duplicate achievement '{achievement_id}'")
            kind = entry.get("type")
            if kind not in ACHIEVEMENT_TYPES:
                raise ValueError(f"{self._path.name}: '{achievement_id}' has unknown type {kind!r}")
            achievements[achievement_id] = Achievement(
                id=achievement_id,
                title=str(entry.get("title", achievement_id)).strip(),
                description=str(entry.get("description", "")).strip(),
                icon=str(entry.get("icon", "")).strip(),
                requirement=int(entry.get("requirement", 1)),
                type=kind,
            )
        return achievements
