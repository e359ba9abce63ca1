from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Dict, Optional, Tuple

import yaml


@dataclass(frozen=True)
class GameRules:
    """Every tunable number of the game, loaded from ``data/rules.yaml``."""

    base_grid_size: int = 3
    turn_cap_base: int = 11
    min_turn_cap: int = 1
    time_limit: int = 30
    difficult_time_limit: int = 45
    time_mode_from_level: int = 8
    difficult_tiers: Tuple[Tuple[int, int], ...] = ((1, 3), (4, 4), (7, 5), (10, 6))
    peek_seconds: float = 3.0
    mismatch_delay: float = 0.6
    auto_progress_seconds: int = 5
    tick_seconds: float = 1.0
    starting_bonus_lives: int = 1
    bonus_extra_turns: int = 2
    bonus_extra_seconds: int = 10
    match_points: int = 100
    perfect_bonus: int = 200
    turn_bonus: int = 20
    time_bonus: int = 10
    level_bonus: int = 50
    time_wizard_seconds: int = 20

    def difficult_grid_size(self, level: int) -> int:
        """Grid size of the highest tier whose first level is <= ``level``."""
        size = self.difficult_tiers[0][1]
        for first_level, tier_size in self.difficult_tiers:
            if level >= first_level:
                size = tier_size
        return size


DEFAULT_RULES = GameRules()


def default_rules_path() -> Path:
    return Path(__file__).resolve().parent.parent / "data" / "rules.yaml"


def load_rules(path: Optional[Path] = None) -> GameRules:
    """Load rules from YAML. Keys that are absent keep their built-in value."""
    rules_path = path or default_rules_path()
    if not rules_path.exists():
        raise FileNotFoundError(f"Rules file not found: {rules_path}")

    raw = yaml.safe_load(rules_path.read_text(encoding="utf-8"))
    if raw is None:
        return DEFAULT_RULES
    if not isinstance(raw, dict):
        raise ValueError(f"{rules_path.name}: expected a mapping of rule names to values")

    known = {f.name: f for f in fields(GameRules)}
    overrides: Dict[str, object] = {}
    for key, value in raw.items():
        if key not in known:
            raise ValueError(f"{rules_path.name}: unknown rule '{key}'")
        if key == "difficult_tiers":
            overrides[key] = _parse_tiers(rules_path.name, value)
            continue
        default = getattr(DEFAULT_RULES, key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{rules_path.name}: '{key}' must be a number")
        overrides[key] = float(value) if isinstance(default, float) else int(value)

    return replace(DEFAULT_RULES, **overrides)


def _parse_tiers(file_name: str, value: object) -> Tuple[Tuple[int, int], ...]:
    if not isinstance(value, list) or not value:
        raise ValueError(f"{file_name}: 'difficult_tiers' must be a non-empty list")
    tiers = []
    for item in value:
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            raise ValueError(f"{file_name}: each difficult tier must be [first_level, grid_size]")
        first_level, size = int(item[0]), int(item[1])
        if size < 2:
            raise ValueError(f"{file_name}: difficult tier grid size must be at least 2")
        tiers.append((first_level, size))
    tiers.sort()
    return tuple(tiers)
