"""Data models used by the UI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from memorymatch.core.state import GameSnapshot, GameState
from memorymatch.ui.colors import GameColors, blend_hex, card_color


@dataclass
class CardView:
    """How a single card button should look right now."""

    index: int
    color: str
    face_up: bool
    enabled: bool
    label: str = ""


def build_card_views(snapshot: GameSnapshot) -> List[CardView]:
    accepting = snapshot.game_state is GameState.PLAYING and not snapshot.is_resolving
    views: List[CardView] = []
    for index, card in enumerate(snapshot.cards):
        if card.is_bonus:
            views.append(CardView(index=index, color=GameColors.CARD_BONUS, face_up=True, enabled=False, label="★"))
            continue
        if card.is_matched:
            color = blend_hex(card_color(card.color_index), GameColors.MATCHED_TINT, 0.5)
            views.append(CardView(index=index, color=color, face_up=True, enabled=False))
            continue
        if card.is_flipped:
            views.append(CardView(index=index, color=card_color(card.color_index), face_up=True, enabled=False))
            continue
        views.append(CardView(index=index, color=GameColors.CARD_BACK, face_up=False, enabled=accepting))
    return views


def status_line(snapshot: GameSnapshot) -> str:
    """Header text: level, mode and the limit that matters for the mode."""
    config = snapshot.level_config
    stats = snapshot.stats
    parts = [f"Level {stats.current_level}", config.mode.description]
    if config.max_turns is not None:
        parts.append(f"Turns {stats.turns}/{config.max_turns + stats.extra_turns}")
    else:
        parts.append(f"Time {stats.time_remaining}s")
    parts.append(f"Matches {stats.matches_found}/{config.pair_count}")
    parts.append(f"Lives {stats.bonus_lives}")
    return "  ·  ".join(parts)


def round_end_message(snapshot: GameSnapshot) -> str:
    outcome = snapshot.last_outcome
    if outcome is None:
        return ""
    if outcome.is_win:
        title = "PERFECT GAME! Bonus life earned!" if outcome.is_perfect else "Level Complete!"
        follow_up = "Next level"
    else:
        title = "Turn limit exceeded" if snapshot.level_config.max_turns is not None else "Time's up!"
        follow_up = "Retry"
    lines = [title, f"Score: {outcome.score}"]
    if snapshot.auto_progress_remaining is not None:
        lines.append(f"{follow_up} in {snapshot.auto_progress_remaining}s")
    return "\n".join(lines)
