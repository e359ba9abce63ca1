from __future__ import annotations

import random
import uuid
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence

BONUS_COLOR_INDEX = -1


def _new_card_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Card:
    """A single cell of the grid. ``color_index`` identifies the pair."""

    color_index: int
    is_flipped: bool = False
    is_matched: bool = False
    is_bonus: bool = False
    card_id: str = field(default_factory=_new_card_id)

    def copy(self) -> "Card":
        return replace(self)


def pair_count_for(grid_size: int) -> int:
    return (grid_size * grid_size) // 2


def generate_cards(
    grid_size: int,
    palette: Sequence[object],
    rng: Optional[random.Random] = None,
) -> List[Card]:
    """Build a shuffled grid of paired cards.

    Colors are reused cyclically when the palette is shorter than the pair
    count. On odd grids a pre-solved bonus card sits at the middle index.
    """
    if grid_size < 2:
        raise ValueError(f"Grid size must be at least 2, got {grid_size}")
    if not palette:
        raise ValueError("Palette must contain at least one color")
    if len(set(palette)) != len(palette):
        raise ValueError("Palette colors must be distinct")

    rng = rng or random.Random()
    total = grid_size * grid_size
    cards: List[Card] = []
    for i in range(pair_count_for(grid_size)):
        color_index = i % len(palette)
        cards.append(Card(color_index=color_index))
        cards.append(Card(color_index=color_index))

    rng.shuffle(cards)

    if total % 2:
        bonus = Card(color_index=BONUS_COLOR_INDEX, is_flipped=True, is_matched=True, is_bonus=True)
        cards.insert(total // 2, bonus)
    return cards
