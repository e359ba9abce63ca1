"""Theme colors, the card palette and color utilities for the UI."""

from typing import Tuple

# Pair colors, indexed by Card.color_index (modulo length).
CARD_PALETTE: Tuple[str, ...] = (
    "#007AFF",  # blue
    "#FF3B30",  # red
    "#34C759",  # green
    "#FF9500",  # orange
    "#AF52DE",  # purple
    "#FF2D55",  # pink
    "#FFCC00",  # yellow
    "#32ADE6",  # cyan
    "#00C7BE",  # mint
    "#5856D6",  # indigo
    "#30B0C7",  # teal
    "#A2845E",  # brown
)


class GameColors:
    """Light theme palette."""

    BG_TOP = "#dbe7ff"
    BG_BOTTOM = "#e9dcff"

    CARD_BACK = "#3f51b5"
    CARD_BONUS = "#ffffff"
    MATCHED_TINT = "#ffffff"

    TEXT_PRIMARY = "#1a1a3a"
    TEXT_MUTED = "#6b6f8a"
    TIME_WARNING = "#d32f2f"

    WIN = "#2e7d32"
    LOSS = "#c62828"


def card_color(color_index: int) -> str:
    """Palette color for a pair; bonus cards (negative index) get the bonus color."""
    if color_index < 0:
        return GameColors.CARD_BONUS
    return CARD_PALETTE[color_index % len(CARD_PALETTE)]


def blend_hex(a: str, b: str, t: float) -> str:
    """Blend two #RRGGBB colors. t=0 -> a, t=1 -> b."""
    try:
        a = a.strip()
        b = b.strip()
        if not (a.startswith("#") and b.startswith("#") and len(a) == 7 and len(b) == 7):
            return a
        t = max(0.0, min(1.0, float(t)))
        ar, ag, ab = int(a[1:3], 16), int(a[3:5], 16), int(a[5:7], 16)
        br, bg, bb = int(b[1:3], 16), int(b[3:5], 16), int(b[5:7], 16)
        r = int(ar + (br - ar) * t)
        g = int(ag + (bg - ag) * t)
        bl = int(ab + (bb - ab) * t)
        return f"#{r:02X}{g:02X}{bl:02X}"
    except ValueError:
        return a
