"""Interfaces of the services a session talks to, plus offline defaults."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Protocol

from memorymatch.core.scoring import RoundOutcome

logger = logging.getLogger(__name__)

MAX_HIGH_SCORES = 10


class ProfileService(Protocol):
    def report_round_result(self, outcome: RoundOutcome) -> None: ...


class HighScoreStore(Protocol):
    def is_high_score(self, score: int) -> bool: ...

    def record_high_score(self, name: str, score: int, level: int) -> None: ...


class FeedbackSink(Protocol):
    """Accessibility/audio/haptic hooks. Calls are best effort."""

    def on_tap(self, index: int) -> None: ...

    def on_match(self, index: int) -> None: ...

    def on_mismatch(self, index: int) -> None: ...

    def on_win(self, outcome: RoundOutcome) -> None: ...

    def on_loss(self, outcome: RoundOutcome) -> None: ...

    def on_error(self, message: str) -> None: ...


class NullProfileService:
    def report_round_result(self, outcome: RoundOutcome) -> None:
        logger.debug("No profile service configured; dropping result for level %d", outcome.level)


@dataclass(frozen=True)
class HighScoreEntry:
    name: str
    score: int
    level: int


class InMemoryHighScoreStore:
    """Top-ten table kept only for the lifetime of the process."""

    def __init__(self) -> None:
        self._entries: List[HighScoreEntry] = []

    def entries(self) -> List[HighScoreEntry]:
        return list(self._entries)

    def is_high_score(self, score: int) -> bool:
        return is_high_score(self._entries, score)

    def record_high_score(self, name: str, score: int, level: int) -> None:
        self._entries = insert_high_score(self._entries, HighScoreEntry(name=name, score=score, level=level))


def is_high_score(entries: List[HighScoreEntry], score: int) -> bool:
    if len(entries) < MAX_HIGH_SCORES:
        return True
    return score > entries[-1].score


def insert_high_score(entries: List[HighScoreEntry], entry: HighScoreEntry) -> List[HighScoreEntry]:
    ranked = sorted([*entries, entry], key=lambda e: e.score, reverse=True)
    return ranked[:MAX_HIGH_SCORES]


class LoggingFeedbackSink:
    def on_tap(self, index: int) -> None:
        logger.debug("Card %d tapped", index)

    def on_match(self, index: int) -> None:
        logger.debug("Match completed at card %d", index)

    def on_mismatch(self, index: int) -> None:
        logger.debug("Mismatch at card %d", index)

    def on_win(self, outcome: RoundOutcome) -> None:
        logger.debug("Level %d complete", outcome.level)

    def on_loss(self, outcome: RoundOutcome) -> None:
        logger.debug("Level %d failed", outcome.level)

    def on_error(self, message: str) -> None:
        logger.debug("Error feedback: %s", message)
