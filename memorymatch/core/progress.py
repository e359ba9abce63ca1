from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, field, fields
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from memorymatch.core.collaborators import HighScoreEntry, insert_high_score, is_high_score
from memorymatch.core.levels import GameMode
from memorymatch.core.scoring import RoundOutcome

logger = logging.getLogger(__name__)


@dataclass
class PlayerProgress:
    games_played: int = 0
    games_won: int = 0
    total_score: int = 0
    highest_level: int = 0
    total_matches: int = 0
    time_mode_wins: int = 0
    difficult_mode_wins: int = 0
    current_streak: int = 0
    best_streak: int = 0
    achievements: List[str] = field(default_factory=list)


# (achievement id, counter, threshold)
PROFILE_ACHIEVEMENTS: Tuple[Tuple[str, str, int], ...] = (
    ("first_win", "games_won", 1),
    ("level_master", "highest_level", 10),
    ("score_hunter", "total_score", 10000),
    ("marathon_runner", "games_played", 50),
    ("match_maker", "total_matches", 500),
    ("speedster", "time_mode_wins", 5),
    ("difficult_champion", "difficult_mode_wins", 10),
    ("on_fire", "best_streak", 5),
)


class ProgressStore:
    """Offline profile and high-score table. Persists to disk across app restarts.
    File: ~/.memorymatch/progress.json. Cleared only when the player resets progress."""

    def __init__(self, file_path: Optional[Path] = None) -> None:
        self._file_path = file_path or Path.home() / ".memorymatch" / "progress.json"
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._progress, self._high_scores, self._last_player_name = self._load()

    @property
    def progress(self) -> PlayerProgress:
        return self._progress

    def high_scores(self) -> List[HighScoreEntry]:
        return list(self._high_scores)

    def last_player_name(self) -> str:
        return self._last_player_name

    def unlocked_achievements(self) -> List[str]:
        return list(self._progress.achievements)

    def report_round_result(self, outcome: RoundOutcome) -> List[str]:
        """Fold a finished round into the cumulative counters.

        Returns the achievement ids unlocked by this round.
        """
        p = self._progress
        p.games_played += 1
        p.total_score += outcome.score
        p.highest_level = max(p.highest_level, outcome.level)
        p.total_matches += outcome.matches_found
        if outcome.is_win:
            p.games_won += 1
            p.current_streak += 1
            p.best_streak = max(p.best_streak, p.current_streak)
            if outcome.mode is GameMode.TIME:
                p.time_mode_wins += 1
            elif outcome.mode is GameMode.DIFFICULT:
                p.difficult_mode_wins += 1
        else:
            p.current_streak = 0

        unlocked = [a for a in outcome.achievement_ids if a not in p.achievements]
        for achievement_id, counter, threshold in PROFILE_ACHIEVEMENTS:
            if achievement_id not in p.achievements and achievement_id not in unlocked:
                if getattr(p, counter) >= threshold:
                    unlocked.append(achievement_id)
        p.achievements.extend(unlocked)
        if unlocked:
            logger.info("Unlocked achievements: %s", ", ".join(unlocked))
        self._save()
        return unlocked

    def is_high_score(self, score: int) -> bool:
        return is_high_score(self._high_scores, score)

    def record_high_score(self, name: str, score: int, level: int) -> None:
        name = name.strip() or "Player"
        self._high_scores = insert_high_score(self._high_scores, HighScoreEntry(name=name, score=score, level=level))
        self._last_player_name = name
        self._save()

    def clear_high_scores(self) -> None:
        self._high_scores = []
        self._save()

    def reset(self) -> None:
        """Clear all progress. Only called when the player resets progress."""
        self._progress = PlayerProgress()
        self._high_scores = []
        self._save()

    def save(self) -> None:
        """Persist current state to disk (e.g. on app exit)."""
        self._save()

    def _load(self) -> Tuple[PlayerProgress, List[HighScoreEntry], str]:
        progress = PlayerProgress()
        if not self._file_path.exists():
            return progress, [], ""
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not load progress from %s: %s", self._file_path, e)
            return progress, [], ""
        if not isinstance(payload, dict):
            logger.warning("Ignoring malformed progress file %s", self._file_path)
            return progress, [], ""

        raw = payload.get("profile", {})
        if isinstance(raw, dict):
            counters: Dict[str, int] = {}
            for f in fields(PlayerProgress):
                if f.name == "achievements":
                    continue
                try:
                    counters[f.name] = int(raw.get(f.name, 0))
                except (TypeError, ValueError):
                    logger.warning("Ignoring invalid %s in %s", f.name, self._file_path)
                    counters[f.name] = 0
            achievements = raw.get("achievements", [])
            if not isinstance(achievements, list):
                achievements = []
            progress = PlayerProgress(**counters, achievements=[str(a) for a in achievements])

        high_scores: List[HighScoreEntry] = []
        raw_scores = payload.get("high_scores", [])
        for entry in raw_scores if isinstance(raw_scores, list) else []:
            if not isinstance(entry, dict):
                continue
            try:
                high_scores.append(
                    HighScoreEntry(
                        name=str(entry.get("name", "Player")),
                        score=int(entry.get("score", 0)),
                        level=int(entry.get("level", 1)),
                    )
                )
            except (TypeError, ValueError):
                logger.warning("Skipping invalid high score entry in %s", self._file_path)
        high_scores.sort(key=lambda e: e.score, reverse=True)
        return progress, high_scores, str(payload.get("last_player_name", ""))

    def _save(self) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "profile": asdict(self._progress),
            "high_scores": [asdict(e) for e in self._high_scores],
            "last_player_name": self._last_player_name,
        }
        try:
            self._file_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save progress to %s: %s", self._file_path, e)
