"""
records.py

Serializable records of finished games and solver sessions, plus the
statistics computed over them. These are what the sessions hand to the
history store; nothing here touches the engine state.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from wordle_engine.feedback import Pattern, Tile

OPTIMAL_TOLERANCE = 0.01


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GameOutcome(str, Enum):
    WON = "won"
    LOST = "lost"
    ABANDONED = "abandoned"


class SolverOutcome(str, Enum):
    COMPLETED = "completed"
    ABANDONED = "abandoned"


_TILE_NAMES = {Tile.GREEN: "green", Tile.YELLOW: "yellow", Tile.GRAY: "gray"}
_NAME_TILES = {v: k for k, v in _TILE_NAMES.items()}


def tiles_to_names(pattern: Sequence[int]) -> List[str]:
    return [_TILE_NAMES[Tile(p)] for p in pattern]


def names_to_tiles(names: Sequence[str]) -> Pattern:
    return tuple(_NAME_TILES[n] for n in names)


@dataclass(frozen=True)
class GameGuessRecord:
    guess_number: int
    word: str
    pattern: Pattern

    def to_dict(self) -> dict:
        return {"guess_number": self.guess_number, "word": self.word, "feedback": tiles_to_names(self.pattern)}


@dataclass(frozen=True)
class GameRecord:
    target_word: str
    outcome: GameOutcome
    guesses: Tuple[GameGuessRecord, ...] = ()
    timestamp: datetime = field(default_factory=utcnow)
    id: Optional[int] = None

    @property
    def guesses_count(self) -> int:
        return len(self.guesses)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "target_word": self.target_word,
            "outcome": self.outcome.value,
            "guesses_count": self.guesses_count,
            "guesses": [g.to_dict() for g in self.guesses],
        }


@dataclass(frozen=True)
class SolverGuessRecord:
    guess_number: int
    word: str
    pool_size_before: int
    pool_size_after: int
    entropy: float
    optimal_word: str
    optimal_entropy: float
    deviation_score: float

    @property
    def was_optimal(self) -> bool:
        return self.deviation_score <= OPTIMAL_TOLERANCE

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class SolverSessionRecord:
    outcome: SolverOutcome
    guesses: Tuple[SolverGuessRecord, ...] = ()
    timestamp: datetime = field(default_factory=utcnow)
    id: Optional[int] = None

    @property
    def guesses_count(self) -> int:
        return len(self.guesses)

    def optimal_adherence(self) -> float:
        """Percentage of guesses that were optimal."""
        if not self.guesses:
            return 100.0
        return 100.0 * sum(g.was_optimal for g in self.guesses) / len(self.guesses)

    def average_deviation(self) -> float:
        if not self.guesses:
            return 0.0
        return sum(g.deviation_score for g in self.guesses) / len(self.guesses)

    def average_entropy(self) -> float:
        if not self.guesses:
            return 0.0
        return sum(g.entropy for g in self.guesses) / len(self.guesses)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "outcome": self.outcome.value,
            "guesses_count": self.guesses_count,
            "guesses": [g.to_dict() for g in self.guesses],
        }


@dataclass
class SolverStats:
    total_sessions: int = 0
    completed_sessions: int = 0
    abandoned_sessions: int = 0
    average_guesses: float = 0.0
    average_entropy: float = 0.0
    optimal_adherence: float = 0.0
    average_deviation: float = 0.0

    @classmethod
    def from_sessions(cls, sessions: Sequence[SolverSessionRecord]) -> "SolverStats":
        stats = cls(total_sessions=len(sessions))
        completed_guesses = 0
        all_guesses = [g for s in sessions for g in s.guesses]

        for s in sessions:
            if s.outcome is SolverOutcome.COMPLETED:
                stats.completed_sessions += 1
                completed_guesses += s.guesses_count
            else:
                stats.abandoned_sessions += 1

        if stats.completed_sessions:
            stats.average_guesses = completed_guesses / stats.completed_sessions
        if all_guesses:
            n = len(all_guesses)
            stats.average_entropy = sum(g.entropy for g in all_guesses) / n
            stats.optimal_adherence = 100.0 * sum(g.was_optimal for g in all_guesses) / n
            stats.average_deviation = sum(g.deviation_score for g in all_guesses) / n
        return stats


@dataclass
class GameStats:
    played: int = 0
    won: int = 0
    lost: int = 0
    abandoned: int = 0
    win_percentage: float = 0.0
    average_guesses: float = 0.0
    # guesses needed -> number of won games
    distribution: Dict[int, int] = field(default_factory=dict)

    @classmethod
    def from_games(cls, games: Sequence[GameRecord]) -> "GameStats":
        stats = cls(played=len(games))
        counts = Counter(g.outcome for g in games)
        stats.won = counts[GameOutcome.WON]
        stats.lost = counts[GameOutcome.LOST]
        stats.abandoned = counts[GameOutcome.ABANDONED]
        wins = [g.guesses_count for g in games if g.outcome is GameOutcome.WON]
        stats.distribution = dict(sorted(Counter(wins).items()))
        if games:
            stats.win_percentage = 100.0 * stats.won / len(games)
        if wins:
            stats.average_guesses = sum(wins) / len(wins)
        return stats
