"""
session.py

SolverSession: the human-in-the-loop solver. The user types each guess they
played and the feedback they saw; the session keeps the guess history, the
merged constraint state and the candidate pool, and ranks next guesses.

State is always derived from the history. Every submit and every undo
refolds all guesses into a fresh ConstraintState and refilters the base
list. Constraint merges cannot be reversed once several guesses have
tightened the same bound, and at six guesses a replay costs nothing.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple, Union

from wordle_engine.analysis import PoolStats, PositionAnalysis, pool_stats, position_analysis
from wordle_engine.config import EngineConfig
from wordle_engine.constraints import ConstraintState, derive_from_guess, filter_candidates, fold, merge
from wordle_engine.data_utils import WordCorpus
from wordle_engine.errors import (
    InvalidPatternLength,
    InvalidPatternSymbol,
    NothingToUndo,
    SessionFinished,
    WordNotInCorpus,
)
from wordle_engine.feedback import (
    WORD_LENGTH,
    Pattern,
    Tile,
    format_pattern,
    is_solved,
    parse_guess,
    parse_pattern,
)
from wordle_engine.ranking import (
    RankedWord,
    deviation_score,
    entropy,
    entropy_rank,
    frequency_rank,
    optimal_word,
)
from wordle_engine.records import SolverGuessRecord, SolverOutcome, SolverSessionRecord

log = logging.getLogger(__name__)


class SessionStatus(Enum):
    EMPTY = "empty"
    ACTIVE = "active"
    SOLVED = "solved"
    CONTRADICTORY = "contradictory"
    EXHAUSTED = "exhausted"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionStatus.SOLVED, SessionStatus.CONTRADICTORY, SessionStatus.EXHAUSTED)


@dataclass(frozen=True)
class GuessRecord:
    word: str
    pattern: Pattern

    @classmethod
    def parse(cls, word: str, pattern: Union[str, Sequence[int]]) -> "GuessRecord":
        """Validate user input into a record; raises the parse errors."""
        word = parse_guess(word)
        if isinstance(pattern, str):
            tiles = parse_pattern(pattern)
        else:
            token = "".join(str(p) for p in pattern)
            if len(pattern) != WORD_LENGTH:
                raise InvalidPatternLength(token, WORD_LENGTH)
            tiles = []
            for p in pattern:
                try:
                    tiles.append(Tile(p))
                except ValueError:
                    raise InvalidPatternSymbol(str(p), token) from None
            tiles = tuple(tiles)
        return cls(word, tiles)

    def __str__(self) -> str:
        return f"{self.word.upper()} {format_pattern(self.pattern)}"


@dataclass(frozen=True)
class GuessStats:
    """Ranking metadata of one guess, measured on the pool it was played into."""

    pool_size_before: int
    pool_size_after: int
    entropy: float
    optimal_word: str
    optimal_entropy: float
    deviation_score: float


@dataclass(frozen=True)
class SessionSnapshot:
    guesses: Tuple[GuessRecord, ...]
    stats: Tuple[Optional[GuessStats], ...]
    state: ConstraintState
    pool: Tuple[str, ...]
    status: SessionStatus
    positions: PositionAnalysis
    pool_stats: PoolStats
    # letter entropy of the pool after each guess
    entropy_history: Tuple[float, ...] = ()

    @property
    def pool_size(self) -> int:
        return len(self.pool)

    @property
    def patterns(self) -> Tuple[Pattern, ...]:
        return tuple(g.pattern for g in self.guesses)


class SolverSession:
    """
    API
    ---
    submit_guess(word, pattern) -> SessionSnapshot
        Record a played guess and its feedback. `pattern` is a G/Y/X token
        or a sequence of tiles.
    undo() -> GuessRecord
        Drop the last guess and rebuild from the rest.
    suggestions(limit, method) -> list[RankedWord]
        Ranked next guesses ("frequency" over the pool, or "entropy").
    snapshot() -> SessionSnapshot
        Read-only view for display.
    to_record(outcome) -> SolverSessionRecord
        Hand-off for the history store.

    Status
    ------
    EMPTY until the first guess. CONTRADICTORY when the clues cannot all be
    true (pool empty); SOLVED on an all-green pattern or a single consistent
    candidate; EXHAUSTED once max_guesses guesses are used. Terminal states
    refuse further guesses until undo().
    """

    def __init__(
        self,
        corpus: WordCorpus,
        config: Optional[EngineConfig] = None,
        *,
        base: str = "solutions",
    ) -> None:
        if not isinstance(corpus, WordCorpus):
            raise TypeError("corpus must be a WordCorpus")
        if base not in ("solutions", "allowed"):
            raise ValueError("base must be 'solutions' or 'allowed'")
        self.corpus = corpus
        self.config = config or EngineConfig()
        self.base = base
        self._base_list: Tuple[str, ...] = tuple(corpus.solutions if base == "solutions" else corpus.allowed)

        self._guesses: List[GuessRecord] = []
        self._stats: List[Optional[GuessStats]] = []
        self._optimal_cache: Dict[Tuple[GuessRecord, ...], Tuple[str, float]] = {}
        self._rebuild()

    # -------------------------
    # Core session API
    # -------------------------
    def submit_guess(
        self,
        word: str,
        pattern: Union[str, Sequence[int]],
        *,
        cancel: Optional[threading.Event] = None,
    ) -> SessionSnapshot:
        record = GuessRecord.parse(word, pattern)
        if self.status.is_terminal:
            raise SessionFinished(f"session is {self.status.value}; undo before adding guesses")
        if not self.config.allow_off_list and not self.corpus.is_allowed(record.word):
            raise WordNotInCorpus(record.word)

        before = self._pool
        best = None
        if self.config.track_optimal:
            # Ranked before anything is appended so a cancelled ranking
            # leaves the session untouched.
            best = self._optimal_for(tuple(self._guesses), before, cancel)

        self._guesses.append(record)
        self._rebuild()
        self._stats.append(None if best is None else self._guess_stats(record.word, before, len(self._pool), best))
        log.info("guess %d: %s -> %d candidates (%s)", len(self._guesses), record, len(self._pool), self.status.value)
        return self.snapshot()

    def undo(self) -> GuessRecord:
        if not self._guesses:
            raise NothingToUndo("no guesses to undo")
        record = self._guesses.pop()
        self._stats.pop()
        self._rebuild()
        log.info("undid %s -> %d candidates", record, len(self._pool))
        return record

    def reset(self) -> None:
        self._guesses.clear()
        self._stats.clear()
        self._rebuild()

    def suggestions(
        self,
        limit: Optional[int] = None,
        method: Optional[str] = None,
        *,
        universe: Optional[Sequence[str]] = None,
        cancel: Optional[threading.Event] = None,
    ) -> List[RankedWord]:
        """Best next guesses; empty once the clues are contradictory."""
        if limit is None:
            limit = self.config.suggestion_limit
        method = method or self.config.ranking
        if self._state.contradictory or not self._pool:
            return []
        if method == "frequency":
            ranked = frequency_rank(self._pool)
        elif method == "entropy":
            ranked = entropy_rank(self._pool, universe, workers=self.config.entropy_workers, cancel=cancel)
        else:
            raise ValueError(f"unknown ranking method: {method}")
        return ranked[:limit]

    # -------------------------
    # Introspection helpers
    # -------------------------
    @property
    def guesses(self) -> Tuple[GuessRecord, ...]:
        return tuple(self._guesses)

    @property
    def state(self) -> ConstraintState:
        return self._state

    @property
    def pool(self) -> Tuple[str, ...]:
        return self._pool

    @property
    def status(self) -> SessionStatus:
        if not self._guesses:
            return SessionStatus.EMPTY
        if self._state.contradictory:
            return SessionStatus.CONTRADICTORY
        if is_solved(self._guesses[-1].pattern) or len(self._pool) == 1:
            return SessionStatus.SOLVED
        if len(self._guesses) >= self.config.max_guesses:
            return SessionStatus.EXHAUSTED
        return SessionStatus.ACTIVE

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            guesses=tuple(self._guesses),
            stats=tuple(self._stats),
            state=self._state,
            pool=self._pool,
            status=self.status,
            positions=position_analysis(self._pool),
            pool_stats=pool_stats(self._pool, len(self._base_list)),
            entropy_history=tuple(self._entropy_history),
        )

    def to_record(self, outcome: Optional[SolverOutcome] = None) -> SolverSessionRecord:
        """
        Serializable summary of the session. Guesses submitted while
        tracking was off get their ranking metadata computed here.
        """
        if outcome is None:
            outcome = SolverOutcome.COMPLETED if self.status is SessionStatus.SOLVED else SolverOutcome.ABANDONED
        rows = []
        for i, (record, stats) in enumerate(zip(self._guesses, self._stats)):
            if stats is None:
                stats = self._replay_stats(i)
            rows.append(
                SolverGuessRecord(
                    guess_number=i + 1,
                    word=record.word,
                    pool_size_before=stats.pool_size_before,
                    pool_size_after=stats.pool_size_after,
                    entropy=stats.entropy,
                    optimal_word=stats.optimal_word,
                    optimal_entropy=stats.optimal_entropy,
                    deviation_score=stats.deviation_score,
                )
            )
        return SolverSessionRecord(outcome=outcome, guesses=tuple(rows))

    # -------------------------
    # Helpers
    # -------------------------
    def _rebuild(self) -> None:
        # A longer prefix admits a subset of the shorter prefix's pool.
        state = ConstraintState.empty()
        pool = self._base_list
        self._entropy_history: List[float] = []
        for g in self._guesses:
            state = merge(state, derive_from_guess(g.word, g.pattern))
            pool = tuple(filter_candidates(pool, state))
            self._entropy_history.append(pool_stats(pool, len(self._base_list)).letter_entropy)
        self._state = state
        self._pool = pool

    def _optimal_for(
        self,
        prefix: Tuple[GuessRecord, ...],
        pool: Sequence[str],
        cancel: Optional[threading.Event] = None,
    ) -> Tuple[str, float]:
        if prefix not in self._optimal_cache:
            universe = tuple(self.corpus.allowed) if self.config.optimal_universe == "allowed" else None
            best = optimal_word(pool, universe, workers=self.config.entropy_workers, cancel=cancel)
            self._optimal_cache[prefix] = best if best is not None else ("", 0.0)
        return self._optimal_cache[prefix]

    def _guess_stats(
        self,
        word: str,
        before: Sequence[str],
        after_size: int,
        best: Tuple[str, float],
    ) -> GuessStats:
        chosen = entropy(word, before)
        best_word, best_entropy = best
        return GuessStats(
            pool_size_before=len(before),
            pool_size_after=after_size,
            entropy=chosen,
            optimal_word=best_word,
            optimal_entropy=best_entropy,
            deviation_score=deviation_score(
                best_entropy, chosen, mode=self.config.deviation_mode, pool_size=len(before)
            ),
        )

    def _replay_stats(self, i: int) -> GuessStats:
        prefix = tuple(self._guesses[:i])
        before = filter_candidates(self._base_list, fold((g.word, g.pattern) for g in prefix))
        after = filter_candidates(self._base_list, fold((g.word, g.pattern) for g in self._guesses[: i + 1]))
        return self._guess_stats(self._guesses[i].word, before, len(after), self._optimal_for(prefix, before))
