"""
constraints.py

Keeps track of Wordle-style constraints and filters candidate words.

Each (guess, pattern) pair is turned into a partial ConstraintState, and the
partials are merged into one global state: per-letter occurrence bounds plus
per-position facts (a fixed letter or a set of excluded letters). A
self-inconsistent sequence of clues produces a state with
`contradictory=True`; that is a normal result, not an exception.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from functools import reduce
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from wordle_engine.feedback import WORD_LENGTH, Tile, score_pattern

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class LetterBound:
    """How many times a letter occurs in the answer. max_count None = unbounded."""

    min_count: int = 0
    max_count: Optional[int] = None

    def tighten(self, other: "LetterBound") -> "LetterBound":
        lo = max(self.min_count, other.min_count)
        if self.max_count is None:
            hi = other.max_count
        elif other.max_count is None:
            hi = self.max_count
        else:
            hi = min(self.max_count, other.max_count)
        return LetterBound(lo, hi)

    @property
    def is_empty(self) -> bool:
        return self.max_count is not None and self.min_count > self.max_count

    def admits(self, count: int) -> bool:
        if count < self.min_count:
            return False
        return self.max_count is None or count <= self.max_count


@dataclass(frozen=True)
class PositionFact:
    fixed: Optional[str] = None
    excluded: FrozenSet[str] = frozenset()
    # a second, different letter claimed green here
    conflict: bool = False

    def combine(self, other: "PositionFact") -> "PositionFact":
        fixed = self.fixed or other.fixed
        conflict = self.conflict or other.conflict or (
            self.fixed is not None and other.fixed is not None and self.fixed != other.fixed
        )
        return PositionFact(fixed, self.excluded | other.excluded, conflict)

    @property
    def is_contradictory(self) -> bool:
        return self.conflict or (self.fixed is not None and self.fixed in self.excluded)

    def admits(self, ch: str) -> bool:
        if self.fixed is not None and ch != self.fixed:
            return False
        return ch not in self.excluded


def _empty_positions() -> Tuple[PositionFact, ...]:
    return tuple(PositionFact() for _ in range(WORD_LENGTH))


@dataclass(frozen=True)
class ConstraintState:
    bounds: Dict[str, LetterBound] = field(default_factory=dict)
    positions: Tuple[PositionFact, ...] = field(default_factory=_empty_positions)
    contradictory: bool = False

    @classmethod
    def empty(cls) -> "ConstraintState":
        return cls()

    def bound(self, letter: str) -> LetterBound:
        return self.bounds.get(letter, LetterBound())

    def fixed_letters(self) -> List[Optional[str]]:
        """Letter confirmed at each position, or None."""
        return [p.fixed for p in self.positions]

    def required_letters(self) -> Dict[str, int]:
        """Letters that must appear, with their minimum count."""
        return {c: b.min_count for c, b in sorted(self.bounds.items()) if b.min_count > 0}

    def absent_letters(self) -> List[str]:
        return sorted(c for c, b in self.bounds.items() if b.max_count == 0)

    def exact_counts(self) -> Dict[str, int]:
        return {
            c: b.max_count
            for c, b in sorted(self.bounds.items())
            if b.max_count is not None and b.max_count == b.min_count and b.max_count > 0
        }


def _is_contradictory(bounds: Dict[str, LetterBound], positions: Sequence[PositionFact]) -> bool:
    if any(b.is_empty for b in bounds.values()):
        return True
    if any(p.is_contradictory for p in positions):
        return True
    # A five-letter word cannot hold more than five required letters.
    if sum(b.min_count for b in bounds.values()) > WORD_LENGTH:
        return True
    # Greens are occurrences too.
    fixed_counts = Counter(p.fixed for p in positions if p.fixed is not None)
    for c, n in fixed_counts.items():
        hi = bounds.get(c, LetterBound()).max_count
        if hi is not None and n > hi:
            return True
    return False


def derive_from_guess(guess: str, pattern: Sequence[int]) -> ConstraintState:
    """
    Translate one (guess, pattern) pair into a partial constraint state.

    For each distinct letter c in the guess, `gy` counts its green/yellow
    tiles. If any tile of c is gray the answer holds exactly `gy` copies,
    otherwise at least `gy`. A green fixes c at its position; yellow and gray
    tiles exclude c from theirs.
    """
    gy: Counter = Counter()
    grays: Counter = Counter()
    positions = []
    for ch, p in zip(guess, pattern):
        if p == Tile.GREEN:
            gy[ch] += 1
            positions.append(PositionFact(fixed=ch))
        else:
            if p == Tile.YELLOW:
                gy[ch] += 1
            else:
                grays[ch] += 1
            positions.append(PositionFact(excluded=frozenset(ch)))

    bounds = {}
    for ch in set(guess):
        k = gy[ch]
        bounds[ch] = LetterBound(k, k if grays[ch] else None)

    positions = tuple(positions)
    return ConstraintState(bounds, positions, _is_contradictory(bounds, positions))


def merge(state: ConstraintState, partial: ConstraintState) -> ConstraintState:
    """Fold `partial` into `state`. Never raises on inconsistent input."""
    bounds = dict(state.bounds)
    for ch, b in partial.bounds.items():
        bounds[ch] = bounds[ch].tighten(b) if ch in bounds else b
    positions = tuple(a.combine(b) for a, b in zip(state.positions, partial.positions))

    contradictory = state.contradictory or partial.contradictory or _is_contradictory(bounds, positions)
    if contradictory and not state.contradictory:
        log.info("constraints became contradictory")
    return ConstraintState(bounds, positions, contradictory)


def fold(history: Iterable[Tuple[str, Sequence[int]]]) -> ConstraintState:
    """Merged state for a whole sequence of (guess, pattern) pairs."""
    return reduce(
        lambda acc, gp: merge(acc, derive_from_guess(gp[0], gp[1])),
        history,
        ConstraintState.empty(),
    )


def filter_candidates(words: Iterable[str], state: ConstraintState) -> List[str]:
    """
    Keep only the words (in their original order) allowed by `state`.

    A contradictory state admits nothing, so no filtering is attempted.
    """
    if state.contradictory:
        return []
    checks = [(i, p) for i, p in enumerate(state.positions) if p.fixed is not None or p.excluded]
    bounds = [(ch, b) for ch, b in state.bounds.items() if b.min_count > 0 or b.max_count is not None]

    out = []
    for w in words:
        if any(not p.admits(w[i]) for i, p in checks):
            continue
        if any(not b.admits(w.count(ch)) for ch, b in bounds):
            continue
        out.append(w)
    log.debug("filtered to %d candidates", len(out))
    return out


def filter_by_history(words: List[str], history: List[Tuple[str, Sequence[int]]]) -> List[str]:
    """
    Keep only candidates that match *all* (guess, pattern) pairs in history.
    Uses score_pattern directly, so it doubles as a reference for
    filter_candidates.
    """
    wanted = [(g, tuple(Tile(p) for p in patt)) for g, patt in history]
    candidates = []
    for w in words:
        if all(score_pattern(g, w) == patt for g, patt in wanted):
            candidates.append(w)
    return candidates
