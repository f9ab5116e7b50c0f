"""
analysis.py

Descriptive views of a candidate pool for display: which letters can still
sit in each square, and how much of the answer list the clues have ruled out.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

from wordle_engine.feedback import WORD_LENGTH
from wordle_engine.ranking import letter_frequencies


@dataclass(frozen=True)
class PositionAnalysis:
    # per position, most frequent first
    possible_letters: Tuple[Tuple[str, ...], ...]
    solved_positions: Tuple[Optional[str], ...]
    position_frequencies: Tuple[Dict[str, int], ...]


@dataclass(frozen=True)
class PoolStats:
    total_remaining: int
    eliminated_percentage: float
    letter_entropy: float


def position_analysis(pool: Sequence[str]) -> PositionAnalysis:
    """
    Letters seen at each position across the pool. A position is solved
    when every pool word has the same letter there. Equal counts keep the
    order in which the letters first appear in the pool.
    """
    counts = [Counter() for _ in range(WORD_LENGTH)]
    for w in pool:
        for i, ch in enumerate(w):
            counts[i][ch] += 1

    possible = tuple(
        tuple(sorted(c, key=lambda ch, c=c: -c[ch])) for c in counts
    )
    solved = tuple(letters[0] if len(letters) == 1 else None for letters in possible)
    return PositionAnalysis(possible, solved, tuple(dict(c) for c in counts))


def letter_entropy(pool: Sequence[str]) -> float:
    """Sum of -p*log2(p) over letters, p = share of pool words holding the letter."""
    n = len(pool)
    if n <= 1:
        return 0.0
    total = 0.0
    for count in letter_frequencies(pool).values():
        p = count / n
        total -= p * math.log2(p)
    return total


def pool_stats(pool: Sequence[str], base_size: int) -> PoolStats:
    if base_size <= 0:
        eliminated = 0.0
    else:
        eliminated = (1.0 - len(pool) / base_size) * 100.0
    return PoolStats(len(pool), eliminated, letter_entropy(pool))
