"""
ranking.py

Ranks candidate guesses against the current candidate pool.

Two metrics:
- frequency: sum, over the distinct letters of a word, of how many pool
  words contain that letter. Cheap; used for the default suggestion list.
- entropy: Shannon entropy (bits) of the feedback-pattern buckets a guess
  splits the pool into. Used to find the optimal guess and to score how far
  a chosen guess was from it.

Entropy over a whole guess universe is O(|universe| x |pool|) pattern
evaluations. The pool is encoded once into a (n, 5) letter array and each
guess is scored against every target at once with numpy, so the per-guess
cost is a handful of vector operations rather than n Python calls.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from wordle_engine.errors import RankingCancelled
from wordle_engine.feedback import N_PATTERNS, WORD_LENGTH

log = logging.getLogger(__name__)

_POWERS = np.array([3 ** (WORD_LENGTH - 1 - i) for i in range(WORD_LENGTH)], dtype=np.int64)
_GREEN_WEIGHTS = 2 * _POWERS
_CANCEL_CHECK_EVERY = 32


@dataclass(frozen=True)
class RankedWord:
    word: str
    score: float
    index: int


# ---------------------------
# Frequency ranking
# ---------------------------

def letter_frequencies(pool: Sequence[str]) -> Dict[str, int]:
    """Number of pool words containing each letter at least once."""
    freq: Dict[str, int] = {}
    for w in pool:
        for ch in set(w):
            freq[ch] = freq.get(ch, 0) + 1
    return freq


def frequency_score(word: str, freq: Dict[str, int]) -> int:
    # Repeated letters earn nothing extra.
    return sum(freq.get(ch, 0) for ch in set(word))


def frequency_rank(pool: Sequence[str]) -> List[RankedWord]:
    freq = letter_frequencies(pool)
    ranked = [RankedWord(w, frequency_score(w, freq), i) for i, w in enumerate(pool)]
    # sort is stable, so equal scores keep pool order
    ranked.sort(key=lambda r: r.score, reverse=True)
    return ranked


# ---------------------------
# Pattern partitions & entropy
# ---------------------------

def encode_words(words: Sequence[str]) -> np.ndarray:
    """(n, 5) uint8 array of letter indices 0..25."""
    if not words:
        return np.zeros((0, WORD_LENGTH), dtype=np.uint8)
    buf = "".join(words).encode("ascii")
    arr = np.frombuffer(buf, dtype=np.uint8).reshape(len(words), WORD_LENGTH)
    return arr - np.uint8(ord("a"))


def pattern_codes(guess: str, pool_arr: np.ndarray) -> np.ndarray:
    """
    Base-3 feedback code of `guess` against every row of `pool_arr`.

    Same two-pass rule as feedback.score_pattern: greens first, then for
    each letter its non-green guess positions, left to right, turn yellow
    while the target still has unmatched copies of that letter.
    """
    g = encode_words([guess])[0]
    green = pool_arr == g
    codes = green.astype(np.int64) @ _GREEN_WEIGHTS
    not_green = ~green

    for letter in set(g.tolist()):
        positions = [i for i in range(WORD_LENGTH) if g[i] == letter]
        avail = ((pool_arr == letter) & not_green).sum(axis=1)
        for i in positions:
            hit = not_green[:, i] & (avail > 0)
            avail -= hit
            codes += hit * _POWERS[i]
    return codes


def _entropy_from_codes(codes: np.ndarray) -> float:
    n = codes.shape[0]
    if n <= 1:
        return 0.0
    counts = np.bincount(codes, minlength=N_PATTERNS)
    nz = counts[counts > 0]
    return float(math.log2(n) - float((nz * np.log2(nz)).sum()) / n)


def pattern_histogram(guess: str, pool: Sequence[str]) -> Dict[int, int]:
    """pattern code -> number of pool words producing it."""
    codes = pattern_codes(guess, encode_words(pool))
    counts = np.bincount(codes, minlength=N_PATTERNS)
    return {int(c): int(counts[c]) for c in np.flatnonzero(counts)}


def entropy(guess: str, pool: Sequence[str]) -> float:
    """Expected information (bits) from playing `guess` against `pool`."""
    if len(pool) <= 1:
        return 0.0
    return _entropy_from_codes(pattern_codes(guess, encode_words(pool)))


def ranking_metrics(guess: str, pool: Sequence[str]) -> Dict[str, float]:
    """
    Partition metrics for a guess:
    - exp_remaining: expected remaining candidates after the feedback
    - entropy: information gain (higher is better)
    - worst_case: size of the largest bucket (lower is better)
    - partitions: number of distinct feedback patterns induced
    """
    n = len(pool)
    if n <= 0:
        raise ValueError("pool must be non-empty")
    counts = list(pattern_histogram(guess, pool).values())
    return {
        "exp_remaining": float(sum(c * c for c in counts) / n),
        "entropy": entropy(guess, pool),
        "worst_case": int(max(counts)),
        "partitions": int(len(counts)),
    }


def _entropy_chunk(
    universe: Sequence[str],
    start: int,
    stop: int,
    pool_arr: np.ndarray,
    out: np.ndarray,
    cancel: Optional[threading.Event],
) -> None:
    for k in range(start, stop):
        if cancel is not None and (k - start) % _CANCEL_CHECK_EVERY == 0 and cancel.is_set():
            raise RankingCancelled("entropy ranking cancelled")
        out[k] = _entropy_from_codes(pattern_codes(universe[k], pool_arr))


def entropy_scores(
    pool: Sequence[str],
    universe: Optional[Sequence[str]] = None,
    *,
    workers: int = 1,
    cancel: Optional[threading.Event] = None,
) -> np.ndarray:
    """Entropy of every universe word against `pool`, in universe order."""
    universe = pool if universe is None else universe
    out = np.zeros(len(universe), dtype=np.float64)
    if len(pool) <= 1 or not universe:
        return out
    pool_arr = encode_words(pool)

    t0 = time.perf_counter()
    if workers <= 1 or len(universe) < 2 * workers:
        _entropy_chunk(universe, 0, len(universe), pool_arr, out, cancel)
    else:
        # Contiguous shards write disjoint slices of `out`.
        bounds = np.linspace(0, len(universe), workers + 1).astype(int)
        with ThreadPoolExecutor(max_workers=workers) as pool_exec:
            futures = [
                pool_exec.submit(_entropy_chunk, universe, int(a), int(b), pool_arr, out, cancel)
                for a, b in zip(bounds[:-1], bounds[1:])
            ]
            for fut in futures:
                fut.result()
    log.debug(
        "entropy for %d guesses x %d targets in %.3fs",
        len(universe), len(pool), time.perf_counter() - t0,
    )
    return out


def entropy_rank(
    pool: Sequence[str],
    universe: Optional[Sequence[str]] = None,
    *,
    workers: int = 1,
    cancel: Optional[threading.Event] = None,
) -> List[RankedWord]:
    """Universe words by entropy, best first; ties go to the lower universe index."""
    universe = pool if universe is None else universe
    scores = entropy_scores(pool, universe, workers=workers, cancel=cancel)
    # rounding keeps float noise from reordering equal partitions
    order = sorted(range(len(universe)), key=lambda i: (-round(float(scores[i]), 12), i))
    return [RankedWord(universe[i], float(scores[i]), i) for i in order]


def optimal_word(
    pool: Sequence[str],
    universe: Optional[Sequence[str]] = None,
    *,
    workers: int = 1,
    cancel: Optional[threading.Event] = None,
) -> Optional[Tuple[str, float]]:
    """
    The highest-entropy guess for `pool` and its entropy, or None for an
    empty pool. With a single candidate left the answer itself is optimal.
    """
    if not pool:
        return None
    if len(pool) == 1:
        return pool[0], 0.0
    best = entropy_rank(pool, universe, workers=workers, cancel=cancel)[0]
    return best.word, best.score


def deviation_score(
    optimal_entropy: float,
    chosen_entropy: float,
    *,
    mode: str = "clamped",
    pool_size: int = 0,
) -> float:
    """
    Entropy given up by not playing the optimal guess.

    clamped    -> max(0, optimal - chosen)
    raw        -> optimal - chosen
    normalized -> clamped / log2(pool_size), 0 for pools of one or none
    """
    gap = optimal_entropy - chosen_entropy
    if mode == "raw":
        return gap
    gap = max(0.0, gap)
    if mode == "clamped":
        return gap
    if mode == "normalized":
        if pool_size <= 1:
            return 0.0
        return gap / math.log2(pool_size)
    raise ValueError(f"unknown deviation mode: {mode}")
