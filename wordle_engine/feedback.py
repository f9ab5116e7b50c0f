"""
Feedback utilities for Wordle.

Scores a guess against a target with the official two-pass rule and
converts patterns between their tile, integer and text forms.
"""

from __future__ import annotations

from collections import Counter
from enum import IntEnum
from typing import Sequence, Tuple

from wordle_engine.errors import (
    InvalidPatternLength,
    InvalidPatternSymbol,
    InvalidWord,
    InvalidWordLength,
)

WORD_LENGTH = 5


class Tile(IntEnum):
    GRAY = 0
    YELLOW = 1
    GREEN = 2

    @property
    def symbol(self) -> str:
        return _TILE_SYMBOLS[self]

    @classmethod
    def from_symbol(cls, ch: str) -> "Tile":
        return _SYMBOL_TILES[ch.upper()]


_TILE_SYMBOLS = {Tile.GREEN: "G", Tile.YELLOW: "Y", Tile.GRAY: "X"}
_SYMBOL_TILES = {v: k for k, v in _TILE_SYMBOLS.items()}

Pattern = Tuple[Tile, ...]

ALL_GREEN: Pattern = (Tile.GREEN,) * WORD_LENGTH
ALL_GREEN_CODE = 3 ** WORD_LENGTH - 1
N_PATTERNS = 3 ** WORD_LENGTH


def validate_word(word: str) -> str:
    """Raise unless `word` is a 5-letter lowercase alphabetic str; return it."""
    if not isinstance(word, str):
        raise InvalidWord(f"word must be a string, got {type(word).__name__}")
    if len(word) != WORD_LENGTH:
        raise InvalidWordLength(word, WORD_LENGTH)
    if not word.isalpha() or not word.isascii():
        raise InvalidWord(f"word must be alphabetic: {word!r}")
    if not word.islower():
        raise InvalidWord(f"word must be lowercase: {word!r}")
    return word


def score_pattern(guess: str, target: str) -> Pattern:
    """
    Compute the 5-position Wordle feedback for `guess` against `target`.

    Returns
    -------
    tuple[Tile, ...]
        One tile per guess position.

    Correct Duplicate Handling (two-pass rule)
    ------------------------------------------
    1) Greens pass: exact matches are marked green and consume one copy of
       the letter from the target's letter counts.
    2) Yellows pass: every non-green position is yellow while the letter
       still has a positive remaining count (consuming it), gray otherwise.

    A single pass that only asks "is the letter in the target?" over-credits
    repeats: 'sassy' vs 'stays' has one green s, one yellow s and one gray s.
    """
    validate_word(guess)
    validate_word(target)
    return _score(guess, target)


def _score(guess: str, target: str) -> Pattern:
    # Unvalidated inner scorer for the ranking hot path.
    pattern = [Tile.GRAY] * WORD_LENGTH
    remaining = Counter(target)

    # Pass 1: mark greens and decrement availability
    for i, (g, t) in enumerate(zip(guess, target)):
        if g == t:
            pattern[i] = Tile.GREEN
            remaining[g] -= 1

    # Pass 2: mark yellows where counts allow (else gray)
    for i, g in enumerate(guess):
        if pattern[i] is Tile.GRAY and remaining[g] > 0:
            pattern[i] = Tile.YELLOW
            remaining[g] -= 1

    return tuple(pattern)


def score_code(guess: str, target: str) -> int:
    """Base-3 code of `_score(guess, target)` without building the tuple."""
    digits = [0] * WORD_LENGTH
    remaining = Counter(target)
    for i in range(WORD_LENGTH):
        if guess[i] == target[i]:
            digits[i] = 2
            remaining[guess[i]] -= 1
    code = 0
    for i in range(WORD_LENGTH):
        d = digits[i]
        if d == 0 and remaining[guess[i]] > 0:
            d = 1
            remaining[guess[i]] -= 1
        code = code * 3 + d
    return code


def pattern_to_int(pattern: Sequence[int]) -> int:
    """
    Encode a 5-trit pattern (each in {0,1,2}) into a single integer in [0, 242].

    The first tile is the most significant digit, so all-green is 242.
    """
    if not isinstance(pattern, (list, tuple)):
        raise TypeError("pattern must be a list or tuple of 5 tiles")
    if len(pattern) != WORD_LENGTH:
        raise ValueError("pattern must have length 5")
    value = 0
    for p in pattern:
        if p not in (0, 1, 2):
            raise ValueError("pattern elements must be tiles or integers in {0,1,2}")
        value = value * 3 + int(p)
    return value


def int_to_pattern(code: int) -> Pattern:
    if not 0 <= code < N_PATTERNS:
        raise ValueError(f"pattern code out of range: {code}")
    out = []
    for _ in range(WORD_LENGTH):
        code, d = divmod(code, 3)
        out.append(Tile(d))
    return tuple(reversed(out))


def parse_guess(token: str) -> str:
    """Normalise a user-typed guess; raise InvalidWord/InvalidWordLength."""
    word = token.strip().lower()
    if len(word) != WORD_LENGTH:
        raise InvalidWordLength(word, WORD_LENGTH)
    return validate_word(word)


def parse_pattern(token: str) -> Pattern:
    """
    Parse a G/Y/X pattern token (case-insensitive), e.g. 'GXXYG'.

    Raises InvalidPatternLength or InvalidPatternSymbol; never defaults.
    """
    s = token.strip()
    if len(s) != WORD_LENGTH:
        raise InvalidPatternLength(s, WORD_LENGTH)
    tiles = []
    for ch in s:
        try:
            tiles.append(Tile.from_symbol(ch))
        except KeyError:
            raise InvalidPatternSymbol(ch, s) from None
    return tuple(tiles)


def format_pattern(pattern: Sequence[int]) -> str:
    return "".join(Tile(p).symbol for p in pattern)


def is_solved(pattern: Sequence[int]) -> bool:
    return len(pattern) == WORD_LENGTH and all(p == Tile.GREEN for p in pattern)


def consistent_with(word: str, guess: str, pattern: Sequence[int]) -> bool:
    """
    Check if `word` (as a hypothetical target) is consistent with `(guess, pattern)`.

    Delegates to `score_pattern` rather than re-implementing the scoring rule.
    """
    pattern_to_int(pattern)  # will raise if invalid
    return score_pattern(guess, word) == tuple(Tile(p) for p in pattern)
