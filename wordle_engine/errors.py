"""
errors.py

Exception types raised at the input boundary of the engine.

Parse and validation errors also derive from ValueError so callers that
already catch ValueError around feedback parsing keep working. A
contradictory set of clues is NOT an error: it is reported through
ConstraintState.contradictory and SessionStatus.CONTRADICTORY.
"""

from __future__ import annotations


class WordleError(Exception):
    """Base class for all engine errors."""


class InvalidWord(WordleError, ValueError):
    """A guess or target is not a lowercase alphabetic word."""


class InvalidWordLength(InvalidWord):
    def __init__(self, word: str, expected: int = 5) -> None:
        super().__init__(f"word must be length {expected}, got {len(word)}: {word!r}")
        self.word = word
        self.expected = expected


class InvalidPattern(WordleError, ValueError):
    """A feedback pattern could not be parsed."""


class InvalidPatternLength(InvalidPattern):
    def __init__(self, token: str, expected: int = 5) -> None:
        super().__init__(f"pattern must be length {expected}, got {len(token)}: {token!r}")
        self.token = token
        self.expected = expected


class InvalidPatternSymbol(InvalidPattern):
    def __init__(self, symbol: str, token: str) -> None:
        super().__init__(f"invalid pattern character {symbol!r} in {token!r} (use G/Y/X)")
        self.symbol = symbol
        self.token = token


class WordNotInCorpus(WordleError, KeyError):
    def __init__(self, word: str) -> None:
        super().__init__(word)
        self.word = word

    def __str__(self) -> str:
        return f"not in word list: {self.word}"


class SessionError(WordleError):
    """An operation is not valid in the session's current state."""


class NothingToUndo(SessionError):
    pass


class SessionFinished(SessionError):
    pass


class RankingCancelled(WordleError):
    """Raised out of a ranking computation whose cancel event was set."""
