"""
game.py

A local Wordle game: the answer is drawn from the corpus solutions and each
guess is scored by the same feedback engine the solver uses. The candidate
pool after each guess comes from the same constraint model, so a game can
show how many answers are still possible and offer hints.

API
---
reset(target=None) -> None
    Start a new game. A given target is useful for tests.
guess(word) -> GameTurn
    Play a word from the allowed list. Off-list words are rejected.
abandon() -> None
    Give up the current game.
to_record() -> GameRecord
    Hand-off for the history store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from wordle_engine.config import EngineConfig
from wordle_engine.constraints import ConstraintState, filter_candidates, fold
from wordle_engine.data_utils import WordCorpus
from wordle_engine.errors import SessionFinished, WordNotInCorpus
from wordle_engine.feedback import Pattern, is_solved, parse_guess, score_pattern
from wordle_engine.ranking import RankedWord, frequency_rank
from wordle_engine.records import GameGuessRecord, GameOutcome, GameRecord
from wordle_engine.sampler import WordSampler

log = logging.getLogger(__name__)


class GameStatus(Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST = "lost"
    ABANDONED = "abandoned"


@dataclass(frozen=True)
class GameTurn:
    guess: str
    pattern: Pattern
    remaining: int
    step: int
    solved: bool
    # revealed once the game is over
    target: Optional[str]


class WordleGame:
    def __init__(
        self,
        corpus: WordCorpus,
        sampler: Optional[WordSampler] = None,
        config: Optional[EngineConfig] = None,
        *,
        target: Optional[str] = None,
    ) -> None:
        if not isinstance(corpus, WordCorpus):
            raise TypeError("corpus must be a WordCorpus")
        self.corpus = corpus
        self.sampler = sampler or WordSampler(corpus.solutions)
        self.config = config or EngineConfig()
        self.max_guesses = self.config.max_guesses
        self.reset(target)

    # -------------------------
    # Core game API
    # -------------------------
    def reset(self, target: Optional[str] = None) -> None:
        if target is None:
            target = self.sampler.choice_word()
        else:
            target = parse_guess(target)
            if not self.corpus.is_solution(target):
                raise WordNotInCorpus(target)
        self._target = target
        self._history: List[Tuple[str, Pattern]] = []
        self._status = GameStatus.IN_PROGRESS
        self._rebuild()
        log.debug("new game started")

    def guess(self, word: str) -> GameTurn:
        if self._status is not GameStatus.IN_PROGRESS:
            raise SessionFinished(f"game is {self._status.value}")
        word = parse_guess(word)
        if not self.corpus.is_allowed(word):
            raise WordNotInCorpus(word)

        pattern = score_pattern(word, self._target)
        self._history.append((word, pattern))
        self._rebuild()

        solved = is_solved(pattern)
        if solved:
            self._status = GameStatus.WON
        elif len(self._history) >= self.max_guesses:
            self._status = GameStatus.LOST
        log.info("guess %d: %s -> %d remaining", len(self._history), word, len(self._pool))

        return GameTurn(
            guess=word,
            pattern=pattern,
            remaining=len(self._pool),
            step=len(self._history),
            solved=solved,
            target=self._target if self.is_over else None,
        )

    def abandon(self) -> None:
        if self._status is GameStatus.IN_PROGRESS:
            self._status = GameStatus.ABANDONED

    def hints(self, limit: int = 5) -> List[RankedWord]:
        return frequency_rank(self._pool)[:limit]

    def to_record(self) -> GameRecord:
        outcome = {
            GameStatus.WON: GameOutcome.WON,
            GameStatus.LOST: GameOutcome.LOST,
        }.get(self._status, GameOutcome.ABANDONED)
        guesses = tuple(GameGuessRecord(i + 1, w, p) for i, (w, p) in enumerate(self._history))
        return GameRecord(target_word=self._target, outcome=outcome, guesses=guesses)

    # -------------------------
    # Helpers
    # -------------------------
    def _rebuild(self) -> None:
        self._state = fold(self._history)
        self._pool = tuple(filter_candidates(self.corpus.solutions, self._state))

    # -------------------------
    # Introspection helpers
    # -------------------------
    @property
    def history(self) -> List[Tuple[str, Pattern]]:
        return list(self._history)

    @property
    def status(self) -> GameStatus:
        return self._status

    @property
    def is_over(self) -> bool:
        return self._status is not GameStatus.IN_PROGRESS

    @property
    def target(self) -> str:
        return self._target

    @property
    def state(self) -> ConstraintState:
        return self._state

    @property
    def pool(self) -> Tuple[str, ...]:
        return self._pool

    @property
    def remaining_candidates(self) -> int:
        return len(self._pool)
