"""
Word corpus loading.

A WordCorpus holds the two fixed word lists a session works with: the
allowed guesses and the possible answers. It is loaded once and passed into
sessions, so tests can inject tiny synthetic corpora.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import FrozenSet, Iterable, Optional, Union

from wordle_engine.vocab import WordVocab

log = logging.getLogger(__name__)


class WordCorpus:
    def __init__(self, solutions: WordVocab, allowed: Optional[WordVocab] = None) -> None:
        # Every answer is a legal guess.
        self.solutions = solutions
        self.allowed = solutions if allowed is None else allowed.union(solutions)
        self._allowed_set = frozenset(self.allowed)
        self._solution_set = frozenset(self.solutions)

    @classmethod
    def from_words(cls, solutions: Iterable[str], allowed: Optional[Iterable[str]] = None) -> "WordCorpus":
        allowed_vocab = WordVocab(list(dict.fromkeys(allowed))) if allowed is not None else None
        return cls(WordVocab(list(dict.fromkeys(solutions))), allowed_vocab)

    def allowed_words(self) -> FrozenSet[str]:
        return self._allowed_set

    def solution_words(self) -> FrozenSet[str]:
        return self._solution_set

    def is_allowed(self, word: str) -> bool:
        return word in self._allowed_set

    def is_solution(self, word: str) -> bool:
        return word in self._solution_set

    def __repr__(self) -> str:
        return f"WordCorpus(solutions={len(self.solutions)}, allowed={len(self.allowed)})"


def load_answer_vocab(csv_path: Union[str, Path]) -> WordVocab:
    """
    Load only the official Wordle answers from the CSV.
    Keeps rows where 'day' is not null, and returns a WordVocab.
    """
    return WordVocab.from_csv(csv_path, answers_only=True)


def load_corpus_csv(csv_path: Union[str, Path]) -> WordCorpus:
    """All rows are allowed guesses; rows with a 'day' are the answers."""
    corpus = WordCorpus(load_answer_vocab(csv_path), WordVocab.from_csv(csv_path))
    log.info("loaded %r from %s", corpus, csv_path)
    return corpus


def load_corpus_text(allowed_path: Union[str, Path], solutions_path: Union[str, Path]) -> WordCorpus:
    corpus = WordCorpus(WordVocab.from_text(solutions_path), WordVocab.from_text(allowed_path))
    log.info("loaded %r from %s and %s", corpus, allowed_path, solutions_path)
    return corpus
