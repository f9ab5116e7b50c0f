from __future__ import annotations

import random
from typing import Optional

from wordle_engine.vocab import WordVocab


class WordSampler:
    """Picks game answers from a vocab; deterministic when seeded."""

    def __init__(self, vocab: WordVocab, seed: Optional[int] = None) -> None:
        if not isinstance(vocab, WordVocab):
            raise TypeError("vocab must be a WordVocab")
        if len(vocab) == 0:
            raise ValueError("vocab is empty")

        self._vocab = vocab
        self._rng = random.Random(seed)
        self._seed = seed

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    def set_seed(self, seed: int) -> None:
        self._rng = random.Random(seed)
        self._seed = seed

    def choice_index(self) -> int:
        return self._rng.randrange(len(self._vocab))

    def choice_word(self) -> str:
        return self._vocab.word_at(self.choice_index())
