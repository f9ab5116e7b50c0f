from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, List, Union

import pandas as pd

from wordle_engine.feedback import WORD_LENGTH


def _clean_words(raw: Iterable[object], *, dedupe: bool = True) -> List[str]:
    """Lowercase, keep 5-letter alphabetic entries, drop later duplicates."""
    clean: List[str] = []
    seen = set()
    for val in raw:
        if not isinstance(val, str):
            val = str(val) if val is not None else ""
        w = val.strip().lower()
        if len(w) != WORD_LENGTH or not w.isalpha() or not w.isascii():
            continue
        if dedupe:
            if w in seen:
                continue
            seen.add(w)
        clean.append(w)
    return clean


class WordVocab:
    """An ordered, duplicate-free, immutable list of five-letter words."""

    def __init__(self, words: List[str]) -> None:
        if not isinstance(words, (list, tuple)):
            raise TypeError("`words` must be a list of strings")
        if not words:
            raise ValueError("no words provided")
        if not all(isinstance(w, str) for w in words):
            raise TypeError("all items in `words` must be str")
        if len(set(words)) != len(words):
            raise ValueError("duplicate words detected; input to WordVocab must be deduplicated")

        self._words = tuple(words)
        self._index = {w: i for i, w in enumerate(self._words)}

    # ---------- Construction helpers ----------

    @classmethod
    def from_csv(
        cls,
        path: Union[str, Path],
        column: str = "word",
        *,
        answers_only: bool = False,
        day_column: str = "day",
    ) -> "WordVocab":
        """
        Load words from a CSV and build a WordVocab.

        Parameters
        ----------
        path : str
            Path to CSV file.
        column : str
            Column name containing words.
        answers_only : bool, default=False
            If True, keep only rows whose `day_column` is filled in, i.e. the
            official answers.

        Raises
        ------
        FileNotFoundError, KeyError, ValueError
        """
        df = pd.read_csv(path)
        if column not in df.columns:
            raise KeyError(f"column '{column}' not found in {path}")
        if answers_only:
            if day_column not in df.columns:
                raise KeyError(f"column '{day_column}' not found in {path}")
            df = df[df[day_column].notna()]

        clean = _clean_words(df[column].tolist())
        if not clean:
            raise ValueError(f"no valid words in {path}")
        return cls(clean)

    @classmethod
    def from_text(cls, path: Union[str, Path]) -> "WordVocab":
        """One word per line; blank lines and malformed entries are skipped."""
        with open(path, encoding="utf-8") as f:
            clean = _clean_words(f.read().splitlines())
        if not clean:
            raise ValueError(f"no valid words in {path}")
        return cls(clean)

    # ---------- Basic protocol ----------

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def __contains__(self, word: object) -> bool:
        return word in self._index

    def words(self) -> List[str]:
        """Return a copy of the word list (to avoid external mutation)."""
        return list(self._words)

    def index_of(self, word: str) -> int:
        """Return the index for `word`; raise KeyError if unknown."""
        try:
            return self._index[word]
        except KeyError:
            raise KeyError(f"unknown word: {word}") from None

    def word_at(self, idx: int) -> str:
        if idx < 0 or idx >= len(self._words):
            raise IndexError(f"index out of range: {idx}")
        return self._words[idx]

    def union(self, other: "WordVocab") -> "WordVocab":
        """This vocab followed by the words of `other` it does not already have."""
        return WordVocab(list(self._words) + [w for w in other if w not in self._index])
