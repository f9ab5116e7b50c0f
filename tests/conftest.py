from pathlib import Path

import pytest

from wordle_engine.data_utils import WordCorpus, load_corpus_text

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture
def sample_corpus() -> WordCorpus:
    return load_corpus_text(DATA_DIR / "allowed_sample.txt", DATA_DIR / "solutions_sample.txt")


@pytest.fixture
def tiny_corpus() -> WordCorpus:
    return WordCorpus.from_words(
        ["total", "stoal", "bleed", "blend", "allot"],
        allowed=["atoll", "tally", "alloy"],
    )
