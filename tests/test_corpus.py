import pytest

from wordle_engine.data_utils import WordCorpus, load_answer_vocab, load_corpus_csv
from wordle_engine.vocab import WordVocab

CSV = """word,day
cigar,1
rebut,2
Aahed,
sissy,3
aahed,
toolong,
c1gar,
stoal,
"""


@pytest.fixture
def csv_path(tmp_path):
    path = tmp_path / "word_list.csv"
    path.write_text(CSV, encoding="utf-8")
    return path


def test_answers_only_keeps_rows_with_a_day(csv_path):
    vocab = load_answer_vocab(csv_path)
    assert vocab.words() == ["cigar", "rebut", "sissy"]


def test_corpus_from_csv(csv_path):
    corpus = load_corpus_csv(csv_path)
    assert corpus.allowed.words() == ["cigar", "rebut", "aahed", "sissy", "stoal"]
    assert corpus.is_solution("sissy")
    assert corpus.is_allowed("stoal")
    assert not corpus.is_solution("stoal")


def test_missing_column(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("words\ncigar\n", encoding="utf-8")
    with pytest.raises(KeyError):
        WordVocab.from_csv(path)


def test_text_corpus_includes_answers_in_allowed(sample_corpus):
    assert sample_corpus.solution_words() <= sample_corpus.allowed_words()
    assert sample_corpus.is_allowed("aahed")
    assert not sample_corpus.is_solution("aahed")
    # answers keep their file order
    assert sample_corpus.solutions.word_at(0) == "cigar"


def test_vocab_basics():
    vocab = WordVocab(["crane", "slate"])
    assert len(vocab) == 2
    assert "slate" in vocab
    assert vocab.index_of("slate") == 1
    with pytest.raises(KeyError):
        vocab.index_of("zzzzz")
    with pytest.raises(IndexError):
        vocab.word_at(2)
    with pytest.raises(ValueError):
        WordVocab(["crane", "crane"])
    with pytest.raises(ValueError):
        WordVocab([])


def test_from_words_dedupes():
    corpus = WordCorpus.from_words(["crane", "crane", "slate"], allowed=["aahed"])
    assert corpus.solutions.words() == ["crane", "slate"]
    assert corpus.allowed.words() == ["aahed", "crane", "slate"]
