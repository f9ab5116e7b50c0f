import pytest

from wordle_engine.config import EngineConfig
from wordle_engine.errors import InvalidWord, SessionFinished, WordNotInCorpus
from wordle_engine.feedback import ALL_GREEN, parse_pattern
from wordle_engine.game import GameStatus, WordleGame
from wordle_engine.records import GameOutcome
from wordle_engine.sampler import WordSampler


@pytest.fixture
def game(sample_corpus):
    return WordleGame(sample_corpus, target="total")


def test_guess_scores_against_target(game):
    turn = game.guess("allot")
    assert turn.pattern == parse_pattern("YYXYY")
    assert turn.step == 1
    assert not turn.solved
    assert turn.target is None
    assert "total" in game.pool
    assert turn.remaining == game.remaining_candidates
    assert game.status is GameStatus.IN_PROGRESS


def test_solving_reveals_target(game):
    game.guess("crane")
    turn = game.guess("total")
    assert turn.solved
    assert turn.pattern == ALL_GREEN
    assert turn.target == "total"
    assert game.status is GameStatus.WON
    assert game.pool == ("total",)


def test_running_out_of_guesses(sample_corpus):
    game = WordleGame(sample_corpus, config=EngineConfig(max_guesses=2), target="total")
    game.guess("crane")
    turn = game.guess("fjord")
    assert game.status is GameStatus.LOST
    assert turn.target == "total"
    with pytest.raises(SessionFinished):
        game.guess("total")


def test_off_list_and_malformed_guesses_are_rejected(game):
    with pytest.raises(WordNotInCorpus):
        game.guess("zzzzz")
    with pytest.raises(InvalidWord):
        game.guess("tot")
    assert game.history == []
    # allowed words that are never answers can still be played
    game.guess("stoal")
    assert len(game.history) == 1


def test_target_must_be_an_answer(game):
    with pytest.raises(WordNotInCorpus):
        game.reset(target="aahed")


def test_seeded_games_pick_the_same_target(sample_corpus):
    a = WordleGame(sample_corpus, WordSampler(sample_corpus.solutions, seed=7))
    b = WordleGame(sample_corpus, WordSampler(sample_corpus.solutions, seed=7))
    assert a.target == b.target
    assert sample_corpus.is_solution(a.target)


def test_hints_come_from_the_pool(game):
    game.guess("allot")
    hints = game.hints()
    assert hints
    assert {h.word for h in hints} <= set(game.pool)


def test_to_record(game):
    game.guess("allot")
    game.guess("total")
    record = game.to_record()
    assert record.outcome is GameOutcome.WON
    assert record.target_word == "total"
    assert [g.word for g in record.guesses] == ["allot", "total"]
    assert [g.guess_number for g in record.guesses] == [1, 2]


def test_abandon(game):
    game.guess("crane")
    game.abandon()
    assert game.is_over
    assert game.to_record().outcome is GameOutcome.ABANDONED
    with pytest.raises(SessionFinished):
        game.guess("total")


def test_sampler_reseed_repeats_draws(sample_corpus):
    sampler = WordSampler(sample_corpus.solutions, seed=3)
    first = [sampler.choice_word() for _ in range(5)]
    sampler.set_seed(3)
    assert sampler.seed == 3
    assert [sampler.choice_word() for _ in range(5)] == first
    assert all(sample_corpus.is_solution(w) for w in first)
