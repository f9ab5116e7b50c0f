import threading

import pytest

from wordle_engine.config import EngineConfig
from wordle_engine.errors import (
    InvalidPatternLength,
    InvalidPatternSymbol,
    InvalidWordLength,
    NothingToUndo,
    RankingCancelled,
    SessionFinished,
    WordNotInCorpus,
)
from wordle_engine.feedback import ALL_GREEN, Tile
from wordle_engine.records import SolverOutcome
from wordle_engine.session import GuessRecord, SessionStatus, SolverSession


@pytest.fixture
def session(sample_corpus):
    return SolverSession(sample_corpus)


def test_new_session_is_empty(session, sample_corpus):
    assert session.status is SessionStatus.EMPTY
    assert session.pool == tuple(sample_corpus.solutions)
    assert session.guesses == ()
    assert session.snapshot().pool_size == len(sample_corpus.solutions)


def test_submit_narrows_pool(session):
    # Pinned against the bundled sample answers; the full answer list is not
    # shipped with the tests, so the clue predicates are checked as well.
    snap = session.submit_guess("daisy", "GXXYG")
    assert snap.pool == ("dusky", "dusty")
    for w in snap.pool:
        assert w[0] == "d" and w[4] == "y"
        assert "a" not in w and "i" not in w
        assert "s" in w and w[3] != "s"
    assert snap.status is SessionStatus.ACTIVE
    assert snap.patterns == ((Tile.GREEN, Tile.GRAY, Tile.GRAY, Tile.YELLOW, Tile.GREEN),)

    stats = snap.stats[0]
    assert stats.pool_size_after == 2
    assert stats.pool_size_before == len(session.corpus.solutions)
    assert stats.deviation_score >= 0.0
    assert stats.optimal_entropy >= stats.entropy - 1e-9


def test_contradiction_then_undo(session):
    session.submit_guess("daisy", "GXXYG")
    snap = session.submit_guess("dusty", "GGXGG")
    assert snap.status is SessionStatus.CONTRADICTORY
    assert snap.pool == ()
    assert session.suggestions() == []

    with pytest.raises(SessionFinished):
        session.submit_guess("crane", "XXXXX")

    removed = session.undo()
    assert removed == GuessRecord.parse("dusty", "GGXGG")
    assert session.pool == ("dusky", "dusty")
    assert session.status is SessionStatus.ACTIVE


def test_undo_restores_the_replayed_state(session):
    session.submit_guess("crane", "XXXXX")
    after_one = session.snapshot()
    session.submit_guess("daisy", "GXXYG")
    session.undo()
    assert session.state == after_one.state
    assert session.pool == after_one.pool


def test_undo_on_empty_session(session):
    with pytest.raises(NothingToUndo):
        session.undo()


def test_all_green_solves(session):
    snap = session.submit_guess("dusty", ALL_GREEN)
    assert snap.status is SessionStatus.SOLVED
    assert snap.pool == ("dusty",)
    assert session.to_record().outcome is SolverOutcome.COMPLETED


def test_single_candidate_counts_as_solved(sample_corpus):
    session = SolverSession(sample_corpus)
    session.submit_guess("daisy", "GXXYG")
    session.submit_guess("dusky", "GGGXG")
    assert session.pool == ("dusty",)
    assert session.status is SessionStatus.SOLVED


def test_exhausted_after_max_guesses(sample_corpus):
    session = SolverSession(sample_corpus, EngineConfig(max_guesses=2, track_optimal=False))
    session.submit_guess("fjord", "XXXXX")
    snap = session.submit_guess("whelp", "XXXXX")
    assert snap.pool_size > 1
    assert snap.status is SessionStatus.EXHAUSTED
    with pytest.raises(SessionFinished):
        session.submit_guess("crane", "XXXXX")


def test_bad_input_leaves_session_untouched(session):
    session.submit_guess("crane", "XXXXG")
    before = session.snapshot()
    with pytest.raises(InvalidWordLength):
        session.submit_guess("cran", "XXXXG")
    with pytest.raises(InvalidPatternLength):
        session.submit_guess("slate", "XXXX")
    with pytest.raises(InvalidPatternSymbol):
        session.submit_guess("slate", "XXXXQ")
    with pytest.raises(InvalidPatternSymbol):
        session.submit_guess("slate", [0, 0, 0, 0, 3])
    assert session.snapshot() == before


def test_strict_mode_rejects_off_list_words(sample_corpus):
    session = SolverSession(sample_corpus, EngineConfig(allow_off_list=False))
    with pytest.raises(WordNotInCorpus):
        session.submit_guess("zzzzz", "XXXXX")
    # allowed-only guesses are fine
    session.submit_guess("aahed", "XXXXX")
    assert len(session.guesses) == 1


def test_off_list_words_allowed_by_default(session):
    session.submit_guess("qxzvj", "XXXXX")
    assert session.status is SessionStatus.ACTIVE


def test_cancelled_submit_leaves_session_untouched(session):
    cancel = threading.Event()
    cancel.set()
    with pytest.raises(RankingCancelled):
        session.submit_guess("crane", "XXXXX", cancel=cancel)
    assert session.guesses == ()
    assert session.status is SessionStatus.EMPTY


def test_suggestions(session):
    session.submit_guess("daisy", "GXXYG")
    freq = session.suggestions()
    assert [(r.word, r.score) for r in freq] == [("dusky", 9), ("dusty", 9)]
    ent = session.suggestions(limit=1, method="entropy")
    assert len(ent) == 1
    assert ent[0].score == pytest.approx(1.0)
    with pytest.raises(ValueError):
        session.suggestions(method="vibes")


def test_zero_limit_means_no_suggestions(session):
    assert session.suggestions(limit=0) == []
    assert len(session.suggestions()) == session.config.suggestion_limit


def test_snapshot_analysis(session, sample_corpus):
    empty = session.snapshot()
    assert empty.entropy_history == ()
    assert empty.pool_stats.eliminated_percentage == 0.0

    session.submit_guess("daisy", "GXXYG")
    snap = session.snapshot()
    assert snap.positions.solved_positions == ("d", "u", "s", None, "y")
    assert snap.positions.possible_letters[3] == ("k", "t")
    assert snap.pool_stats.total_remaining == 2
    assert snap.pool_stats.eliminated_percentage == pytest.approx(100.0 * (1 - 2 / len(sample_corpus.solutions)))
    assert snap.entropy_history == pytest.approx((1.0,))

    session.submit_guess("dusty", "GGXGG")
    assert session.snapshot().entropy_history == pytest.approx((1.0, 0.0))
    session.undo()
    assert session.snapshot().entropy_history == pytest.approx((1.0,))


def test_optimal_is_cached_per_prefix(session, monkeypatch):
    session.submit_guess("daisy", "GXXYG")
    session.undo()

    import wordle_engine.session as session_mod

    def boom(*args, **kwargs):
        raise AssertionError("optimal recomputed")

    monkeypatch.setattr(session_mod, "optimal_word", boom)
    # same empty prefix, so the cached optimum is reused
    session.submit_guess("daisy", "GXXYG")


def test_to_record_fills_untracked_stats(sample_corpus):
    session = SolverSession(sample_corpus, EngineConfig(track_optimal=False))
    session.submit_guess("daisy", "GXXYG")
    assert session.snapshot().stats == (None,)

    record = session.to_record(SolverOutcome.ABANDONED)
    assert record.outcome is SolverOutcome.ABANDONED
    assert record.guesses_count == 1
    row = record.guesses[0]
    assert row.word == "daisy"
    assert row.pool_size_after == 2
    assert row.optimal_entropy >= row.entropy - 1e-9


def test_reset_clears_history(session):
    session.submit_guess("crane", "XXXXX")
    session.reset()
    assert session.status is SessionStatus.EMPTY
    assert session.pool == tuple(session.corpus.solutions)


def test_allowed_base_pool(sample_corpus):
    session = SolverSession(sample_corpus, base="allowed")
    assert len(session.pool) == len(sample_corpus.allowed)
    with pytest.raises(ValueError):
        SolverSession(sample_corpus, base="everything")
