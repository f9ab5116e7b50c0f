import builtins
from pathlib import Path

import pytest

from solver import play_cli, solver_cli
from starting_word import eval as starting_eval
from wordle_engine.errors import InvalidPattern
from wordle_engine.game import GameStatus, WordleGame
from wordle_engine.records import SolverOutcome
from wordle_engine.session import GuessRecord, SolverSession
from wordle_engine.storage import HistoryStore

DATA_DIR = Path(__file__).resolve().parent / "data"

TEXT_ARGS = ["--allowed", str(DATA_DIR / "allowed_sample.txt"), "--solutions", str(DATA_DIR / "solutions_sample.txt")]


def feed(monkeypatch, lines):
    it = iter(lines)

    def fake_input(prompt=""):
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr(builtins, "input", fake_input)


def test_one_shot_lines(sample_corpus):
    assert solver_cli.run_one_shot(sample_corpus, ["daisy", "GXXYG"]) == ["dusky (9)", "dusty (9)"]
    assert solver_cli.run_one_shot(sample_corpus, ["daisy", "GXXYG", "dusty", "GGXGG"]) == []
    with pytest.raises(InvalidPattern):
        solver_cli.run_one_shot(sample_corpus, ["daisy"])


def test_main_one_shot(capsys):
    assert solver_cli.main(TEXT_ARGS + ["daisy", "GXXYG"]) == 0
    assert capsys.readouterr().out.splitlines() == ["dusky (9)", "dusty (9)"]


def test_main_one_shot_reports_bad_pattern(capsys):
    assert solver_cli.main(TEXT_ARGS + ["daisy", "GXXY"]) == 2
    assert "pattern must be length 5" in capsys.readouterr().err


def test_interactive_undo_and_solve(monkeypatch, capsys, sample_corpus):
    session = SolverSession(sample_corpus)
    feed(monkeypatch, ["daisy", "gxxyg", "dusty", "GGXGG", "undo", "dusky", "nonsense", "GGGGG"])
    outcome = solver_cli.interactive(session, top=5)
    out = capsys.readouterr().out
    assert outcome is SolverOutcome.COMPLETED
    assert "contradict" in out
    assert "Removed DUSTY" in out
    assert "Invalid feedback" in out
    assert "Solved! The word is DUSKY" in out


def test_interactive_only_takes_gyx_feedback(monkeypatch, capsys, sample_corpus):
    session = SolverSession(sample_corpus)
    feed(monkeypatch, ["daisy", "gbbyg", "21102", "[2,0,0,1,2]", "gxxyg", "quit"])
    solver_cli.interactive(session, top=3)
    out = capsys.readouterr().out
    assert out.count("Invalid feedback") == 3
    assert session.guesses == (GuessRecord.parse("daisy", "GXXYG"),)
    assert "Known: D U S _ Y" in out
    assert "Remaining candidates: 2" in out


def test_interactive_empty_pool_without_contradiction(monkeypatch, capsys, sample_corpus):
    session = SolverSession(sample_corpus)
    feed(monkeypatch, ["zzzzz", "GGGGX", "quit"])
    solver_cli.interactive(session, top=3)
    out = capsys.readouterr().out
    assert not session.state.contradictory
    assert session.pool == ()
    assert "No word in the list fits these clues" in out
    assert "Remaining candidates" not in out


def test_interactive_eof_abandons(monkeypatch, sample_corpus):
    feed(monkeypatch, ["crane", "XXXXX"])
    session = SolverSession(sample_corpus)
    assert solver_cli.interactive(session, top=3) is SolverOutcome.ABANDONED
    assert len(session.guesses) == 1


def test_main_saves_session(monkeypatch, tmp_path, capsys):
    db = tmp_path / "history.db"
    feed(monkeypatch, ["daisy", "GXXYG", "quit"])
    assert solver_cli.main(TEXT_ARGS + ["--db", str(db)]) == 0
    with HistoryStore(db) as store:
        (saved,) = store.list_solver_sessions()
    assert saved.outcome is SolverOutcome.ABANDONED
    assert [g.word for g in saved.guesses] == ["daisy"]


def test_play_win_with_hint(monkeypatch, capsys, sample_corpus):
    game = WordleGame(sample_corpus, target="dusty")
    feed(monkeypatch, ["zzzzz", "daisy", "hint", "dusty"])
    play_cli.play(game)
    out = capsys.readouterr().out
    assert game.status is GameStatus.WON
    assert "not in word list: zzzzz" in out
    assert "Possible: dusky, dusty" in out
    assert "Solved in 2!" in out


def test_play_quit(monkeypatch, capsys, sample_corpus):
    game = WordleGame(sample_corpus, target="dusty")
    feed(monkeypatch, ["q"])
    play_cli.play(game)
    assert game.status is GameStatus.ABANDONED
    assert "The word was DUSTY." in capsys.readouterr().out


def test_play_stats_needs_db(capsys):
    assert play_cli.main(["--stats"]) == 2


def test_evaluate_first_guesses():
    answers = ["abcde", "fghij", "abcdz", "zbcde"]
    rows = starting_eval.evaluate_first_guesses(answers, ["fghij", "abcde"])
    assert [r["guess"] for r in rows] == ["abcde", "fghij"]
    assert rows[0]["partitions"] == 4
    by_entropy = starting_eval.evaluate_first_guesses(answers, sort_by="entropy")
    assert by_entropy[0]["entropy"] == pytest.approx(2.0)
    with pytest.raises(ValueError):
        starting_eval.evaluate_first_guesses([])
