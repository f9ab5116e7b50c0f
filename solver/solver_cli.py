"""
solver/solver_cli.py

Interactive Wordle helper (human-in-the-loop):
- YOU type the guess you played and the feedback pattern you saw.
- Feedback is a G/Y/X token such as 'GXXYG' (case-insensitive):
  G = right spot, Y = wrong spot, X = not in the word.
- The solver prunes candidates and shows the top next guesses.
- Type 'undo' to take back the last guess.

Run:
  python -m solver.solver_cli --csv word_list.csv
  python -m solver.solver_cli --allowed allowed.txt --solutions answers.txt --ranking entropy

One-shot (prints every remaining word with its letter-frequency score):
  python -m solver.solver_cli --csv word_list.csv daisy GXXYG

Shortcuts:
  quit / q / exit  -> exit
  undo / u         -> remove the last guess
"""
from __future__ import annotations

import argparse
import sys
from typing import List, Optional, Sequence

from wordle_engine.config import EngineConfig, configure_logging
from wordle_engine.constraints import filter_candidates, fold
from wordle_engine.data_utils import WordCorpus, load_corpus_csv, load_corpus_text
from wordle_engine.errors import InvalidPattern, InvalidWord, SessionError, WordNotInCorpus
from wordle_engine.feedback import format_pattern, is_solved, parse_guess, parse_pattern
from wordle_engine.ranking import frequency_rank
from wordle_engine.records import SolverOutcome
from wordle_engine.session import SessionStatus, SolverSession
from wordle_engine.storage import HistoryStore

QUIT = {"q", "quit", "exit"}
UNDO = {"u", "undo"}


def _load_corpus(args: argparse.Namespace) -> WordCorpus:
    if args.allowed or args.solutions:
        if not (args.allowed and args.solutions):
            raise SystemExit("--allowed and --solutions must be given together")
        return load_corpus_text(args.allowed, args.solutions)
    return load_corpus_csv(args.csv)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Wordle solver (manual feedback)")
    ap.add_argument("pairs", nargs="*", metavar="GUESS PATTERN",
                    help="one-shot mode: guess/pattern pairs such as: daisy GXXYG")
    ap.add_argument("--csv", default="word_list.csv", help="Path to word_list.csv")
    ap.add_argument("--allowed", help="Plain-text allowed-guess list (with --solutions)")
    ap.add_argument("--solutions", help="Plain-text answer list (with --allowed)")
    ap.add_argument("--base", choices=("solutions", "allowed"), default="solutions",
                    help="Which list the candidate pool is drawn from")
    ap.add_argument("--ranking", choices=("frequency", "entropy"), default=None)
    ap.add_argument("--top", type=int, default=None, help="How many suggestions to show")
    ap.add_argument("--max-guesses", type=int, default=None)
    ap.add_argument("--workers", type=int, default=None, help="Threads for entropy ranking")
    ap.add_argument("--strict", action="store_true", help="Reject guesses not in the allowed list")
    ap.add_argument("--db", default=None, help="SQLite file to record the session in")
    ap.add_argument("-v", "--verbose", action="count", default=0)
    return ap


def run_one_shot(corpus: WordCorpus, pairs: Sequence[str], base: str = "solutions") -> List[str]:
    """Lines 'word (score)' for every word consistent with the given pairs."""
    if len(pairs) % 2:
        raise InvalidPattern("guesses and patterns must come in pairs")
    history = [(parse_guess(g), parse_pattern(p)) for g, p in zip(pairs[::2], pairs[1::2])]
    base_list = corpus.solutions if base == "solutions" else corpus.allowed
    matches = filter_candidates(base_list, fold(history))
    return [f"{r.word} ({int(r.score)})" for r in frequency_rank(matches)]


def _print_state(session: SolverSession, top: int) -> None:
    snap = session.snapshot()
    for g in snap.guesses:
        print(f"  {g.word.upper()}  {format_pattern(g.pattern)}")
    if snap.status is SessionStatus.CONTRADICTORY:
        print("These clues contradict each other; no word fits. Type 'undo' to fix the last entry.")
        return
    if snap.pool_size == 0 and snap.status is not SessionStatus.SOLVED:
        print("No word in the list fits these clues. Check for a typo and type 'undo' to fix it.")
        return
    print(f"Remaining candidates: {snap.pool_size} ({snap.pool_stats.eliminated_percentage:.1f}% eliminated)")
    print("Known:", " ".join((ch or "_").upper() for ch in snap.positions.solved_positions))
    if 0 < snap.pool_size <= 10:
        print("Candidates:", ", ".join(snap.pool))
    if snap.stats and snap.stats[-1] is not None:
        s = snap.stats[-1]
        print(f"  last guess: H={s.entropy:.3f} (optimal {s.optimal_word.upper()} H={s.optimal_entropy:.3f},"
              f" deviation {s.deviation_score:.3f})")
    if snap.status is SessionStatus.SOLVED:
        answer = snap.guesses[-1].word if is_solved(snap.guesses[-1].pattern) else snap.pool[0]
        print(f"Solved! The word is {answer.upper()}")
        return
    if snap.status is SessionStatus.EXHAUSTED:
        print("Out of guesses.")
        return
    ranked = session.suggestions(top)
    if ranked:
        print("Top suggestions:")
        for i, r in enumerate(ranked, 1):
            print(f"  {i}. {r.word}  ({r.score:g})")


def _ask(prompt: str) -> str:
    try:
        return input(prompt).strip()
    except EOFError:
        return "quit"


def interactive(session: SolverSession, top: int) -> SolverOutcome:
    print("\nWordle helper: after EACH guess you make in the game, enter it and its feedback here.")
    print("Feedback: G/Y/X, e.g. GXXYG. Type 'undo' to take back a guess, 'quit' to exit.\n")

    while True:
        if session.status.is_terminal and session.status is not SessionStatus.CONTRADICTORY:
            return SolverOutcome.COMPLETED if session.status is SessionStatus.SOLVED else SolverOutcome.ABANDONED

        guess = _ask("Enter your guess word: ").lower()
        if guess in QUIT:
            print("bye!")
            return SolverOutcome.ABANDONED
        if guess in UNDO:
            try:
                print(f"Removed {session.undo()}")
            except SessionError as e:
                print(e)
            _print_state(session, top)
            continue
        try:
            guess = parse_guess(guess)
        except InvalidWord as e:
            print("Invalid guess:", e)
            continue

        while True:
            fb = _ask("Feedback for that guess: ")
            if fb.lower() in QUIT:
                print("bye!")
                return SolverOutcome.ABANDONED
            try:
                pattern = parse_pattern(fb)
                break
            except InvalidPattern as e:
                print("Invalid feedback:", e)

        try:
            session.submit_guess(guess, pattern)
        except (WordNotInCorpus, SessionError) as e:
            print(e)
            continue
        _print_state(session, top)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    config = EngineConfig.from_env().with_overrides(
        ranking=args.ranking,
        suggestion_limit=args.top,
        max_guesses=args.max_guesses,
        entropy_workers=args.workers,
        allow_off_list=False if args.strict else None,
    )
    corpus = _load_corpus(args)

    if args.pairs:
        try:
            lines = run_one_shot(corpus, args.pairs, base=args.base)
        except (InvalidWord, InvalidPattern) as e:
            print(f"error: {e}", file=sys.stderr)
            return 2
        for line in lines:
            print(line)
        return 0

    session = SolverSession(corpus, config, base=args.base)
    outcome = interactive(session, config.suggestion_limit)
    if args.db and session.guesses:
        with HistoryStore(args.db) as store:
            session_id = store.save_solver_session(session.to_record(outcome))
        print(f"Saved session #{session_id} to {args.db}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
