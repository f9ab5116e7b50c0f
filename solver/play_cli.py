"""
solver/play_cli.py

Play Wordle locally against a random answer, and review saved history.

Run:
  python -m solver.play_cli --csv word_list.csv --db history.db
  python -m solver.play_cli --csv word_list.csv --seed 7      # reproducible answer
  python -m solver.play_cli --db history.db --stats            # no game, just stats

Shortcuts:
  quit / q / exit  -> give up (recorded as abandoned)
  hint             -> show the best remaining candidates
"""
from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from wordle_engine.config import EngineConfig, configure_logging
from wordle_engine.data_utils import load_corpus_csv
from wordle_engine.errors import InvalidWord, WordNotInCorpus
from wordle_engine.feedback import format_pattern
from wordle_engine.game import GameStatus, WordleGame
from wordle_engine.records import GameStats, SolverStats
from wordle_engine.sampler import WordSampler
from wordle_engine.storage import HistoryStore

QUIT = {"q", "quit", "exit"}


def print_stats(store: HistoryStore) -> None:
    games = GameStats.from_games(store.list_games())
    print(f"Games played: {games.played}  won: {games.won}  lost: {games.lost}  abandoned: {games.abandoned}")
    print(f"Win rate: {games.win_percentage:.1f}%  average guesses (wins): {games.average_guesses:.2f}")
    for n, count in games.distribution.items():
        print(f"  {n}: {'#' * count} {count}")

    solver = SolverStats.from_sessions(store.list_solver_sessions())
    print(f"\nSolver sessions: {solver.total_sessions}  completed: {solver.completed_sessions}"
          f"  abandoned: {solver.abandoned_sessions}")
    print(f"Average guesses (completed): {solver.average_guesses:.2f}")
    print(f"Average entropy per guess: {solver.average_entropy:.3f} bits")
    print(f"Optimal adherence: {solver.optimal_adherence:.1f}%  average deviation: {solver.average_deviation:.3f}")


def play(game: WordleGame) -> None:
    print(f"\nGuess the word in {game.max_guesses} tries. G = right spot, Y = wrong spot, X = not in word.\n")
    while not game.is_over:
        raw = input(f"Guess {len(game.history) + 1}: ").strip().lower()
        if raw in QUIT:
            game.abandon()
            break
        if raw == "hint":
            print("Possible:", ", ".join(r.word for r in game.hints()))
            continue
        try:
            turn = game.guess(raw)
        except (InvalidWord, WordNotInCorpus) as e:
            print(e)
            continue
        print(f"  {turn.guess.upper()}  {format_pattern(turn.pattern)}   ({turn.remaining} possible)")

    if game.status is GameStatus.WON:
        print(f"Solved in {len(game.history)}!")
    else:
        print(f"The word was {game.target.upper()}.")


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Play Wordle locally")
    ap.add_argument("--csv", default="word_list.csv", help="Path to word_list.csv")
    ap.add_argument("--db", default=None, help="SQLite file for game history")
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--stats", action="store_true", help="Print history statistics and exit")
    ap.add_argument("-v", "--verbose", action="count", default=0)
    args = ap.parse_args(argv)
    configure_logging(args.verbose)

    if args.stats:
        if not args.db:
            print("--stats needs --db", file=sys.stderr)
            return 2
        with HistoryStore(args.db) as store:
            print_stats(store)
        return 0

    corpus = load_corpus_csv(args.csv)
    game = WordleGame(corpus, WordSampler(corpus.solutions, seed=args.seed), EngineConfig.from_env())
    try:
        play(game)
    except (KeyboardInterrupt, EOFError):
        game.abandon()
        print()
    if args.db:
        with HistoryStore(args.db) as store:
            store.save_game(game.to_record())
    return 0


if __name__ == "__main__":
    sys.exit(main())
