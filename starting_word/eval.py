"""
starting_word/eval.py

Score candidate first guesses by how well they split the answer set.

Metrics per guess:
- exp_remaining: expected remaining candidates after the first feedback
- entropy: information gain (higher is better)
- worst_case: size of the largest bucket (lower is better)
- partitions: number of distinct feedback patterns induced

Usage:
  python -m starting_word.eval
  python -m starting_word.eval --csv word_list.csv --guesses allowed --sort entropy --top 30
"""

from __future__ import annotations

import argparse
import csv
import logging
import time
from typing import Dict, List, Optional, Sequence

from wordle_engine.config import configure_logging
from wordle_engine.data_utils import load_corpus_csv
from wordle_engine.ranking import ranking_metrics

log = logging.getLogger(__name__)

FIELDNAMES = ["guess", "exp_remaining", "entropy", "worst_case", "partitions"]


def evaluate_first_guesses(
    answers: Sequence[str],
    guesses: Optional[Sequence[str]] = None,
    *,
    sort_by: str = "exp_remaining",
    progress: bool = False,
) -> List[Dict[str, float]]:
    """
    Evaluate each candidate first guess against the full answer set.

    Parameters
    ----------
    answers : list[str]
        The set of possible targets.
    guesses : list[str] | None
        Candidate guesses to score. If None, uses `answers`.
    sort_by : str
        "exp_remaining" (then worst_case, then entropy) or "entropy".
    progress : bool
        If True, prints a tiny progress indicator every 100 guesses.

    Returns
    -------
    list[dict]
        Sorted list (best first) of records with keys:
        'guess', 'exp_remaining', 'entropy', 'worst_case', 'partitions'
    """
    if not answers:
        raise ValueError("answers must be non-empty")
    pool = answers if guesses is None else guesses

    results: List[Dict[str, float]] = []
    for i, g in enumerate(pool):
        row = ranking_metrics(g, answers)
        row["guess"] = g
        results.append(row)
        if progress and (i + 1) % 100 == 0:
            print(f"Scored {i+1}/{len(pool)} guesses...", flush=True)

    if sort_by == "entropy":
        results.sort(key=lambda r: -r["entropy"])
    elif sort_by == "exp_remaining":
        results.sort(key=lambda r: (r["exp_remaining"], r["worst_case"], -r["entropy"]))
    else:
        raise ValueError(f"unknown sort key: {sort_by}")
    return results


def _print_top(results: List[Dict[str, float]], k: int = 20) -> None:
    print(f"\nTop {k} starting words:")
    print(f"{'rank':>4}  {'guess':<8}  {'exp_rem':>8}  {'entropy':>8}  {'worst':>5}  {'parts':>6}")
    for idx, r in enumerate(results[:k], start=1):
        print(
            f"{idx:>4}  {r['guess']:<8}  {r['exp_remaining']:>8.2f}  {r['entropy']:>8.3f}  {int(r['worst_case']):>5}  {int(r['partitions']):>6}"
        )


def _write_csv(results: List[Dict[str, float]], path: str) -> None:
    with open(path, mode="w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        for row in results:
            writer.writerow({k: row[k] for k in FIELDNAMES})


def main(argv: Optional[Sequence[str]] = None) -> None:
    ap = argparse.ArgumentParser(description="Rank first guesses against the answer list.")
    ap.add_argument("--csv", default="word_list.csv", help="Path to word_list.csv")
    ap.add_argument("--guesses", choices=("answers", "allowed"), default="answers",
                    help="Score only answers as guesses, or every allowed word")
    ap.add_argument("--sort", choices=("exp_remaining", "entropy"), default="exp_remaining")
    ap.add_argument("--limit-guesses", type=int, default=None, help="Evaluate only the first K guesses")
    ap.add_argument("--top", type=int, default=20, help="How many top rows to print")
    ap.add_argument("--out", default="starting_word_results.csv", help="Output CSV filename")
    ap.add_argument("-v", "--verbose", action="count", default=0)
    args = ap.parse_args(argv)
    configure_logging(args.verbose)

    corpus = load_corpus_csv(args.csv)
    answers = corpus.solutions.words()
    guesses = answers if args.guesses == "answers" else corpus.allowed.words()
    if args.limit_guesses is not None:
        guesses = guesses[: args.limit_guesses]

    print(f"Scoring {len(guesses)} guesses against {len(answers)} answers...", flush=True)
    t0 = time.perf_counter()
    results = evaluate_first_guesses(answers, guesses, sort_by=args.sort, progress=True)
    log.info("evaluated %d guesses in %.2fs", len(results), time.perf_counter() - t0)
    print(f"Done in {time.perf_counter() - t0:.2f}s", flush=True)
    _print_top(results, k=args.top)
    _write_csv(results, args.out)
    print(f"Wrote results to {args.out}")


if __name__ == "__main__":
    main()
