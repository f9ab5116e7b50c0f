import math

import pytest

from wordle_engine.analysis import letter_entropy, pool_stats, position_analysis


def test_position_analysis_orders_by_frequency():
    pool = ["dusky", "dusty", "dutty", "dumpy"]
    view = position_analysis(pool)
    assert view.solved_positions == ("d", "u", None, None, "y")
    # t and m tie at position 2; t shows up first
    assert view.possible_letters[2] == ("s", "t", "m")
    assert view.possible_letters[3] == ("t", "k", "p")
    assert view.position_frequencies[3] == {"k": 1, "t": 2, "p": 1}


def test_position_analysis_of_empty_pool():
    view = position_analysis([])
    assert view.possible_letters == ((),) * 5
    assert view.solved_positions == (None,) * 5


def test_letter_entropy():
    assert letter_entropy([]) == 0.0
    assert letter_entropy(["dusty"]) == 0.0
    # d, u, s, y in both words; k and t in half of them
    assert letter_entropy(["dusky", "dusty"]) == pytest.approx(1.0)
    assert letter_entropy(["abcde", "fghij"]) == pytest.approx(10 * 0.5 * math.log2(2))


def test_pool_stats():
    stats = pool_stats(["dusky", "dusty"], 8)
    assert stats.total_remaining == 2
    assert stats.eliminated_percentage == pytest.approx(75.0)
    assert stats.letter_entropy == pytest.approx(1.0)
    assert pool_stats([], 8).eliminated_percentage == pytest.approx(100.0)
    assert pool_stats([], 0).eliminated_percentage == 0.0
