"""Tests for greedy diversity sequencing."""

import numpy as np
import pytest

from multidistances.core.diversity import DiversitySequence, Strategy, diversity_sequence, sequence
from multidistances.core.matrix import compute_matrix
from multidistances.errors import ConfigurationError
from multidistances.metrics import Levenshtein


# Items A, B, C, D
FOUR = np.array([
    [0, 1, 9, 3],
    [1, 0, 4, 8],
    [9, 4, 0, 2],
    [3, 8, 2, 0],
], dtype=float)


def random_matrix(n, seed):
    rng = np.random.default_rng(seed)
    upper = np.triu(rng.random((n, n)), k=1)
    return upper + upper.T


def assert_is_sequence(seq: DiversitySequence, n: int):
    assert sorted(seq.order) == list(range(n))
    for k, item in enumerate(seq.order):
        assert seq.rank[item] == k


class TestMaxiMin:
    """Test max-min diversification."""

    def test_four_item_example(self):
        """Seed C (largest row sum), then A, then D, then B."""
        seq = diversity_sequence(FOUR, Strategy.MAXIMIN)
        assert seq.order == [2, 0, 3, 1]
        assert seq.rank == [1, 3, 0, 2]

    def test_strategy_by_name(self):
        assert diversity_sequence(FOUR, "MaxiMin").order == [2, 0, 3, 1]

    def test_seed_tie_goes_to_lowest_index(self):
        uniform = np.ones((4, 4)) - np.eye(4)
        seq = diversity_sequence(uniform, Strategy.MAXIMIN)
        assert seq.order == [0, 1, 2, 3]

    def test_far_clusters_are_interleaved(self):
        """Two tight clusters: the second pick comes from the other cluster."""
        words = ["aaaa", "aaab", "aaba", "zzzz", "zzzy", "zzyz"]
        m = compute_matrix(Levenshtein(), words)
        seq = diversity_sequence(m, Strategy.MAXIMIN)
        first, second = seq.order[:2]
        assert (first < 3) != (second < 3)


class TestMaxiMean:
    """Test max-mean diversification."""

    def test_four_item_example(self):
        """After C and A, B and D tie on mean distance 2.5; B has the lower index."""
        seq = diversity_sequence(FOUR, Strategy.MAXIMEAN)
        assert seq.order == [2, 0, 1, 3]
        assert seq.rank == [1, 2, 0, 3]

    def test_matches_naive_mean(self):
        """The running-sum update picks the same items as recomputing means."""
        m = random_matrix(25, seed=7)
        seq = diversity_sequence(m, Strategy.MAXIMEAN)

        selected = [int(np.argmax(m.sum(axis=1)))]
        while len(selected) < 25:
            remaining = [j for j in range(25) if j not in selected]
            means = [m[j, selected].mean() for j in remaining]
            selected.append(remaining[int(np.argmax(means))])
        assert seq.order == selected


class TestSequenceProperties:
    """Properties shared by both strategies."""

    @pytest.mark.parametrize("strategy", list(Strategy))
    @pytest.mark.parametrize("n", [2, 3, 10, 40])
    def test_order_is_permutation_and_rank_is_inverse(self, strategy, n):
        seq = diversity_sequence(random_matrix(n, seed=n), strategy)
        assert_is_sequence(seq, n)

    @pytest.mark.parametrize("strategy", list(Strategy))
    def test_deterministic(self, strategy):
        m = random_matrix(30, seed=1)
        assert diversity_sequence(m, strategy).order == diversity_sequence(m, strategy).order

    @pytest.mark.parametrize("strategy", list(Strategy))
    def test_single_item(self, strategy):
        seq = diversity_sequence([[0.0]], strategy)
        assert seq.order == [0]
        assert seq.rank == [0]

    @pytest.mark.parametrize("matrix", [np.zeros((0, 0)), []])
    def test_empty_matrix(self, matrix):
        with pytest.raises(ConfigurationError):
            diversity_sequence(matrix, Strategy.MAXIMIN)

    def test_invalid_matrix(self):
        with pytest.raises(ConfigurationError):
            diversity_sequence([[0, 1], [2, 0]])

    def test_head_is_diverse_subset(self):
        seq = diversity_sequence(FOUR, Strategy.MAXIMIN)
        assert seq.head(2) == [2, 0]
        assert seq.head(10) == [2, 0, 3, 1]
        assert seq.head(0) == []

    def test_sequence_with_metric(self):
        m = compute_matrix(Levenshtein(), ["kitten", "sitting", "mitten"])
        assert sequence(Levenshtein(), m, "maximin").order == diversity_sequence(m).order
        assert sequence(None, m, "maximean").strategy is Strategy.MAXIMEAN


class TestStrategy:
    """Test strategy parsing."""

    @pytest.mark.parametrize("text,expected", [
        ("maximin", Strategy.MAXIMIN),
        ("MaxiMin", Strategy.MAXIMIN),
        ("maxi-mean", Strategy.MAXIMEAN),
        (Strategy.MAXIMEAN, Strategy.MAXIMEAN),
    ])
    def test_parse(self, text, expected):
        assert Strategy.parse(text) is expected

    def test_unknown(self):
        with pytest.raises(ConfigurationError):
            Strategy.parse("random")

    def test_labels(self):
        assert Strategy.MAXIMIN.label == "MaxiMin"
        assert Strategy.MAXIMEAN.label == "MaxiMean"
