"""
Tests for ballotbox/services/tally.py
"""

from ballotbox.services.tally import compute_winner


class TestComputeWinner:
    """Single forward pass, strict comparison."""

    def test_highest_count_wins(self):
        assert compute_winner([0, 2, 1]) == 1
        assert compute_winner([0, 1, 0, 4]) == 3

    def test_tie_goes_to_lowest_index(self):
        assert compute_winner([0, 1, 1]) == 1
        assert compute_winner([0, 0, 3, 1, 3]) == 2

    def test_sentinel_wins_without_votes(self):
        assert compute_winner([0]) == 0
        assert compute_winner([0, 0, 0]) == 0

    def test_empty_sequence(self):
        assert compute_winner([]) == 0
