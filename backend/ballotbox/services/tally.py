"""
Tally engine
"""

from typing import Sequence


def compute_winner(vote_counts: Sequence[int]) -> int:
    """Index of the highest count; the earliest index wins ties.

    Index 0 is the sentinel and starts as the tentative winner, so it
    is returned when nothing received a vote.
    """
    winner = 0
    highest = 0
    for index, count in enumerate(vote_counts):
        if count > highest:
            highest = count
            winner = index
    return winner
