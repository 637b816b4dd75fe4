"""Vote aggregation and dense ranking for deliberations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

# Averages are compared at this precision so float noise never splits a tie.
_RANK_PRECISION = 9


@dataclass
class RankedEntry:
    applicant_round_id: int
    applicant_id: int
    name: str
    headshot_url: str | None
    avg_vote: float
    vote_count: int
    rank_dense: int = 0
    is_tied: bool = False


def average_votes(votes: Iterable[int]) -> tuple[float, int]:
    """Return (mean, count); an empty vote list averages to 0."""
    values = list(votes)
    if not values:
        return 0.0, 0
    return sum(values) / len(values), len(values)


def dense_rank(entries: list[RankedEntry]) -> list[RankedEntry]:
    """Rank by avg_vote descending; equal averages share a rank, no gaps.

    Returns the entries ordered by rank, then name.
    """
    ordered = sorted(entries, key=lambda e: (-round(e.avg_vote, _RANK_PRECISION), e.name.lower()))
    counts: dict[float, int] = {}
    for entry in ordered:
        key = round(entry.avg_vote, _RANK_PRECISION)
        counts[key] = counts.get(key, 0) + 1

    rank = 0
    previous: float | None = None
    for entry in ordered:
        key = round(entry.avg_vote, _RANK_PRECISION)
        if previous is None or key != previous:
            rank += 1
            previous = key
        entry.rank_dense = rank
        entry.is_tied = counts[key] > 1
    return ordered
