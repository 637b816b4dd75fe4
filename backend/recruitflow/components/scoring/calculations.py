"""Pure weighted-score math: no database access."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Optional

MEAN_OF_SUBMISSIONS = "mean_of_submissions"
LATEST_SUBMISSION = "latest_submission"


def weighted_average(pairs: Iterable[tuple[float | None, float | None]]) -> Optional[float]:
    """Return sum(value * weight) / sum(weight), or None when the weights sum to zero."""
    numerator = 0.0
    denominator = 0.0
    for value, weight in pairs:
        w = float(weight or 0.0)
        numerator += float(value or 0.0) * w
        denominator += w
    if denominator <= 0:
        return None
    return numerator / denominator


def weights_sum_to_one(weights: Iterable[float | None], tolerance: float) -> bool:
    total = sum(float(w or 0.0) for w in weights)
    return abs(total - 1.0) <= tolerance


@dataclass
class ScoreLine:
    score_id: int
    metric_id: int
    metric_name: str | None
    metric_weight: float | None
    score_value: float
    user_id: int | None
    created_at: datetime | None
    submission_id: str | None


@dataclass
class SubmissionGroup:
    submission_id: str
    created_at: datetime | None
    user_id: int | None
    lines: list[ScoreLine] = field(default_factory=list)

    @property
    def weighted_average(self) -> Optional[float]:
        return weighted_average((line.score_value, line.metric_weight) for line in self.lines)


def submission_key(submission_id: str | None, created_at: datetime | None) -> str:
    """Group key: the submission id, or the creation timestamp for legacy rows."""
    if submission_id:
        return submission_id
    return created_at.isoformat() if created_at else ""


def group_submissions(lines: Iterable[ScoreLine]) -> list[SubmissionGroup]:
    """Group score lines into submissions, newest first."""
    groups: dict[str, SubmissionGroup] = {}
    for line in lines:
        key = submission_key(line.submission_id, line.created_at)
        group = groups.get(key)
        if group is None:
            group = SubmissionGroup(submission_id=key, created_at=line.created_at, user_id=line.user_id)
            groups[key] = group
        group.lines.append(line)
    return sorted(groups.values(), key=_newest_first_key, reverse=True)


def _newest_first_key(group: SubmissionGroup) -> tuple[float, int]:
    stamp = 0.0
    if group.created_at is not None:
        created = group.created_at
        if created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)
        stamp = created.timestamp()
    return stamp, max(line.score_id for line in group.lines)


def rollup_weighted_score(groups: list[SubmissionGroup], mode: str) -> Optional[float]:
    """Collapse per-submission averages into the cached ApplicantRound value.

    ``groups`` must be ordered newest first (as returned by group_submissions).
    Submissions whose weights sum to zero are ignored.
    """
    averages = [g.weighted_average for g in groups]
    averages = [a for a in averages if a is not None]
    if not averages:
        return None
    if mode == LATEST_SUBMISSION:
        return averages[0]
    return sum(averages) / len(averages)
