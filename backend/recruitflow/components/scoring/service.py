"""Scoring engine: submissions, edits, read-back and the weighted-score cache."""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Iterable, List, Mapping, Optional

from sqlalchemy.orm import Session

from ...models.applicant import ApplicantRound, Score
from ...models.user import User
from ...platform.config import settings
from ...platform.database import commit_or_raise
from ...platform.errors import AuthorizationError, NotFoundError, ValidationError
from ..metrics import repository as metrics_repo
from ..rounds import repository as rounds_repo
from ..rounds.repository import utcnow
from . import repository
from .calculations import group_submissions, rollup_weighted_score, weighted_average

logger = logging.getLogger("recruitflow.scoring")


def _field(entry: Any, name: str) -> Any:
    if isinstance(entry, Mapping):
        return entry.get(name)
    return getattr(entry, name, None)


def refresh_weighted_score(db: Session, applicant_round: ApplicantRound) -> Optional[float]:
    """Recompute the cached weighted_score from live metric weights.

    Pending changes are flushed first; the caller commits.
    """
    db.flush()
    groups = group_submissions(repository.score_lines_for(db, applicant_round.id))
    applicant_round.weighted_score = rollup_weighted_score(groups, settings.WEIGHTED_SCORE_MODE)
    return applicant_round.weighted_score


def serialize_score(score: Score) -> Dict[str, Any]:
    return {
        "id": score.id,
        "applicant_round_id": score.applicant_round_id,
        "metric_id": score.metric_id,
        "score_value": score.score_value,
        "user_id": score.user_id,
        "submission_id": score.submission_id,
        "created_at": score.created_at,
    }


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------

def submit_scores(
    db: Session,
    *,
    applicant_id: int,
    recruitment_round_id: int,
    user_id: int,
    entries: Iterable[Any],
) -> Dict[str, Any]:
    """Persist one scorer's pass over the round's metrics as a single submission."""
    entries = list(entries or [])
    if not entries:
        raise ValidationError("At least one score is required")

    applicant_round = rounds_repo.find_applicant_round(db, applicant_id, recruitment_round_id)
    if applicant_round is None:
        raise NotFoundError(
            "Applicant round",
            message="Applicant round not found",
        )

    metrics = metrics_repo.metrics_by_id(db, recruitment_round_id)
    seen: set[int] = set()
    parsed: List[tuple[int, float]] = []
    for entry in entries:
        metric_id = _field(entry, "metric_id")
        value = _field(entry, "score_value")
        if metric_id not in metrics:
            raise ValidationError(
                "Metric does not belong to this round",
                details={"metric_id": metric_id},
            )
        if metric_id in seen:
            raise ValidationError("Duplicate metric in submission", details={"metric_id": metric_id})
        try:
            value = float(value)
        except (TypeError, ValueError):
            raise ValidationError("score_value must be a number", details={"metric_id": metric_id})
        seen.add(metric_id)
        parsed.append((metric_id, value))

    submission_id = str(uuid.uuid4())
    created_at = utcnow()
    rows = [
        Score(
            applicant_round_id=applicant_round.id,
            metric_id=metric_id,
            score_value=value,
            user_id=user_id,
            submission_id=submission_id,
            created_at=created_at,
        )
        for metric_id, value in parsed
    ]
    db.add_all(rows)
    submission_average = weighted_average((value, metrics[mid].weight) for mid, value in parsed)
    cached = refresh_weighted_score(db, applicant_round)
    commit_or_raise(db, logger, "submit_scores")
    for row in rows:
        db.refresh(row)

    logger.info(
        "Scores submitted applicant_round_id=%s submission_id=%s user_id=%s weighted_score=%s",
        applicant_round.id,
        submission_id,
        user_id,
        cached,
    )
    return {
        "scores": [serialize_score(row) for row in rows],
        "submission_id": submission_id,
        "submission_weighted_average": submission_average,
        "weighted_score": cached,
        "applicant_round_id": applicant_round.id,
    }


def update_score(db: Session, *, score_id: int, score_value: float, user_id: int) -> Dict[str, Any]:
    score = repository.get_score(db, score_id)
    if score is None:
        raise NotFoundError("Score", score_id)
    if score.user_id != user_id:
        raise AuthorizationError("You can only update your own scores")

    score.score_value = float(score_value)
    db.flush()
    average = weighted_average(
        (line.score_value, line.metric_weight) for line in repository.sibling_lines(db, score)
    )
    applicant_round = rounds_repo.get_applicant_round_or_404(db, score.applicant_round_id)
    cached = refresh_weighted_score(db, applicant_round)
    commit_or_raise(db, logger, "update_score")
    db.refresh(score)

    logger.info("Score updated score_id=%s user_id=%s", score_id, user_id)
    return {
        "score": serialize_score(score),
        "weighted_average": average if average is not None else 0.0,
        "weighted_score": cached,
    }


def delete_submission(db: Session, *, submission_id: str, user_id: int) -> bool:
    scores = repository.scores_for_submission(db, submission_id)
    if not scores:
        raise NotFoundError("Submission", submission_id)
    if any(score.user_id != user_id for score in scores):
        raise AuthorizationError("You can only delete your own submissions")

    applicant_round_ids = {score.applicant_round_id for score in scores}
    for score in scores:
        db.delete(score)
    for ar_id in applicant_round_ids:
        refresh_weighted_score(db, rounds_repo.get_applicant_round_or_404(db, ar_id))
    commit_or_raise(db, logger, "delete_submission")
    logger.info("Submission deleted submission_id=%s user_id=%s", submission_id, user_id)
    return True


def delete_all_scores_for_round(db: Session, recruitment_round_id: int) -> int:
    rounds_repo.get_round_or_404(db, recruitment_round_id)
    ar_ids = rounds_repo.applicant_round_ids(db, recruitment_round_id)
    deleted = repository.delete_scores_for(db, ar_ids)
    if ar_ids:
        (
            db.query(ApplicantRound)
            .filter(ApplicantRound.id.in_(ar_ids))
            .update({ApplicantRound.weighted_score: None}, synchronize_session=False)
        )
    commit_or_raise(db, logger, "delete_all_scores_for_round")
    logger.info("Cleared scores round_id=%s deleted=%s", recruitment_round_id, deleted)
    return deleted


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

def fetch_scores(
    db: Session,
    *,
    applicant_round_id: int,
    requesting_user_id: int | None = None,
    filter_user_id: int | None = None,
) -> List[Dict[str, Any]]:
    """Submissions for a bridging row, newest first."""
    rounds_repo.get_applicant_round_or_404(db, applicant_round_id)
    groups = group_submissions(repository.score_lines_for(db, applicant_round_id, user_id=filter_user_id))

    user_ids = {g.user_id for g in groups if g.user_id is not None}
    names: Dict[int, str] = {}
    if user_ids:
        for user in db.query(User).filter(User.id.in_(user_ids)).all():
            names[user.id] = user.full_name or user.email

    submissions: List[Dict[str, Any]] = []
    for group in groups:
        if requesting_user_id is not None and group.user_id == requesting_user_id:
            user_name = "You"
        else:
            user_name = names.get(group.user_id, "Unknown")
        average = group.weighted_average
        submissions.append(
            {
                "submission_id": group.submission_id,
                "created_at": group.created_at,
                "user_id": group.user_id,
                "user_name": user_name,
                "user": {"id": group.user_id, "name": user_name},
                "scores": [
                    {
                        "id": line.score_id,
                        "metric_id": line.metric_id,
                        "metric_name": line.metric_name,
                        "weight": line.metric_weight,
                        "score_value": line.score_value,
                    }
                    for line in group.lines
                ],
                "weighted_average": average if average is not None else 0.0,
            }
        )
    return submissions


def check_round_scores(db: Session, recruitment_round_id: int) -> Dict[str, Any]:
    rounds_repo.get_round_or_404(db, recruitment_round_id)
    count = repository.count_scores_for(db, rounds_repo.applicant_round_ids(db, recruitment_round_id))
    return {"has_scores": count > 0, "count": count}


def check_applicant_score(db: Session, *, applicant_id: int, recruitment_round_id: int) -> Dict[str, Any]:
    applicant_round = rounds_repo.find_applicant_round(db, applicant_id, recruitment_round_id)
    if applicant_round is None:
        raise NotFoundError("Applicant round", message="Applicant round not found")
    return {"has_score": applicant_round.weighted_score is not None}
