"""Score queries returning typed score lines."""

from __future__ import annotations

from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models.applicant import Score
from ...models.recruitment import Metric
from .calculations import ScoreLine


def _to_line(score: Score, metric: Metric | None) -> ScoreLine:
    return ScoreLine(
        score_id=score.id,
        metric_id=score.metric_id,
        metric_name=metric.name if metric else None,
        metric_weight=metric.weight if metric else None,
        score_value=score.score_value,
        user_id=score.user_id,
        created_at=score.created_at,
        submission_id=score.submission_id,
    )


def score_lines_for(db: Session, applicant_round_id: int, user_id: int | None = None) -> List[ScoreLine]:
    """All scores of a bridging row joined with their live metric weight."""
    query = (
        db.query(Score, Metric)
        .outerjoin(Metric, Metric.id == Score.metric_id)
        .filter(Score.applicant_round_id == applicant_round_id)
    )
    if user_id is not None:
        query = query.filter(Score.user_id == user_id)
    return [_to_line(score, metric) for score, metric in query.order_by(Score.id.asc()).all()]


def sibling_lines(db: Session, score: Score) -> List[ScoreLine]:
    """Score lines from the same submission as ``score``.

    Rows without a submission id are matched on scorer and creation time.
    """
    query = db.query(Score, Metric).outerjoin(Metric, Metric.id == Score.metric_id)
    if score.submission_id:
        query = query.filter(Score.submission_id == score.submission_id)
    else:
        query = query.filter(
            Score.applicant_round_id == score.applicant_round_id,
            Score.submission_id.is_(None),
            Score.user_id == score.user_id,
            Score.created_at == score.created_at,
        )
    return [_to_line(s, m) for s, m in query.order_by(Score.id.asc()).all()]


def get_score(db: Session, score_id: int) -> Score | None:
    return db.query(Score).filter(Score.id == score_id).first()


def scores_for_submission(db: Session, submission_id: str) -> List[Score]:
    return db.query(Score).filter(Score.submission_id == submission_id).order_by(Score.id.asc()).all()


def count_scores_for(db: Session, applicant_round_ids: List[int]) -> int:
    if not applicant_round_ids:
        return 0
    total = (
        db.query(func.count(Score.id))
        .filter(Score.applicant_round_id.in_(applicant_round_ids))
        .scalar()
    )
    return int(total or 0)


def delete_scores_for(db: Session, applicant_round_ids: List[int]) -> int:
    if not applicant_round_ids:
        return 0
    return (
        db.query(Score)
        .filter(Score.applicant_round_id.in_(applicant_round_ids))
        .delete(synchronize_session=False)
    )
