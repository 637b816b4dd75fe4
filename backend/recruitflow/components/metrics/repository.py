from __future__ import annotations

from typing import List

from sqlalchemy.orm import Session

from ...models.applicant import Score
from ...models.recruitment import Metric


def list_metrics(db: Session, recruitment_round_id: int) -> List[Metric]:
    return (
        db.query(Metric)
        .filter(Metric.recruitment_round_id == recruitment_round_id)
        .order_by(Metric.id.asc())
        .all()
    )


def metrics_by_id(db: Session, recruitment_round_id: int) -> dict[int, Metric]:
    return {m.id: m for m in list_metrics(db, recruitment_round_id)}


def any_scores_for(db: Session, applicant_round_ids: List[int]) -> bool:
    if not applicant_round_ids:
        return False
    return (
        db.query(Score.id)
        .filter(Score.applicant_round_id.in_(applicant_round_ids))
        .first()
        is not None
    )


def delete_metrics(db: Session, recruitment_round_id: int) -> int:
    return (
        db.query(Metric)
        .filter(Metric.recruitment_round_id == recruitment_round_id)
        .delete(synchronize_session=False)
    )
