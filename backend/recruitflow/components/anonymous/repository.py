from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from ...models.applicant import Applicant, ApplicantRound, Comment
from ...models.recruitment import AnonymousReading


def get_reading_by_slug(db: Session, slug: str) -> Optional[AnonymousReading]:
    return db.query(AnonymousReading).filter(AnonymousReading.slug == slug).first()


def get_reading_for_round(db: Session, recruitment_round_id: int) -> Optional[AnonymousReading]:
    return (
        db.query(AnonymousReading)
        .filter(AnonymousReading.recruitment_round_id == recruitment_round_id)
        .order_by(AnonymousReading.id.asc())
        .first()
    )


def applicant_rounds_for_reading(db: Session, recruitment_round_id: int) -> List[tuple[ApplicantRound, Applicant]]:
    # Bridging-row order, never name order, so readers cannot infer identities.
    return (
        db.query(ApplicantRound, Applicant)
        .join(Applicant, Applicant.id == ApplicantRound.applicant_id)
        .filter(ApplicantRound.recruitment_round_id == recruitment_round_id)
        .order_by(ApplicantRound.id.asc())
        .all()
    )


def comments_by_user(db: Session, applicant_round_id: int, user_id: int) -> List[Comment]:
    return (
        db.query(Comment)
        .filter(Comment.applicant_round_id == applicant_round_id, Comment.user_id == user_id)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .all()
    )
