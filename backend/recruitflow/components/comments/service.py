"""Comments on applicant rounds."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ...models.applicant import ApplicantRound, Comment
from ...models.recruitment import RecruitmentRound
from ...models.user import User
from ...platform.database import commit_or_raise
from ...platform.errors import AuthorizationError, NotFoundError, ValidationError
from ..access import policy
from ..rounds import repository as rounds_repo
from ..rounds.repository import utcnow

logger = logging.getLogger("recruitflow.comments")


def _is_edited(comment: Comment) -> bool:
    if comment.updated_at is None or comment.created_at is None:
        return False
    return comment.updated_at.replace(tzinfo=None) > comment.created_at.replace(tzinfo=None)


def serialize_comment(comment: Comment, *, round_name: str | None = None, user_name: str | None = None) -> Dict[str, Any]:
    return {
        "id": comment.id,
        "applicant_round_id": comment.applicant_round_id,
        "user_id": comment.user_id,
        "comment_text": comment.comment_text,
        "source": comment.source,
        "created_at": comment.created_at,
        "updated_at": comment.updated_at,
        "is_edited": _is_edited(comment),
        "round_name": round_name,
        "user_name": user_name,
    }


def _clean_text(comment_text: Optional[str]) -> str:
    text = (comment_text or "").strip()
    if not text:
        raise ValidationError("Comment text is required")
    return text


def _get_comment_or_404(db: Session, comment_id: int) -> Comment:
    comment = db.query(Comment).filter(Comment.id == comment_id).first()
    if comment is None:
        raise NotFoundError("Comment", comment_id)
    return comment


def _require_author_or_manager(db: Session, comment: Comment, user_id: int) -> None:
    if comment.user_id == user_id:
        return
    ar = rounds_repo.get_applicant_round_or_404(db, comment.applicant_round_id)
    rnd = rounds_repo.get_round_or_404(db, ar.recruitment_round_id)
    org_id = rounds_repo.organization_id_for_round(db, rnd)
    if not policy.is_manager(policy.get_membership(db, org_id, user_id)):
        raise AuthorizationError("You can only modify your own comments")


def create_comment(
    db: Session,
    *,
    applicant_round_id: int,
    user_id: int,
    comment_text: str,
    source: str | None = None,
) -> Dict[str, Any]:
    text = _clean_text(comment_text)
    rounds_repo.get_applicant_round_or_404(db, applicant_round_id)
    comment = Comment(
        applicant_round_id=applicant_round_id,
        user_id=user_id,
        comment_text=text,
        source=source,
        created_at=utcnow(),
    )
    db.add(comment)
    commit_or_raise(db, logger, "create_comment")
    db.refresh(comment)
    logger.info("Comment created comment_id=%s applicant_round_id=%s", comment.id, applicant_round_id)
    return serialize_comment(comment)


def update_comment(db: Session, *, comment_id: int, user_id: int, comment_text: str) -> Dict[str, Any]:
    text = _clean_text(comment_text)
    comment = _get_comment_or_404(db, comment_id)
    _require_author_or_manager(db, comment, user_id)
    comment.comment_text = text
    comment.updated_at = utcnow()
    commit_or_raise(db, logger, "update_comment")
    db.refresh(comment)
    return serialize_comment(comment)


def delete_comment(db: Session, *, comment_id: int, user_id: int) -> bool:
    comment = _get_comment_or_404(db, comment_id)
    _require_author_or_manager(db, comment, user_id)
    db.delete(comment)
    commit_or_raise(db, logger, "delete_comment")
    logger.info("Comment deleted comment_id=%s user_id=%s", comment_id, user_id)
    return True


def list_comments(db: Session, applicant_id: int) -> List[Dict[str, Any]]:
    """Comments across every round of the applicant, oldest first."""
    rounds_repo.get_applicant_or_404(db, applicant_id)
    rows = (
        db.query(Comment, RecruitmentRound.name, User)
        .join(ApplicantRound, ApplicantRound.id == Comment.applicant_round_id)
        .join(RecruitmentRound, RecruitmentRound.id == ApplicantRound.recruitment_round_id)
        .outerjoin(User, User.id == Comment.user_id)
        .filter(ApplicantRound.applicant_id == applicant_id)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .all()
    )
    return [
        serialize_comment(
            comment,
            round_name=round_name,
            user_name=(user.full_name or user.email) if user else None,
        )
        for comment, round_name, user in rows
    ]
