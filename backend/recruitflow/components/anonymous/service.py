"""Anonymous readings: shareable, de-identified views of a round and the comments left through them."""

from __future__ import annotations

import logging
import secrets
import string
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from ...models.applicant import Comment
from ...models.recruitment import AnonymousReading
from ...platform.database import commit_or_raise
from ...platform.errors import AuthorizationError, NotFoundError, StoreError, ValidationError
from ..access import policy
from ..comments import service as comments_service
from ..rounds import repository as rounds_repo
from . import repository

logger = logging.getLogger("recruitflow.anonymous")

ANONYMOUS_SOURCE = "A"
SLUG_ALPHABET = string.ascii_lowercase + string.digits
SLUG_LENGTH = 6
_SLUG_ATTEMPTS = 10


def generate_slug(length: int = SLUG_LENGTH) -> str:
    return "".join(secrets.choice(SLUG_ALPHABET) for _ in range(length))


def clean_omitted_fields(fields: Optional[Iterable[Any]]) -> List[str]:
    """Strip, drop blanks and de-duplicate while keeping the caller's order."""
    cleaned: List[str] = []
    for field in fields or ():
        if not isinstance(field, str):
            raise ValidationError("omitted_fields must be a list of strings")
        field = field.strip()
        if field and field not in cleaned:
            cleaned.append(field)
    return cleaned


def redact(data: Optional[Dict[str, Any]], omitted_fields: Iterable[str]) -> Dict[str, Any]:
    hidden = set(omitted_fields or ())
    return {key: value for key, value in (data or {}).items() if key not in hidden}


def serialize_reading(reading: AnonymousReading) -> Dict[str, Any]:
    return {
        "id": reading.id,
        "recruitment_round_id": reading.recruitment_round_id,
        "slug": reading.slug,
        "omitted_fields": list(reading.omitted_fields or []),
        "created_by": reading.created_by,
        "created_at": reading.created_at,
    }


def _reading_or_404(db: Session, slug: str) -> AnonymousReading:
    reading = repository.get_reading_by_slug(db, slug)
    if reading is None:
        raise NotFoundError("Anonymous reading", slug, message="Reading not found")
    return reading


def _require_round_member(db: Session, recruitment_round_id: int, user_id: int):
    rnd = rounds_repo.get_round_or_404(db, recruitment_round_id)
    policy.require_member(db, rounds_repo.organization_id_for_round(db, rnd), user_id)
    return rnd


def _unused_slug(db: Session) -> str:
    for _ in range(_SLUG_ATTEMPTS):
        slug = generate_slug()
        if repository.get_reading_by_slug(db, slug) is None:
            return slug
    logger.error("Could not allocate an unused reading slug after %s attempts", _SLUG_ATTEMPTS)
    raise StoreError("Could not allocate a reading slug", operation="create_reading")


# ---------------------------------------------------------------------------
# Readings
# ---------------------------------------------------------------------------

def create_reading(
    db: Session,
    *,
    recruitment_round_id: int,
    user_id: int,
    omitted_fields: Optional[Iterable[Any]] = None,
) -> Dict[str, Any]:
    """Create the round's reading, or update the omitted fields of the existing one."""
    fields = clean_omitted_fields(omitted_fields)
    _require_round_member(db, recruitment_round_id, user_id)

    reading = repository.get_reading_for_round(db, recruitment_round_id)
    if reading is not None:
        reading.omitted_fields = fields
        commit_or_raise(db, logger, "create_reading")
        db.refresh(reading)
        return {"reading": serialize_reading(reading), "created": False}

    reading = AnonymousReading(
        recruitment_round_id=recruitment_round_id,
        slug=_unused_slug(db),
        omitted_fields=fields,
        created_by=user_id,
    )
    db.add(reading)
    commit_or_raise(db, logger, "create_reading")
    db.refresh(reading)
    logger.info(
        "Anonymous reading created reading_id=%s round_id=%s omitted=%s",
        reading.id,
        recruitment_round_id,
        len(fields),
    )
    return {"reading": serialize_reading(reading), "created": True}


def get_slug(db: Session, *, recruitment_round_id: int, user_id: int) -> Dict[str, str]:
    _require_round_member(db, recruitment_round_id, user_id)
    reading = repository.get_reading_for_round(db, recruitment_round_id)
    if reading is None:
        raise NotFoundError(
            "Anonymous reading", message="No reading found for that round"
        )
    return {"slug": reading.slug}


def get_reading(db: Session, *, slug: str, user_id: int) -> Dict[str, Any]:
    """The reading with its round's applicants, stripped of identity and omitted fields."""
    reading = _reading_or_404(db, slug)
    rnd = _require_round_member(db, reading.recruitment_round_id, user_id)
    cycle = rounds_repo.get_cycle_or_404(db, rnd.recruitment_cycle_id)

    omitted = reading.omitted_fields or []
    applicants = [
        {
            "applicant_id": applicant.id,
            "applicant_round_id": ar.id,
            "created_at": ar.created_at,
            "data": redact(applicant.data, omitted),
        }
        for ar, applicant in repository.applicant_rounds_for_reading(db, rnd.id)
    ]
    return {
        "reading": serialize_reading(reading),
        "applicants": applicants,
        "organization_name": cycle.organization.name if cycle.organization else None,
        "recruitment_cycle_name": cycle.name,
        "recruitment_round_name": rnd.name,
    }


def delete_reading(db: Session, *, slug: str, user_id: int) -> bool:
    reading = _reading_or_404(db, slug)
    _require_round_member(db, reading.recruitment_round_id, user_id)
    db.delete(reading)
    commit_or_raise(db, logger, "delete_reading")
    logger.info("Anonymous reading deleted slug=%s user_id=%s", slug, user_id)
    return True


# ---------------------------------------------------------------------------
# Comments left through a reading
# ---------------------------------------------------------------------------

def _applicant_round_or_404(db: Session, applicant_id: int, recruitment_round_id: int):
    ar = rounds_repo.find_applicant_round(db, applicant_id, recruitment_round_id)
    if ar is None:
        raise NotFoundError(
            "Applicant round",
            message="No matching applicant_round found for that applicant + round",
        )
    return ar


def post_comment(
    db: Session,
    *,
    applicant_id: int,
    recruitment_round_id: int,
    user_id: int,
    comment_text: str,
    source: str = ANONYMOUS_SOURCE,
) -> Dict[str, Any]:
    _require_round_member(db, recruitment_round_id, user_id)
    ar = _applicant_round_or_404(db, applicant_id, recruitment_round_id)
    return comments_service.create_comment(
        db,
        applicant_round_id=ar.id,
        user_id=user_id,
        comment_text=comment_text,
        source=source or ANONYMOUS_SOURCE,
    )


def list_user_comments(
    db: Session, *, applicant_id: int, recruitment_round_id: int, user_id: int
) -> List[Dict[str, Any]]:
    """The caller's own comments on one applicant in one round."""
    _require_round_member(db, recruitment_round_id, user_id)
    ar = _applicant_round_or_404(db, applicant_id, recruitment_round_id)
    return [comments_service.serialize_comment(c) for c in repository.comments_by_user(db, ar.id, user_id)]


def delete_comment(db: Session, *, comment_id: int, user_id: int) -> bool:
    comment = db.query(Comment).filter(Comment.id == comment_id).first()
    if comment is None:
        raise NotFoundError("Comment", comment_id)
    # Readers may only remove what they wrote, whatever their role.
    if comment.user_id != user_id:
        logger.warning("Anonymous comment delete denied comment_id=%s user_id=%s", comment_id, user_id)
        raise AuthorizationError("Not authorized to delete this comment")
    db.delete(comment)
    commit_or_raise(db, logger, "delete_anonymous_comment")
    return True
