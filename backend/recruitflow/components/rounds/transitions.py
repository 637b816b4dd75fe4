"""Applicant-round status changes, including accept-and-advance."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ...models.applicant import (
    APPLICANT_ROUND_STATUSES,
    STATUS_ACCEPTED,
    STATUS_IN_PROGRESS,
    ApplicantRound,
)
from ...models.recruitment import RecruitmentRound
from ...platform.database import commit_or_raise
from ...platform.errors import NoNextRoundError, NotFoundError, ValidationError
from . import repository
from .repository import utcnow

logger = logging.getLogger("recruitflow.rounds")


def serialize_applicant_round(ar: ApplicantRound) -> Dict[str, Any]:
    return {
        "id": ar.id,
        "applicant_id": ar.applicant_id,
        "recruitment_round_id": ar.recruitment_round_id,
        "status": ar.status,
        "weighted_score": ar.weighted_score,
        "updated_at": ar.updated_at,
    }


def _round_info(rnd: RecruitmentRound) -> Dict[str, Any]:
    return {"id": rnd.id, "name": rnd.name, "sort_order": rnd.sort_order}


def _load(db: Session, applicant_id: int, applicant_round_id: int) -> ApplicantRound:
    ar = (
        db.query(ApplicantRound)
        .filter(
            ApplicantRound.id == applicant_round_id,
            ApplicantRound.applicant_id == applicant_id,
        )
        .first()
    )
    if ar is None:
        raise NotFoundError("Applicant round", applicant_round_id)
    return ar


def set_status(db: Session, *, applicant_id: int, applicant_round_id: int, new_status: str) -> Dict[str, Any]:
    """Move an applicant_round to ``new_status``; ``accepted`` also advances."""
    if new_status not in APPLICANT_ROUND_STATUSES:
        raise ValidationError(
            "Invalid status",
            details={"allowed": list(APPLICANT_ROUND_STATUSES)},
        )
    if new_status == STATUS_ACCEPTED:
        return accept_and_advance(db, applicant_id=applicant_id, applicant_round_id=applicant_round_id)

    ar = _load(db, applicant_id, applicant_round_id)
    previous = ar.status
    ar.status = new_status
    ar.updated_at = utcnow()
    commit_or_raise(db, logger, "set_status")
    db.refresh(ar)
    logger.info(
        "Status changed applicant_round_id=%s %s -> %s", ar.id, previous, new_status
    )
    return {"new_status": new_status, "updated_record": serialize_applicant_round(ar)}


def accept_and_advance(db: Session, *, applicant_id: int, applicant_round_id: int) -> Dict[str, Any]:
    """Accept the applicant and place them in the next round of the cycle.

    Runs in one transaction. Re-invoking after success leaves exactly one
    bridging row in the next round, reset to in_progress.
    """
    ar = _load(db, applicant_id, applicant_round_id)
    current = repository.get_round_or_404(db, ar.recruitment_round_id)
    repository.get_cycle_or_404(db, current.recruitment_cycle_id)
    now = utcnow()

    if repository.is_last_round(db, current):
        ar.status = STATUS_ACCEPTED
        ar.updated_at = now
        commit_or_raise(db, logger, "accept_last_round")
        db.refresh(ar)
        logger.info("Accepted in final round applicant_round_id=%s", ar.id)
        return {
            "old_round_id": ar.id,
            "new_round": None,
            "next_round_info": None,
            "updated_record": serialize_applicant_round(ar),
            "is_last_round": True,
        }

    target = repository.next_round(db, current.recruitment_cycle_id, current.sort_order)
    if target is None:
        logger.warning(
            "No next round for non-final round round_id=%s sort_order=%s",
            current.id,
            current.sort_order,
        )
        raise NoNextRoundError(current.id)

    ar.status = STATUS_ACCEPTED
    ar.updated_at = now
    bridging: Optional[ApplicantRound] = repository.find_applicant_round(db, applicant_id, target.id)
    if bridging is not None:
        bridging.status = STATUS_IN_PROGRESS
        bridging.updated_at = now
    else:
        bridging = ApplicantRound(
            applicant_id=applicant_id,
            recruitment_round_id=target.id,
            status=STATUS_IN_PROGRESS,
        )
        db.add(bridging)
    commit_or_raise(db, logger, "accept_and_advance")
    db.refresh(ar)
    db.refresh(bridging)

    logger.info(
        "Accepted and advanced applicant_id=%s from round_id=%s to round_id=%s",
        applicant_id,
        current.id,
        target.id,
    )
    return {
        "old_round_id": ar.id,
        "new_round": serialize_applicant_round(bridging),
        "next_round_info": _round_info(target),
        "updated_record": serialize_applicant_round(ar),
        "is_last_round": False,
    }
