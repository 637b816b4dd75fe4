"""Round and cycle lifecycle: creation with backfill, guarded deletion, cascades."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List

from sqlalchemy.orm import Session

from ...models.applicant import STATUS_ACCEPTED, STATUS_IN_PROGRESS, Applicant, ApplicantRound, Comment, Score
from ...models.delibs import DelibsSession, DelibsVote
from ...models.recruitment import Metric, RecruitmentCycle, RecruitmentRound
from ...platform.database import commit_or_raise
from ...platform.errors import ConflictError, ValidationError
from ..metrics.service import add_metrics, validate_metrics
from . import repository

logger = logging.getLogger("recruitflow.rounds")


def serialize_round(rnd: RecruitmentRound) -> Dict[str, Any]:
    return {
        "id": rnd.id,
        "recruitment_cycle_id": rnd.recruitment_cycle_id,
        "name": rnd.name,
        "sort_order": rnd.sort_order,
        "column_order": rnd.column_order,
        "metrics": [
            {"id": m.id, "name": m.name, "weight": m.weight} for m in rnd.metrics
        ],
    }


def create_round(
    db: Session,
    *,
    recruitment_cycle_id: int,
    name: str,
    metrics: Iterable[Any] = (),
) -> Dict[str, Any]:
    """Append a round to the cycle and carry over applicants accepted in the previous one."""
    name = (name or "").strip()
    if not name:
        raise ValidationError("Round name is required")
    normalized = validate_metrics(metrics)
    repository.get_cycle_or_404(db, recruitment_cycle_id)

    highest = repository.max_sort_order(db, recruitment_cycle_id)
    sort_order = 0 if highest is None else highest + 1
    rnd = RecruitmentRound(recruitment_cycle_id=recruitment_cycle_id, name=name, sort_order=sort_order)
    db.add(rnd)
    db.flush()
    add_metrics(db, rnd.id, normalized)

    backfilled = 0
    if sort_order > 0:
        previous = (
            db.query(RecruitmentRound)
            .filter(
                RecruitmentRound.recruitment_cycle_id == recruitment_cycle_id,
                RecruitmentRound.sort_order == sort_order - 1,
            )
            .order_by(RecruitmentRound.id.asc())
            .first()
        )
        if previous is not None:
            accepted = (
                db.query(ApplicantRound.applicant_id)
                .filter(
                    ApplicantRound.recruitment_round_id == previous.id,
                    ApplicantRound.status == STATUS_ACCEPTED,
                )
                .all()
            )
            for (applicant_id,) in accepted:
                if repository.find_applicant_round(db, applicant_id, rnd.id) is None:
                    db.add(
                        ApplicantRound(
                            applicant_id=applicant_id,
                            recruitment_round_id=rnd.id,
                            status=STATUS_IN_PROGRESS,
                        )
                    )
                    backfilled += 1

    commit_or_raise(db, logger, "create_round")
    db.refresh(rnd)
    logger.info(
        "Round created round_id=%s cycle_id=%s sort_order=%s backfilled=%s",
        rnd.id,
        recruitment_cycle_id,
        sort_order,
        backfilled,
    )
    payload = serialize_round(rnd)
    payload["backfilled_applicants"] = backfilled
    return payload


def list_rounds(db: Session, recruitment_cycle_id: int) -> List[Dict[str, Any]]:
    repository.get_cycle_or_404(db, recruitment_cycle_id)
    return [serialize_round(rnd) for rnd in repository.list_rounds(db, recruitment_cycle_id)]


def delete_round(db: Session, recruitment_round_id: int) -> Dict[str, Any]:
    """Delete an unused round and close the gap in the cycle's sort order."""
    rnd = repository.get_round_or_404(db, recruitment_round_id)
    if repository.applicant_round_ids(db, recruitment_round_id):
        logger.warning("Round deletion blocked by applicants round_id=%s", recruitment_round_id)
        raise ConflictError(
            "Cannot delete round with applicants. Delete the applicants from this round first.",
            details={"recruitment_round_id": recruitment_round_id},
        )
    if repository.has_anonymous_readings(db, recruitment_round_id):
        logger.warning("Round deletion blocked by anonymous readings round_id=%s", recruitment_round_id)
        raise ConflictError(
            "Cannot delete round with anonymous readings. Delete the anonymous readings first.",
            details={"recruitment_round_id": recruitment_round_id},
        )

    cycle_id = rnd.recruitment_cycle_id
    deleted_sort_order = rnd.sort_order
    later = repository.rounds_after(db, cycle_id, deleted_sort_order)

    db.query(Metric).filter(Metric.recruitment_round_id == rnd.id).delete(synchronize_session=False)
    db.query(DelibsSession).filter(DelibsSession.recruitment_round_id == rnd.id).delete(
        synchronize_session=False
    )
    db.expire(rnd)
    db.delete(rnd)
    db.flush()
    for other in later:
        other.sort_order = other.sort_order - 1
        db.flush()
    commit_or_raise(db, logger, "delete_round")

    logger.info(
        "Round deleted round_id=%s cycle_id=%s resequenced=%s",
        recruitment_round_id,
        cycle_id,
        len(later),
    )
    return {"success": True, "resequenced": len(later)}


def delete_applicant(db: Session, applicant_id: int) -> bool:
    """Remove an applicant and everything hanging off their bridging rows."""
    applicant = repository.get_applicant_or_404(db, applicant_id)
    ar_ids = [
        row[0]
        for row in db.query(ApplicantRound.id).filter(ApplicantRound.applicant_id == applicant_id).all()
    ]
    if ar_ids:
        db.query(DelibsVote).filter(DelibsVote.applicant_round_id.in_(ar_ids)).delete(synchronize_session=False)
        db.query(Comment).filter(Comment.applicant_round_id.in_(ar_ids)).delete(synchronize_session=False)
        db.query(Score).filter(Score.applicant_round_id.in_(ar_ids)).delete(synchronize_session=False)
        db.query(ApplicantRound).filter(ApplicantRound.id.in_(ar_ids)).delete(synchronize_session=False)
    db.expire(applicant)
    db.delete(applicant)
    commit_or_raise(db, logger, "delete_applicant")
    logger.info("Applicant deleted applicant_id=%s applicant_rounds=%s", applicant_id, len(ar_ids))
    return True


def serialize_cycle(cycle: RecruitmentCycle) -> Dict[str, Any]:
    return {
        "id": cycle.id,
        "organization_id": cycle.organization_id,
        "name": cycle.name,
        "archived": bool(cycle.archived),
        "created_at": cycle.created_at,
    }


def create_cycle(db: Session, *, organization_id: int, name: str) -> Dict[str, Any]:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Cycle name is required")
    repository.get_organization_or_404(db, organization_id)
    cycle = RecruitmentCycle(organization_id=organization_id, name=name, archived=False)
    db.add(cycle)
    commit_or_raise(db, logger, "create_cycle")
    db.refresh(cycle)
    logger.info("Cycle created cycle_id=%s org_id=%s", cycle.id, organization_id)
    return serialize_cycle(cycle)


def list_cycles(db: Session, organization_id: int, include_archived: bool = True) -> List[Dict[str, Any]]:
    """Cycles of the organization, newest first."""
    repository.get_organization_or_404(db, organization_id)
    return [serialize_cycle(c) for c in repository.list_cycles(db, organization_id, include_archived)]


def archive_cycle(db: Session, recruitment_cycle_id: int, archived: bool = True) -> Dict[str, Any]:
    cycle = repository.get_cycle_or_404(db, recruitment_cycle_id)
    cycle.archived = bool(archived)
    commit_or_raise(db, logger, "archive_cycle")
    logger.info("Cycle archive flag set cycle_id=%s archived=%s", cycle.id, cycle.archived)
    return serialize_cycle(cycle)


def delete_cycle(db: Session, recruitment_cycle_id: int) -> bool:
    cycle = repository.get_cycle_or_404(db, recruitment_cycle_id)
    if not cycle.archived:
        raise ConflictError("Cycle must be archived before it can be deleted. Archive the cycle first.")
    if db.query(RecruitmentRound.id).filter(RecruitmentRound.recruitment_cycle_id == cycle.id).first():
        raise ConflictError("Cannot delete cycle with rounds. Delete all rounds first.")
    if db.query(Applicant.id).filter(Applicant.recruitment_cycle_id == cycle.id).first():
        raise ConflictError("Cannot delete cycle with applicants. Delete all applicants first.")
    db.expire(cycle)
    db.delete(cycle)
    commit_or_raise(db, logger, "delete_cycle")
    logger.info("Cycle deleted cycle_id=%s", recruitment_cycle_id)
    return True
