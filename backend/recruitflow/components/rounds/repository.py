"""Round, cycle and applicant-round query helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models.applicant import Applicant, ApplicantRound
from ...models.organization import Organization
from ...models.recruitment import AnonymousReading, RecruitmentCycle, RecruitmentRound
from ...platform.errors import NotFoundError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Cycles and rounds
# ---------------------------------------------------------------------------

def get_organization_or_404(db: Session, organization_id: int) -> Organization:
    org = db.query(Organization).filter(Organization.id == organization_id).first()
    if org is None:
        raise NotFoundError("Organization", organization_id)
    return org


def list_cycles(db: Session, organization_id: int, include_archived: bool = True) -> List[RecruitmentCycle]:
    query = db.query(RecruitmentCycle).filter(RecruitmentCycle.organization_id == organization_id)
    if not include_archived:
        query = query.filter(RecruitmentCycle.archived.is_(False))
    return query.order_by(RecruitmentCycle.created_at.desc(), RecruitmentCycle.id.desc()).all()


def get_cycle_or_404(db: Session, recruitment_cycle_id: int) -> RecruitmentCycle:
    cycle = db.query(RecruitmentCycle).filter(RecruitmentCycle.id == recruitment_cycle_id).first()
    if cycle is None:
        raise NotFoundError("Recruitment cycle", recruitment_cycle_id)
    return cycle


def get_round_or_404(db: Session, recruitment_round_id: int) -> RecruitmentRound:
    rnd = db.query(RecruitmentRound).filter(RecruitmentRound.id == recruitment_round_id).first()
    if rnd is None:
        raise NotFoundError("Recruitment round", recruitment_round_id)
    return rnd


def organization_id_for_round(db: Session, rnd: RecruitmentRound) -> int:
    cycle = get_cycle_or_404(db, rnd.recruitment_cycle_id)
    return cycle.organization_id


def list_rounds(db: Session, recruitment_cycle_id: int) -> List[RecruitmentRound]:
    return (
        db.query(RecruitmentRound)
        .filter(RecruitmentRound.recruitment_cycle_id == recruitment_cycle_id)
        .order_by(RecruitmentRound.sort_order.asc(), RecruitmentRound.id.asc())
        .all()
    )


def max_sort_order(db: Session, recruitment_cycle_id: int) -> Optional[int]:
    return (
        db.query(func.max(RecruitmentRound.sort_order))
        .filter(RecruitmentRound.recruitment_cycle_id == recruitment_cycle_id)
        .scalar()
    )


def next_round(db: Session, recruitment_cycle_id: int, sort_order: Optional[int]) -> Optional[RecruitmentRound]:
    """Round with the smallest sort_order strictly greater than ``sort_order``."""
    if sort_order is None:
        return None
    return (
        db.query(RecruitmentRound)
        .filter(
            RecruitmentRound.recruitment_cycle_id == recruitment_cycle_id,
            RecruitmentRound.sort_order > sort_order,
        )
        .order_by(RecruitmentRound.sort_order.asc(), RecruitmentRound.id.asc())
        .first()
    )


def previous_round(db: Session, recruitment_cycle_id: int, sort_order: Optional[int]) -> Optional[RecruitmentRound]:
    if sort_order is None:
        return None
    return (
        db.query(RecruitmentRound)
        .filter(
            RecruitmentRound.recruitment_cycle_id == recruitment_cycle_id,
            RecruitmentRound.sort_order < sort_order,
        )
        .order_by(RecruitmentRound.sort_order.desc(), RecruitmentRound.id.desc())
        .first()
    )


def rounds_after(db: Session, recruitment_cycle_id: int, sort_order: Optional[int]) -> List[RecruitmentRound]:
    if sort_order is None:
        return []
    return (
        db.query(RecruitmentRound)
        .filter(
            RecruitmentRound.recruitment_cycle_id == recruitment_cycle_id,
            RecruitmentRound.sort_order > sort_order,
        )
        .order_by(RecruitmentRound.sort_order.asc(), RecruitmentRound.id.asc())
        .all()
    )


def is_last_round(db: Session, rnd: RecruitmentRound) -> bool:
    """True when no round in the cycle sorts after ``rnd``."""
    highest = max_sort_order(db, rnd.recruitment_cycle_id)
    if rnd.sort_order is None or highest is None:
        return False
    return rnd.sort_order >= highest


def has_anonymous_readings(db: Session, recruitment_round_id: int) -> bool:
    return (
        db.query(AnonymousReading.id)
        .filter(AnonymousReading.recruitment_round_id == recruitment_round_id)
        .first()
        is not None
    )


# ---------------------------------------------------------------------------
# Applicants and applicant rounds
# ---------------------------------------------------------------------------

def get_applicant_or_404(db: Session, applicant_id: int) -> Applicant:
    applicant = db.query(Applicant).filter(Applicant.id == applicant_id).first()
    if applicant is None:
        raise NotFoundError("Applicant", applicant_id)
    return applicant


def get_applicant_round_or_404(db: Session, applicant_round_id: int) -> ApplicantRound:
    ar = db.query(ApplicantRound).filter(ApplicantRound.id == applicant_round_id).first()
    if ar is None:
        raise NotFoundError("Applicant round", applicant_round_id)
    return ar


def find_applicant_round(db: Session, applicant_id: int, recruitment_round_id: int) -> Optional[ApplicantRound]:
    return (
        db.query(ApplicantRound)
        .filter(
            ApplicantRound.applicant_id == applicant_id,
            ApplicantRound.recruitment_round_id == recruitment_round_id,
        )
        .first()
    )


def applicant_round_ids(db: Session, recruitment_round_id: int) -> List[int]:
    rows = (
        db.query(ApplicantRound.id)
        .filter(ApplicantRound.recruitment_round_id == recruitment_round_id)
        .all()
    )
    return [row[0] for row in rows]


def applicant_rounds_with_applicants(db: Session, recruitment_round_id: int) -> List[tuple[ApplicantRound, Applicant]]:
    return (
        db.query(ApplicantRound, Applicant)
        .join(Applicant, Applicant.id == ApplicantRound.applicant_id)
        .filter(ApplicantRound.recruitment_round_id == recruitment_round_id)
        .order_by(Applicant.name.asc(), ApplicantRound.id.asc())
        .all()
    )
