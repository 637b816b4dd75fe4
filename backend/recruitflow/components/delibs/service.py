"""Deliberation sessions, blind voting and ranked results."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ...models.applicant import ApplicantRound
from ...models.delibs import SESSION_LOCKED, SESSION_OPEN, DelibsSession, DelibsVote
from ...platform.config import settings
from ...platform.database import commit_or_raise
from ...platform.errors import AuthorizationError, NotFoundError, StoreError, ValidationError
from ..access import policy
from ..rounds import repository as rounds_repo
from ..rounds.repository import utcnow
from . import repository
from .ranking import RankedEntry, average_votes, dense_rank

logger = logging.getLogger("recruitflow.delibs")

LOCK_ACTIONS = ("lock", "unlock")


def serialize_session(session: Optional[DelibsSession]) -> Optional[Dict[str, Any]]:
    if session is None:
        return None
    return {
        "id": session.id,
        "recruitment_round_id": session.recruitment_round_id,
        "created_by": session.created_by,
        "status": session.status,
        "locked_at": session.locked_at,
        "created_at": session.created_at,
    }


def serialize_vote(vote: DelibsVote) -> Dict[str, Any]:
    return {
        "id": vote.id,
        "delibs_session_id": vote.delibs_session_id,
        "applicant_round_id": vote.applicant_round_id,
        "voter_user_id": vote.voter_user_id,
        "vote_value": vote.vote_value,
        "updated_at": vote.updated_at,
    }


def _round_and_org(db: Session, recruitment_round_id: int):
    rnd = rounds_repo.get_round_or_404(db, recruitment_round_id)
    return rnd, rounds_repo.organization_id_for_round(db, rnd)


def _session_or_404(db: Session, delibs_session_id: int) -> DelibsSession:
    session = repository.get_session(db, delibs_session_id)
    if session is None:
        raise NotFoundError("Delibs session", delibs_session_id)
    return session


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------

def get_or_create_session(db: Session, *, recruitment_round_id: int, user_id: int) -> Dict[str, Any]:
    """Return the round's session, creating an open one on first access."""
    _, org_id = _round_and_org(db, recruitment_round_id)
    membership = policy.require_member(db, org_id, user_id)

    session = repository.get_session_for_round(db, recruitment_round_id)
    created = False
    if session is None:
        session = DelibsSession(
            recruitment_round_id=recruitment_round_id,
            created_by=user_id,
            status=SESSION_OPEN,
        )
        db.add(session)
        try:
            db.commit()
            created = True
        except IntegrityError:
            # Another caller created the session first; use theirs.
            db.rollback()
            session = repository.get_session_for_round(db, recruitment_round_id)
            if session is None:
                logger.exception("Delibs session missing after create race round_id=%s", recruitment_round_id)
                raise StoreError(operation="get_or_create_session")
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Store failure during get_or_create_session")
            raise StoreError(operation="get_or_create_session")
        db.refresh(session)
        if created:
            logger.info("Delibs session created session_id=%s round_id=%s", session.id, recruitment_round_id)

    return {"session": serialize_session(session), "created": created, "role": membership.role}


def get_session(db: Session, *, recruitment_round_id: int, user_id: int) -> Dict[str, Any]:
    _, org_id = _round_and_org(db, recruitment_round_id)
    membership = policy.require_member(db, org_id, user_id)
    session = repository.get_session_for_round(db, recruitment_round_id)
    return {"session": serialize_session(session), "role": membership.role}


def set_session_lock(db: Session, *, delibs_session_id: int, action: str, user_id: int) -> Dict[str, Any]:
    if action not in LOCK_ACTIONS:
        raise ValidationError("Invalid action", details={"allowed": list(LOCK_ACTIONS)})
    session = _session_or_404(db, delibs_session_id)
    _, org_id = _round_and_org(db, session.recruitment_round_id)
    policy.require_manager(db, org_id, user_id, message="Only Owner or Admin can lock or unlock sessions")

    if action == "lock":
        session.status = SESSION_LOCKED
        session.locked_at = utcnow()
    else:
        session.status = SESSION_OPEN
        session.locked_at = None
    commit_or_raise(db, logger, "set_session_lock")
    db.refresh(session)
    logger.info("Delibs session %sed session_id=%s user_id=%s", action, session.id, user_id)
    return serialize_session(session)


# ---------------------------------------------------------------------------
# Votes
# ---------------------------------------------------------------------------

def _open_session_for_voter(db: Session, delibs_session_id: int, user_id: int) -> DelibsSession:
    session = _session_or_404(db, delibs_session_id)
    if session.status != SESSION_OPEN:
        raise AuthorizationError("Session is locked")
    _, org_id = _round_and_org(db, session.recruitment_round_id)
    policy.require_member(db, org_id, user_id)
    return session


def cast_vote(
    db: Session,
    *,
    delibs_session_id: int,
    applicant_round_id: int,
    vote_value: int,
    user_id: int,
) -> Dict[str, Any]:
    allowed = settings.delibs_vote_values
    if vote_value not in allowed:
        raise ValidationError("Invalid vote value", details={"allowed": allowed})
    session = _open_session_for_voter(db, delibs_session_id, user_id)

    ar = rounds_repo.get_applicant_round_or_404(db, applicant_round_id)
    if ar.recruitment_round_id != session.recruitment_round_id:
        raise ValidationError("Applicant round does not belong to this session's round")

    vote = repository.find_vote(db, session.id, applicant_round_id, user_id)
    created = vote is None
    if created:
        vote = DelibsVote(
            delibs_session_id=session.id,
            applicant_round_id=applicant_round_id,
            voter_user_id=user_id,
            vote_value=vote_value,
        )
        db.add(vote)
    else:
        vote.vote_value = vote_value
        vote.updated_at = utcnow()
    commit_or_raise(db, logger, "cast_vote")
    db.refresh(vote)
    logger.info(
        "Vote %s session_id=%s applicant_round_id=%s",
        "cast" if created else "updated",
        session.id,
        applicant_round_id,
    )
    return {"vote": serialize_vote(vote), "created": created}


def get_my_vote(db: Session, *, delibs_session_id: int, applicant_round_id: int, user_id: int) -> Optional[Dict[str, Any]]:
    session = _session_or_404(db, delibs_session_id)
    _, org_id = _round_and_org(db, session.recruitment_round_id)
    policy.require_member(db, org_id, user_id)
    vote = repository.find_vote(db, session.id, applicant_round_id, user_id)
    return serialize_vote(vote) if vote else None


def delete_vote(db: Session, *, delibs_session_id: int, applicant_round_id: int, user_id: int) -> bool:
    session = _open_session_for_voter(db, delibs_session_id, user_id)
    vote = repository.find_vote(db, session.id, applicant_round_id, user_id)
    if vote is None:
        raise NotFoundError("Vote")
    db.delete(vote)
    commit_or_raise(db, logger, "delete_vote")
    logger.info("Vote deleted session_id=%s applicant_round_id=%s", session.id, applicant_round_id)
    return True


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

def list_applicants_for_voting(db: Session, *, recruitment_round_id: int, user_id: int) -> Dict[str, Any]:
    """Applicants in the round with the caller's own votes; other votes stay hidden."""
    _, org_id = _round_and_org(db, recruitment_round_id)
    policy.require_member(db, org_id, user_id)

    session = repository.get_session_for_round(db, recruitment_round_id)
    my_votes = repository.votes_by_voter(db, session.id, user_id) if session else {}

    applicants = []
    for ar, applicant in rounds_repo.applicant_rounds_with_applicants(db, recruitment_round_id):
        applicants.append(
            {
                "applicant_round_id": ar.id,
                "applicant_id": applicant.id,
                "name": applicant.name,
                "headshot_url": applicant.headshot_url,
                "status": ar.status,
                "my_vote": my_votes.get(ar.id),
            }
        )
    voted = sum(1 for a in applicants if a["my_vote"] is not None)
    return {
        "applicants": applicants,
        "session": serialize_session(session),
        "voted_count": voted,
        "total_count": len(applicants),
    }


def compute_results(db: Session, *, recruitment_round_id: int, user_id: int) -> Dict[str, Any]:
    """Average votes and dense ranks; visible to Owners and Admins only."""
    rnd, org_id = _round_and_org(db, recruitment_round_id)
    policy.require_manager(db, org_id, user_id, message="Only Owner or Admin can view results")

    session = repository.get_session_for_round(db, recruitment_round_id)
    votes = repository.votes_by_applicant_round(db, session.id) if session else {}

    entries = []
    for ar, applicant in rounds_repo.applicant_rounds_with_applicants(db, recruitment_round_id):
        avg, count = average_votes(votes.get(ar.id, []))
        entries.append(
            RankedEntry(
                applicant_round_id=ar.id,
                applicant_id=applicant.id,
                name=applicant.name,
                headshot_url=applicant.headshot_url,
                avg_vote=avg,
                vote_count=count,
            )
        )

    results = [
        {
            "applicant_round_id": e.applicant_round_id,
            "applicant_id": e.applicant_id,
            "name": e.name,
            "headshot_url": e.headshot_url,
            "avg_vote": e.avg_vote,
            "vote_count": e.vote_count,
            "rank_dense": e.rank_dense,
            "is_tied": e.is_tied,
        }
        for e in dense_rank(entries)
    ]
    return {
        "results": results,
        "session": serialize_session(session),
        "total_members": policy.count_members(db, org_id),
        "is_last_round": rounds_repo.is_last_round(db, rnd),
    }
