from __future__ import annotations

from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ...models.delibs import DelibsSession, DelibsVote


def get_session_for_round(db: Session, recruitment_round_id: int) -> Optional[DelibsSession]:
    return (
        db.query(DelibsSession)
        .filter(DelibsSession.recruitment_round_id == recruitment_round_id)
        .first()
    )


def get_session(db: Session, delibs_session_id: int) -> Optional[DelibsSession]:
    return db.query(DelibsSession).filter(DelibsSession.id == delibs_session_id).first()


def find_vote(
    db: Session, delibs_session_id: int, applicant_round_id: int, voter_user_id: int
) -> Optional[DelibsVote]:
    return (
        db.query(DelibsVote)
        .filter(
            DelibsVote.delibs_session_id == delibs_session_id,
            DelibsVote.applicant_round_id == applicant_round_id,
            DelibsVote.voter_user_id == voter_user_id,
        )
        .first()
    )


def votes_by_voter(db: Session, delibs_session_id: int, voter_user_id: int) -> Dict[int, int]:
    """applicant_round_id -> vote_value for one voter."""
    rows = (
        db.query(DelibsVote.applicant_round_id, DelibsVote.vote_value)
        .filter(
            DelibsVote.delibs_session_id == delibs_session_id,
            DelibsVote.voter_user_id == voter_user_id,
        )
        .all()
    )
    return {ar_id: value for ar_id, value in rows}


def votes_by_applicant_round(db: Session, delibs_session_id: int) -> Dict[int, List[int]]:
    grouped: Dict[int, List[int]] = {}
    rows = (
        db.query(DelibsVote.applicant_round_id, DelibsVote.vote_value)
        .filter(DelibsVote.delibs_session_id == delibs_session_id)
        .all()
    )
    for ar_id, value in rows:
        grouped.setdefault(ar_id, []).append(value)
    return grouped
