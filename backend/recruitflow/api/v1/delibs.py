from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...components.delibs import service as delibs_service
from ...deps import get_current_user
from ...models.user import User
from ...platform.database import get_db
from ...schemas.delibs import (
    ResultsResponse,
    SessionEnvelope,
    SessionLock,
    SessionRequest,
    SessionResponse,
    VoteCast,
    VoteEnvelope,
    VotingList,
)

router = APIRouter(prefix="/delibs", tags=["Deliberations"])


@router.post("/sessions", response_model=SessionEnvelope)
def get_or_create_session(
    data: SessionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return delibs_service.get_or_create_session(
        db, recruitment_round_id=data.recruitment_round_id, user_id=current_user.id
    )


@router.get("/sessions", response_model=SessionEnvelope)
def get_session(
    recruitment_round_id: int = Query(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return delibs_service.get_session(
        db, recruitment_round_id=recruitment_round_id, user_id=current_user.id
    )


@router.patch("/sessions/{session_id}", response_model=SessionResponse)
def set_session_lock(
    session_id: int,
    data: SessionLock,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return delibs_service.set_session_lock(
        db, delibs_session_id=session_id, action=data.action, user_id=current_user.id
    )


@router.get("/rounds/{round_id}/applicants", response_model=VotingList)
def list_applicants_for_voting(
    round_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return delibs_service.list_applicants_for_voting(
        db, recruitment_round_id=round_id, user_id=current_user.id
    )


@router.get("/rounds/{round_id}/results", response_model=ResultsResponse)
def compute_results(
    round_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return delibs_service.compute_results(db, recruitment_round_id=round_id, user_id=current_user.id)


@router.post("/votes", response_model=VoteEnvelope)
def cast_vote(
    data: VoteCast,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return delibs_service.cast_vote(
        db,
        delibs_session_id=data.delibs_session_id,
        applicant_round_id=data.applicant_round_id,
        vote_value=data.vote_value,
        user_id=current_user.id,
    )


@router.get("/votes/me", response_model=VoteEnvelope)
def get_my_vote(
    delibs_session_id: int = Query(...),
    applicant_round_id: int = Query(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    vote = delibs_service.get_my_vote(
        db,
        delibs_session_id=delibs_session_id,
        applicant_round_id=applicant_round_id,
        user_id=current_user.id,
    )
    return {"vote": vote}


@router.delete("/votes")
def delete_vote(
    delibs_session_id: int = Query(...),
    applicant_round_id: int = Query(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    delibs_service.delete_vote(
        db,
        delibs_session_id=delibs_session_id,
        applicant_round_id=applicant_round_id,
        user_id=current_user.id,
    )
    return {"success": True}
