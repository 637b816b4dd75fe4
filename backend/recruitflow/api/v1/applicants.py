from typing import Union

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...components.comments import service as comments_service
from ...components.rounds import service as rounds_service
from ...components.rounds import transitions
from ...deps import ensure_applicant_member, get_current_user
from ...models.user import User
from ...platform.database import get_db
from ...schemas.comment import CommentList
from ...schemas.recruitment import AcceptRequest, AcceptResponse, StatusChange, StatusChangeResponse

router = APIRouter(prefix="/applicants", tags=["Applicants"])


@router.post("/status", response_model=Union[AcceptResponse, StatusChangeResponse])
def set_status(
    data: StatusChange,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Change an applicant_round status; 'accepted' advances to the next round."""
    ensure_applicant_member(db, data.applicant_id, current_user)
    return transitions.set_status(
        db,
        applicant_id=data.applicant_id,
        applicant_round_id=data.applicant_round_id,
        new_status=data.new_status,
    )


@router.post("/accept", response_model=AcceptResponse)
def accept_applicant(
    data: AcceptRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_applicant_member(db, data.applicant_id, current_user)
    return transitions.accept_and_advance(
        db, applicant_id=data.applicant_id, applicant_round_id=data.applicant_round_id
    )


@router.get("/{applicant_id}/comments", response_model=CommentList)
def list_comments(
    applicant_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_applicant_member(db, applicant_id, current_user)
    return {"comments": comments_service.list_comments(db, applicant_id)}


@router.delete("/{applicant_id}")
def delete_applicant(
    applicant_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_applicant_member(db, applicant_id, current_user)
    rounds_service.delete_applicant(db, applicant_id)
    return {"success": True}
