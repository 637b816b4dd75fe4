from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...components.comments import service as comments_service
from ...deps import ensure_applicant_round_member, get_current_user
from ...models.user import User
from ...platform.database import get_db
from ...schemas.comment import CommentCreate, CommentResponse, CommentUpdate

router = APIRouter(prefix="/comments", tags=["Comments"])


@router.post("", response_model=CommentResponse, status_code=201)
def create_comment(
    data: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_applicant_round_member(db, data.applicant_round_id, current_user)
    return comments_service.create_comment(
        db,
        applicant_round_id=data.applicant_round_id,
        user_id=current_user.id,
        comment_text=data.comment_text,
        source=data.source,
    )


@router.patch("/{comment_id}", response_model=CommentResponse)
def update_comment(
    comment_id: int,
    data: CommentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return comments_service.update_comment(
        db, comment_id=comment_id, user_id=current_user.id, comment_text=data.comment_text
    )


@router.delete("/{comment_id}")
def delete_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    comments_service.delete_comment(db, comment_id=comment_id, user_id=current_user.id)
    return {"success": True}
