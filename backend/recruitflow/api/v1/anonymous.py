from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...components.anonymous import service as anonymous_service
from ...deps import get_current_user
from ...models.user import User
from ...platform.database import get_db
from ...schemas.anonymous import (
    AnonymousCommentCreate,
    ReadingCreate,
    ReadingEnvelope,
    ReadingSlug,
    ReadingView,
)
from ...schemas.comment import CommentList, CommentResponse

router = APIRouter(prefix="/anonymous", tags=["Anonymous Readings"])


@router.post("/readings", response_model=ReadingEnvelope, status_code=201)
def create_reading(
    data: ReadingCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return anonymous_service.create_reading(
        db,
        recruitment_round_id=data.recruitment_round_id,
        user_id=current_user.id,
        omitted_fields=data.omitted_fields,
    )


@router.get("/rounds/{round_id}/slug", response_model=ReadingSlug)
def get_slug(
    round_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return anonymous_service.get_slug(db, recruitment_round_id=round_id, user_id=current_user.id)


@router.get("/readings/{slug}", response_model=ReadingView)
def get_reading(
    slug: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return anonymous_service.get_reading(db, slug=slug, user_id=current_user.id)


@router.delete("/readings/{slug}")
def delete_reading(
    slug: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    anonymous_service.delete_reading(db, slug=slug, user_id=current_user.id)
    return {"success": True}


@router.post("/comments", response_model=CommentResponse, status_code=201)
def post_comment(
    data: AnonymousCommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return anonymous_service.post_comment(
        db,
        applicant_id=data.applicant_id,
        recruitment_round_id=data.recruitment_round_id,
        user_id=current_user.id,
        comment_text=data.comment_text,
        source=data.source,
    )


@router.get("/comments", response_model=CommentList)
def list_my_comments(
    applicant_id: int = Query(...),
    recruitment_round_id: int = Query(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    comments = anonymous_service.list_user_comments(
        db,
        applicant_id=applicant_id,
        recruitment_round_id=recruitment_round_id,
        user_id=current_user.id,
    )
    return {"comments": comments}


@router.delete("/comments/{comment_id}")
def delete_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    anonymous_service.delete_comment(db, comment_id=comment_id, user_id=current_user.id)
    return {"success": True}
