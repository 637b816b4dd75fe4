from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...components.scoring import service as scoring_service
from ...deps import ensure_applicant_round_member, ensure_round_member, get_current_user
from ...models.user import User
from ...platform.database import get_db
from ...schemas.score import (
    ApplicantScoreCheck,
    RoundScoresCheck,
    ScoreSubmit,
    ScoreUpdate,
    SubmissionsResponse,
    SubmitScoresResponse,
    UpdateScoreResponse,
)

router = APIRouter(tags=["Scores"])


@router.post("/scores", response_model=SubmitScoresResponse, status_code=201)
def submit_scores(
    data: ScoreSubmit,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_round_member(db, data.recruitment_round_id, current_user)
    return scoring_service.submit_scores(
        db,
        applicant_id=data.applicant_id,
        recruitment_round_id=data.recruitment_round_id,
        user_id=current_user.id,
        entries=data.scores,
    )


@router.get("/scores/check", response_model=ApplicantScoreCheck)
def check_applicant_score(
    applicant_id: int = Query(...),
    recruitment_round_id: int = Query(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_round_member(db, recruitment_round_id, current_user)
    return scoring_service.check_applicant_score(
        db, applicant_id=applicant_id, recruitment_round_id=recruitment_round_id
    )


@router.patch("/scores/{score_id}", response_model=UpdateScoreResponse)
def update_score(
    score_id: int,
    data: ScoreUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return scoring_service.update_score(
        db, score_id=score_id, score_value=data.score_value, user_id=current_user.id
    )


@router.delete("/scores/submissions/{submission_id}")
def delete_submission(
    submission_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    scoring_service.delete_submission(db, submission_id=submission_id, user_id=current_user.id)
    return {"success": True}


@router.get("/applicant-rounds/{applicant_round_id}/scores", response_model=SubmissionsResponse)
def fetch_scores(
    applicant_round_id: int,
    user_id: Optional[int] = Query(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_applicant_round_member(db, applicant_round_id, current_user)
    submissions = scoring_service.fetch_scores(
        db,
        applicant_round_id=applicant_round_id,
        requesting_user_id=current_user.id,
        filter_user_id=user_id,
    )
    return {"submissions": submissions}


@router.get("/rounds/{round_id}/scores/check", response_model=RoundScoresCheck)
def check_round_scores(
    round_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_round_member(db, round_id, current_user)
    return scoring_service.check_round_scores(db, round_id)


@router.delete("/rounds/{round_id}/scores")
def delete_all_scores_for_round(
    round_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_round_member(db, round_id, current_user)
    deleted = scoring_service.delete_all_scores_for_round(db, round_id)
    return {"success": True, "deleted": deleted}
