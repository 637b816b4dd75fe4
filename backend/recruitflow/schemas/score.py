from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class ScoreEntry(BaseModel):
    metric_id: int
    score_value: float
    # Accepted for compatibility; live metric weights are used instead.
    weight: Optional[float] = None


class ScoreSubmit(BaseModel):
    applicant_id: int
    recruitment_round_id: int
    scores: List[ScoreEntry] = Field(min_length=1)


class ScoreUpdate(BaseModel):
    score_value: float


class ScoreRow(BaseModel):
    id: int
    applicant_round_id: int
    metric_id: int
    score_value: float
    user_id: Optional[int] = None
    submission_id: Optional[str] = None
    created_at: Optional[datetime] = None


class SubmitScoresResponse(BaseModel):
    scores: List[ScoreRow]
    submission_id: str
    submission_weighted_average: Optional[float] = None
    weighted_score: Optional[float] = None
    applicant_round_id: int


class UpdateScoreResponse(BaseModel):
    score: ScoreRow
    weighted_average: float
    weighted_score: Optional[float] = None


class SubmissionScore(BaseModel):
    id: int
    metric_id: int
    metric_name: Optional[str] = None
    weight: Optional[float] = None
    score_value: float


class SubmissionUser(BaseModel):
    id: Optional[int] = None
    name: str


class Submission(BaseModel):
    submission_id: str
    created_at: Optional[datetime] = None
    user_id: Optional[int] = None
    user_name: str
    user: SubmissionUser
    scores: List[SubmissionScore]
    weighted_average: float


class SubmissionsResponse(BaseModel):
    submissions: List[Submission]


class RoundScoresCheck(BaseModel):
    has_scores: bool
    count: int


class ApplicantScoreCheck(BaseModel):
    has_score: bool
