from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel


class SessionRequest(BaseModel):
    recruitment_round_id: int


class SessionLock(BaseModel):
    action: Literal["lock", "unlock"]


class SessionResponse(BaseModel):
    id: int
    recruitment_round_id: int
    created_by: Optional[int] = None
    status: str
    locked_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class SessionEnvelope(BaseModel):
    session: Optional[SessionResponse] = None
    role: Optional[str] = None
    created: Optional[bool] = None


class VoteCast(BaseModel):
    delibs_session_id: int
    applicant_round_id: int
    vote_value: int


class VoteResponse(BaseModel):
    id: int
    delibs_session_id: int
    applicant_round_id: int
    voter_user_id: int
    vote_value: int
    updated_at: Optional[datetime] = None


class VoteEnvelope(BaseModel):
    vote: Optional[VoteResponse] = None
    created: Optional[bool] = None


class VotingApplicant(BaseModel):
    applicant_round_id: int
    applicant_id: int
    name: str
    headshot_url: Optional[str] = None
    status: str
    my_vote: Optional[int] = None


class VotingList(BaseModel):
    applicants: List[VotingApplicant]
    session: Optional[SessionResponse] = None
    voted_count: int
    total_count: int


class RankedResult(BaseModel):
    applicant_round_id: int
    applicant_id: int
    name: str
    headshot_url: Optional[str] = None
    avg_vote: float
    vote_count: int
    rank_dense: int
    is_tied: bool


class ResultsResponse(BaseModel):
    results: List[RankedResult]
    session: Optional[SessionResponse] = None
    total_members: int
    is_last_round: bool
