from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from .metric import MetricInput


class RoundCreate(BaseModel):
    recruitment_cycle_id: int
    name: str = Field(min_length=1, max_length=200)
    metrics: List[MetricInput] = Field(default_factory=list)


class RoundMetric(BaseModel):
    id: int
    name: str
    weight: float


class RoundResponse(BaseModel):
    id: int
    recruitment_cycle_id: int
    name: str
    sort_order: Optional[int] = None
    column_order: Optional[Any] = None
    metrics: List[RoundMetric] = Field(default_factory=list)
    backfilled_applicants: Optional[int] = None


class RoundDeleteResponse(BaseModel):
    success: bool
    resequenced: int


class CycleCreate(BaseModel):
    organization_id: int
    name: str = Field(min_length=1, max_length=200)


class CycleArchive(BaseModel):
    archived: bool = True


class CycleResponse(BaseModel):
    id: int
    organization_id: int
    name: str
    archived: bool
    created_at: Optional[datetime] = None


class ApplicantRoundResponse(BaseModel):
    id: int
    applicant_id: int
    recruitment_round_id: int
    status: str
    weighted_score: Optional[float] = None
    updated_at: Optional[datetime] = None


class StatusChange(BaseModel):
    applicant_id: int
    applicant_round_id: int
    new_status: str


class AcceptRequest(BaseModel):
    applicant_id: int
    applicant_round_id: int


class NextRoundInfo(BaseModel):
    id: int
    name: str
    sort_order: Optional[int] = None


class StatusChangeResponse(BaseModel):
    new_status: str
    updated_record: ApplicantRoundResponse


class AcceptResponse(BaseModel):
    old_round_id: int
    new_round: Optional[ApplicantRoundResponse] = None
    next_round_info: Optional[NextRoundInfo] = None
    updated_record: ApplicantRoundResponse
    is_last_round: bool
