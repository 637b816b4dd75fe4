from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ReadingCreate(BaseModel):
    recruitment_round_id: int
    omitted_fields: List[str] = Field(default_factory=list)


class ReadingResponse(BaseModel):
    id: int
    recruitment_round_id: int
    slug: str
    omitted_fields: List[str] = Field(default_factory=list)
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None


class ReadingEnvelope(BaseModel):
    reading: ReadingResponse
    created: bool


class ReadingSlug(BaseModel):
    slug: str


class AnonymousApplicant(BaseModel):
    applicant_id: int
    applicant_round_id: int
    created_at: Optional[datetime] = None
    data: Dict[str, Any] = Field(default_factory=dict)


class ReadingView(BaseModel):
    reading: ReadingResponse
    applicants: List[AnonymousApplicant]
    organization_name: Optional[str] = None
    recruitment_cycle_name: Optional[str] = None
    recruitment_round_name: Optional[str] = None


class AnonymousCommentCreate(BaseModel):
    applicant_id: int
    recruitment_round_id: int
    comment_text: str = Field(min_length=1)
    source: str = Field(default="A", max_length=8)
