from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class CommentCreate(BaseModel):
    applicant_round_id: int
    comment_text: str = Field(min_length=1)
    source: Optional[str] = None


class CommentUpdate(BaseModel):
    comment_text: str = Field(min_length=1)


class CommentResponse(BaseModel):
    id: int
    applicant_round_id: int
    user_id: Optional[int] = None
    comment_text: str
    source: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    is_edited: bool = False
    round_name: Optional[str] = None
    user_name: Optional[str] = None


class CommentList(BaseModel):
    comments: List[CommentResponse]
