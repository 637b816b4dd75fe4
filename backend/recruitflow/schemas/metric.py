from typing import List

from pydantic import BaseModel, Field


class MetricInput(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    weight: float = Field(ge=0, le=1)


class MetricsReplace(BaseModel):
    metrics: List[MetricInput] = Field(default_factory=list)


class MetricResponse(BaseModel):
    id: int
    recruitment_round_id: int
    name: str
    weight: float

    model_config = {"from_attributes": True}


class MetricsResponse(BaseModel):
    success: bool = True
    metrics: List[MetricResponse] = Field(default_factory=list)
