from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...components.metrics import service as metrics_service
from ...deps import ensure_round_member, get_current_user
from ...models.user import User
from ...platform.database import get_db
from ...schemas.metric import MetricResponse, MetricsReplace, MetricsResponse

router = APIRouter(tags=["Metrics"])


@router.get("/rounds/{round_id}/metrics", response_model=MetricsResponse)
def list_metrics(
    round_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_round_member(db, round_id, current_user)
    rows = metrics_service.list_metrics(db, round_id)
    return MetricsResponse(metrics=[MetricResponse.model_validate(m) for m in rows])


@router.put("/rounds/{round_id}/metrics", response_model=MetricsResponse)
def replace_metrics(
    round_id: int,
    data: MetricsReplace,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_round_member(db, round_id, current_user)
    rows = metrics_service.replace_metrics(db, round_id, data.metrics)
    return MetricsResponse(metrics=[MetricResponse.model_validate(m) for m in rows])
