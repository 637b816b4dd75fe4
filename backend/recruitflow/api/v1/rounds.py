from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...components.rounds import service as rounds_service
from ...deps import ensure_cycle_member, ensure_organization_member, ensure_round_member, get_current_user
from ...models.user import User
from ...platform.database import get_db
from ...schemas.recruitment import (
    CycleArchive,
    CycleCreate,
    CycleResponse,
    RoundCreate,
    RoundDeleteResponse,
    RoundResponse,
)

router = APIRouter(tags=["Rounds"])


@router.post("/rounds", response_model=RoundResponse, status_code=201)
def create_round(
    data: RoundCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_cycle_member(db, data.recruitment_cycle_id, current_user)
    return rounds_service.create_round(
        db,
        recruitment_cycle_id=data.recruitment_cycle_id,
        name=data.name,
        metrics=data.metrics,
    )


@router.get("/cycles/{cycle_id}/rounds", response_model=List[RoundResponse])
def list_rounds(
    cycle_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_cycle_member(db, cycle_id, current_user)
    return rounds_service.list_rounds(db, cycle_id)


@router.delete("/rounds/{round_id}", response_model=RoundDeleteResponse)
def delete_round(
    round_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_round_member(db, round_id, current_user)
    return rounds_service.delete_round(db, round_id)


@router.post("/cycles", response_model=CycleResponse, status_code=201)
def create_cycle(
    data: CycleCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_organization_member(db, data.organization_id, current_user)
    return rounds_service.create_cycle(db, organization_id=data.organization_id, name=data.name)


@router.get("/organizations/{organization_id}/cycles", response_model=List[CycleResponse])
def list_cycles(
    organization_id: int,
    include_archived: bool = True,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_organization_member(db, organization_id, current_user)
    return rounds_service.list_cycles(db, organization_id, include_archived=include_archived)


@router.post("/cycles/{cycle_id}/archive", response_model=CycleResponse)
def archive_cycle(
    cycle_id: int,
    data: CycleArchive,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_cycle_member(db, cycle_id, current_user)
    return rounds_service.archive_cycle(db, cycle_id, data.archived)


@router.delete("/cycles/{cycle_id}")
def delete_cycle(
    cycle_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_cycle_member(db, cycle_id, current_user)
    rounds_service.delete_cycle(db, cycle_id)
    return {"success": True}
