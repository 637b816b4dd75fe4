"""
Shared dependencies. Resolves the caller from the X-User-Id header and
guards organization-scoped resources.
"""

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from .components.access.policy import require_member
from .components.rounds import repository as rounds_repo
from .models.user import User
from .platform.database import get_db


def get_current_user(
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
    db: Session = Depends(get_db),
) -> User:
    if not x_user_id or not x_user_id.strip().isdigit():
        raise HTTPException(status_code=401, detail="Missing or invalid X-User-Id header")
    user = db.query(User).filter(User.id == int(x_user_id)).first()
    if user is None:
        raise HTTPException(status_code=401, detail="Unknown user")
    return user


def ensure_organization_member(db: Session, organization_id: int, user: User) -> None:
    rounds_repo.get_organization_or_404(db, organization_id)
    require_member(db, organization_id, user.id, message="Not authorized to access this organization")


def ensure_cycle_member(db: Session, recruitment_cycle_id: int, user: User) -> None:
    cycle = rounds_repo.get_cycle_or_404(db, recruitment_cycle_id)
    require_member(db, cycle.organization_id, user.id, message="Not authorized to access this cycle")


def ensure_round_member(db: Session, recruitment_round_id: int, user: User) -> None:
    rnd = rounds_repo.get_round_or_404(db, recruitment_round_id)
    require_member(db, rounds_repo.organization_id_for_round(db, rnd), user.id)


def ensure_applicant_round_member(db: Session, applicant_round_id: int, user: User) -> None:
    ar = rounds_repo.get_applicant_round_or_404(db, applicant_round_id)
    ensure_round_member(db, ar.recruitment_round_id, user)


def ensure_applicant_member(db: Session, applicant_id: int, user: User) -> None:
    applicant = rounds_repo.get_applicant_or_404(db, applicant_id)
    ensure_cycle_member(db, applicant.recruitment_cycle_id, user)


__all__ = [
    "get_current_user",
    "ensure_organization_member",
    "ensure_cycle_member",
    "ensure_round_member",
    "ensure_applicant_round_member",
    "ensure_applicant_member",
]
