from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models.organization import ROLE_ADMIN, ROLE_OWNER, OrganizationUser
from ...platform.errors import AuthorizationError

logger = logging.getLogger("recruitflow.access")

MANAGER_ROLES = (ROLE_OWNER, ROLE_ADMIN)


def get_membership(db: Session, organization_id: int, user_id: int) -> OrganizationUser | None:
    return (
        db.query(OrganizationUser)
        .filter(
            OrganizationUser.organization_id == organization_id,
            OrganizationUser.user_id == user_id,
        )
        .first()
    )


def is_manager(membership: OrganizationUser | None) -> bool:
    return bool(membership and membership.role in MANAGER_ROLES)


def require_member(
    db: Session,
    organization_id: int,
    user_id: int,
    message: str = "Not authorized to access this round",
) -> OrganizationUser:
    membership = get_membership(db, organization_id, user_id)
    if membership is None:
        logger.warning("Membership check failed org=%s user=%s", organization_id, user_id)
        raise AuthorizationError(message)
    return membership


def require_manager(
    db: Session,
    organization_id: int,
    user_id: int,
    message: str = "Only Owner or Admin can perform this action",
) -> OrganizationUser:
    membership = require_member(db, organization_id, user_id, message="Not authorized")
    if not is_manager(membership):
        logger.warning(
            "Role check failed org=%s user=%s role=%s", organization_id, user_id, membership.role
        )
        raise AuthorizationError(message)
    return membership


def count_members(db: Session, organization_id: int) -> int:
    total = (
        db.query(func.count(OrganizationUser.id))
        .filter(OrganizationUser.organization_id == organization_id)
        .scalar()
    )
    return int(total or 0)
