"""Member accounts: credential checks, creation, and startup seeding."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from fastapi_users.password import PasswordHelper
from sqlalchemy.orm import Session

from nasa_gateway.config import Settings
from nasa_gateway.models.member import Member, MemberRole
from nasa_gateway.security.policy import ADMIN, EMPLOYEE

logger = logging.getLogger(__name__)

password_helper = PasswordHelper()


class MemberExistsError(Exception):
    pass


def authenticate_member(db: Session, user_id: str, password: str) -> Member | None:
    """Return the active member matching the credentials, else ``None``.

    Hashes are upgraded in place when the password helper reports the stored
    one uses an outdated scheme.
    """
    member = db.get(Member, user_id)
    if member is None:
        # Spend the same time as a real check so unknown users are not obvious
        password_helper.hash(password)
        return None

    verified, updated_hash = password_helper.verify_and_update(password, member.pw)
    if not verified:
        logger.info("Rejected credentials", extra={"user_id": user_id})
        return None
    if not member.active:
        logger.info("Rejected inactive member", extra={"user_id": user_id})
        return None
    if updated_hash is not None:
        member.pw = updated_hash
        db.commit()
    return member


def create_member(
    db: Session,
    user_id: str,
    password: str,
    roles: Iterable[str],
    active: bool = True,
) -> Member:
    if db.get(Member, user_id) is not None:
        raise MemberExistsError(f"Member {user_id!r} already exists")
    member = Member(user_id=user_id, pw=password_helper.hash(password), active=active)
    member.roles = [MemberRole(role=role) for role in sorted(set(roles))]
    db.add(member)
    db.commit()
    db.refresh(member)
    logger.info(
        "Created member",
        extra={"user_id": user_id, "roles": sorted(member.role_names)},
    )
    return member


def seed_members(db: Session, settings: Settings) -> list[str]:
    """Create the admin and employee accounts named in settings, if missing.

    Returns the ids of members that were created.
    """
    seeds = [
        (settings.admin_username, settings.admin_password, (EMPLOYEE, ADMIN)),
        (settings.employee_username, settings.employee_password, (EMPLOYEE,)),
    ]
    created = []
    for user_id, password, roles in seeds:
        if not user_id or not password:
            continue
        if db.get(Member, user_id) is not None:
            continue
        create_member(db, user_id, password, roles)
        created.append(user_id)
    return created
