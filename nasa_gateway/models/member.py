"""Principals allowed to sign in, and their role assignments."""

from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nasa_gateway.database import Base


class Member(Base):
    __tablename__ = "nasa_members"

    user_id: Mapped[str] = mapped_column(String(50), primary_key=True)
    pw: Mapped[str] = mapped_column(String(1024))
    active: Mapped[bool] = mapped_column(Boolean, default=True, server_default="1")

    roles: Mapped[list[MemberRole]] = relationship(
        back_populates="member",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def role_names(self) -> frozenset[str]:
        return frozenset(role.role for role in self.roles)


class MemberRole(Base):
    __tablename__ = "nasa_roles"

    user_id: Mapped[str] = mapped_column(
        String(50), ForeignKey("nasa_members.user_id"), primary_key=True
    )
    role: Mapped[str] = mapped_column(String(50), primary_key=True)

    member: Mapped[Member] = relationship(back_populates="roles")
