"""Board user: profile, credential and the member/admin flags."""
from __future__ import annotations

import enum

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from club.models.base import Base


class Role(str, enum.Enum):
    """Highest privilege a viewer holds. Derived from the user flags, never stored."""

    ANONYMOUS = "anonymous"
    USER = "user"
    MEMBER = "member"
    ADMIN = "admin"


class User(Base):
    """Signed-up user. Email is the login key."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(64), nullable=False)
    last_name: Mapped[str] = mapped_column(String(64), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    is_member: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    @property
    def role(self) -> Role:
        if self.is_admin:
            return Role.ADMIN
        if self.is_member:
            return Role.MEMBER
        return Role.USER

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} role={self.role.value}>"


def role_of(user: User | None) -> Role:
    """Role of a possibly anonymous viewer."""
    return user.role if user else Role.ANONYMOUS
