"""Database models."""
from club.models.base import Base, init_db
from club.models.user import Role, User, role_of
from club.models.message import Message  # noqa: F401 - for metadata

__all__ = [
    "Base",
    "Message",
    "Role",
    "User",
    "init_db",
    "role_of",
]
