"""Authentication for the web app: password hashing, session cookies, user lookup."""
from __future__ import annotations

import hashlib
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Request, Response
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

import config
from club.models import User
from club.models.base import async_session_factory

logger = logging.getLogger("club.auth")

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=config.BCRYPT_ROUNDS,
)


def _prepare_password(password: str) -> str:
    """Bcrypt has a 72-byte limit. Pre-hash longer passwords with SHA256."""
    encoded = password.encode("utf-8")
    if len(encoded) > 72:
        return hashlib.sha256(encoded).hexdigest()
    return password


def hash_password(password: str) -> str:
    return pwd_context.hash(_prepare_password(password))


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(_prepare_password(plain), hashed)


def create_session_token(user_id: int) -> str:
    expire = datetime.now(timezone.utc) + timedelta(days=config.SESSION_EXPIRE_DAYS)
    payload = {"sub": str(user_id), "exp": expire}
    return jwt.encode(payload, config.SESSION_SECRET, algorithm=config.SESSION_ALGORITHM)


def decode_session_token(token: str) -> Optional[int]:
    """Return the user id carried by a session token, or None if it is forged, expired or malformed."""
    try:
        payload = jwt.decode(token, config.SESSION_SECRET, algorithms=[config.SESSION_ALGORITHM])
    except jwt.InvalidTokenError as e:
        logger.debug("Rejected session token: %s", e)
        return None
    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        return None


def start_session(response: Response, user: User) -> None:
    """Bind the client to user by setting the signed session cookie."""
    response.set_cookie(
        key=config.SESSION_COOKIE_NAME,
        value=create_session_token(user.id),
        max_age=config.SESSION_EXPIRE_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=config.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


def end_session(response: Response) -> None:
    response.delete_cookie(
        key=config.SESSION_COOKIE_NAME,
        httponly=True,
        secure=config.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


async def get_user_by_id(user_id: int) -> Optional[User]:
    async with async_session_factory() as session:
        return await session.get(User, user_id)


async def get_user_by_email(email: str) -> Optional[User]:
    async with async_session_factory() as session:
        result = await session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()


async def resolve_session_user(request: Request) -> Optional[User]:
    """Load the user named by the request's session cookie. Anonymous (None) on any failure."""
    token = request.cookies.get(config.SESSION_COOKIE_NAME)
    if not token:
        return None
    user_id = decode_session_token(token)
    if user_id is None:
        return None
    try:
        return await get_user_by_id(user_id)
    except SQLAlchemyError:
        logger.exception("Session user lookup failed for id %s", user_id)
        return None


async def authenticate(email: str, password: str) -> Optional[User]:
    """Return the user if email and password match, else None. Callers must not reveal which part failed."""
    user = await get_user_by_email(email)
    if not user:
        # Spend the same hashing time as a real check
        pwd_context.dummy_verify()
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def get_current_user(request: Request) -> Optional[User]:
    """Dependency: current user resolved by the session middleware, or None if anonymous."""
    return getattr(request.state, "user", None)
