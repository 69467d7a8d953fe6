"""Account pages: signup, login, logout, joining the club."""
from __future__ import annotations

import hmac
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

import config
from club.models import User
from club.models.base import async_session_factory
from web.api.forms import LoginForm, SignupForm, form_error
from web.api.utils import redirect, render
from web.auth import authenticate, end_session, get_current_user, hash_password, start_session

logger = logging.getLogger("club.auth")

router = APIRouter(tags=["auth"])

SIGNUP_FAILED = "Could not create account"
INVALID_CREDENTIALS = "Invalid email or password"
INVALID_SECRET_CODE = "Invalid secret code"
_SECRET_FIELDS = ("password", "confirmPassword", "secretCode")


def _echo(form) -> dict:
    """Form values safe to put back into a re-rendered page."""
    return {k: v for k, v in form.items() if k not in _SECRET_FIELDS and isinstance(v, str)}


@router.get("/signup")
async def signup_page(request: Request):
    return render(request, "signup.html")


@router.post("/signup")
async def signup(request: Request):
    """Create an account and sign the new user in."""
    form = await request.form()
    try:
        data = SignupForm.model_validate(dict(form))
    except ValidationError as e:
        return render(request, "signup.html", error=form_error(e), form=_echo(form))

    user = User(
        first_name=data.first_name,
        last_name=data.last_name,
        email=data.email,
        password_hash=hash_password(data.password),
        is_member=False,
        is_admin=False,
    )
    try:
        async with async_session_factory() as session:
            session.add(user)
            await session.commit()
            await session.refresh(user)
    except IntegrityError:
        logger.info("Signup rejected, email already registered: %s", data.email)
        return render(request, "signup.html", error=SIGNUP_FAILED, form=_echo(form))
    except SQLAlchemyError:
        logger.exception("Signup failed for %s", data.email)
        return render(request, "signup.html", error=SIGNUP_FAILED, form=_echo(form))

    logger.info("New user %s signed up (id=%s)", user.email, user.id)
    response = redirect("/")
    start_session(response, user)
    return response


@router.get("/login")
async def login_page(request: Request):
    return render(request, "login.html")


@router.post("/login")
async def login(request: Request):
    """Authenticate by email and password. Every failure gets the same message."""
    form = await request.form()
    try:
        data = LoginForm.model_validate(dict(form))
    except ValidationError:
        return render(request, "login.html", error=INVALID_CREDENTIALS, form=_echo(form))

    try:
        user = await authenticate(data.email, data.password)
    except SQLAlchemyError:
        logger.exception("Login lookup failed")
        user = None
    if not user:
        logger.warning("Failed login for %s", data.email)
        return render(request, "login.html", error=INVALID_CREDENTIALS, form=_echo(form))

    logger.info("User %s logged in", user.id)
    response = redirect("/")
    start_session(response, user)
    return response


@router.post("/logout")
async def logout():
    response = redirect("/")
    end_session(response)
    return response


@router.get("/join-club")
async def join_club_page(request: Request, user: Optional[User] = Depends(get_current_user)):
    """Membership form. Viewable by anyone, only signed-in users can use it."""
    return render(request, "join_club.html", user=user)


def _secret_code_matches(code: str) -> bool:
    return hmac.compare_digest(code.encode("utf-8"), config.CLUB_SECRET_CODE.encode("utf-8"))


@router.post("/join-club")
async def join_club(request: Request, user: Optional[User] = Depends(get_current_user)):
    """Upgrade the current user to member when the shared code matches."""
    form = await request.form()
    code = form.get("secretCode")
    if not user or not isinstance(code, str) or not _secret_code_matches(code):
        return render(request, "join_club.html", user=user, error=INVALID_SECRET_CODE)

    try:
        async with async_session_factory() as session:
            await session.execute(update(User).where(User.id == user.id).values(is_member=True))
            await session.commit()
    except SQLAlchemyError:
        logger.exception("Membership update failed for user %s", user.id)
        return render(request, "join_club.html", user=user, error="Could not update membership")

    logger.info("User %s joined the club", user.id)
    return redirect("/")
