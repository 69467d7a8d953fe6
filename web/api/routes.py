"""Message board pages: listing, posting and admin deletion."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from club.models import Message, Role, User, role_of
from club.models.base import async_session_factory
from web.api.forms import NewMessageForm, form_error
from web.api.utils import redirect, render
from web.auth import get_current_user

logger = logging.getLogger("club.web")

router = APIRouter(tags=["messages"])

SAVE_FAILED = "Could not save message"
_SQLITE_INT_MIN = -(2**63)
_SQLITE_INT_MAX = 2**63 - 1


async def list_messages() -> list[Message]:
    """All messages, newest first."""
    async with async_session_factory() as session:
        result = await session.execute(
            select(Message).order_by(Message.created_at.desc(), Message.id.desc())
        )
        return list(result.scalars().all())


@router.get("/")
async def home(request: Request, user: Optional[User] = Depends(get_current_user)):
    """Public listing. Author and time are for members, delete buttons for admins."""
    return render(request, "index.html", user=user, messages=await list_messages())


@router.get("/new-message")
async def new_message_page(request: Request, user: Optional[User] = Depends(get_current_user)):
    if not user:
        return redirect("/login")
    return render(request, "new_message.html", user=user)


@router.post("/new-message")
async def new_message(request: Request, user: Optional[User] = Depends(get_current_user)):
    """Post a message as the current user."""
    if not user:
        return redirect("/login")

    form = await request.form()
    echo = {k: v for k, v in form.items() if isinstance(v, str)}
    try:
        data = NewMessageForm.model_validate(dict(form))
    except ValidationError as e:
        return render(request, "new_message.html", user=user, error=form_error(e), form=echo)

    try:
        async with async_session_factory() as session:
            session.add(Message(title=data.title, content=data.content, user_id=user.id))
            await session.commit()
    except SQLAlchemyError:
        logger.exception("Saving message failed for user %s", user.id)
        return render(request, "new_message.html", user=user, error=SAVE_FAILED, form=echo)

    return redirect("/")


@router.post("/delete-message/{message_id}")
async def delete_message(message_id: str, user: Optional[User] = Depends(get_current_user)):
    """Admin-only delete. Everyone else is sent home without a hint. Unknown ids are a no-op."""
    if role_of(user) is not Role.ADMIN:
        return redirect("/")
    try:
        pk = int(message_id)
    except ValueError:
        return redirect("/")
    # SQLite INTEGER is a signed 64-bit value
    if not _SQLITE_INT_MIN <= pk <= _SQLITE_INT_MAX:
        return redirect("/")

    try:
        async with async_session_factory() as session:
            result = await session.execute(delete(Message).where(Message.id == pk))
            await session.commit()
    except SQLAlchemyError:
        logger.exception("Deleting message %s failed", pk)
        return redirect("/")
    logger.info("Admin %s deleted message %s (%d row(s))", user.id, pk, result.rowcount)
    return redirect("/")
