"""Shared page helpers: template rendering and redirects."""
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional

from fastapi import Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

import config
from club.models import User

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))


def format_timestamp(value: Optional[datetime]) -> str:
    """Human-readable post time. Empty for a missing value."""
    if not value:
        return ""
    return value.strftime("%Y-%m-%d %H:%M")


templates.env.filters["timestamp"] = format_timestamp


def render(request: Request, name: str, user: Optional[User] = None, **context) -> HTMLResponse:
    """Render a page inside the base layout. Status is always 200, including re-rendered forms."""
    context.setdefault("error", None)
    context.setdefault("form", {})
    return templates.TemplateResponse(
        request,
        name,
        {
            "user": user,
            "site_title": config.SITE_TITLE,
            **context,
        },
    )


def redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)
