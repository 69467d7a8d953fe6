"""FastAPI app for the Members Only board - serves the HTML pages."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware

import config
from club.models.base import init_db
from web.api.auth_routes import router as auth_router
from web.api.routes import router as messages_router
from web.auth import resolve_session_user

logger = logging.getLogger("club.web")


def warn_insecure_settings() -> None:
    if config.SESSION_SECRET == config.DEFAULT_SESSION_SECRET:
        logger.warning("SESSION_SECRET is the built-in default - set it before deploying")


@asynccontextmanager
async def lifespan(app: FastAPI):
    warn_insecure_settings()
    await init_db()
    logger.info("Database ready at %s", config.DATABASE_URL)
    yield


app = FastAPI(title=config.SITE_TITLE, lifespan=lifespan)


class SessionUserMiddleware(BaseHTTPMiddleware):
    """Resolve the session cookie to a user once per request (request.state.user, None when anonymous)."""

    async def dispatch(self, request, call_next):
        request.state.user = await resolve_session_user(request)
        return await call_next(request)


app.add_middleware(SessionUserMiddleware)
app.include_router(messages_router)
app.include_router(auth_router)


@app.get("/health")
async def health():
    return {"status": "ok"}
