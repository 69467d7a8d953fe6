"""Configuration for the Members Only board."""
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


# Database
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{Path(__file__).parent / 'club.db'}",
)

# Web session (signed JWT in a cookie)
DEFAULT_SESSION_SECRET = "change-me-in-production-use-long-random-string"
SESSION_SECRET = os.getenv("SESSION_SECRET", DEFAULT_SESSION_SECRET)
SESSION_ALGORITHM = "HS256"
SESSION_EXPIRE_DAYS = int(os.getenv("SESSION_EXPIRE_DAYS", "7"))
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "session")
SESSION_COOKIE_SECURE = _parse_bool(os.getenv("SESSION_COOKIE_SECURE", "false"))

# Shared code that unlocks member status
CLUB_SECRET_CODE = os.getenv("CLUB_SECRET_CODE", "supersecret")

# bcrypt cost; 10 rounds is roughly 100ms per verify
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "10"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
SITE_TITLE = os.getenv("SITE_TITLE", "Members Only")
