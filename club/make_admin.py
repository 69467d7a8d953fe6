"""Grant or revoke admin rights for an existing user.

Usage: python -m club.make_admin someone@example.com [--revoke]
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from sqlalchemy import select

import config
from club.models import User, init_db
from club.models.base import async_session_factory, engine

logger = logging.getLogger("club.admin")


async def set_admin(email: str, is_admin: bool = True) -> bool:
    """Set the admin flag for the user with this email. False if no such user."""
    async with async_session_factory() as session:
        result = await session.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        if not user:
            return False
        user.is_admin = is_admin
        await session.commit()
    logger.info("Admin %s for %s", "granted" if is_admin else "revoked", email)
    return True


async def _run(email: str, is_admin: bool) -> bool:
    await init_db()
    try:
        return await set_admin(email, is_admin)
    finally:
        await engine.dispose()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("email")
    parser.add_argument("--revoke", action="store_true", help="clear the admin flag instead of setting it")
    args = parser.parse_args(argv)

    logging.basicConfig(level=config.LOG_LEVEL)
    if not asyncio.run(_run(args.email, not args.revoke)):
        print(f"No user with email {args.email}", file=sys.stderr)
        return 1
    print(f"Admin {'revoked' if args.revoke else 'ensured'}: {args.email}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
