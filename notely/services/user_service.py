"""
Notely Backend: User Service
============================

What:  User creation, API-key lookup, and the database-backed identity
       resolver used by the Auth Guard.
How:   Stateless; every method receives the session it works in. SQLAlchemy
       failures are wrapped in ``DatabaseError`` so callers only see the
       application hierarchy.
"""

import hashlib
import logging
import secrets
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from notely.database import session_scope
from notely.exceptions import DatabaseError, NotelyError
from notely.models.user import User

logger = logging.getLogger(__name__)


def generate_api_key() -> str:
    """64 lowercase hex chars: SHA-256 of 32 bytes from the OS CSPRNG."""
    return hashlib.sha256(secrets.token_bytes(32)).hexdigest()


class UserService:
    """Queries on the ``users`` table."""

    async def create_user(self, db: AsyncSession, name: str) -> User:
        """
        Insert a user with a freshly generated API key.

        Raises:
            DatabaseError: insert failed
        """
        user = User(name=name, api_key=generate_api_key())
        try:
            db.add(user)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating user: %s", str(e))
            raise DatabaseError(
                message="Couldn't create user",
                context={"error_type": type(e).__name__},
            ) from e
        logger.info("User created: %s", user.id)
        return user

    async def get_user_by_api_key(self, db: AsyncSession, api_key: str) -> Optional[User]:
        """
        Look up the owner of ``api_key``.

        Returns None when no user matches, including for the empty key.

        Raises:
            DatabaseError: query failed
        """
        try:
            result = await db.execute(select(User).where(User.api_key == api_key))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error looking up user by API key: %s", str(e))
            raise DatabaseError(
                message="Couldn't get user",
                context={"error_type": type(e).__name__},
            ) from e


class DatabaseIdentityResolver:
    """
    ``IdentityResolver`` backed by the ``users`` table.

    Opens one short session per lookup, so concurrent requests never share a
    session.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        users: Optional[UserService] = None,
    ):
        self.session_factory = session_factory
        self.users = users or user_service

    async def resolve(self, api_key: str) -> Optional[User]:
        try:
            async with session_scope(self.session_factory) as db:
                return await self.users.get_user_by_api_key(db, api_key)
        except NotelyError:
            raise
        except Exception as e:
            # driver-level failures (refused connection, commit errors) are not
            # always wrapped by SQLAlchemy
            logger.error("Identity store unavailable: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Couldn't get user",
                context={"error_type": type(e).__name__},
            ) from e


user_service = UserService()
