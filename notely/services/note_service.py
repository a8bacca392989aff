"""
Notely Backend: Note Service
============================

What:  Create and list notes belonging to one user.
How:   Stateless; receives the session per call. Queries are always scoped
       to ``user_id``, so one user can never read another user's notes.
"""

import logging
import uuid
from typing import List

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notely.exceptions import DatabaseError
from notely.models.note import Note

logger = logging.getLogger(__name__)


class NoteService:
    """Queries on the ``notes`` table."""

    async def create_note(self, db: AsyncSession, user_id: uuid.UUID, text: str) -> Note:
        """
        Insert a note owned by ``user_id``.

        Raises:
            DatabaseError: insert failed
        """
        note = Note(note=text, user_id=user_id)
        try:
            db.add(note)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating note for user %s: %s", user_id, str(e))
            raise DatabaseError(
                message="Couldn't create note",
                context={"user_id": str(user_id), "error_type": type(e).__name__},
            ) from e
        logger.info("Note %s created for user %s", note.id, user_id)
        return note

    async def list_notes_for_user(self, db: AsyncSession, user_id: uuid.UUID) -> List[Note]:
        """
        All notes of ``user_id``, newest first.

        Raises:
            DatabaseError: query failed
        """
        try:
            result = await db.execute(
                select(Note)
                .where(Note.user_id == user_id)
                .order_by(desc(Note.created_at), desc(Note.id))
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing notes for user %s: %s", user_id, str(e))
            raise DatabaseError(
                message="Couldn't retrieve notes",
                context={"user_id": str(user_id), "error_type": type(e).__name__},
            ) from e


note_service = NoteService()
