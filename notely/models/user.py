"""
Notely Backend: User SQLAlchemy Model
=====================================

What:  ORM model for the ``users`` table, the identity store behind API keys.
How:   ``api_key`` is unique and indexed; the identity lookup is a single
       equality query on it.
"""

import uuid
from datetime import datetime, timezone
from typing import List, TYPE_CHECKING

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from notely.database import Base

if TYPE_CHECKING:
    from notely.models.note import Note


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """
    A registered API user.

    Lifecycle:
        1. Created by POST /v1/users with a freshly generated API key
        2. Resolved from the Authorization header on every guarded request
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # 64 hex chars: SHA-256 digest of 32 random bytes
    api_key: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
    )

    notes: Mapped[List["Note"]] = relationship(back_populates="user")

    def __repr__(self) -> str:
        # api_key is left out on purpose; reprs end up in logs
        return f"<User(id={self.id}, name='{self.name}')>"
