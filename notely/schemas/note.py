"""
Notely Backend: Note Schemas
============================

What:  Request and response models for /v1/notes.
"""

import uuid
from datetime import datetime
from typing import List

from pydantic import BaseModel, Field, RootModel, field_validator


class CreateNoteRequest(BaseModel):
    """Body of POST /v1/notes."""
    note: str = Field(description="Note text")

    @field_validator("note")
    @classmethod
    def validate_note(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("note must not be empty")
        return v


class NoteResponse(BaseModel):
    """A single note as returned by the API."""
    id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    note: str
    user_id: uuid.UUID

    model_config = {"from_attributes": True}


class NoteListResponse(RootModel[List[NoteResponse]]):
    """GET /v1/notes returns a bare JSON array, newest note first."""
    pass
