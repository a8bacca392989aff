"""
Notely Backend: User Schemas
============================

What:  Request and response models for /v1/users.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class CreateUserRequest(BaseModel):
    """Body of POST /v1/users."""
    name: str = Field(description="Display name of the new user")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be empty")
        return v


class UserResponse(BaseModel):
    """
    A user, including the API key.

    Only ever returned to the user themself: on creation, and from the
    guarded GET /v1/users.
    """
    id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    name: str
    api_key: str

    model_config = {"from_attributes": True}
