"""
Notely Backend: API Routes Package
==================================

Route Inventory:
    - index.py:   GET  /                  (static index page)
    - health.py:  GET  /v1/healthz        (readiness)
    - users.py:   POST /v1/users          (create user, returns API key)
                  GET  /v1/users          (guarded: current user)
    - notes.py:   GET  /v1/notes          (guarded: list own notes)
                  POST /v1/notes          (guarded: create note)

users.py and notes.py expose ``build_router(api, guard)`` and are only
mounted when a database is configured.

Handlers stay thin: parse the body, call a service, serialize the result.
"""

import json
from typing import Type, TypeVar

import pydantic
from starlette.requests import Request

from notely.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)


async def parse_body(request: Request, model: Type[ModelT]) -> ModelT:
    """
    Decode the JSON request body into ``model``.

    Raises:
        ValidationError: body is not JSON or does not match the model
    """
    try:
        data = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError(message="Couldn't decode parameters") from e

    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        raise ValidationError(
            message=f"Invalid parameters: {first.get('msg', 'invalid value')}",
            field=field,
        ) from e
