"""
Notely Backend: Note Route Handlers
===================================

What:  GET /v1/notes and POST /v1/notes, both behind the Auth Guard.
How:   The guard hands each handler the resolved ``User``; every query is
       scoped to that user's id.
"""

from fastapi import APIRouter
from starlette.requests import Request
from starlette.responses import Response

from notely.api_config import ApiConfig
from notely.middleware.auth import AuthGuard
from notely.models.user import User
from notely.responses import respond_with_json
from notely.routes import parse_body
from notely.schemas.common import ErrorResponse
from notely.schemas.note import CreateNoteRequest, NoteListResponse, NoteResponse
from notely.services.note_service import note_service


def build_router(api: ApiConfig, guard: AuthGuard) -> APIRouter:
    router = APIRouter(prefix="/v1", tags=["Notes"])

    async def handler_notes_get(request: Request, user: User) -> Response:
        """List the authenticated user's notes, newest first."""
        async with api.session() as db:
            notes = await note_service.list_notes_for_user(db, user.id)
        return respond_with_json(
            200,
            NoteListResponse([NoteResponse.model_validate(n) for n in notes]),
        )

    async def handler_notes_create(request: Request, user: User) -> Response:
        """Create a note owned by the authenticated user."""
        params = await parse_body(request, CreateNoteRequest)
        async with api.session() as db:
            note = await note_service.create_note(db, user.id, params.note)
        return respond_with_json(201, NoteResponse.model_validate(note))

    unauthorized = {401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
    router.add_api_route(
        "/notes",
        guard(handler_notes_get),
        methods=["GET"],
        responses={200: {"model": NoteListResponse}, **unauthorized},
        summary="List notes",
    )
    router.add_api_route(
        "/notes",
        guard(handler_notes_create),
        methods=["POST"],
        status_code=201,
        responses={201: {"model": NoteResponse}, 400: {"model": ErrorResponse}, **unauthorized},
        summary="Create a note",
    )
    return router
