"""
Notely Backend: User Route Handlers
===================================

What:  POST /v1/users (open) and GET /v1/users (guarded).
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
from notely.schemas.user import CreateUserRequest, UserResponse
from notely.services.user_service import user_service


def build_router(api: ApiConfig, guard: AuthGuard) -> APIRouter:
    router = APIRouter(prefix="/v1", tags=["Users"])

    async def handler_users_create(request: Request) -> Response:
        """Create a user and return it with its new API key."""
        params = await parse_body(request, CreateUserRequest)
        async with api.session() as db:
            user = await user_service.create_user(db, params.name)
        return respond_with_json(201, UserResponse.model_validate(user))

    async def handler_users_get(request: Request, user: User) -> Response:
        """Return the authenticated user."""
        return respond_with_json(200, UserResponse.model_validate(user))

    router.add_api_route(
        "/users",
        handler_users_create,
        methods=["POST"],
        status_code=201,
        responses={201: {"model": UserResponse}, 400: {"model": ErrorResponse}},
        summary="Create a user",
    )
    router.add_api_route(
        "/users",
        guard(handler_users_get),
        methods=["GET"],
        responses={200: {"model": UserResponse}, 401: {"model": ErrorResponse}},
        summary="Get the authenticated user",
    )
    return router
