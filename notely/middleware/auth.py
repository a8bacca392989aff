"""
Notely Backend: Auth Guard
==========================

What:  Wraps a handler that needs an authenticated user and turns it into a
       plain ``(request) -> response`` endpoint.
How:   Explicit function composition rather than a Starlette middleware:
       only the routes wrapped with the guard are protected.

Per request:

    Start ─┬─ missing header ───────────────→ 401 "no authorization header included"
           ├─ malformed header ─────────────→ 401 "malformed authorization header"
           └─ key extracted ─→ resolve(key)
                                ├─ DatabaseError ─→ 500 (cause logged)
                                ├─ None ──────────→ 401 "unauthorized"
                                └─ user ──────────→ handler(request, user)

Every branch but the last is terminal: the guard writes the whole response
and the wrapped handler is never called. No retries.

Usage:
    guard = AuthGuard(resolver)
    router.add_api_route("/notes", guard(handler_notes_get), methods=["GET"])
"""

import logging
from typing import Awaitable, Callable

from starlette.requests import Request
from starlette.responses import Response

from notely.auth import IdentityResolver, get_api_key
from notely.exceptions import (
    AuthenticationError,
    AuthOutcome,
    DatabaseError,
    UnknownCredentialError,
)
from notely.middleware.request_id import request_id_var
from notely.models.user import User
from notely.responses import INTERNAL_ERROR_MESSAGE, respond_with_error

logger = logging.getLogger(__name__)

AuthedHandler = Callable[[Request, User], Awaitable[Response]]
Handler = Callable[[Request], Awaitable[Response]]


class AuthGuard:
    """
    Authentication wrapper for protected handlers.

    Holds only the resolver, which is shared read-only across requests.
    """

    def __init__(self, resolver: IdentityResolver):
        self.resolver = resolver

    def __call__(self, handler: AuthedHandler) -> Handler:
        async def guarded(request: Request) -> Response:
            rid = request_id_var.get("")
            try:
                api_key = get_api_key(request.headers)
                user = await self.resolver.resolve(api_key)
                if user is None:
                    raise UnknownCredentialError()
            except AuthenticationError as e:
                request.state.auth_outcome = e.outcome
                logger.info("[%s] Authentication rejected: %s", rid, e.outcome.value)
                return respond_with_error(401, e.message)
            except DatabaseError as e:
                request.state.auth_outcome = AuthOutcome.LOOKUP_FAILURE
                return respond_with_error(500, INTERNAL_ERROR_MESSAGE, log_err=e)

            request.state.auth_outcome = AuthOutcome.AUTHENTICATED
            request.state.user = user
            return await handler(request, user)

        # FastAPI reads the endpoint signature, so the wrapper must not carry
        # ``__wrapped__`` (functools.wraps would expose ``user`` as a parameter)
        guarded.__name__ = getattr(handler, "__name__", "guarded")
        guarded.__qualname__ = getattr(handler, "__qualname__", guarded.__name__)
        guarded.__doc__ = handler.__doc__
        return guarded
