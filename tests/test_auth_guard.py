"""
Notely Backend: Auth Guard Tests
================================

What:  The guard's state machine, driven with a fake identity resolver.
How:   Direct calls on Starlette ``Request`` objects, plus HTTP calls through
       a minimal FastAPI app so route registration is covered too.

What we test:
    ✅ Missing / malformed header → 401 with distinct messages, no lookup
    ✅ Unknown key (including empty key) → 401 "unauthorized"
    ✅ Lookup failure → opaque 500, cause logged, no retry
    ✅ Success → handler called once with the user, response unchanged
"""

import json
import logging
from typing import List, Tuple
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from notely.exceptions import AuthOutcome, DatabaseError
from notely.middleware.auth import AuthGuard
from notely.models.user import User
from notely.services.user_service import DatabaseIdentityResolver


def make_request(headers: List[Tuple[bytes, bytes]] = ()) -> Request:
    return Request({
        "type": "http",
        "method": "GET",
        "path": "/v1/notes",
        "query_string": b"",
        "headers": list(headers),
    })


def auth_header(value: str) -> List[Tuple[bytes, bytes]]:
    return [(b"authorization", value.encode("latin-1"))]


def body_of(response: Response) -> dict:
    return json.loads(response.body)


class RecordingHandler:
    """Protected handler that records every call it receives."""

    def __init__(self):
        self.calls = []

    async def __call__(self, request: Request, user: User) -> Response:
        self.calls.append((request, user))
        return JSONResponse({"user": user.name}, status_code=202, headers={"X-Handler": "yes"})


class TestAuthGuardRejections:

    def setup_method(self):
        self.handler = RecordingHandler()

    @pytest.mark.asyncio
    async def test_missing_header(self, fake_resolver):
        guarded = AuthGuard(fake_resolver)(self.handler)
        request = make_request()

        response = await guarded(request)

        assert response.status_code == 401
        assert body_of(response) == {"error": "no authorization header included"}
        assert self.handler.calls == []
        assert fake_resolver.calls == []
        assert request.state.auth_outcome is AuthOutcome.MISSING_CREDENTIAL

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", ["Bearer some-token", "apikey mykey", "ApiKey"])
    async def test_malformed_header(self, fake_resolver, value):
        guarded = AuthGuard(fake_resolver)(self.handler)
        request = make_request(auth_header(value))

        response = await guarded(request)

        assert response.status_code == 401
        assert body_of(response) == {"error": "malformed authorization header"}
        assert self.handler.calls == []
        assert fake_resolver.calls == []
        assert request.state.auth_outcome is AuthOutcome.MALFORMED_CREDENTIAL

    @pytest.mark.asyncio
    async def test_unknown_key(self, fake_resolver):
        guarded = AuthGuard(fake_resolver)(self.handler)
        request = make_request(auth_header("ApiKey not-a-real-key"))

        response = await guarded(request)

        assert response.status_code == 401
        assert body_of(response) == {"error": "unauthorized"}
        assert fake_resolver.calls == ["not-a-real-key"]
        assert self.handler.calls == []
        assert request.state.auth_outcome is AuthOutcome.UNKNOWN_CREDENTIAL

    @pytest.mark.asyncio
    async def test_empty_key_is_looked_up_and_rejected(self, fake_resolver):
        guarded = AuthGuard(fake_resolver)(self.handler)

        response = await guarded(make_request(auth_header("ApiKey ")))

        assert response.status_code == 401
        assert body_of(response) == {"error": "unauthorized"}
        assert fake_resolver.calls == [""]
        assert self.handler.calls == []

    @pytest.mark.asyncio
    async def test_lookup_failure_is_opaque_500(self, caplog, resolver_factory):
        resolver = resolver_factory(error=DatabaseError(
            message="Couldn't get user",
            context={"error_type": "OperationalError"},
        ))
        guarded = AuthGuard(resolver)(self.handler)
        request = make_request(auth_header("ApiKey my-secret-key"))

        with caplog.at_level(logging.ERROR):
            response = await guarded(request)

        assert response.status_code == 500
        assert body_of(response) == {"error": "internal server error"}
        assert "Couldn't get user" in caplog.text
        assert resolver.calls == ["my-secret-key"]  # exactly one attempt
        assert self.handler.calls == []
        assert request.state.auth_outcome is AuthOutcome.LOOKUP_FAILURE


class TestAuthGuardSuccess:

    @pytest.mark.asyncio
    async def test_delegates_with_user(self, fake_resolver, sample_user):
        handler = RecordingHandler()
        guarded = AuthGuard(fake_resolver)(handler)
        request = make_request(auth_header("ApiKey my-secret-key"))

        response = await guarded(request)

        assert response.status_code == 202
        assert response.headers["X-Handler"] == "yes"
        assert body_of(response) == {"user": "alice"}
        assert len(handler.calls) == 1
        assert handler.calls[0][0] is request
        assert handler.calls[0][1] is sample_user
        assert request.state.user is sample_user
        assert request.state.auth_outcome is AuthOutcome.AUTHENTICATED

    @pytest.mark.asyncio
    async def test_extra_tokens_ignored(self, fake_resolver):
        handler = RecordingHandler()
        guarded = AuthGuard(fake_resolver)(handler)

        response = await guarded(make_request(auth_header("ApiKey my-secret-key extra")))

        assert response.status_code == 202
        assert fake_resolver.calls == ["my-secret-key"]

    def test_wrapper_hides_handler_signature(self, fake_resolver):
        async def handler_notes_get(request: Request, user: User) -> Response:
            """List notes."""

        guarded = AuthGuard(fake_resolver)(handler_notes_get)

        assert guarded.__name__ == "handler_notes_get"
        assert guarded.__doc__ == "List notes."
        assert not hasattr(guarded, "__wrapped__")


class TestAuthGuardOverHTTP:
    """The guard registered on a real FastAPI route."""

    @pytest.fixture
    def app(self, fake_resolver):
        app = FastAPI()
        guard = AuthGuard(fake_resolver)

        async def handler_whoami(request: Request, user: User) -> Response:
            return JSONResponse({"name": user.name})

        app.add_api_route("/whoami", guard(handler_whoami), methods=["GET"])
        return app

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "headers, status, body",
        [
            ({"Authorization": "ApiKey my-secret-key"}, 200, {"name": "alice"}),
            ({}, 401, {"error": "no authorization header included"}),
            ({"Authorization": "Bearer some-token"}, 401, {"error": "malformed authorization header"}),
            ({"Authorization": "ApiKey "}, 401, {"error": "unauthorized"}),
            ({"Authorization": "ApiKey my-secret-key extra"}, 200, {"name": "alice"}),
            ({"Authorization": "apikey my-secret-key"}, 401, {"error": "malformed authorization header"}),
        ],
        ids=["valid", "no header", "bearer", "empty key", "extra token", "lowercase scheme"],
    )
    async def test_scenarios(self, app, headers, status, body):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/whoami", headers=headers)

        assert response.status_code == status
        assert response.json() == body
        assert response.headers["content-type"] == "application/json"

    @pytest.mark.asyncio
    async def test_user_is_not_a_query_parameter(self, app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            schema = (await client.get("/openapi.json")).json()

        assert schema["paths"]["/whoami"]["get"].get("parameters", []) == []


class TestAuthGuardStoreUnavailable:
    """Identity store that cannot be reached at all."""

    @pytest.mark.asyncio
    async def test_refused_connection_is_guard_500(self, caplog):
        factory = MagicMock(side_effect=ConnectionRefusedError(111, "Connect call failed"))
        handler = RecordingHandler()
        guarded = AuthGuard(DatabaseIdentityResolver(factory))(handler)
        request = make_request(auth_header("ApiKey k"))

        with caplog.at_level(logging.ERROR):
            response = await guarded(request)

        assert response.status_code == 500
        assert body_of(response) == {"error": "internal server error"}
        assert request.state.auth_outcome is AuthOutcome.LOOKUP_FAILURE
        assert handler.calls == []
        assert "Connect call failed" in caplog.text
        assert "Connect call failed" not in response.body.decode()
