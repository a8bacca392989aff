"""
Notely Backend: Custom Exception Hierarchy
==========================================

What:  Application-specific exceptions for the failure kinds the API reports.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) turn them into
       ``{"error": "<message>"}`` JSON responses. The Auth Guard catches the
       authentication errors itself and never lets them reach those handlers.

Exception Hierarchy:
    NotelyError (base)
    ├── AuthenticationError          → 401 Unauthorized
    │   ├── MissingCredentialError
    │   ├── MalformedCredentialError
    │   └── UnknownCredentialError
    ├── ValidationError              → 400 Bad Request
    ├── NotFoundError                → 404 Not Found
    └── DatabaseError                → 500 Internal Server Error
"""

import enum
from typing import Any, Dict, Optional


class AuthOutcome(str, enum.Enum):
    """
    Result of one authentication attempt.

    Exactly one outcome is produced per request that passes through the
    Auth Guard. Only ``AUTHENTICATED`` lets the protected handler run.
    """

    AUTHENTICATED = "authenticated"
    MISSING_CREDENTIAL = "missing_credential"
    MALFORMED_CREDENTIAL = "malformed_credential"
    UNKNOWN_CREDENTIAL = "unknown_credential"
    LOOKUP_FAILURE = "lookup_failure"


class NotelyError(Exception):
    """
    Base exception for all Notely application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


# ══════════════════════════════════════════════════════════════════════════
# Authentication
# ══════════════════════════════════════════════════════════════════════════


class AuthenticationError(NotelyError):
    """
    Raised when a request cannot be authenticated.

    HTTP:    401 Unauthorized
    Outcome: Subclasses set ``outcome`` to the matching ``AuthOutcome``.
    """

    outcome: AuthOutcome = AuthOutcome.UNKNOWN_CREDENTIAL

    def __init__(
        self,
        message: str = "unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class MissingCredentialError(AuthenticationError):
    """The Authorization header is absent or empty."""

    outcome = AuthOutcome.MISSING_CREDENTIAL

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="no authorization header included", context=context)


class MalformedCredentialError(AuthenticationError):
    """
    The Authorization header is present but is not ``ApiKey <key>``.

    Kept distinct from ``MissingCredentialError`` even though both map to 401,
    so the client gets a message that tells the two apart.
    """

    outcome = AuthOutcome.MALFORMED_CREDENTIAL

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="malformed authorization header", context=context)


class UnknownCredentialError(AuthenticationError):
    """
    A well-formed API key that matches no user.

    The message is deliberately generic: the response must not reveal
    whether the key was well formed but unknown.
    """

    outcome = AuthOutcome.UNKNOWN_CREDENTIAL

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="unauthorized", context=context)


# ══════════════════════════════════════════════════════════════════════════
# Request / persistence errors
# ══════════════════════════════════════════════════════════════════════════


class ValidationError(NotelyError):
    """
    Raised when a request body fails validation.

    When:  Body is not JSON, or required fields are missing/empty.
    HTTP:  400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(NotelyError):
    """Raised when a requested resource does not exist (404)."""

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(NotelyError):
    """
    Raised when database operations fail unexpectedly.

    When:    Connection lost, constraint violation, storage unavailable.
    HTTP:    500 Internal Server Error

    This is also the lookup failure of the identity store: the Auth Guard
    answers it with an opaque 500 and logs ``context`` server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
