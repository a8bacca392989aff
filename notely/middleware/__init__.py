"""
Notely Backend: Middleware Package
==================================

What:  Cross-cutting request handling.

Middleware Chain (Starlette, applied to every request):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

Auth Guard (``auth.py``) is not part of the chain. It wraps individual
handlers, so only routes registered through it require an API key.
"""
