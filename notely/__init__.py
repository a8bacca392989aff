"""
Notely Backend
==============

What: Notes API with API-key authentication.
Who:  Imported by uvicorn (``notely.main:app``), Alembic and pytest.

Layers:

    ┌─────────────────────────────────────┐
    │     Routes + Auth Guard (API)       │  ← HTTP concerns, authentication
    ├─────────────────────────────────────┤
    │         Services                    │  ← user/note queries, identity lookup
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
