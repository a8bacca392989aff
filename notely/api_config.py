"""
Notely Backend: API Configuration
=================================

What:  The explicit configuration value handed to route construction.
How:   ``create_app()`` builds one ``ApiConfig`` per application. Routes that
       need storage receive it instead of reading module-level globals, so
       whether a database is configured is visible at the call site and the
       Auth Guard can be tested with a fake identity resolver.
"""

from dataclasses import dataclass
from typing import AsyncContextManager, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from notely.database import session_scope


@dataclass
class ApiConfig:
    """Per-application dependencies shared by the route builders."""

    engine: Optional[AsyncEngine] = None
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def db_configured(self) -> bool:
        return self.session_factory is not None

    def session(self) -> AsyncContextManager[AsyncSession]:
        """Open a committed-on-success session; requires a configured database."""
        if self.session_factory is None:
            raise RuntimeError("No database configured")
        return session_scope(self.session_factory)
