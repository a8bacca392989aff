"""ORM models. Importing this package registers every table with ``Base.metadata``."""

from notely.models.note import Note
from notely.models.user import User

__all__ = ["Note", "User"]
