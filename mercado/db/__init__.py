"""SQLite storage for saved shopping lists."""

from .schema import ensure_schema
from .sessions import DEFAULT_DB_PATH, SessionStore

__all__ = [
    "DEFAULT_DB_PATH",
    "SessionStore",
    "ensure_schema",
]
