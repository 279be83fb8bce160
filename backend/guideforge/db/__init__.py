"""Database package with engine lifecycle and transaction helpers."""

from guideforge.db.session import Database, get_session
from guideforge.db.transaction import atomic, storage_errors

__all__ = [
    "Database",
    "atomic",
    "get_session",
    "storage_errors",
]
