"""MongoDB client connection."""

from __future__ import annotations

from pymongo import MongoClient, ReadPreference
from pymongo.errors import PyMongoError

_TIMEOUT_MS = 10_000


class DatabaseError(Exception):
    """Raised when the database cannot be reached."""


def db_conn(config) -> MongoClient:
    """Connect to the database named in ``config`` and check it answers a ping."""
    try:
        client = MongoClient(config.db.url, serverSelectionTimeoutMS=_TIMEOUT_MS)
    except (PyMongoError, ValueError, TypeError) as exc:
        raise DatabaseError(f"MongoDB connection error: {exc}") from exc

    try:
        client.admin.command("ping", read_preference=ReadPreference.PRIMARY)
    except PyMongoError as exc:
        client.close()
        raise DatabaseError(f"error test ping database {exc}") from exc
    return client