"""
Base repository with common document-store operations.
"""

import json
import logging
import sqlite3
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Generic, TypeVar

logger = logging.getLogger("bucks_bot.repositories")

T = TypeVar("T")


class MissingDocumentError(LookupError):
    """A provisioned singleton document (leaderboard, guild lottery) is absent."""

    def __init__(self, collection: str, document_id: str):
        super().__init__(f"Missing required document {collection}/{document_id}")
        self.collection = collection
        self.document_id = document_id


class BaseRepository(ABC, Generic[T]):
    """
    Base class for all document repositories.

    Each subclass owns one collection (one SQLite table) whose rows hold a
    whole JSON document keyed by a string id. Writes replace the full
    document; the last write wins.
    """

    collection: str = ""

    def __init__(self, db_path: str):
        """
        Initialize repository with database path.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path

    def get_connection(self) -> sqlite3.Connection:
        """Get database connection with row factory enabled."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA busy_timeout=5000")
        return conn

    @contextmanager
    def connection(self):
        """
        Context manager for database connections.

        Automatically commits on success, rolls back on exception,
        and always closes the connection.
        """
        conn = self.get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @abstractmethod
    def _to_document(self, value: T) -> dict: ...

    @abstractmethod
    def _from_document(self, doc: dict) -> T: ...

    @abstractmethod
    def _document_id(self, value: T) -> str: ...

    def get(self, document_id: str) -> T | None:
        """Fetch a document by id. Not-found returns None."""
        with self.connection() as conn:
            row = conn.execute(
                f"SELECT body FROM {self.collection} WHERE id = ?", (document_id,)
            ).fetchone()
        if row is None:
            return None
        return self._from_document(json.loads(row["body"]))

    def require(self, document_id: str) -> T:
        """Fetch a document that must exist; raises MissingDocumentError otherwise."""
        value = self.get(document_id)
        if value is None:
            raise MissingDocumentError(self.collection, document_id)
        return value

    def upsert(self, value: T) -> None:
        """Insert or wholly replace a document."""
        document_id = self._document_id(value)
        body = json.dumps(self._to_document(value), sort_keys=True)
        with self.connection() as conn:
            conn.execute(
                f"""
                INSERT INTO {self.collection} (id, body, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET body = excluded.body, updated_at = excluded.updated_at
                """,
                (document_id, body, int(time.time())),
            )
        logger.debug(f"Upserted {self.collection}/{document_id}")

    def delete(self, document_id: str) -> bool:
        """Delete a document; returns True if one was removed."""
        with self.connection() as conn:
            cursor = conn.execute(f"DELETE FROM {self.collection} WHERE id = ?", (document_id,))
            deleted = cursor.rowcount > 0
        logger.debug(f"Deleted {self.collection}/{document_id}: {deleted}")
        return deleted

