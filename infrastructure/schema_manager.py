"""
Schema and migration management for the SQLite document store.
"""

import logging
import sqlite3

logger = logging.getLogger("bucks_bot.schema")

COLLECTIONS = ("accounts", "leaderboards", "lotteries", "bets", "cancel_tickets")


class SchemaManager:
    """
    Owns schema creation and migrations.

    Every collection is a table of whole JSON documents keyed by a string id.
    Call initialize() to ensure schema is present and migrations are applied.
    """

    def __init__(self, db_path: str, use_uri: bool = False):
        self.db_path = db_path
        self.use_uri = use_uri

    def initialize(self) -> None:
        """Create base schema and apply migrations."""
        logger.info(f"Initializing database schema: {self.db_path}")
        conn = self._connect()
        try:
            cursor = conn.cursor()
            self._create_base_schema(cursor)
            self._create_schema_migrations_table(cursor)
            self._run_migrations(cursor)
            conn.commit()
        finally:
            # Closing the last connection checkpoints the WAL into the main file
            conn.close()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, uri=self.use_uri)
        conn.row_factory = sqlite3.Row
        if not self.use_uri:  # Skip WAL for in-memory databases
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA busy_timeout=5000")
        return conn

    def _create_base_schema(self, cursor) -> None:
        for collection in COLLECTIONS:
            cursor.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {collection} (
                    id TEXT PRIMARY KEY,
                    body TEXT NOT NULL,
                    updated_at INTEGER NOT NULL DEFAULT 0
                )
                """
            )

    def _create_schema_migrations_table(self, cursor) -> None:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_migrations (
                name TEXT PRIMARY KEY,
                applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )

    def _run_migrations(self, cursor) -> None:
        applied = {row["name"] for row in cursor.execute("SELECT name FROM schema_migrations")}
        for name, action in self._get_migrations():
            if name in applied:
                continue
            logger.info(f"Applying migration: {name}")
            action(cursor)
            cursor.execute(
                "INSERT INTO schema_migrations (name) VALUES (?)",
                (name,),
            )

    def _get_migrations(self):
        return [
            ("add_updated_at_indexes", self._migration_add_updated_at_indexes),
        ]

    def _migration_add_updated_at_indexes(self, cursor) -> None:
        for collection in COLLECTIONS:
            cursor.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{collection}_updated_at ON {collection}(updated_at)"
            )
