"""SQLite persistence for user interaction records."""

import json
import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import List, Optional

from ..models.property import utc_now
from ..models.recommendation import UserInteraction

logger = logging.getLogger(__name__)


class InteractionRepository:
    """
    Key-value store for interaction records, one row per user key.

    Features:
    - Persist view/favorite/search history across sessions
    - Record when each user's history was last written
    - Remove a single user's history on request
    """

    DEFAULT_DB_PATH = "./data/interactions.db"

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or os.getenv("INTERACTIONS_DB_PATH", self.DEFAULT_DB_PATH)
        self._ensure_db_directory()
        self._init_db()

    def _ensure_db_directory(self) -> None:
        """Create data directory if it doesn't exist."""
        db_dir = Path(self.db_path).parent
        if db_dir and not db_dir.exists():
            db_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created database directory: {db_dir}")

    @contextmanager
    def _get_connection(self):
        """Context manager for database connections."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_db(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS interaction_records (
                    user_key TEXT PRIMARY KEY,
                    payload TEXT NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

        logger.debug(f"Interaction store initialized at {self.db_path}")

    def load(self, user_key: str) -> Optional[UserInteraction]:
        """
        Load the stored interaction record for a user.

        Returns:
            The stored record, or None if nothing has been saved yet
        """
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT payload FROM interaction_records WHERE user_key = ?",
                (user_key,),
            ).fetchone()

        if row is None:
            return None

        interaction = UserInteraction.from_dict(json.loads(row["payload"]))
        logger.debug(f"Loaded {interaction.total()} interactions for {user_key}")
        return interaction

    def save(self, user_key: str, interaction: UserInteraction) -> None:
        """Insert or replace the interaction record for a user."""
        payload = json.dumps(interaction.to_dict())
        with self._get_connection() as conn:
            conn.execute(
                """
                INSERT INTO interaction_records (user_key, payload, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(user_key) DO UPDATE SET
                    payload = excluded.payload,
                    updated_at = excluded.updated_at
                """,
                (user_key, payload, utc_now().isoformat()),
            )

        logger.debug(f"Saved {interaction.total()} interactions for {user_key}")

    def delete(self, user_key: str) -> bool:
        """
        Remove a user's stored history.

        Returns:
            True if a record was removed
        """
        with self._get_connection() as conn:
            cursor = conn.execute(
                "DELETE FROM interaction_records WHERE user_key = ?",
                (user_key,),
            )
            removed = cursor.rowcount > 0

        if removed:
            logger.warning(f"Interaction history for {user_key} has been reset")
        return removed

    def list_keys(self) -> List[str]:
        """Return every user key with stored history."""
        with self._get_connection() as conn:
            return [
                row["user_key"]
                for row in conn.execute(
                    "SELECT user_key FROM interaction_records ORDER BY user_key"
                )
            ]
