"""Key-value persistence slot backed by a SQLite database."""

import logging
import sqlite3
from pathlib import Path
from typing import Optional

from .errors import PersistenceError

logger = logging.getLogger(__name__)


class SqliteSlot:
    """Named text slots stored in a single SQLite table."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        self._initialized = False

    def get_connection(self) -> sqlite3.Connection:
        """Get SQLite database connection, creating the schema on first use."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path)
        except (OSError, sqlite3.Error) as e:
            raise PersistenceError(f"Cannot open {self.db_path}: {e}") from e

        if not self._initialized:
            try:
                self._init_db(conn)
            except sqlite3.Error as e:
                conn.close()
                raise PersistenceError(f"Cannot initialize {self.db_path}: {e}") from e
            self._initialized = True
        return conn

    def _init_db(self, conn: sqlite3.Connection) -> None:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS slots (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
            )
        """)
        conn.commit()
        logger.debug(f"Slot table ready in {self.db_path}")

    def read(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None if it was never written."""
        conn = self.get_connection()
        try:
            cursor = conn.execute("SELECT value FROM slots WHERE key = ?", (key,))
            row = cursor.fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Cannot read slot {key!r}: {e}") from e
        finally:
            conn.close()
        return row[0] if row else None

    def write(self, key: str, value: str) -> None:
        """Replace the value stored under key."""
        conn = self.get_connection()
        try:
            with conn:
                conn.execute(
                    """
                    INSERT OR REPLACE INTO slots (key, value, updated_at)
                    VALUES (?, ?, CURRENT_TIMESTAMP)
                    """,
                    (key, value),
                )
        except sqlite3.Error as e:
            raise PersistenceError(f"Cannot write slot {key!r}: {e}") from e
        finally:
            conn.close()
        logger.debug(f"Wrote {len(value)} bytes to slot {key!r}")
