"""
Database connection management.
"""
import sqlite3
import logging
import time
from pathlib import Path
from typing import Optional

from .. import config
from ..exceptions import DatabaseError
from .schema import init_schema


class DBManager:
    def __init__(self, db_path: Path, read_only: bool = False):
        self.db_path = Path(db_path)
        self.read_only = read_only
        self._conn: Optional[sqlite3.Connection] = None

    @classmethod
    def create(cls, output_dir: Path) -> "DBManager":
        """
        Returns a manager for a brand new store named after the current
        unix timestamp. Every run gets its own file; an existing one is
        never reused.
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        stamp = int(time.time())
        db_path = output_dir / f"{stamp}{config.DB_SUFFIX}"
        while db_path.exists():
            stamp += 1
            db_path = output_dir / f"{stamp}{config.DB_SUFFIX}"
        return cls(db_path)

    def connect(self) -> sqlite3.Connection:
        """
        Connects to the SQLite database and configures pragmas.
        Each worker calls this on its own manager, so connections are
        never shared across threads.
        """
        if self._conn:
            return self._conn

        logging.debug(f"Connecting to database: {self.db_path}")
        if self.read_only:
            return self._connect_read_only()

        try:
            # IMMEDIATE: a write transaction takes the lock up front, so the
            # busy timeout applies instead of failing on a stale read snapshot.
            self._conn = sqlite3.connect(
                self.db_path, timeout=config.DB_TIMEOUT, isolation_level="IMMEDIATE"
            )

            # WAL lets the readers proceed while another connection writes;
            # writers still queue on the lock for up to DB_TIMEOUT.
            self._conn.execute("PRAGMA journal_mode=WAL;")
            self._conn.execute("PRAGMA synchronous=NORMAL;")
            self._conn.execute("PRAGMA temp_store=MEMORY;")

            init_schema(self._conn)
        except sqlite3.Error as e:
            self.close()
            raise DatabaseError(f"Failed to open database {self.db_path}: {e}") from e

        return self._conn

    def _connect_read_only(self) -> sqlite3.Connection:
        # No pragmas and no schema: an existing file is inspected, never changed
        uri = f"{self.db_path.resolve().as_uri()}?mode=ro"
        try:
            self._conn = sqlite3.connect(uri, uri=True, timeout=config.DB_TIMEOUT)
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to open database {self.db_path} read-only: {e}") from e
        return self._conn

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self):
        return self.connect()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
