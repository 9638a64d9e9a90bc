import sqlite3
import logging
from typing import List, Sequence

from ..exceptions import DatabaseError
from ..integrity import table_signature
from ..models import DATA_COLUMNS, METADATA_COLUMNS, FileRecord, RunMetadata


class RecordStore:
    """
    ID-addressed access to the data and metadata tables over one connection.

    Every write runs in its own transaction and is all-or-nothing. Nothing
    here serializes across connections; workers sharing a store must touch
    disjoint id ranges.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def insert_batch(self, records: Sequence[FileRecord]) -> int:
        """
        Appends placeholder records in one transaction.
        ids are assigned by the engine; any row error rolls back the batch.
        """
        if not records:
            return 0

        rows = [rec.as_row()[1:] for rec in records]
        try:
            with self.conn:
                self.conn.executemany("""
                    INSERT INTO data (
                        full_path, file_name, file_extension, hash_md5,
                        size_bytes, date_creation, date_last_modification
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                """, rows)
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to insert batch of {len(rows)} records: {e}") from e

        logging.debug(f"Inserted {len(rows)} records")
        return len(rows)

    def read_range(self, lo_id: int, hi_id: int) -> List[FileRecord]:
        """Returns records with lo_id <= id <= hi_id, ordered by id."""
        if lo_id > hi_id:
            return []
        try:
            cur = self.conn.execute(
                f"SELECT {', '.join(DATA_COLUMNS)} FROM data WHERE id >= ? AND id <= ? ORDER BY id",
                (lo_id, hi_id),
            )
            return [FileRecord.from_row(row) for row in cur.fetchall()]
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to read records {lo_id}..{hi_id}: {e}") from e

    def update_batch(self, records: Sequence[FileRecord]) -> int:
        """Rewrites every field except id for the given records, in one transaction."""
        if not records:
            return 0

        rows = []
        for rec in records:
            if rec.id is None:
                raise ValueError(f"Cannot update a record without id: {rec.full_path}")
            rows.append(rec.as_row()[1:] + (rec.id,))

        try:
            with self.conn:
                self.conn.executemany("""
                    UPDATE data
                    SET full_path = ?,
                        file_name = ?,
                        file_extension = ?,
                        hash_md5 = ?,
                        size_bytes = ?,
                        date_creation = ?,
                        date_last_modification = ?
                    WHERE id = ?
                """, rows)
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to update batch of {len(rows)} records: {e}") from e

        return len(rows)

    def count(self) -> int:
        try:
            return self.conn.execute("SELECT COUNT(*) FROM data").fetchone()[0]
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to count records: {e}") from e

    def digest(self, table: str, salt: str) -> str:
        return table_signature(self.conn, table, salt)

    def insert_metadata(self, meta: RunMetadata) -> int:
        try:
            with self.conn:
                cur = self.conn.execute("""
                    INSERT INTO metadata (signature_md5, challenge, so, architecture, date_db_creation)
                    VALUES (?, ?, ?, ?, ?)
                """, meta.as_row()[1:])
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to insert run metadata: {e}") from e

        if cur.lastrowid is None:
            raise DatabaseError("Metadata INSERT failed to return a row ID.")
        meta.id = cur.lastrowid
        return meta.id

    def fetch_metadata(self) -> List[RunMetadata]:
        try:
            cur = self.conn.execute(
                f"SELECT {', '.join(METADATA_COLUMNS)} FROM metadata ORDER BY id"
            )
            return [RunMetadata.from_row(row) for row in cur.fetchall()]
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to read run metadata: {e}") from e
