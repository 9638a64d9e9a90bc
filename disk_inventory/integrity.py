"""
Whole-table integrity signatures.

A signature is order dependent: every cell, row by row in id order and column
by column in the declared column order, is salted and hashed, the digests are
concatenated, and the concatenation is hashed once more. Reordering rows or
columns changes the result even when the set of values is the same.
"""
import hashlib
import logging
import sqlite3
from datetime import datetime
from typing import Dict, Tuple

from . import config
from . import system
from .exceptions import DatabaseError, IntegrityError
from .models import DATA_COLUMNS, METADATA_COLUMNS, RunMetadata

TABLE_COLUMNS: Dict[str, Tuple[str, ...]] = {
    "data": DATA_COLUMNS,
    "metadata": METADATA_COLUMNS,
}


def cell_text(value) -> str:
    """Textual form of a cell as it enters the digest."""
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.hex()
    return str(value)


def table_signature(conn: sqlite3.Connection, table: str, salt: str) -> str:
    """Computes the salted MD5 signature of every cell of `table`."""
    columns = TABLE_COLUMNS.get(table)
    if columns is None:
        raise ValueError(f"Unknown table: {table!r}")

    accumulated = bytearray()
    try:
        cur = conn.execute(f"SELECT {', '.join(columns)} FROM {table} ORDER BY id")
        for row in cur:
            for value in row:
                cell = hashlib.md5((salt + cell_text(value)).encode("utf-8"))
                accumulated += cell.digest()
    except sqlite3.Error as e:
        raise DatabaseError(f"Failed to read table '{table}' for signature: {e}") from e

    return hashlib.md5(bytes(accumulated)).hexdigest()


def build_run_metadata(conn: sqlite3.Connection,
                       started_at: datetime,
                       salt: str = config.CHALLENGE) -> RunMetadata:
    """Signs the data table as it stands and describes the host."""
    signature = table_signature(conn, "data", salt)
    return RunMetadata(
        signature_md5=signature,
        challenge=salt,
        so=system.host_platform(),
        architecture=system.host_architecture(),
        date_db_creation=started_at.strftime(config.DATE_FORMAT),
    )


def verify_store(conn: sqlite3.Connection) -> bool:
    """
    Recomputes the data table signature with the challenge recorded in the
    latest metadata row and compares it with the stored signature.
    """
    try:
        row = conn.execute(
            f"SELECT {', '.join(METADATA_COLUMNS)} FROM metadata ORDER BY id DESC LIMIT 1"
        ).fetchone()
    except sqlite3.Error as e:
        raise IntegrityError(f"Store has no readable metadata table: {e}") from e

    if row is None:
        raise IntegrityError("Store has no metadata row; the run never completed.")

    meta = RunMetadata.from_row(row)
    actual = table_signature(conn, "data", meta.challenge)
    if actual != meta.signature_md5:
        logging.warning(f"Signature mismatch: stored {meta.signature_md5}, computed {actual}")
        return False
    return True
