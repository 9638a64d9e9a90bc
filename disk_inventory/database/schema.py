"""
Database schema definitions.
"""
import sqlite3
import logging


def init_schema(conn: sqlite3.Connection):
    """
    Applies the inventory schema to the database.
    Idempotent: safe to run on every connect.
    """
    with conn:
        # 1. Run Metadata
        # One row per completed run, appended after all workers join
        conn.execute("""
        CREATE TABLE IF NOT EXISTS metadata (
            id                  INTEGER PRIMARY KEY AUTOINCREMENT,
            signature_md5       TEXT,
            challenge           TEXT,
            so                  TEXT,
            architecture        TEXT,
            date_db_creation    TEXT
        );
        """)

        # 2. File Records
        # ids are handed out by the engine, dense from 1 on a fresh store.
        # The partition scheduler relies on that.
        conn.execute("""
        CREATE TABLE IF NOT EXISTS data (
            id                      INTEGER PRIMARY KEY AUTOINCREMENT,
            full_path               TEXT NOT NULL,
            file_name               TEXT,
            file_extension          TEXT,
            hash_md5                TEXT,
            size_bytes              INTEGER,
            date_creation           TEXT,
            date_last_modification  TEXT
        );
        """)

    logging.debug("Database schema initialized.")
