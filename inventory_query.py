#!/usr/bin/env python

import argparse
import sqlite3
from pathlib import Path


def connect_db(db_path: Path) -> sqlite3.Connection:
    if not db_path.exists():
        raise SystemExit(f"DB not found: {db_path}")
    return sqlite3.connect(db_path)


def show_summary(conn: sqlite3.Connection):
    cur = conn.cursor()
    cur.execute("SELECT COUNT(*), COALESCE(SUM(size_bytes), 0) FROM data")
    count, total_bytes = cur.fetchone()
    cur.execute("SELECT COUNT(*) FROM data WHERE hash_md5 IS NULL OR hash_md5 = ''")
    unreadable = cur.fetchone()[0]

    print(f"Records:     {count}")
    print(f"Total bytes: {total_bytes}")
    print(f"Unreadable:  {unreadable}")

    cur.execute("""
        SELECT id, signature_md5, so, architecture, date_db_creation
        FROM metadata
        ORDER BY id
    """)
    runs = cur.fetchall()
    if not runs:
        print("No run metadata (run did not complete).")
        return

    print("\nRuns:")
    print("id   | date_db_creation    | so       | arch   | signature_md5")
    print("-----+---------------------+----------+--------+----------------------------------")
    for rid, sig, so, arch, created in runs:
        print(f"{rid:4d} | {(created or '').ljust(19)} | {(so or '').ljust(8)} | {(arch or '').ljust(6)} | {sig or ''}")


def _resolve_id_from_path(conn: sqlite3.Connection, path: Path):
    cur = conn.cursor()
    for cand in (str(path), path.as_posix()):
        cur.execute("SELECT id FROM data WHERE full_path = ?", (cand,))
        row = cur.fetchone()
        if row:
            return row[0]
    return None


def show_record(conn: sqlite3.Connection, record_id: int):
    cur = conn.cursor()
    cur.execute("""
        SELECT id, full_path, file_name, file_extension, hash_md5, size_bytes,
               date_creation, date_last_modification
        FROM data
        WHERE id = ?
    """, (record_id,))
    row = cur.fetchone()
    if not row:
        print(f"No record with id={record_id}")
        return

    rid, full_path, name, ext, md5, size, created, modified = row
    print("Record:")
    print(f"  id:            {rid}")
    print(f"  full_path:     {full_path}")
    print(f"  file_name:     {name}")
    print(f"  extension:     {ext}")
    print(f"  md5:           {md5}")
    print(f"  size_bytes:    {'' if size is None else size}")
    print(f"  created:       {created}")
    print(f"  modified:      {modified}")


def list_unreadable(conn: sqlite3.Connection):
    cur = conn.cursor()
    cur.execute("""
        SELECT id, size_bytes, full_path
        FROM data
        WHERE hash_md5 IS NULL OR hash_md5 = ''
        ORDER BY id
    """)
    rows = cur.fetchall()
    if not rows:
        print("All records were hashed.")
        return

    print("Records without a content hash (vanished or unreadable):")
    print("id     | size_bytes | full_path")
    print("-------+------------+----------")
    for rid, size, full_path in rows:
        print(f"{rid:6d} | {('' if size is None else str(size)).rjust(10)} | {full_path}")


def list_extensions(conn: sqlite3.Connection):
    cur = conn.cursor()
    cur.execute("""
        SELECT LOWER(COALESCE(file_extension, '')), COUNT(*), COALESCE(SUM(size_bytes), 0)
        FROM data
        GROUP BY 1
        ORDER BY 2 DESC, 1
    """)
    print("ext        | files    | bytes")
    print("-----------+----------+---------------")
    for ext, count, total in cur.fetchall():
        print(f"{(ext or '(none)').ljust(10)} | {str(count).rjust(8)} | {str(total).rjust(14)}")


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Query helper for disk inventory SQLite stores.")
    p.add_argument("--db", required=True, help="Path to a <timestamp>.sqlite inventory store")
    group = p.add_mutually_exclusive_group(required=True)
    group.add_argument("--summary", action="store_true", help="Show record totals and run metadata")
    group.add_argument("--id", type=int, dest="record_id", help="Show a record by id")
    group.add_argument("--path", help="Show a record by full path")
    group.add_argument("--unreadable", action="store_true", help="List records with no content hash")
    group.add_argument("--extensions", action="store_true", help="Count files and bytes per extension")
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    db_path = Path(args.db).resolve()
    conn = connect_db(db_path)

    try:
        if args.summary:
            show_summary(conn)
        elif args.record_id is not None:
            show_record(conn, args.record_id)
        elif args.path:
            record_id = _resolve_id_from_path(conn, Path(args.path))
            if record_id is None:
                print(f"No record found for path: {args.path}")
            else:
                show_record(conn, record_id)
        elif args.unreadable:
            list_unreadable(conn)
        elif args.extensions:
            list_extensions(conn)
    finally:
        conn.close()


if __name__ == "__main__":
    main()
