import pytest
import sqlite3
from disk_inventory.database.db import DBManager
from disk_inventory.database.schema import init_schema
from disk_inventory.database.ops import RecordStore
from disk_inventory.models import FileRecord

@pytest.fixture
def conn():
    """Returns an in-memory SQLite connection with the schema initialized."""
    c = sqlite3.connect(":memory:")
    init_schema(c)
    try:
        yield c
    finally:
        c.close()

@pytest.fixture
def store(conn):
    """Returns a RecordStore attached to the in-memory DB."""
    return RecordStore(conn)

@pytest.fixture
def db_path(tmp_path):
    """Path of a file-backed store with the schema in place."""
    path = tmp_path / "inventory.sqlite"
    with DBManager(path):
        pass
    return path

@pytest.fixture
def make_tree(tmp_path):
    """Creates `count` small files under tmp_path/root and returns the root."""
    def _make(count, name="root"):
        root = tmp_path / name
        root.mkdir()
        for i in range(1, count + 1):
            (root / f"file_{i:04d}.txt").write_bytes(f"content {i}".encode())
        return root
    return _make

@pytest.fixture
def placeholders():
    """Builds n Unenriched records with distinct fake paths."""
    def _build(n, prefix="/data"):
        return [FileRecord.placeholder(f"{prefix}/f{i}.bin") for i in range(1, n + 1)]
    return _build
