import hashlib
import pytest
from datetime import datetime
from disk_inventory import config
from disk_inventory.database.ops import RecordStore
from disk_inventory.exceptions import IntegrityError
from disk_inventory.integrity import build_run_metadata, cell_text, table_signature, verify_store
from disk_inventory.models import FileRecord

SALT = "test-salt"

def _fill(store, placeholders, n=7):
    store.insert_batch(placeholders(n))
    records = store.read_range(1, n)
    for rec in records:
        rec.file_name = f"f{rec.id}.bin"
        rec.file_extension = ".bin"
        rec.size_bytes = rec.id * 10
        rec.hash_md5 = hashlib.md5(str(rec.id).encode()).hexdigest()
    store.update_batch(records)

def test_empty_table_signature(conn):
    # No cells -> hash of empty input
    assert table_signature(conn, "data", SALT) == hashlib.md5(b"").hexdigest()

def test_signature_matches_manual_computation(store):
    store.insert_batch([FileRecord.placeholder("/a.txt")])

    expected = b""
    for value in (1, "/a.txt", "", "", "", None, "", ""):
        expected += hashlib.md5((SALT + cell_text(value)).encode()).digest()

    assert store.digest("data", SALT) == hashlib.md5(expected).hexdigest()

def test_signature_is_repeatable(store, placeholders):
    _fill(store, placeholders)
    assert store.digest("data", SALT) == store.digest("data", SALT)

def test_changing_one_cell_changes_signature(store, placeholders):
    _fill(store, placeholders)
    before = store.digest("data", SALT)

    (rec,) = store.read_range(4, 4)
    rec.size_bytes += 1
    store.update_batch([rec])

    assert store.digest("data", SALT) != before

def test_appending_a_row_changes_signature(store, placeholders):
    _fill(store, placeholders)
    before = store.digest("data", SALT)

    store.insert_batch([FileRecord.placeholder("/data/eighth.bin")])

    assert store.count() == 8
    assert store.digest("data", SALT) != before

def test_salt_changes_signature(store, placeholders):
    _fill(store, placeholders)
    assert store.digest("data", SALT) != store.digest("data", config.CHALLENGE)

def test_row_order_matters(store):
    # Swapping the contents of two rows keeps the set of paths but moves them
    store.insert_batch([FileRecord.placeholder("/a"), FileRecord.placeholder("/b")])
    before = store.digest("data", SALT)

    a, b = store.read_range(1, 2)
    a.full_path, b.full_path = b.full_path, a.full_path
    store.update_batch([a, b])

    assert store.digest("data", SALT) != before

def test_unknown_table_rejected(store):
    with pytest.raises(ValueError):
        store.digest("sqlite_master", SALT)

def test_cell_text():
    assert cell_text(None) == ""
    assert cell_text(42) == "42"
    assert cell_text("x") == "x"

def test_build_run_metadata_and_verify(conn, placeholders):
    store = RecordStore(conn)
    _fill(store, placeholders)

    meta = build_run_metadata(conn, datetime(2024, 5, 6, 7, 8, 9))
    store.insert_metadata(meta)

    assert meta.challenge == config.CHALLENGE
    assert meta.date_db_creation == "2024-05-06 07:08:09"
    assert meta.signature_md5 == store.digest("data", config.CHALLENGE)
    assert verify_store(conn)

    (rec,) = store.read_range(2, 2)
    rec.hash_md5 = "0" * 32
    store.update_batch([rec])

    assert not verify_store(conn)

def test_verify_without_metadata_raises(conn):
    with pytest.raises(IntegrityError):
        verify_store(conn)
