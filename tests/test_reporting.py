import csv
from pathlib import Path
from disk_inventory.models import DATA_COLUMNS, RunSummary
from disk_inventory.reporting import ReportGenerator, format_summary

def test_format_summary():
    summary = RunSummary(
        record_count=1234,
        workers=4,
        elapsed_sec=75.5,
        db_path=Path("/out/1700000000.sqlite"),
        signature="0123456789abcdef0123456789abcdef",
    )

    lines = format_summary(summary)

    assert any("1234" in line for line in lines)
    assert any("0:01:15.500000" in line for line in lines)
    assert any(str(Path("/out/1700000000.sqlite")) in line for line in lines)
    assert any(summary.signature in line for line in lines)

def test_export_csv_pages_through_store(store, placeholders, tmp_path):
    store.insert_batch(placeholders(25))
    records = store.read_range(1, 3)
    for rec in records:
        rec.size_bytes = 0
        rec.hash_md5 = "d41d8cd98f00b204e9800998ecf8427e"
    store.update_batch(records)

    output_csv = tmp_path / "report.csv"
    written = ReportGenerator(store).export_csv(output_csv, page_size=10)

    with open(output_csv, "r", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))

    assert written == 25
    assert list(rows[0].keys()) == list(DATA_COLUMNS)
    assert [int(r["id"]) for r in rows] == list(range(1, 26))
    assert rows[0]["size_bytes"] == "0"
    # Unenriched size is exported as an empty cell, not "None"
    assert rows[10]["size_bytes"] == ""
    assert rows[10]["full_path"] == "/data/f11.bin"

def test_export_empty_store(store, tmp_path):
    output_csv = tmp_path / "report.csv"
    assert ReportGenerator(store).export_csv(output_csv) == 0
    assert output_csv.read_text(encoding="utf-8").strip() == ",".join(DATA_COLUMNS)
