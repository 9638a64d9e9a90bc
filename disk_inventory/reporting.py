import csv
import logging
from datetime import timedelta
from pathlib import Path
from typing import List

from .database.ops import RecordStore
from .models import DATA_COLUMNS, RunSummary


def format_summary(summary: RunSummary) -> List[str]:
    """Human readable lines describing a finished run."""
    elapsed = timedelta(seconds=round(summary.elapsed_sec, 3))
    return [
        f"Files inventoried: {summary.record_count}",
        f"Workers:           {summary.workers}",
        f"Time elapsed:      {elapsed}",
        f"Database:          {summary.db_path}",
        f"Signature (MD5):   {summary.signature}",
    ]


class ReportGenerator:
    def __init__(self, store: RecordStore):
        self.store = store

    def export_csv(self, output_csv: Path, page_size: int = 1000) -> int:
        """
        Writes the whole data table to CSV in id order, paging through the
        store so large inventories are never fully in memory.
        Returns the number of rows written.
        """
        output_csv = Path(output_csv)
        logging.info(f"Exporting inventory -> {output_csv}")

        total = self.store.count()
        written = 0

        with open(output_csv, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(DATA_COLUMNS)

            lo = 1
            while lo <= total:
                hi = lo + page_size - 1
                for rec in self.store.read_range(lo, hi):
                    writer.writerow(["" if v is None else v for v in rec.as_row()])
                    written += 1
                lo = hi + 1

        logging.info(f"Export complete. Wrote {written} rows.")
        return written
