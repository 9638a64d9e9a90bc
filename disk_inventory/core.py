import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from .database.db import DBManager
from .database.ops import RecordStore
from .enrichment.progress import ProgressReporter, TqdmProgress
from .enrichment.worker import run_workers
from .exceptions import ConfigError
from .integrity import build_run_metadata
from .models import RunSummary
from .scanning.filesystem import FileEnumerator
from .scanning.hasher import FileHasher
from . import config
from . import system


class InventoryApp:
    def __init__(self,
                 output_dir: Path,
                 batch_size: int = config.BATCH_MAX_SIZE,
                 progress_factory: Callable[[], ProgressReporter] = TqdmProgress,
                 hasher: Optional[FileHasher] = None):
        self.output_dir = Path(output_dir)
        self.batch_size = batch_size
        self.progress_factory = progress_factory
        self.hasher = hasher

    def run(self, root: Path, workers: int) -> RunSummary:
        """
        Executes one inventory run into a fresh store.
        1. Enumerate (placeholder record per file)
        2. Enrich (one worker per id partition, all joined)
        3. Sign (digest over the data table + metadata row)

        Fatal errors propagate; a half-written store is left as is.
        """
        limit = system.max_workers()
        if not 1 <= workers <= limit:
            raise ConfigError(f"Worker count must be between 1 and {limit}, got {workers}.")
        if self.batch_size < 1:
            raise ConfigError(f"Batch size must be positive, got {self.batch_size}.")

        started_at = datetime.now()
        t0 = time.perf_counter()

        db_manager = DBManager.create(self.output_dir)
        logging.info(f"Database saved as '{db_manager.db_path}'")

        # --- Step 1: Enumeration ---
        with db_manager as conn:
            store = RecordStore(conn)
            FileEnumerator(self.batch_size).populate(store, root)
            total = store.count()
        logging.info(f"Got {total} files")

        # --- Step 2: Enrichment ---
        progress = self.progress_factory()
        progress.start(total)
        try:
            processed = run_workers(
                db_manager.db_path,
                total,
                workers,
                progress,
                batch_size=self.batch_size,
                hasher=self.hasher,
            )
        finally:
            progress.close()
        logging.info(f"Enriched {processed} records with {workers} workers")

        # --- Step 3: Signature ---
        logging.info("Update metadata table")
        with db_manager as conn:
            store = RecordStore(conn)
            meta = build_run_metadata(conn, started_at)
            store.insert_metadata(meta)

        return RunSummary(
            record_count=total,
            workers=workers,
            elapsed_sec=time.perf_counter() - t0,
            db_path=db_manager.db_path,
            signature=meta.signature_md5,
        )
