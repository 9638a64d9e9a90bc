import os
import stat
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from pathlib import Path
from typing import Optional

from .. import config
from ..database.db import DBManager
from ..database.ops import RecordStore
from ..exceptions import FileHashError
from ..models import FileRecord
from ..scanning.hasher import FileHasher
from .partition import IdRange, partition_range
from .progress import ProgressReporter


def _format_ts(ts: float) -> str:
    try:
        return datetime.fromtimestamp(ts).strftime(config.DATE_FORMAT)
    except (OverflowError, OSError, ValueError):
        # Timestamps outside what the platform can represent
        return ""


def _creation_time(stat_result: os.stat_result) -> float:
    # st_birthtime exists on macOS/BSD and on Windows from Python 3.12.
    # Elsewhere st_ctime is the closest the platform offers (creation time on
    # older Windows builds, inode change time on Linux).
    birth = getattr(stat_result, "st_birthtime", None)
    return birth if birth is not None else stat_result.st_ctime


def enrich_record(record: FileRecord, hasher: FileHasher) -> FileRecord:
    """
    Fills in name, extension, size, timestamps and MD5 for one record.

    A file that vanished or cannot be read leaves the affected fields empty.
    That is the record's final state for the run, not an error.
    """
    path = Path(record.full_path)

    try:
        st = path.stat()
    except OSError as e:
        logging.debug(f"Cannot stat {path}: {e}")
        return record

    record.file_name = path.name
    record.file_extension = os.path.splitext(record.full_path)[1]
    record.size_bytes = st.st_size
    record.date_last_modification = _format_ts(st.st_mtime)
    record.date_creation = _format_ts(_creation_time(st))

    # Pipes, sockets and devices are recorded but never read
    if not stat.S_ISREG(st.st_mode):
        return record

    try:
        record.hash_md5 = hasher.md5(path)
    except FileHashError as e:
        logging.debug(str(e))

    return record


class EnrichmentWorker:
    def __init__(self,
                 db_path: Path,
                 id_range: IdRange,
                 progress: ProgressReporter,
                 batch_size: int = config.BATCH_MAX_SIZE,
                 hasher: Optional[FileHasher] = None,
                 name: str = "worker",
                 stop_event: Optional[threading.Event] = None):
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self.db_path = db_path
        self.id_range = id_range
        self.progress = progress
        self.batch_size = batch_size
        self.hasher = hasher or FileHasher()
        self.name = name
        self.stop_event = stop_event or threading.Event()

    def run(self) -> int:
        """
        Enriches every record in the assigned range, one sub-batch at a time,
        over a connection owned by this worker. Returns records processed.

        Stops between records once stop_event is set (another worker hit a
        fatal error); the unfinished sub-batch is not written back.
        """
        if self.id_range.is_empty:
            logging.debug(f"{self.name}: empty range, nothing to do")
            return 0

        logging.debug(f"{self.name}: processing ids {self.id_range.lo}..{self.id_range.hi}")
        try:
            return self._run_range()
        except BaseException:
            self.stop_event.set()
            raise

    def _run_range(self) -> int:
        processed = 0

        with DBManager(self.db_path) as conn:
            store = RecordStore(conn)
            lo = self.id_range.lo
            while lo <= self.id_range.hi:
                if self.stop_event.is_set():
                    return self._stopped(processed)
                hi = min(lo + self.batch_size - 1, self.id_range.hi)
                records = store.read_range(lo, hi)

                for record in records:
                    if self.stop_event.is_set():
                        return self._stopped(processed)
                    enrich_record(record, self.hasher)
                    self.progress.increment()

                store.update_batch(records)
                processed += len(records)
                lo = hi + 1

        logging.debug(f"{self.name}: done, {processed} records")
        return processed

    def _stopped(self, processed: int) -> int:
        logging.warning(f"{self.name}: stopping early after {processed} records")
        return processed


def run_workers(db_path: Path,
                total: int,
                workers: int,
                progress: ProgressReporter,
                batch_size: int = config.BATCH_MAX_SIZE,
                hasher: Optional[FileHasher] = None) -> int:
    """
    Runs one EnrichmentWorker per partition and waits for all of them.
    The first worker failure signals the others to stop at their next record
    and is re-raised once they have.
    """
    stop_event = threading.Event()
    pool = [
        EnrichmentWorker(
            db_path,
            partition_range(total, workers, k),
            progress,
            batch_size=batch_size,
            hasher=hasher,
            name=f"worker-{k}",
            stop_event=stop_event,
        )
        for k in range(1, workers + 1)
    ]

    processed = 0
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="enrich") as executor:
        futures = {executor.submit(w.run): w for w in pool}
        for future in as_completed(futures):
            try:
                processed += future.result()
            except BaseException:
                stop_event.set()
                raise

    return processed
