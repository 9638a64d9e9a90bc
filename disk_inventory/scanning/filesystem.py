import os
import logging
from pathlib import Path
from typing import Iterator, List

from .. import config
from ..database.ops import RecordStore
from ..exceptions import EnumerationError
from ..models import FileRecord


def _text_path(path: str) -> str:
    # Names that are not valid UTF-8 surface as lone surrogates and cannot be
    # written to SQLite text columns. Store a lossy form instead; enrichment
    # then finds nothing at that path and leaves the record empty.
    try:
        path.encode("utf-8")
    except UnicodeEncodeError:
        logging.warning(f"Recording undecodable name in lossy form: {path!r}")
        return os.fsencode(path).decode("utf-8", "replace")
    return path


class FileEnumerator:
    def __init__(self, batch_size: int = config.BATCH_MAX_SIZE):
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self.batch_size = batch_size

    def populate(self, store: RecordStore, root: Path) -> int:
        """
        Walks root and inserts one placeholder record per file, in batches of
        at most batch_size. Returns the number of records inserted.

        Store failures propagate and abort the run; there is no resuming a
        half-finished walk.
        """
        root = Path(os.path.abspath(root))
        if not os.path.lexists(root):
            raise EnumerationError(f"Root {root} does not exist.")

        logging.info(f"Enumerating files under {root}...")
        batch: List[FileRecord] = []
        inserted = 0

        for path in self.iter_files(root):
            batch.append(FileRecord.placeholder(_text_path(str(path))))
            if len(batch) >= self.batch_size:
                inserted += store.insert_batch(batch)
                batch = []

        if batch:
            inserted += store.insert_batch(batch)

        logging.info(f"Enumeration complete. Found {inserted} files.")
        return inserted

    def iter_files(self, root: Path) -> Iterator[Path]:
        """
        Depth-first walker using os.scandir.
        Yields every entry that is not a directory; symlinks are not
        followed. Directories or entries that fail are dropped. A root that
        is itself a file is yielded as the only entry.
        """
        root = Path(root)
        if not root.is_dir() and os.path.lexists(root):
            yield root
            return

        stack = [root]
        while stack:
            current = stack.pop()

            try:
                with os.scandir(current) as it:
                    entries = list(it)
            except OSError as e:
                logging.debug(f"Skipping unreadable directory {current}: {e}")
                continue

            # Sort for stable traversal order
            entries.sort(key=lambda e: e.name.lower())

            dirs = []
            files = []
            for e in entries:
                try:
                    is_dir = e.is_dir(follow_symlinks=False)
                except OSError as err:
                    logging.debug(f"Skipping unreadable entry {e.path}: {err}")
                    continue
                if is_dir:
                    dirs.append(Path(e.path))
                else:
                    files.append(Path(e.path))

            # Push dirs to stack (reversed so we process A before Z)
            for d in reversed(dirs):
                stack.append(d)

            for f in files:
                yield f
