import threading
from typing import Optional

from tqdm import tqdm


class ProgressReporter:
    """
    Counts processed records across worker threads.

    Handed to every worker explicitly; increments are serialized by a lock
    so none are lost. Subclasses add a display.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._count = 0
        self.total = 0

    def start(self, total: int):
        self.total = total

    def increment(self):
        with self._lock:
            self._count += 1
            self._on_increment()

    def _on_increment(self):
        pass

    def close(self):
        pass

    @property
    def count(self) -> int:
        with self._lock:
            return self._count


class TqdmProgress(ProgressReporter):
    def __init__(self, desc: str = "Processing files"):
        super().__init__()
        self.desc = desc
        self._bar: Optional[tqdm] = None

    def start(self, total: int):
        super().start(total)
        self._bar = tqdm(total=total, desc=self.desc, unit="file")

    def _on_increment(self):
        if self._bar is not None:
            self._bar.update(1)

    def close(self):
        if self._bar is not None:
            self._bar.close()
            self._bar = None
