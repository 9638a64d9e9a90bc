"""
Static range partitioning of record ids across workers.

Each worker derives its own range from (total, workers, ordinal) alone, so no
shared counter or lock is needed. Ranges are contiguous, 1-indexed and cover
1..total exactly once. There is no rebalancing: a worker that draws many large
files simply finishes later.
"""
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class IdRange:
    lo: int
    hi: int

    @property
    def is_empty(self) -> bool:
        return self.hi < self.lo

    @property
    def size(self) -> int:
        return max(0, self.hi - self.lo + 1)

    def ids(self) -> range:
        return range(self.lo, self.hi + 1)


def partition_range(total: int, workers: int, ordinal: int) -> IdRange:
    """
    Range of ids owned by worker `ordinal` (1-indexed) out of `workers`.

    Every worker but the last gets total // workers ids; the last one takes
    whatever is left. With fewer records than workers the leading workers
    get empty ranges and the last one gets them all.
    """
    if workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")
    if not 1 <= ordinal <= workers:
        raise ValueError(f"ordinal must be in 1..{workers}, got {ordinal}")
    if total < 0:
        raise ValueError(f"total must be >= 0, got {total}")

    base = total // workers
    lo = 1 + (ordinal - 1) * base
    hi = total if ordinal == workers else lo + base - 1
    return IdRange(lo, hi)


def partition_all(total: int, workers: int) -> List[IdRange]:
    return [partition_range(total, workers, k) for k in range(1, workers + 1)]
