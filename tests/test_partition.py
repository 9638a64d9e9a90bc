import pytest
from disk_inventory.enrichment.partition import IdRange, partition_all, partition_range

def test_seven_records_three_workers():
    ranges = partition_all(7, 3)
    assert [(r.lo, r.hi) for r in ranges] == [(1, 2), (3, 4), (5, 7)]

@pytest.mark.parametrize("total", range(0, 41))
@pytest.mark.parametrize("workers", [1, 2, 3, 4, 7, 12])
def test_ranges_are_disjoint_and_cover_everything(total, workers):
    ranges = partition_all(total, workers)
    assert len(ranges) == workers

    seen = []
    for r in ranges:
        seen.extend(r.ids())

    assert len(seen) == len(set(seen)), "ranges overlap"
    assert sorted(seen) == list(range(1, total + 1))

@pytest.mark.parametrize("total,workers", [(0, 3), (1, 4), (2, 5), (5, 8)])
def test_fewer_records_than_workers(total, workers):
    ranges = partition_all(total, workers)

    for r in ranges[:-1]:
        assert r.is_empty
        assert r.size == 0
    last = ranges[-1]
    assert (last.lo, last.hi) == (1, total)
    for r in ranges:
        assert all(1 <= i <= total for i in r.ids())

def test_ranges_do_not_depend_on_other_workers():
    # A worker computes its own range from the ordinal alone
    assert partition_range(100, 4, 3) == IdRange(51, 75)
    assert partition_range(100, 4, 4) == IdRange(76, 100)

def test_last_worker_takes_remainder():
    ranges = partition_all(10, 4)
    assert [r.size for r in ranges] == [2, 2, 2, 4]

@pytest.mark.parametrize("total,workers,ordinal", [
    (10, 0, 1),
    (10, 3, 0),
    (10, 3, 4),
    (-1, 3, 1),
])
def test_invalid_arguments(total, workers, ordinal):
    with pytest.raises(ValueError):
        partition_range(total, workers, ordinal)
