import threading
from disk_inventory.enrichment.progress import ProgressReporter, TqdmProgress

def test_concurrent_increments_are_not_lost():
    progress = ProgressReporter()
    progress.start(8 * 500)

    def bump():
        for _ in range(500):
            progress.increment()

    threads = [threading.Thread(target=bump) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert progress.count == 4000
    assert progress.total == 4000

def test_tqdm_progress_tracks_bar():
    progress = TqdmProgress(desc="test")
    progress.start(3)
    for _ in range(3):
        progress.increment()

    assert progress.count == 3
    assert progress._bar.n == 3
    progress.close()
    assert progress._bar is None
