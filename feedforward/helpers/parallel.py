import os
from concurrent.futures import ThreadPoolExecutor

# Below this many rows per worker the pool costs more than it saves
MIN_ROWS_PER_WORKER = 4


def _run_chunk(func, start, end):
    for row_number in range(start, end):
        func(row_number)


def range_par_exec(num_rows, func, n_workers=None):
    """
    Calls func(row_number) for every row in [0, num_rows) and returns once all
    calls have finished.

    Rows are split into contiguous chunks and handed to a thread pool. No order
    is guaranteed between rows, so func must only touch memory owned by its row.
    An exception raised by any call is re-raised here after the join.
    """
    if n_workers is None:
        n_workers = os.cpu_count() or 1

    # For small batches, don't bother with the pool
    if n_workers <= 1 or num_rows < n_workers * MIN_ROWS_PER_WORKER:
        _run_chunk(func, 0, num_rows)
        return

    chunk_size = -(-num_rows // n_workers)
    with ThreadPoolExecutor(max_workers=n_workers) as pool:
        futures = [
            pool.submit(_run_chunk, func, start, min(start + chunk_size, num_rows))
            for start in range(0, num_rows, chunk_size)
        ]
        for future in futures:
            future.result()
