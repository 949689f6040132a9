import numpy as np
import pytest

from feedforward.helpers.parallel import range_par_exec


@pytest.mark.parametrize("num_rows, n_workers", [(0, 4), (3, 4), (1000, 4), (1001, 3), (50, 1)])
def test_every_row_visited_once(num_rows, n_workers):
    visits = np.zeros(num_rows, dtype=np.int64)

    def visit(row_number):
        visits[row_number] += 1

    range_par_exec(num_rows, visit, n_workers=n_workers)
    np.testing.assert_array_equal(visits, np.ones(num_rows, dtype=np.int64))


def test_worker_exception_propagates():
    def fail(row_number):
        if row_number == 500:
            raise RuntimeError("row failed")

    with pytest.raises(RuntimeError, match="row failed"):
        range_par_exec(1000, fail, n_workers=4)
