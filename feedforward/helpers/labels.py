import numpy as np

from .Backend import backend
from .parallel import range_par_exec
from ..errors import InvalidArgument


def to_indices_labels(one_hot_labels):
    """
    Converts one-hot labels (N, C) to class indices (N,).

    Computed as a product against [0, 1, ..., C-1], so it is only meaningful when
    every row holds exactly one true entry. Other rows give a number with no
    range check.
    """
    one_hot = backend.ensure_array(one_hot_labels).astype(np.int64)
    num_classes = one_hot.shape[1]
    indices = backend.arange(num_classes, dtype=np.int64)
    return backend.matmul(one_hot, indices)


def to_one_hot_labels(indices_labels, num_classes):
    """
    Converts class indices (N,) to a boolean one-hot matrix (N, num_classes).

    Raises InvalidArgument if any index is negative or >= num_classes.
    """
    indices = np.asarray(backend.to_cpu(indices_labels)).astype(np.int64).ravel()
    num_rows = indices.shape[0]

    if num_rows > 0:
        if indices.min() < 0:
            raise InvalidArgument("received negative values")
        if indices.max() >= num_classes:
            raise InvalidArgument(
                f"max value {indices.max()} does not match argument `num_classes`={num_classes}"
            )

    one_hot = np.zeros((num_rows, num_classes), dtype=bool)

    def _set_row(row_number):
        one_hot[row_number, indices[row_number]] = True

    range_par_exec(num_rows, _set_row)
    return backend.ensure_array(one_hot)
