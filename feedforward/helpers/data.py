import numpy as np

from ..errors import InvalidArgument


def read_data(source, dtype=np.float32):
    """
    Reads whitespace-delimited numeric rows into a (rows, cols) array.

    Args:
        source: path or open text file; every line must hold the same number of values
        dtype: element type of the returned array

    Returns:
        np.ndarray of shape (rows, cols)
    """
    table = np.loadtxt(source, dtype=dtype, ndmin=2)
    if table.size == 0:
        raise InvalidArgument(f"no data rows in {source!r}")
    return table


def split_inputs_labels(table, num_classes):
    """
    Splits a table into leading feature columns and trailing one-hot label columns.

    Returns:
        (inputs, one_hot_labels) with labels as a bool array
    """
    table = np.asarray(table)
    if not 0 < num_classes < table.shape[1]:
        raise InvalidArgument(
            f"cannot take {num_classes} label columns from a table with {table.shape[1]} columns"
        )
    inputs = table[:, :-num_classes]
    one_hot_labels = table[:, -num_classes:].astype(bool)
    return inputs, one_hot_labels
