from .Backend import backend
from .softmax import softmax
from .labels import to_indices_labels, to_one_hot_labels
from .parallel import range_par_exec

__all__ = [
    "backend",
    "softmax",
    "to_indices_labels",
    "to_one_hot_labels",
    "range_par_exec",
]
