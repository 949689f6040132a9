import numpy as np

from ..helpers.Backend import backend
from ..helpers.softmax import softmax
from ..helpers.labels import to_indices_labels
from ..helpers.parallel import range_par_exec
from ..errors import InvalidArgument


class SoftmaxLoss:
    """
    Categorical cross-entropy over row-wise softmax, fused with its gradient.

    The gradient is taken with respect to the output layer's signals and is only
    exact when that layer's activation is the identity.
    """
    def __init__(self):
        # cache from forward
        self.probs = None
        self.m = None
        self.Y = None

    def forward(self, outputs, Y_onehot):
        """
        outputs: (batch, num_classes)  -- output layer activations
        Y_onehot: (batch, num_classes)
        returns: ((cross_entropy, misclass), probs)
        """
        outputs = backend.astype_default(outputs)
        labels = backend.ensure_array(Y_onehot)
        Y = backend.astype_default(labels)
        if outputs.shape != Y.shape:
            raise InvalidArgument(
                f"outputs of shape {outputs.shape} do not match labels of shape {Y.shape}"
            )

        self.m = Y.shape[0]
        self.Y = Y

        probs = softmax(outputs, axis=1)
        self.probs = probs

        # No epsilon: a zero probability yields -inf in the log
        selected = backend.sum(probs * Y, axis=1)
        cross_entropy = -float(backend.sum(backend.log(selected))) / self.m

        predicted = self.predicted_classes(probs)
        true = backend.to_cpu(to_indices_labels(labels))
        misclass = float(np.sum(predicted != true)) / self.m

        return (cross_entropy, misclass), probs

    def backward(self):
        """
        dL/dsignals = (probs - Y)/m
        """
        if self.probs is None or self.Y is None or self.m is None:
            raise ValueError("Must call forward() before backward()")
        return (self.probs - self.Y) / self.m

    def evaluate(self, outputs, Y_onehot):
        losses, _ = self.forward(outputs, Y_onehot)
        return losses, self.backward()

    @staticmethod
    def predicted_classes(probs):
        # Row-wise arg-max; ties go to the first index found in the row
        probs_cpu = np.asarray(backend.to_cpu(probs))
        predicted = np.empty(probs_cpu.shape[0], dtype=np.int64)

        def _scan_row(row_number):
            predicted[row_number] = np.argmax(probs_cpu[row_number])

        range_par_exec(probs_cpu.shape[0], _scan_row)
        return predicted
