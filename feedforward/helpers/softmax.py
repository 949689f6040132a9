from .Backend import backend


def softmax(x, axis=None):
    """
    Normalized exponential of `x`.

    axis=1 divides each row by its own sum, axis=0 each column by its own sum,
    axis=None the whole matrix by the grand total. There is no max-subtraction:
    large entries overflow to inf and give nan, exactly as the plain formula does.
    """
    raised = backend.exp(backend.astype_default(x))
    if axis is None:
        return raised / backend.sum(raised)
    return raised / backend.sum(raised, axis=axis, keepdims=True)
