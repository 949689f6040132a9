from .Layer import Layer
from ..helpers.Backend import backend
from ..errors import InvalidArgument


class LinearLayer(Layer):
    """
    Affine layer with the bias folded into the weights, followed by a pointwise
    activation.

    Subclasses implement `activate(z)` and `differentiate(z)` over whole arrays;
    the latter must be the derivative of the former.

    weights: (in_dim + 1, out_dim), the last row is the bias
    """
    def __init__(self, in_dim, out_dim, max_weight=1.0, seed=42):
        if in_dim <= 0 or out_dim <= 0:
            raise InvalidArgument(f"layer dimensions must be positive, got {in_dim}x{out_dim}")
        self.in_dim = in_dim
        self.out_dim = out_dim
        self.max_weight = max_weight

        self.weights = max_weight * backend.uniform(-1.0, 1.0, (in_dim + 1, out_dim), seed=seed)

    def activate(self, z):
        raise NotImplementedError

    def differentiate(self, z):
        raise NotImplementedError

    def feed_forward(self, inputs):
        # inputs: (batch, in_dim)
        # returns: signals, outputs both (batch, out_dim)
        aug_inputs = self._augment_one(inputs)
        signals = backend.matmul(aug_inputs, self.weights)
        return signals, self.activate(signals)

    def back_propagate(self, signals, tgradient):
        diff_signals = self.differentiate(backend.astype_default(signals))
        gradient = diff_signals * backend.astype_default(tgradient)
        return gradient, self._transform_gradient(gradient)

    def seed_back_prop(self, signals, gradient):
        # Corrects the loss gradient for this layer's own activation
        diff_signals = self.differentiate(backend.astype_default(signals))
        corrected_gradient = diff_signals * backend.astype_default(gradient)
        return corrected_gradient, self._transform_gradient(corrected_gradient)

    def update_weights(self, inputs, gradient, lr):
        """Gradient descent step, in place. lr is validated by the caller."""
        gradient = backend.astype_default(gradient)
        aug_inputs = self._augment_one(inputs)
        if gradient.shape != (aug_inputs.shape[0], self.out_dim):
            raise InvalidArgument(
                f"gradient of shape {gradient.shape} does not fit "
                f"{aug_inputs.shape[0]} inputs and {self.out_dim} outputs"
            )
        step = lr * backend.matmul(backend.transpose(aug_inputs), gradient)
        self.weights -= step

    def params(self):
        return [self.weights]

    # ----- helpers -----
    def _transform_gradient(self, gradient):
        # Bias row has no predecessor
        return backend.matmul(gradient, backend.transpose(self.weights[:-1]))

    def _augment_one(self, inputs):
        inputs = backend.astype_default(inputs)
        if inputs.ndim != 2 or inputs.shape[1] != self.in_dim:
            raise InvalidArgument(
                f"expected inputs with {self.in_dim} columns, got shape {inputs.shape}"
            )
        bias_col = backend.ones((inputs.shape[0], 1))
        return backend.hstack([inputs, bias_col])
