from .LinearLayer import LinearLayer
from ..helpers.Backend import backend


class TanhLinearLayer(LinearLayer):
    def activate(self, z):
        return backend.tanh(z)

    def differentiate(self, z):
        # tanh derivative
        return 1 - backend.tanh(z) ** 2
