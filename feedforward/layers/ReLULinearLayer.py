from .LinearLayer import LinearLayer
from ..helpers.Backend import backend


class ReLULinearLayer(LinearLayer):
    def activate(self, z):
        return backend.maximum(0, z)

    def differentiate(self, z):
        return (z > 0).astype(backend.default_float)
