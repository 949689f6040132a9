from .SoftmaxLoss import SoftmaxLoss

__all__ = ["SoftmaxLoss"]
