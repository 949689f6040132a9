from .FeedForwardNN import FeedForwardNN
from .MultiClassNN import MultiClassNN
from .errors import InvalidArgument
from .layers import (
    Layer,
    LinearLayer,
    PlainLinearLayer,
    ReLULinearLayer,
    TanhLinearLayer,
)
from .loss import SoftmaxLoss

__all__ = [
    "FeedForwardNN",
    "MultiClassNN",
    "InvalidArgument",
    "Layer",
    "LinearLayer",
    "PlainLinearLayer",
    "ReLULinearLayer",
    "TanhLinearLayer",
    "SoftmaxLoss",
]
