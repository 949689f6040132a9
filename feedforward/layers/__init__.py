from .Layer import Layer
from .LinearLayer import LinearLayer
from .PlainLinearLayer import PlainLinearLayer
from .ReLULinearLayer import ReLULinearLayer
from .TanhLinearLayer import TanhLinearLayer

__all__ = [
    "Layer",
    "LinearLayer",
    "PlainLinearLayer",
    "ReLULinearLayer",
    "TanhLinearLayer",
]
