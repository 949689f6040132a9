import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

from feedforward import MultiClassNN, PlainLinearLayer


@pytest.fixture
def separable_data():
    # Two classes split by the sign of the first feature
    X = np.array(
        [[1.0, 0.2], [0.8, -0.4], [0.6, 0.5], [0.9, 0.1],
         [-1.0, 0.3], [-0.7, -0.2], [-0.5, 0.6], [-0.9, -0.5]],
        dtype=np.float32,
    )
    Y = np.zeros((8, 2), dtype=bool)
    Y[:4, 0] = True
    Y[4:, 1] = True
    return X, Y


@pytest.fixture
def iris_like_data():
    rng = np.random.default_rng(0)
    centers = np.array([[1.0, 0.0, 0.0, 0.5], [0.0, 1.0, 0.5, 0.0], [0.0, 0.0, 1.0, 1.0]])
    labels = np.repeat(np.arange(3), 10)
    X = (centers[labels] + 0.05 * rng.standard_normal((30, 4))).astype(np.float32)
    Y = np.zeros((30, 3), dtype=bool)
    Y[np.arange(30), labels] = True
    return X, Y


def make_network(X, Y, hidden_dims=(), num_classes=2, seed=42, max_weight=0.5):
    dims = [X.shape[1], *hidden_dims]
    net = MultiClassNN(X, Y, PlainLinearLayer(dims[-1], num_classes, max_weight, seed=seed), verbose=0)
    for i, (d_in, d_out) in enumerate(zip(dims[:-1], dims[1:])):
        net.push_layer(PlainLinearLayer(d_in, d_out, max_weight, seed=seed + i + 1))
    return net


@pytest.fixture
def network_factory():
    return make_network
