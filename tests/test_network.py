import numpy as np
import pytest

from feedforward import (
    FeedForwardNN,
    InvalidArgument,
    MultiClassNN,
    PlainLinearLayer,
    TanhLinearLayer,
)


def aug(x):
    return np.hstack([x, np.ones((x.shape[0], 1))])


def weights_of(net):
    return [layer.weights.copy() for layer in net.layers]


def test_update_pass_pairs_each_layer_with_its_own_inputs_and_gradient():
    rng = np.random.default_rng(3)
    X = rng.standard_normal((6, 3)).astype(np.float32)
    Y = np.zeros((6, 2), dtype=bool)
    Y[np.arange(6), [0, 1, 1, 0, 1, 0]] = True
    lr = 0.3

    net = MultiClassNN(X, Y, PlainLinearLayer(5, 2, 0.5, seed=1), verbose=0)
    net.push_layer(TanhLinearLayer(3, 4, 0.5, seed=2))
    net.push_layer(TanhLinearLayer(4, 5, 0.5, seed=3))
    W1, W2, W3 = [w.astype(np.float64) for w in weights_of(net)]

    # Reference computation, layer by layer
    x = X.astype(np.float64)
    s1 = aug(x) @ W1
    a1 = np.tanh(s1)
    s2 = aug(a1) @ W2
    a2 = np.tanh(s2)
    s3 = aug(a2) @ W3
    probs = np.exp(s3) / np.exp(s3).sum(axis=1, keepdims=True)
    g3 = (probs - Y) / 6
    g2 = (1 - np.tanh(s2) ** 2) * (g3 @ W3[:-1].T)
    g1 = (1 - np.tanh(s1) ** 2) * (g2 @ W2[:-1].T)
    expected = [
        W1 - lr * aug(x).T @ g1,
        W2 - lr * aug(a1).T @ g2,
        W3 - lr * aug(a2).T @ g3,
    ]

    net.train(lr)

    for got, want in zip(weights_of(net), expected):
        np.testing.assert_allclose(got, want, rtol=1e-4, atol=1e-5)


def test_cross_entropy_non_increasing_without_hidden_layers(separable_data, network_factory):
    X, Y = separable_data
    net = network_factory(X, Y)

    losses = [net.train(0.1)[0] for _ in range(40)]

    assert all(b <= a + 1e-6 for a, b in zip(losses, losses[1:]))
    assert losses[-1] < losses[0]


@pytest.mark.parametrize("lr", [-1, float("nan")])
def test_invalid_learning_rate_rejected_before_any_mutation(lr, separable_data, network_factory):
    X, Y = separable_data
    net = network_factory(X, Y, hidden_dims=(3,))
    before = weights_of(net)

    with pytest.raises(InvalidArgument):
        net.train(lr)

    for got, want in zip(weights_of(net), before):
        np.testing.assert_array_equal(got, want)
    assert net.loss is None


@pytest.mark.parametrize("which", ["inputs", "labels"])
def test_inputs_and_labels_must_be_given_together(which, separable_data, network_factory):
    X, Y = separable_data
    net = network_factory(X, Y, hidden_dims=(3,))
    before = weights_of(net)

    with pytest.raises(InvalidArgument):
        if which == "inputs":
            net.train(0.1, X)
        else:
            net.train(0.1, one_hot_labels=Y)

    for got, want in zip(weights_of(net), before):
        np.testing.assert_array_equal(got, want)
    assert net.loss is None


def test_batch_with_too_few_labels_leaves_weights_alone(separable_data, network_factory):
    X, Y = separable_data
    net = network_factory(X, Y, hidden_dims=(3,))
    before = weights_of(net)

    with pytest.raises(InvalidArgument):
        net.train(0.1, X, Y[:1])

    for got, want in zip(weights_of(net), before):
        np.testing.assert_array_equal(got, want)
    assert net.loss is None


def test_push_then_pop_restores_behaviour(separable_data, network_factory):
    X, Y = separable_data
    plain = network_factory(X, Y, hidden_dims=(3,))
    pushed = network_factory(X, Y, hidden_dims=(3,))
    extra = PlainLinearLayer(3, 3, seed=99)
    pushed.push_layer(extra)
    assert pushed.pop_layer() is extra

    for _ in range(5):
        assert plain.train(0.05) == pushed.train(0.05)
    for a, b in zip(weights_of(plain), weights_of(pushed)):
        np.testing.assert_array_equal(a, b)


def test_pushed_layer_sits_next_to_output_layer(separable_data):
    X, Y = separable_data
    net = MultiClassNN(X, Y, PlainLinearLayer(4, 2), verbose=0)
    first, second = PlainLinearLayer(2, 3), PlainLinearLayer(3, 4)
    net.push_layer(first)
    net.push_layer(second)

    assert net.layers == [first, second, net.output_layer]
    assert net.forward(X).shape == (8, 2)


def test_pop_without_hidden_layers_raises(separable_data, network_factory):
    X, Y = separable_data
    with pytest.raises(IndexError):
        network_factory(X, Y).pop_layer()


def test_test_does_not_touch_state(separable_data, network_factory):
    X, Y = separable_data
    net = network_factory(X, Y, hidden_dims=(3,))
    trained_loss = net.train(0.1)
    before = weights_of(net)

    result = net.test(X[:4], Y[:4])

    assert len(result) == 2
    assert net.loss == trained_loss
    for got, want in zip(weights_of(net), before):
        np.testing.assert_array_equal(got, want)


def test_train_reports_loss_before_the_update(separable_data, network_factory):
    X, Y = separable_data
    net = network_factory(X, Y)
    measured = net.test(X, Y)
    assert net.train(0.1) == pytest.approx(measured)


def test_explicit_batch_drives_every_update(separable_data, network_factory):
    X, Y = separable_data
    other = np.flip(X, axis=0).copy()
    other_labels = np.flip(Y, axis=0).copy()

    explicit = network_factory(X, Y, hidden_dims=(3,))
    default = network_factory(other, other_labels, hidden_dims=(3,))
    explicit.train(0.1, other, other_labels)
    default.train(0.1)

    for a, b in zip(weights_of(explicit), weights_of(default)):
        np.testing.assert_allclose(a, b, rtol=1e-6)


def test_predict_after_training(separable_data, network_factory):
    X, Y = separable_data
    net = network_factory(X, Y)
    for _ in range(200):
        net.train(0.5)
    np.testing.assert_array_equal(net.predict(X), np.argmax(Y, axis=1))
    assert net.loss[1] == 0.0


class ZeroGradientLoss:
    def evaluate(self, outputs, one_hot_labels):
        return (0.0, 0.0), np.zeros(outputs.shape, dtype=np.float32)


def test_loss_evaluation_is_pluggable(separable_data):
    X, Y = separable_data
    net = FeedForwardNN(X, Y, PlainLinearLayer(2, 2), ZeroGradientLoss(), verbose=0)
    before = weights_of(net)

    assert net.train(1.0) == (0.0, 0.0)
    np.testing.assert_array_equal(net.output_layer.weights, before[0])


def test_save_and_load_round_trip(tmp_path, separable_data, network_factory):
    X, Y = separable_data
    net = network_factory(X, Y, hidden_dims=(3,))
    net.train(0.1)
    path = tmp_path / "weights.npz"
    net.save(path)

    fresh = network_factory(X, Y, hidden_dims=(3,))
    fresh.load(path)
    for a, b in zip(weights_of(net), weights_of(fresh)):
        np.testing.assert_array_equal(a, b)
