import time
import numpy as np

from .early_stopping.EarlyStopping import EarlyStopping
from .helpers.Backend import backend
from .helpers.logger import RunLogger
from .helpers.lr_scheduler import InverseTimeDecayLR
from .helpers.softmax import softmax
from .errors import InvalidArgument


class FeedForwardNN:
    """
    Feedforward network: hidden layers in insertion order, then a fixed output layer.

    The network owns its layers. Hidden layers are added and removed at the tail,
    so the most recently pushed layer sits right before the output layer.

    :param inputs: default inputs to train on, (batch, features)
    :param one_hot_labels: default one-hot labels, (batch, classes)
    :param output_layer: layer producing the final activations
    :param loss_fn: object with `evaluate(outputs, one_hot_labels)` returning
                    ((cross_entropy, misclass), gradient wrt output signals)
    """

    def __init__(self, inputs, one_hot_labels, output_layer, loss_fn, verbose=1):
        self.inputs = backend.astype_default(inputs)
        self.one_hot_labels = backend.astype_default(one_hot_labels)
        self.output_layer = output_layer
        self.loss_fn = loss_fn
        self.hidden_layers = []
        self.verbose = verbose

        # (cross_entropy, misclass) of the latest train() call
        self.loss = None

    @property
    def layers(self):
        return self.hidden_layers + [self.output_layer]

    def push_layer(self, layer):
        self.hidden_layers.append(layer)

    def pop_layer(self):
        return self.hidden_layers.pop()

    # ================== passes ==================
    def train(self, lr, inputs=None, one_hot_labels=None):
        """
        One full forward, backward and update pass. Updates every layer's weights.

        Uses the network's default dataset when inputs and labels are both omitted;
        passing only one of them is rejected.
        Returns the (cross_entropy, misclass) measured before the update.
        """
        # Also rejects nan
        if not lr >= 0:
            raise InvalidArgument(f"learning rate must be a non-negative number, got lr={lr}")
        if (inputs is None) != (one_hot_labels is None):
            raise InvalidArgument("inputs and one_hot_labels must be given together")
        if inputs is None:
            inputs, one_hot_labels = self.inputs, self.one_hot_labels
        inputs = backend.astype_default(inputs)
        one_hot_labels = backend.astype_default(one_hot_labels)

        signals_outputs, final_signals, final_outputs = self._fwd_pass(inputs)
        losses, pre_gradient = self.evaluate(final_outputs, one_hot_labels)
        self.loss = losses

        gradients = self._bwd_pass(signals_outputs, final_signals, pre_gradient)
        outputs = [out for _, out in signals_outputs]
        self._update_network(inputs, outputs, gradients, lr)

        return self.loss

    def test(self, inputs, one_hot_labels):
        """Forward pass and loss only; leaves weights and `loss` untouched."""
        _, _, final_outputs = self._fwd_pass(backend.astype_default(inputs))
        losses, _ = self.evaluate(final_outputs, backend.astype_default(one_hot_labels))
        return losses

    def evaluate(self, outputs, one_hot_labels):
        return self.loss_fn.evaluate(outputs, one_hot_labels)

    def forward(self, inputs):
        _, _, final_outputs = self._fwd_pass(backend.astype_default(inputs))
        return final_outputs

    def predict_proba(self, inputs):
        return backend.to_cpu(softmax(self.forward(inputs), axis=1))

    def predict(self, inputs):
        return np.argmax(self.predict_proba(inputs), axis=1)

    def _fwd_pass(self, inputs):
        # Each hidden layer's (signals, outputs) in forward order
        signals_outputs = []
        next_inputs = inputs
        for layer in self.hidden_layers:
            signals, outputs = layer.feed_forward(next_inputs)
            signals_outputs.append((signals, outputs))
            next_inputs = outputs

        final_signals, final_outputs = self.output_layer.feed_forward(next_inputs)
        return signals_outputs, final_signals, final_outputs

    def _bwd_pass(self, signals_outputs, final_signals, pre_gradient):
        # Gradients come out output layer first, earliest hidden layer last
        gradient, tgradient = self.output_layer.seed_back_prop(final_signals, pre_gradient)
        gradients = [gradient]
        for layer, (signals, _) in zip(reversed(self.hidden_layers), reversed(signals_outputs)):
            gradient, tgradient = layer.back_propagate(signals, tgradient)
            gradients.append(gradient)
        return gradients

    def _update_network(self, inputs, outputs, gradients, lr):
        # Layer k (forward order) saw layer_inputs[k] and owns gradients[-1 - k]
        layer_inputs = [inputs] + outputs
        n = len(gradients)
        for k, layer in enumerate(self.layers):
            layer.update_weights(layer_inputs[k], gradients[n - 1 - k], lr)

    # ================== training loop ==================
    def fit(
        self,
        x_val,
        y_val,
        lr=0.1,
        decay_rate=0.1,
        epochs=1000,
        patience=3,
        early_stopping=None,
        scheduler=None,
        tag="run",
        runs_root=None,
        verbose=None,
    ):
        """
        Full-batch training on the default dataset with a decaying learning rate,
        stopped early on validation cross-entropy.

        Args:
            x_val, y_val: validation inputs and one-hot labels
            lr: initial learning rate
            decay_rate: inverse-time decay, lr / (1 + epoch * decay_rate)
            epochs: upper bound on the number of epochs
            patience: epochs without val_loss improvement before stopping
            early_stopping: EarlyStopping instance or kwargs dict (overrides patience)
            scheduler: LRScheduler instance (overrides lr/decay_rate)
            tag, runs_root: when runs_root is set, history/checkpoints go to a RunLogger dir
            verbose: console progress level, defaults to the network's verbose

        Returns:
            history dict with lists 'loss', 'misclass', 'val_loss', 'val_misclass', 'lr'
        """
        if scheduler is None:
            scheduler = InverseTimeDecayLR(lr, decay_rate=decay_rate)
        if isinstance(early_stopping, dict):
            stopper = EarlyStopping(**early_stopping)
        elif early_stopping is None:
            stopper = EarlyStopping(patience=patience, monitor="val_loss", mode="min")
        else:
            stopper = early_stopping
        logger = RunLogger(root=runs_root, tag=tag) if runs_root is not None else None
        if verbose is None:
            verbose = self.verbose

        history = {"loss": [], "misclass": [], "val_loss": [], "val_misclass": [], "lr": []}
        log_interval = max(1, epochs // 10)

        if verbose > 0:
            print(f"Starting training for up to {epochs} epochs...")
        for ep in range(epochs):
            t0 = time.time()
            current_lr = scheduler.step(ep)

            train_loss, train_misclass = self.train(current_lr)
            val_loss, val_misclass = self.test(x_val, y_val)

            history["loss"].append(train_loss)
            history["misclass"].append(train_misclass)
            history["val_loss"].append(val_loss)
            history["val_misclass"].append(val_misclass)
            history["lr"].append(current_lr)

            if verbose > 0 and (ep % log_interval == 0 or ep == epochs - 1):
                print(
                    f"Epoch {ep:3d} | lr {current_lr:.5f} | TrainLoss {train_loss:.4f} "
                    f"| ValLoss {val_loss:.4f} | ValMisclass {val_misclass:.4f}"
                )

            if logger is not None:
                logger.log_epoch(
                    ep,
                    time_s=time.time() - t0,
                    lr=current_lr,
                    loss=train_loss,
                    misclass=train_misclass,
                    val_loss=val_loss,
                    val_misclass=val_misclass,
                )
                logger.save_checkpoint(self._pack_npz_state(), best=False)
                if val_loss <= min(history["val_loss"]):
                    logger.save_checkpoint(self._pack_npz_state(), best=True)

            metrics = {"loss": train_loss, "val_loss": val_loss, "val_misclass": val_misclass}
            if stopper.update(ep, metrics, self):
                if verbose > 0:
                    print(
                        f"Early stopping at epoch {ep}. "
                        f"Best {stopper.monitor}={stopper.best:.4f} at epoch {stopper.best_epoch}."
                    )
                break

        if logger is not None:
            logger.save_json()
        return history

    # ================== helpers ==================
    def _snapshot_params(self):
        return [np.copy(backend.to_cpu(p)) for layer in self.layers for p in layer.params()]

    def _load_params(self, snapshot):
        i = 0
        for layer in self.layers:
            for p in layer.params():
                p[...] = backend.ensure_array(snapshot[i])
                i += 1

    def _pack_npz_state(self):
        # Pack params into a dict for RunLogger checkpoint
        return {f"p{i}": p for i, p in enumerate(self._snapshot_params())}

    # model I/O
    def save(self, path):
        np.savez(path, **self._pack_npz_state())

    def load(self, path):
        data = np.load(path)
        self._load_params([data[f"p{i}"] for i in range(len(data.files))])
