
class EarlyStopping:
    """
    Stops training once `monitor` has gone `patience` consecutive epochs without
    beating its best value by more than `min_delta`.

    Any improvement resets the counter, so scattered bad epochs never add up to a stop.
    With restore_best_weights the model is rolled back to the best epoch on stop.
    """

    def __init__(
        self,
        patience=3,
        min_delta=0.0,
        monitor="val_loss",
        mode="min",
        restore_best_weights=False,
    ):
        self.monitor = monitor
        self.mode = mode
        self.patience = patience
        self.min_delta = float(min_delta)
        self.restore_best_weights = restore_best_weights

        self.best = None
        self.best_epoch = -1
        self.wait = 0
        self.stopped = False
        self._best_snapshot = None

    def _is_better(self, current, best):
        if self.mode == "min":
            return current < (best - self.min_delta)
        else:  # 'max'
            return current > (best + self.min_delta)

    def update(self, epoch, metrics, model):
        """Returns True once `monitor` has failed to improve for `patience` epochs in a row."""
        value = metrics[self.monitor]
        if self.best is None or self._is_better(value, self.best):
            self.best = value
            self.best_epoch = epoch
            self.wait = 0
            if self.restore_best_weights:
                self._best_snapshot = model._snapshot_params()
        else:
            self.wait += 1
            if self.wait >= self.patience:
                self.stopped = True
                if self.restore_best_weights and self._best_snapshot is not None:
                    model._load_params(self._best_snapshot)
                return True
        return False
