"""
Learning rate schedules for the training loop.
Each scheduler maps an epoch index to the learning rate used for that epoch.
"""
import math


class LRScheduler:
    """Base class for learning rate schedulers."""

    def __init__(self, initial_lr, verbose=False):
        self.verbose = verbose
        self.initial_lr = initial_lr
        self.current_lr = initial_lr

    def step(self, epoch):
        """Update learning rate for `epoch` and return it."""
        new_lr = self.get_lr(epoch)
        if new_lr != self.current_lr:
            self.current_lr = new_lr
            if self.verbose:
                print(f"   LR updated: {new_lr:.6f}")
        return new_lr

    def get_lr(self, epoch):
        """Override this method in subclasses."""
        return self.current_lr


class InverseTimeDecayLR(LRScheduler):
    """Inverse-time decay: LR = initial_lr / (1 + epoch * decay_rate)."""

    def __init__(self, initial_lr, decay_rate=0.1, verbose=False):
        super().__init__(initial_lr, verbose)
        self.decay_rate = decay_rate

    def get_lr(self, epoch):
        return self.initial_lr / (1.0 + epoch * self.decay_rate)


class StepLR(LRScheduler):
    """Step decay: reduce LR by gamma every step_size epochs."""

    def __init__(self, initial_lr, step_size, gamma=0.1, verbose=False):
        super().__init__(initial_lr, verbose)
        self.step_size = step_size
        self.gamma = gamma

    def get_lr(self, epoch):
        return self.initial_lr * (self.gamma ** (epoch // self.step_size))


class ExponentialLR(LRScheduler):
    """Exponential decay: LR = initial_lr * gamma^epoch."""

    def __init__(self, initial_lr, gamma=0.95, verbose=False):
        super().__init__(initial_lr, verbose)
        self.gamma = gamma

    def get_lr(self, epoch):
        return self.initial_lr * (self.gamma ** epoch)


class CosineAnnealingLR(LRScheduler):
    """Cosine annealing: smooth cosine decay from initial_lr to min_lr."""

    def __init__(self, initial_lr, T_max, min_lr=0, verbose=False):
        super().__init__(initial_lr, verbose)
        self.T_max = T_max
        self.min_lr = min_lr

    def get_lr(self, epoch):
        return self.min_lr + (self.initial_lr - self.min_lr) * \
               (1 + math.cos(math.pi * epoch / self.T_max)) / 2


def get_scheduler(name, initial_lr, **kwargs):
    """Factory function to create schedulers by name."""
    schedulers = {
        'inverse_time': InverseTimeDecayLR,
        'step': StepLR,
        'exponential': ExponentialLR,
        'cosine': CosineAnnealingLR,
    }

    if name not in schedulers:
        raise ValueError(f"Unknown scheduler: {name}. Available: {list(schedulers.keys())}")

    return schedulers[name](initial_lr, **kwargs)
