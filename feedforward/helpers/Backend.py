# feedforward/helpers/Backend.py
import os
import numpy as np

VERBOSE_STARTUP = False  # set True to print device selection

try:
    import cupy as cp
    # Quick runtime check
    try:
        _ = (cp.array([1, 2, 3]) + 1).sum()
        CUPY_AVAILABLE = True
    except Exception as e:
        print(f"CuPy installed but CUDA runtime error: {e}")
        print("Falling back to CPU (NumPy)")
        cp = None
        CUPY_AVAILABLE = False
except ImportError:
    cp = None
    CUPY_AVAILABLE = False


class Backend:
    """Dense-matrix provider for the engine (NumPy, or CuPy when enabled)."""
    def __init__(self, use_gpu=False, default_float=np.float32):
        self.use_gpu = bool(use_gpu and CUPY_AVAILABLE)
        self.default_float = default_float
        self.xp = cp if self.use_gpu else np
        if VERBOSE_STARTUP:
            name = "GPU backend (CuPy)" if self.use_gpu else "CPU backend (NumPy)"
            print(f"Using {name}")

    # -------- device transfer --------
    def to_cpu(self, x):
        """Move array to CPU (NumPy)."""
        if self.use_gpu and x is not None and not isinstance(x, np.ndarray):
            return cp.asnumpy(x)
        return x

    def ensure_array(self, x, dtype=None):
        """
        Ensure 'x' is an array of the current backend.
        Accepts list/tuple/np/cp arrays; returns xp.ndarray.
        """
        if self.use_gpu and isinstance(x, np.ndarray):
            arr = cp.asarray(x)
        elif (not self.use_gpu) and (cp is not None) and isinstance(x, cp.ndarray):
            arr = cp.asnumpy(x)
        else:
            arr = self.xp.asarray(x)
        if dtype is not None and arr.dtype != dtype:
            arr = arr.astype(dtype)
        return arr

    def astype_default(self, x):
        """Cast to default float dtype if needed."""
        return self.ensure_array(x, dtype=self.default_float)

    # -------- array creation --------
    def zeros(self, shape, dtype=None):
        return self.xp.zeros(shape, dtype=self.default_float if dtype is None else dtype)

    def ones(self, shape, dtype=None):
        return self.xp.ones(shape, dtype=self.default_float if dtype is None else dtype)

    def arange(self, *args, **kwargs):
        return self.xp.arange(*args, **kwargs)

    # -------- math / linalg (thin wrappers) --------
    def sum(self, x, axis=None, keepdims=False):  return self.xp.sum(x, axis=axis, keepdims=keepdims)
    def argmax(self, x, axis=None):               return self.xp.argmax(x, axis=axis)
    def exp(self, x):                              return self.xp.exp(x)
    def log(self, x):                              return self.xp.log(x)
    def transpose(self, x, axes=None):            return self.xp.transpose(x, axes)
    def matmul(self, a, b):                        return self.xp.matmul(a, b)
    def hstack(self, arrays):                      return self.xp.hstack(arrays)

    # -------- randomness --------
    def uniform(self, low, high, shape, seed=None):
        """Seeded uniform draw, made on CPU so every device sees the same values."""
        rng = np.random.default_rng(seed)
        return self.astype_default(rng.uniform(low, high, size=shape))

    # -------- delegate unknown attrs to xp --------
    def __getattr__(self, name):
        return getattr(self.xp, name)


# Global backend instance; FEEDFORWARD_USE_GPU=1 opts into CuPy
backend = Backend(use_gpu=os.environ.get("FEEDFORWARD_USE_GPU", "0") == "1")
