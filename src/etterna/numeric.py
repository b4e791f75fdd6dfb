from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from scipy import special

# Game values are stored as 32-bit floats. Arithmetic that must reproduce the
# game's numbers goes through these helpers instead of Python floats.
f32 = np.float32


def as_f32_array(values: Sequence[float] | np.ndarray) -> np.ndarray:
    return np.asarray(values, dtype=np.float32)


def erfc_f32(x: np.ndarray) -> np.ndarray:
    """erfc evaluated in double precision, narrowed back to single."""
    return special.erfc(np.asarray(x, dtype=np.float64)).astype(np.float32)


def sum_f32(values: np.ndarray) -> np.float32:
    """Left-to-right single precision sum (np.sum would use pairwise summation)."""
    if len(values) == 0:
        return np.float32(0.0)
    return np.cumsum(values, dtype=np.float32)[-1]


def is_sorted(values: Sequence[float] | np.ndarray) -> bool:
    arr = np.asarray(values, dtype=np.float64)
    if arr.size < 2:
        return True
    return bool(np.all(arr[:-1] <= arr[1:]))


def require_sorted(values: Sequence[float] | np.ndarray, what: str) -> None:
    if not is_sorted(values):
        raise ValueError(f"{what} must be sorted ascending")
