"""Input checks shared by the analysis functions."""

import numpy as np

from ..exceptions import InvalidInputError


def as_series(data, name: str = "data", min_length: int = 1) -> np.ndarray:
    """Convert a numeric sequence to a 1-D float array, checking its length."""
    try:
        arr = np.asarray(data, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"{name} must be numeric: {e}") from e
    if arr.ndim != 1:
        raise InvalidInputError(f"{name} must be one-dimensional, got shape {arr.shape}")
    if len(arr) < min_length:
        raise InvalidInputError(f"{name} needs at least {min_length} value(s), got {len(arr)}")
    return arr


def as_xy(x_data, y_data, min_length: int = 1) -> tuple[np.ndarray, np.ndarray]:
    """Convert paired sequences to float arrays of equal, sufficient length."""
    x = as_series(x_data, "x", min_length)
    y = as_series(y_data, "y", min_length)
    if len(x) != len(y):
        raise InvalidInputError(f"x and y must have equal length ({len(x)} != {len(y)})")
    return x, y
