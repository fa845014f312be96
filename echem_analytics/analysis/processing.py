"""Signal processing helpers: smoothing and numerical differentiation."""

import numpy as np

from ..config import DEFAULT_SMOOTHING_WINDOW
from ..exceptions import InvalidInputError
from .validation import as_series, as_xy


def smooth_data(data, window_size: int = DEFAULT_SMOOTHING_WINDOW) -> np.ndarray:
    """Centered moving average.

    The window shrinks near the boundaries instead of padding. Even window
    sizes behave like the next odd size (half-width = window_size // 2).

    Args:
        data: Numeric sequence
        window_size: Number of points in the window (>= 1)

    Returns:
        Smoothed values, same length as data
    """
    if window_size < 1:
        raise InvalidInputError(f"window_size must be >= 1, got {window_size}")
    values = as_series(data, min_length=0)

    half = window_size // 2
    n = len(values)
    return np.array(
        [np.mean(values[max(0, i - half) : min(n, i + half + 1)]) for i in range(n)],
        dtype=float,
    )


def calculate_derivative(x_data, y_data) -> tuple[np.ndarray, np.ndarray]:
    """Forward-difference derivative dy/dx reported at interval midpoints.

    Args:
        x_data: x values (at least 2)
        y_data: y values

    Returns:
        (x_mid, dy) arrays of length n - 1; dy is NaN where dx == 0
    """
    x, y = as_xy(x_data, y_data, min_length=2)
    dx = np.diff(x)
    dy = np.diff(y)

    with np.errstate(divide="ignore", invalid="ignore"):
        slope = dy / dx
    slope[dx == 0] = np.nan

    return (x[:-1] + x[1:]) / 2, slope
