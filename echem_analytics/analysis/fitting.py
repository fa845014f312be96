"""
Least-squares curve fitting for electrochemistry data.

Five model families are supported. Exponential, logarithmic and power
models are fitted by linearising with logarithms of absolute values, then
evaluated against the original (untransformed) data for R².
"""

from dataclasses import dataclass
from typing import Callable

import numpy as np

from ..config import DEFAULT_BASELINE_ORDER, DEFAULT_POLYNOMIAL_ORDER
from ..exceptions import InvalidInputError, NumericDegenerateError
from .validation import as_xy


@dataclass(frozen=True)
class FitResult:
    """Result of a regression."""
    model: str  # e.g. "Linear", "Polynomial (order 2)"
    equation: str  # Human-readable equation
    r2: float  # Coefficient of determination (NaN for constant y)
    coefficients: tuple[float, ...]
    predict: Callable  # x -> y, scalar or array

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict (without the prediction function)."""
        return {
            "model": self.model,
            "equation": self.equation,
            "r2": None if np.isnan(self.r2) else float(self.r2),
            "coefficients": [float(c) for c in self.coefficients],
        }


def calculate_r2(actual, predicted) -> float:
    """
    Coefficient of determination, 1 - SS_res / SS_tot.

    Parameters
    ----------
    actual : array-like
        Observed values
    predicted : array-like
        Model predictions at the same points

    Returns
    -------
    float
        R², or NaN when the observed values are constant (SS_tot == 0)
    """
    actual, predicted = as_xy(actual, predicted)
    ss_tot = np.sum((actual - np.mean(actual)) ** 2)
    ss_res = np.sum((actual - predicted) ** 2)
    if ss_tot == 0:
        return float("nan")
    return float(1 - ss_res / ss_tot)


def _least_squares_line(x: np.ndarray, y: np.ndarray) -> tuple[float, float]:
    if np.ptp(x) == 0:
        raise NumericDegenerateError("x values are all identical; slope is undefined")
    slope, intercept = np.polyfit(x, y, 1)
    return float(slope), float(intercept)


def _safe_log_abs(values: np.ndarray, name: str) -> np.ndarray:
    magnitude = np.abs(values)
    if np.any(magnitude == 0):
        raise NumericDegenerateError(f"{name} contains zeros; logarithm is undefined")
    return np.log(magnitude)


def fit_linear(x_data, y_data) -> FitResult:
    """Linear regression: y = mx + b."""
    x, y = as_xy(x_data, y_data)
    m, b = _least_squares_line(x, y)

    def predict(x_new):
        return m * np.asarray(x_new, dtype=float) + b

    return FitResult(
        model="Linear",
        equation=f"y = {m:.6f}x + {b:.6f}",
        r2=calculate_r2(y, predict(x)),
        coefficients=(m, b),
        predict=predict,
    )


def fit_polynomial(x_data, y_data, order: int = DEFAULT_POLYNOMIAL_ORDER) -> FitResult:
    """
    Polynomial regression: y = cₙxⁿ + ... + c₁x + c₀.

    Parameters
    ----------
    x_data, y_data : array-like
        Paired observations
    order : int
        Polynomial order (>= 1)

    Returns
    -------
    FitResult
        Coefficients ordered from highest to lowest power
    """
    if order < 1:
        raise InvalidInputError(f"Polynomial order must be >= 1, got {order}")
    x, y = as_xy(x_data, y_data)
    if np.ptp(x) == 0:
        raise NumericDegenerateError("x values are all identical; polynomial is undefined")

    coefficients = tuple(float(c) for c in np.polyfit(x, y, order))

    def predict(x_new):
        return np.polyval(coefficients, np.asarray(x_new, dtype=float))

    terms = []
    for i, coef in enumerate(coefficients):
        power = len(coefficients) - 1 - i
        if power == 0:
            terms.append(f"{coef:.6f}")
        elif power == 1:
            terms.append(f"{coef:.6f}x")
        else:
            terms.append(f"{coef:.6f}x^{power}")

    return FitResult(
        model=f"Polynomial (order {order})",
        equation="y = " + " + ".join(terms),
        r2=calculate_r2(y, predict(x)),
        coefficients=coefficients,
        predict=predict,
    )


def fit_exponential(x_data, y_data) -> FitResult:
    """Exponential regression: y = a·e^(bx), fitted on ln|y|."""
    x, y = as_xy(x_data, y_data)
    b, intercept = _least_squares_line(x, _safe_log_abs(y, "y"))
    a = float(np.exp(intercept))

    def predict(x_new):
        return a * np.exp(b * np.asarray(x_new, dtype=float))

    return FitResult(
        model="Exponential",
        equation=f"y = {a:.6f}e^({b:.6f}x)",
        r2=calculate_r2(y, predict(x)),
        coefficients=(a, b),
        predict=predict,
    )


def fit_logarithmic(x_data, y_data) -> FitResult:
    """Logarithmic regression: y = a + b·ln(x), fitted on ln|x|."""
    x, y = as_xy(x_data, y_data)
    b, a = _least_squares_line(_safe_log_abs(x, "x"), y)

    def predict(x_new):
        return a + b * np.log(np.abs(np.asarray(x_new, dtype=float)))

    return FitResult(
        model="Logarithmic",
        equation=f"y = {a:.6f} + {b:.6f}*ln(x)",
        r2=calculate_r2(y, predict(x)),
        coefficients=(a, b),
        predict=predict,
    )


def fit_power(x_data, y_data) -> FitResult:
    """Power regression: y = a·x^b, fitted on ln|y| vs ln|x|."""
    x, y = as_xy(x_data, y_data)
    b, intercept = _least_squares_line(_safe_log_abs(x, "x"), _safe_log_abs(y, "y"))
    a = float(np.exp(intercept))

    def predict(x_new):
        return a * np.abs(np.asarray(x_new, dtype=float)) ** b

    return FitResult(
        model="Power",
        equation=f"y = {a:.6f}x^{b:.6f}",
        r2=calculate_r2(y, predict(x)),
        coefficients=(a, b),
        predict=predict,
    )


FIT_MODELS = {
    "linear": fit_linear,
    "polynomial": fit_polynomial,
    "exponential": fit_exponential,
    "logarithmic": fit_logarithmic,
    "power": fit_power,
}


def fit_curve(x_data, y_data, model: str = "linear", order: int = DEFAULT_POLYNOMIAL_ORDER) -> FitResult:
    """Fit one of the supported models by name (order applies to polynomial only)."""
    fit = FIT_MODELS.get(model.lower())
    if fit is None:
        raise InvalidInputError(f"Unknown model: {model}. Expected one of {sorted(FIT_MODELS)}")
    if fit is fit_polynomial:
        return fit_polynomial(x_data, y_data, order)
    return fit(x_data, y_data)


def correct_baseline(x_data, y_data, order: int = DEFAULT_BASELINE_ORDER) -> np.ndarray:
    """Subtract a polynomial baseline of the given order. Returns new array."""
    x, y = as_xy(x_data, y_data)
    fit = fit_polynomial(x, y, order)
    return y - fit.predict(x)
