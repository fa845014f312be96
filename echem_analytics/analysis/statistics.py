"""Descriptive statistics."""

from dataclasses import asdict, dataclass

import numpy as np

from .validation import as_series


@dataclass(frozen=True)
class StatisticsResult:
    mean: float
    median: float
    std_dev: float  # Population standard deviation
    variance: float  # Population variance
    min: float
    max: float
    q1: float
    q3: float
    count: int

    def to_dict(self) -> dict:
        return asdict(self)


def calculate_statistics(data) -> StatisticsResult:
    """Summary statistics of a numeric sequence.

    Quartiles use linear interpolation on the sorted values.

    Args:
        data: Non-empty numeric sequence

    Returns:
        StatisticsResult
    """
    values = as_series(data)
    q1, median, q3 = np.quantile(values, [0.25, 0.5, 0.75])

    return StatisticsResult(
        mean=float(np.mean(values)),
        median=float(median),
        std_dev=float(np.std(values)),
        variance=float(np.var(values)),
        min=float(np.min(values)),
        max=float(np.max(values)),
        q1=float(q1),
        q3=float(q3),
        count=len(values),
    )
