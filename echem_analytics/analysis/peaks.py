"""
Peak detection on (x, y) curves.

Candidates are strict local maxima. Prominence is measured the usual way:
walk outward from the peak until a strictly higher point (or the array end)
and take the peak height above the higher of the two lowest points found.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy.signal import peak_prominences, peak_widths

from ..exceptions import InvalidInputError
from .validation import as_xy


@dataclass(frozen=True)
class PeakResult:
    """One detected peak."""
    index: int  # Index in the source arrays
    x: float
    y: float
    prominence: float
    width: Optional[float] = None  # Full width at half prominence, in x units

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "x": self.x,
            "y": self.y,
            "prominence": self.prominence,
            "width": self.width,
        }


def local_maxima(y: np.ndarray) -> np.ndarray:
    """Indices of points strictly greater than both neighbours."""
    if len(y) < 3:
        return np.array([], dtype=np.intp)
    interior = (y[1:-1] > y[:-2]) & (y[1:-1] > y[2:])
    return np.flatnonzero(interior) + 1


def find_peaks(
    x_data,
    y_data,
    min_prominence: float = 0.0,
    min_distance: int = 1,
) -> list[PeakResult]:
    """
    Find peaks in y(x).

    Parameters
    ----------
    x_data, y_data : array-like
        Paired observations
    min_prominence : float
        Peaks with smaller prominence are discarded
    min_distance : int
        When > 1, a peak is kept only if its index is at least this far
        from the previously kept peak (scanning left to right)

    Returns
    -------
    list[PeakResult]
        Peaks in index order
    """
    if min_distance < 1:
        raise InvalidInputError(f"min_distance must be >= 1, got {min_distance}")
    x, y = as_xy(x_data, y_data)

    candidates = local_maxima(y)
    if len(candidates) == 0:
        return []

    prominences, left_bases, right_bases = peak_prominences(y, candidates)
    widths, _, left_ips, right_ips = peak_widths(
        y, candidates, rel_height=0.5, prominence_data=(prominences, left_bases, right_bases)
    )
    sample_axis = np.arange(len(x))
    x_widths = np.abs(np.interp(right_ips, sample_axis, x) - np.interp(left_ips, sample_axis, x))

    peaks = []
    for i, idx in enumerate(candidates):
        if prominences[i] < min_prominence:
            continue
        peaks.append(
            PeakResult(
                index=int(idx),
                x=float(x[idx]),
                y=float(y[idx]),
                prominence=float(prominences[i]),
                width=float(x_widths[i]),
            )
        )

    if min_distance > 1:
        kept = []
        for peak in peaks:
            if not kept or peak.index - kept[-1].index >= min_distance:
                kept.append(peak)
        return kept

    return peaks
