"""
Fourier analysis for electrochemistry time series.

The transform is a direct DFT (O(N²)) over the positive-frequency bins
0 .. ⌊N/2⌋-1, with per-bin magnitude normalised by N. Filters, PSD and peak
detection all build on that bin layout.
"""

import logging
from dataclasses import dataclass

import numpy as np

from ..config import (
    DEFAULT_PSD_OVERLAP,
    DEFAULT_PSD_WINDOW_SIZE,
    DEFAULT_WINDOW,
    DFT_MAX_SAMPLES,
    DFT_WARN_SAMPLES,
    FREQUENCY_PEAK_MIN_PROMINENCE,
    MAX_PERIODIC_COMPONENTS,
    PERIODIC_MIN_PROMINENCE,
    SNR_EPSILON,
)
from ..exceptions import InvalidInputError
from .validation import as_series

logger = logging.getLogger(__name__)

# Window name -> per-sample multipliers for a length-N series
WINDOW_FUNCTIONS = {
    "rectangular": np.ones,
    "hamming": np.hamming,
    "hanning": np.hanning,
    "blackman": np.blackman,
}

FILTER_TYPES = ("lowpass", "highpass", "bandpass", "bandstop")


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr = np.array(arr, dtype=float)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True)
class FFTResult:
    """One positive-frequency spectrum. All arrays share the same length."""
    frequencies: np.ndarray  # Hz, ascending
    magnitudes: np.ndarray  # |X_k| / N
    phases: np.ndarray  # radians
    power_spectrum: np.ndarray  # magnitude²
    dominant_frequency: float
    dominant_magnitude: float
    sampling_rate: float
    window: str
    n_samples: int  # Length of the transformed series

    @property
    def frequency_resolution(self) -> float:
        """Bin spacing in Hz (sampling_rate / N)."""
        return self.sampling_rate / self.n_samples

    def to_dict(self) -> dict:
        return {
            "frequencies": self.frequencies.tolist(),
            "magnitudes": self.magnitudes.tolist(),
            "phases": self.phases.tolist(),
            "power_spectrum": self.power_spectrum.tolist(),
            "dominant_frequency": float(self.dominant_frequency),
            "dominant_magnitude": float(self.dominant_magnitude),
            "sampling_rate": float(self.sampling_rate),
            "window": self.window,
            "n_samples": self.n_samples,
        }


@dataclass(frozen=True)
class PSDResult:
    """Welch-style power spectral density estimate."""
    frequencies: np.ndarray
    psd: np.ndarray
    segments: int  # Number of averaged segments


@dataclass(frozen=True)
class FrequencyPeak:
    frequency: float
    magnitude: float
    index: int
    prominence: float


@dataclass(frozen=True)
class PeriodicComponent:
    frequency: float  # Hz
    period: float  # seconds, 1 / frequency
    magnitude: float
    snr: float


def apply_window(data, window: str = DEFAULT_WINDOW) -> np.ndarray:
    """Multiply a series by the named window function."""
    if window not in WINDOW_FUNCTIONS:
        raise InvalidInputError(f"Unknown window: {window}. Expected one of {list(WINDOW_FUNCTIONS)}")
    values = as_series(data, min_length=0)
    return values * WINDOW_FUNCTIONS[window](len(values))


def perform_fft(time_data, sampling_rate: float, window: str = DEFAULT_WINDOW) -> FFTResult:
    """
    Windowed discrete Fourier transform, positive frequencies only.

    Parameters
    ----------
    time_data : array-like
        Evenly sampled signal
    sampling_rate : float
        Samples per second (Hz)
    window : str
        One of 'rectangular', 'hamming', 'hanning', 'blackman'

    Returns
    -------
    FFTResult
        ⌊N/2⌋ bins; the dominant component is the first bin of maximum
        magnitude (NaN when there are no bins)
    """
    if sampling_rate <= 0:
        raise InvalidInputError(f"sampling_rate must be positive, got {sampling_rate}")
    values = as_series(time_data, "time_data")
    n = len(values)
    if n > DFT_MAX_SAMPLES:
        raise InvalidInputError(
            f"{n} samples exceeds the direct-transform limit of {DFT_MAX_SAMPLES}; downsample first"
        )
    if n > DFT_WARN_SAMPLES:
        logger.warning("Direct DFT over %d samples is O(N^2) and may be slow", n)

    windowed = apply_window(values, window)
    n_bins = n // 2

    sample_idx = np.arange(n)
    real = np.zeros(n_bins)
    imag = np.zeros(n_bins)
    for k in range(n_bins):
        angle = -2 * np.pi * k * sample_idx / n
        real[k] = np.dot(windowed, np.cos(angle))
        imag[k] = np.dot(windowed, np.sin(angle))

    frequencies = np.arange(n_bins) * sampling_rate / n
    magnitudes = np.sqrt(real**2 + imag**2) / n
    phases = np.arctan2(imag, real)

    if n_bins:
        peak = int(np.argmax(magnitudes))
        dominant_frequency, dominant_magnitude = float(frequencies[peak]), float(magnitudes[peak])
    else:
        dominant_frequency = dominant_magnitude = float("nan")

    return FFTResult(
        frequencies=_readonly(frequencies),
        magnitudes=_readonly(magnitudes),
        phases=_readonly(phases),
        power_spectrum=_readonly(magnitudes**2),
        dominant_frequency=dominant_frequency,
        dominant_magnitude=dominant_magnitude,
        sampling_rate=float(sampling_rate),
        window=window,
        n_samples=n,
    )


def perform_ifft(frequencies, magnitudes, phases) -> np.ndarray:
    """Approximate time-domain reconstruction from positive-frequency bins.

    Sums one cosine per bin into 2 * len(bins) samples. The negative-frequency
    half is never retained, so this is not an exact inverse.

    Args:
        frequencies: Bin frequencies (only the count is used)
        magnitudes: Bin magnitudes
        phases: Bin phases in radians

    Returns:
        Reconstructed samples
    """
    frequencies = as_series(frequencies, "frequencies", min_length=0)
    magnitudes = as_series(magnitudes, "magnitudes", min_length=0)
    phases = as_series(phases, "phases", min_length=0)
    if not len(frequencies) == len(magnitudes) == len(phases):
        raise InvalidInputError("frequencies, magnitudes and phases must have equal length")

    n = 2 * len(frequencies)
    sample_idx = np.arange(n)
    result = np.zeros(n)
    for k in np.flatnonzero(magnitudes):
        result += magnitudes[k] * np.cos(2 * np.pi * k * sample_idx / n + phases[k])
    return result


def calculate_psd(
    time_data,
    sampling_rate: float,
    window_size: int = DEFAULT_PSD_WINDOW_SIZE,
    overlap: float = DEFAULT_PSD_OVERLAP,
) -> PSDResult:
    """Power spectral density by averaging overlapping segment spectra.

    Series shorter than one window fall back to a single transform over the
    whole series.

    Args:
        time_data: Evenly sampled signal
        sampling_rate: Samples per second (Hz)
        window_size: Samples per segment
        overlap: Fraction of overlap between segments, in [0, 1)

    Returns:
        PSDResult
    """
    if window_size < 2:
        raise InvalidInputError(f"window_size must be >= 2, got {window_size}")
    if not 0 <= overlap < 1:
        raise InvalidInputError(f"overlap must be in [0, 1), got {overlap}")
    values = as_series(time_data, "time_data")

    step = max(1, int(window_size * (1 - overlap)))
    segments = [
        values[start : start + window_size]
        for start in range(0, len(values) - window_size + 1, step)
    ]

    if not segments:
        fft = perform_fft(values, sampling_rate)
        return PSDResult(frequencies=fft.frequencies, psd=fft.power_spectrum, segments=1)

    spectra = [perform_fft(segment, sampling_rate) for segment in segments]
    psd = np.mean([s.power_spectrum for s in spectra], axis=0)
    return PSDResult(frequencies=spectra[0].frequencies, psd=_readonly(psd), segments=len(spectra))


def _filter_mask(frequencies: np.ndarray, filter_type: str, low: float, high: float) -> np.ndarray:
    if filter_type == "lowpass":
        return frequencies <= low
    if filter_type == "highpass":
        return frequencies >= low
    if filter_type == "bandpass":
        return (frequencies >= low) & (frequencies <= high)
    return (frequencies < low) | (frequencies > high)


def apply_frequency_filter(
    time_data,
    sampling_rate: float,
    filter_type: str,
    cutoff_low: float,
    cutoff_high: float | None = None,
) -> np.ndarray:
    """Ideal (brick-wall) frequency-domain filter.

    Zeroes the magnitude of every bin outside the pass band (inside the stop
    band for 'bandstop') and reconstructs with perform_ifft. Expect ringing.

    Args:
        time_data: Evenly sampled signal
        sampling_rate: Samples per second (Hz)
        filter_type: 'lowpass', 'highpass', 'bandpass' or 'bandstop'
        cutoff_low: Cutoff for low/high-pass, lower edge for band filters
        cutoff_high: Upper edge for band filters (None = unbounded)

    Returns:
        Filtered signal of length 2 * ⌊N/2⌋
    """
    if filter_type not in FILTER_TYPES:
        raise InvalidInputError(f"Unknown filter type: {filter_type}. Expected one of {FILTER_TYPES}")
    high = np.inf if cutoff_high is None else cutoff_high
    if filter_type in ("bandpass", "bandstop") and high < cutoff_low:
        raise InvalidInputError(f"cutoff_high ({cutoff_high}) must be >= cutoff_low ({cutoff_low})")

    fft = perform_fft(time_data, sampling_rate, "hanning")
    keep = _filter_mask(fft.frequencies, filter_type, cutoff_low, high)
    filtered = np.where(keep, fft.magnitudes, 0.0)
    return perform_ifft(fft.frequencies, filtered, fft.phases)


def find_frequency_peaks(
    frequencies,
    magnitudes,
    min_prominence: float = FREQUENCY_PEAK_MIN_PROMINENCE,
) -> list[FrequencyPeak]:
    """Local maxima of a magnitude spectrum, largest magnitude first.

    Prominence here is the smaller of the drops to the two adjacent bins.
    """
    frequencies = as_series(frequencies, "frequencies", min_length=0)
    magnitudes = as_series(magnitudes, "magnitudes", min_length=0)
    if len(frequencies) != len(magnitudes):
        raise InvalidInputError("frequencies and magnitudes must have equal length")

    peaks = []
    for i in range(1, len(magnitudes) - 1):
        left_drop = magnitudes[i] - magnitudes[i - 1]
        right_drop = magnitudes[i] - magnitudes[i + 1]
        if left_drop > 0 and right_drop > 0:
            prominence = min(left_drop, right_drop)
            if prominence >= min_prominence:
                peaks.append(
                    FrequencyPeak(
                        frequency=float(frequencies[i]),
                        magnitude=float(magnitudes[i]),
                        index=i,
                        prominence=float(prominence),
                    )
                )

    return sorted(peaks, key=lambda p: p.magnitude, reverse=True)


def _band_snr(fft: FFTResult, band_low: float, band_high: float) -> float:
    in_band = (fft.frequencies >= band_low) & (fft.frequencies <= band_high)
    signal_power = float(np.sum(fft.power_spectrum[in_band]))
    noise_power = float(np.sum(fft.power_spectrum[~in_band]))

    if signal_power == 0 and noise_power == 0:
        return float("nan")
    return signal_power / (noise_power or SNR_EPSILON)


def calculate_snr(time_data, sampling_rate: float, band_low: float, band_high: float) -> float:
    """Signal-to-noise ratio: in-band power over out-of-band power.

    Args:
        time_data: Evenly sampled signal
        sampling_rate: Samples per second (Hz)
        band_low: Lower edge of the signal band (Hz)
        band_high: Upper edge of the signal band (Hz)

    Returns:
        Power ratio; NaN when the spectrum carries no power at all
    """
    return _band_snr(perform_fft(time_data, sampling_rate), band_low, band_high)


def detect_periodic_components(
    time_data,
    sampling_rate: float,
    min_frequency: float = 0.0,
    max_frequency: float | None = None,
) -> list[PeriodicComponent]:
    """Strongest periodic components with per-component SNR.

    Each component's SNR uses a band of ± one frequency bin around the peak.

    Returns:
        Up to MAX_PERIODIC_COMPONENTS components, largest magnitude first
    """
    values = as_series(time_data, "time_data")
    fft = perform_fft(values, sampling_rate)
    peaks = find_frequency_peaks(fft.frequencies, fft.magnitudes, PERIODIC_MIN_PROMINENCE)

    upper = sampling_rate / 2 if max_frequency is None else max_frequency
    bandwidth = sampling_rate / len(values)

    components = []
    for peak in peaks:
        if not min_frequency <= peak.frequency <= upper:
            continue
        components.append(
            PeriodicComponent(
                frequency=peak.frequency,
                period=1 / peak.frequency,
                magnitude=peak.magnitude,
                snr=_band_snr(fft, peak.frequency - bandwidth, peak.frequency + bandwidth),
            )
        )
        if len(components) == MAX_PERIODIC_COMPONENTS:
            break

    return components
