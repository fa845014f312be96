"""Analysis functions for electrochemistry data."""

from .fitting import (
    FIT_MODELS,
    FitResult,
    calculate_r2,
    correct_baseline,
    fit_curve,
    fit_exponential,
    fit_linear,
    fit_logarithmic,
    fit_polynomial,
    fit_power,
)
from .fourier import (
    FFTResult,
    FrequencyPeak,
    PeriodicComponent,
    PSDResult,
    WINDOW_FUNCTIONS,
    apply_frequency_filter,
    calculate_psd,
    calculate_snr,
    detect_periodic_components,
    find_frequency_peaks,
    perform_fft,
    perform_ifft,
)
from .peaks import PeakResult, find_peaks
from .processing import calculate_derivative, smooth_data
from .statistics import StatisticsResult, calculate_statistics


__all__ = [
    # Fitting
    "FIT_MODELS",
    "FitResult",
    "calculate_r2",
    "correct_baseline",
    "fit_curve",
    "fit_exponential",
    "fit_linear",
    "fit_logarithmic",
    "fit_polynomial",
    "fit_power",
    # Statistics
    "StatisticsResult",
    "calculate_statistics",
    # Peaks
    "PeakResult",
    "find_peaks",
    # Processing
    "calculate_derivative",
    "smooth_data",
    # Fourier
    "FFTResult",
    "FrequencyPeak",
    "PeriodicComponent",
    "PSDResult",
    "WINDOW_FUNCTIONS",
    "apply_frequency_filter",
    "calculate_psd",
    "calculate_snr",
    "detect_periodic_components",
    "find_frequency_peaks",
    "perform_fft",
    "perform_ifft",
]
