"""
echem_analytics - Electrochemistry file ingestion and numeric analysis

Parses BioLogic, Gamry and generic delimited exports into a uniform,
immutable table, then provides curve fitting, statistics, peak detection
and Fourier analysis over its columns. Designed to be called by a web or
notebook frontend that owns storage and rendering.
"""

__version__ = "0.1.0"

# Types
from .types import DataTable, ParsedData, SourceFile, Technique, convert_units

# Errors
from .exceptions import (
    CorruptDataError,
    EchemAnalyticsError,
    InvalidInputError,
    NumericDegenerateError,
    ParseError,
    UnsupportedFormatError,
)

# Parsers
from .parsers import ParserRegistry, default_registry, load_file, load_file_bytes

# Analysis
from .analysis import (
    FitResult,
    FFTResult,
    PeakResult,
    StatisticsResult,
    apply_frequency_filter,
    calculate_derivative,
    calculate_psd,
    calculate_snr,
    calculate_statistics,
    correct_baseline,
    detect_periodic_components,
    find_frequency_peaks,
    find_peaks,
    fit_curve,
    fit_exponential,
    fit_linear,
    fit_logarithmic,
    fit_polynomial,
    fit_power,
    perform_fft,
    perform_ifft,
    smooth_data,
)

__all__ = [
    "__version__",
    # Types
    "DataTable",
    "ParsedData",
    "SourceFile",
    "Technique",
    "convert_units",
    # Errors
    "EchemAnalyticsError",
    "ParseError",
    "CorruptDataError",
    "UnsupportedFormatError",
    "InvalidInputError",
    "NumericDegenerateError",
    # Parsers
    "ParserRegistry",
    "default_registry",
    "load_file",
    "load_file_bytes",
    # Fitting & statistics
    "FitResult",
    "PeakResult",
    "StatisticsResult",
    "fit_linear",
    "fit_polynomial",
    "fit_exponential",
    "fit_logarithmic",
    "fit_power",
    "fit_curve",
    "correct_baseline",
    "calculate_statistics",
    "find_peaks",
    "smooth_data",
    "calculate_derivative",
    # Fourier
    "FFTResult",
    "perform_fft",
    "perform_ifft",
    "calculate_psd",
    "apply_frequency_filter",
    "find_frequency_peaks",
    "calculate_snr",
    "detect_periodic_components",
]
