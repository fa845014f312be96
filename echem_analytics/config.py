"""Configuration constants for echem_analytics.

Operational limits can be overridden through environment variables.
"""

import os

# Limits to prevent runaway parsing / transforms
MAX_FILE_SIZE_MB = float(os.environ.get("ECHEM_MAX_FILE_SIZE_MB", 50))
DFT_WARN_SAMPLES = int(os.environ.get("ECHEM_DFT_WARN_SAMPLES", 16_384))
DFT_MAX_SAMPLES = int(os.environ.get("ECHEM_DFT_MAX_SAMPLES", 131_072))

# Spectral analysis defaults
DEFAULT_WINDOW = "hanning"
DEFAULT_PSD_WINDOW_SIZE = 256
DEFAULT_PSD_OVERLAP = 0.5
FREQUENCY_PEAK_MIN_PROMINENCE = 0.1
PERIODIC_MIN_PROMINENCE = 0.05
MAX_PERIODIC_COMPONENTS = 10
SNR_EPSILON = 1e-10

# Curve fitting / processing defaults
DEFAULT_POLYNOMIAL_ORDER = 2
DEFAULT_BASELINE_ORDER = 1
DEFAULT_SMOOTHING_WINDOW = 5

# Bytes read when sniffing file content
SNIFF_BYTES = 512
