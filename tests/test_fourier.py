import logging
import math

import numpy as np
import pytest

from echem_analytics.analysis import (
    apply_frequency_filter,
    calculate_psd,
    calculate_snr,
    detect_periodic_components,
    find_frequency_peaks,
    perform_fft,
    perform_ifft,
)
from echem_analytics.analysis import fourier
from echem_analytics.exceptions import InvalidInputError


def sine(freq, sampling_rate, n, amplitude=1.0):
    t = np.arange(n) / sampling_rate
    return amplitude * np.sin(2 * np.pi * freq * t)


def magnitude_at(signal, sampling_rate, freq):
    fft = perform_fft(signal, sampling_rate, window="rectangular")
    return fft.magnitudes[int(np.argmin(np.abs(fft.frequencies - freq)))]


# --- FFT ---

def test_fft_dominant_frequency():
    fft = perform_fft(sine(5, 100, 200), 100, window="rectangular")

    assert len(fft.frequencies) == 100
    assert fft.frequencies[1] == pytest.approx(0.5)
    assert fft.dominant_frequency == pytest.approx(5.0)
    assert fft.dominant_magnitude == pytest.approx(0.5)
    np.testing.assert_allclose(fft.power_spectrum, fft.magnitudes**2)
    assert fft.frequency_resolution == pytest.approx(0.5)


def test_fft_default_window_finds_same_peak():
    fft = perform_fft(sine(5, 100, 200), 100)
    assert fft.window == "hanning"
    assert fft.dominant_frequency == pytest.approx(5.0)
    assert fft.dominant_magnitude < 0.5


def test_fft_odd_length():
    fft = perform_fft(np.ones(201), 100)
    assert len(fft.frequencies) == 100
    assert fft.frequency_resolution == pytest.approx(100 / 201)


def test_fft_result_is_read_only():
    fft = perform_fft(sine(5, 100, 64), 100)
    with pytest.raises(ValueError):
        fft.magnitudes[0] = 1.0


def test_fft_single_sample_has_no_bins():
    fft = perform_fft([1.0], 10)
    assert len(fft.frequencies) == 0
    assert math.isnan(fft.dominant_frequency)


def test_fft_input_validation():
    with pytest.raises(InvalidInputError):
        perform_fft([1, 2, 3], 0)
    with pytest.raises(InvalidInputError):
        perform_fft([1, 2, 3], 10, window="kaiser")
    with pytest.raises(InvalidInputError):
        perform_fft([], 10)


def test_fft_sample_limits(monkeypatch, caplog):
    monkeypatch.setattr(fourier, "DFT_WARN_SAMPLES", 8)
    with caplog.at_level(logging.WARNING, logger="echem_analytics.analysis.fourier"):
        perform_fft(np.zeros(16), 10)
    assert "O(N^2)" in caplog.text

    monkeypatch.setattr(fourier, "DFT_MAX_SAMPLES", 12)
    with pytest.raises(InvalidInputError):
        perform_fft(np.zeros(16), 10)


# --- Inverse ---

def test_ifft_reconstructs_half_amplitude():
    signal = sine(5, 100, 200)
    fft = perform_fft(signal, 100, window="rectangular")

    reconstructed = perform_ifft(fft.frequencies, fft.magnitudes, fft.phases)
    assert len(reconstructed) == 200
    np.testing.assert_allclose(reconstructed, 0.5 * signal, atol=1e-9)


def test_ifft_length_mismatch():
    with pytest.raises(InvalidInputError):
        perform_ifft([0, 1], [1.0], [0.0, 0.0])


# --- PSD ---

def test_psd_segments():
    result = calculate_psd(sine(10, 256, 1000), 256, window_size=256, overlap=0.5)
    assert result.segments == 6
    assert len(result.frequencies) == len(result.psd) == 128
    assert result.frequencies[np.argmax(result.psd)] == pytest.approx(10.0)


def test_psd_short_series_falls_back_to_single_transform():
    result = calculate_psd(sine(10, 100, 100), 100, window_size=256)
    assert result.segments == 1
    assert len(result.psd) == 50


def test_psd_parameter_validation():
    with pytest.raises(InvalidInputError):
        calculate_psd(np.zeros(10), 10, overlap=1.0)
    with pytest.raises(InvalidInputError):
        calculate_psd(np.zeros(10), 10, window_size=1)


# --- Filters ---

@pytest.fixture
def two_tone():
    return sine(2, 200, 400) + sine(20, 200, 400)


def test_lowpass_removes_high_tone(two_tone):
    filtered = apply_frequency_filter(two_tone, 200, "lowpass", 10)
    assert len(filtered) == 400
    assert magnitude_at(filtered, 200, 20) < 1e-9
    assert magnitude_at(filtered, 200, 2) > 0.05


def test_highpass_removes_low_tone(two_tone):
    filtered = apply_frequency_filter(two_tone, 200, "highpass", 10)
    assert magnitude_at(filtered, 200, 2) < 1e-9
    assert magnitude_at(filtered, 200, 20) > 0.05


def test_band_filters(two_tone):
    stopped = apply_frequency_filter(two_tone, 200, "bandstop", 15, 25)
    assert magnitude_at(stopped, 200, 20) < 1e-9
    assert magnitude_at(stopped, 200, 2) > 0.05

    passed = apply_frequency_filter(two_tone, 200, "bandpass", 15, 25)
    assert magnitude_at(passed, 200, 2) < 1e-9
    assert magnitude_at(passed, 200, 20) > 0.05


def test_filter_output_length_for_odd_input():
    assert len(apply_frequency_filter(np.ones(401), 200, "lowpass", 10)) == 400


def test_filter_validation(two_tone):
    with pytest.raises(InvalidInputError):
        apply_frequency_filter(two_tone, 200, "notch", 10)
    with pytest.raises(InvalidInputError):
        apply_frequency_filter(two_tone, 200, "bandpass", 25, 15)


# --- Peaks, SNR and periodic components ---

def test_frequency_peaks_sorted_by_magnitude():
    freqs = [0, 1, 2, 3, 4, 5, 6]
    mags = [0, 1, 0, 3, 0, 2, 0]

    peaks = find_frequency_peaks(freqs, mags)
    assert [p.index for p in peaks] == [3, 5, 1]
    assert [p.frequency for p in find_frequency_peaks(freqs, mags, min_prominence=1.5)] == [3, 5]


def test_snr():
    signal = sine(5, 100, 200)
    assert calculate_snr(signal, 100, 4, 6) > 100
    assert calculate_snr(signal, 100, 20, 30) < 0.01


def test_snr_of_silence_is_nan():
    assert math.isnan(calculate_snr(np.zeros(64), 100, 1, 10))


def test_periodic_components():
    signal = sine(5, 100, 200) + sine(12, 100, 200, amplitude=0.5)

    components = detect_periodic_components(signal, 100)
    assert [c.frequency for c in components] == pytest.approx([5.0, 12.0])
    assert components[0].period == pytest.approx(0.2)
    assert components[0].magnitude > components[1].magnitude
    assert components[0].snr > 1

    limited = detect_periodic_components(signal, 100, max_frequency=10)
    assert [c.frequency for c in limited] == pytest.approx([5.0])


def test_periodic_components_capped():
    signal = sum(sine(f, 200, 400) for f in range(5, 65, 5))

    components = detect_periodic_components(signal, 200)
    assert len(components) == 10
