"""
FFT and spectrum analysis tests.
"""

import numpy as np
import pytest

from circuit_builders import rc_lowpass
from circuit_engine import CircuitSimulator, analyze_spectrum
from circuit_engine.config import AnalysisType
from circuit_engine.core.analysis import WINDOWS, apply_window, fft
from circuit_engine.core.analysis.results import TransientResult
from circuit_engine.core.analysis.spectrum_analysis import SpectrumAnalyzer
from circuit_engine.exceptions import ValidationError


def sine(frequency, sample_rate, n, amplitude=1.0):
    t = np.arange(n) / sample_rate
    return amplitude * np.sin(2 * np.pi * frequency * t)


@pytest.mark.parametrize("n", [1, 2, 8, 64, 256])
def test_fft_matches_numpy(n):
    rng = np.random.default_rng(n)
    x = rng.normal(size=n)
    assert np.allclose(fft(x), np.fft.fft(x))


def test_fft_accepts_complex_input():
    x = np.exp(2j * np.pi * 3 * np.arange(16) / 16)
    spectrum = fft(x)
    assert abs(spectrum[3]) == pytest.approx(16.0)
    assert np.allclose(np.delete(spectrum, 3), 0.0, atol=1e-9)


def test_fft_rejects_non_power_of_two():
    with pytest.raises(ValidationError):
        fft(np.ones(12))


def test_hann_window_formula():
    n = 16
    expected = 0.5 * (1 - np.cos(2 * np.pi * np.arange(n) / (n - 1)))
    assert np.allclose(apply_window(np.ones(n), "hann"), expected)


@pytest.mark.parametrize("name", sorted(WINDOWS))
def test_windows_are_symmetric(name):
    w = apply_window(np.ones(33), name)
    assert np.allclose(w, w[::-1])
    assert w.max() == pytest.approx(1.0)


def test_rectangular_and_none_are_identity():
    x = np.arange(8, dtype=float)
    assert np.array_equal(apply_window(x, "rectangular"), x)
    assert np.array_equal(apply_window(x, "none"), x)


def test_unknown_window_rejected():
    with pytest.raises(ValidationError):
        apply_window(np.ones(4), "kaiser")


def test_peak_at_signal_frequency():
    result = analyze_spectrum(sine(1000.0, 8000.0, 64), window="hann", sample_rate=8000.0)

    assert result.success
    assert len(result.bins) == 33
    assert result.bins[-1].frequency == pytest.approx(4000.0)
    assert result.resolution == pytest.approx(125.0)
    assert result.peak().frequency == pytest.approx(1000.0)


def test_rectangular_window_bin_magnitude():
    result = analyze_spectrum(sine(1000.0, 8000.0, 64, amplitude=2.0), window="rectangular",
                              sample_rate=8000.0)

    peak = result.peak()
    assert peak.magnitude == pytest.approx(64.0)
    assert peak.magnitude_db == pytest.approx(20 * np.log10(64.0))
    assert peak.phase_degrees == pytest.approx(-90.0, abs=1e-6)


def test_zero_padding_and_truncation():
    samples = sine(500.0, 4000.0, 40)

    padded = analyze_spectrum(samples, window="none", size=64, sample_rate=4000.0)
    truncated = analyze_spectrum(samples, window="none", size=32, sample_rate=4000.0)

    assert padded.size == 64 and len(padded.bins) == 33
    assert truncated.size == 32 and len(truncated.bins) == 17
    assert truncated.peak().frequency == pytest.approx(500.0)


def test_silent_signal_has_minus_infinite_db():
    result = analyze_spectrum(np.zeros(8), window="none")
    assert result.bins[0].magnitude == 0.0
    assert result.bins[0].magnitude_db == float("-inf")


@pytest.mark.parametrize("kwargs", [
    {"samples": np.ones(12)},
    {"samples": np.ones(16), "size": 24},
    {"samples": []},
    {"samples": np.ones(16), "window": "triangle"},
    {"samples": np.ones(16), "sample_rate": 0.0},
    {"samples": ["a", "b"]},
    {"samples": np.ones(16), "size": "sixteen"},
    {"samples": np.ones(16), "sample_rate": None},
])
def test_invalid_input_returns_failure(kwargs):
    result = analyze_spectrum(**kwargs)
    assert not result.success
    assert result.to_dict()["success"] is False


def test_non_numeric_samples_are_a_validation_failure():
    result = analyze_spectrum(["a", "b"])

    assert not result.success
    assert "numeric" in result.error


def test_spectrum_of_transient_waveform():
    simulator = CircuitSimulator(*rc_lowpass())
    transient = simulator.run_transient_analysis(duration=1e-3, time_step=1e-5)

    result = simulator.run_spectrum_analysis(2, window="hann")

    # 101 samples -> 64-point transform at 100 kHz
    assert result.success
    assert result.size == 64
    assert result.sample_rate == pytest.approx(1.0 / transient.time_step)
    assert simulator.last_results[AnalysisType.SPECTRUM] is result


def test_spectrum_needs_transient_run():
    simulator = CircuitSimulator(*rc_lowpass())
    result = simulator.run_spectrum_analysis(2)
    assert not result.success


def test_spectrum_of_unknown_node_fails():
    simulator = CircuitSimulator(*rc_lowpass())
    simulator.run_transient_analysis(duration=1e-4, time_step=1e-5)
    assert not simulator.run_spectrum_analysis(9).success


def test_failed_transient_is_not_analyzed():
    failed = TransientResult.failure("boom")
    assert not SpectrumAnalyzer().analyze_transient(failed, 1).success
