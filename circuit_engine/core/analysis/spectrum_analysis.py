"""
Spectrum analysis of sampled waveforms.

Radix-2 decimation-in-time FFT with an optional window. The analyzer works on
plain sample sequences or on a node waveform of a transient result.
"""

import logging
import time
from typing import Callable, Dict, Sequence

import numpy as np

from ...config import AnalysisType
from ...exceptions import CircuitError, ValidationError
from .results import SpectrumBin, SpectrumResult, TransientResult

logger = logging.getLogger(__name__)


WINDOWS: Dict[str, Callable[[int], np.ndarray]] = {
    "hann": np.hanning,
    "hamming": np.hamming,
    "blackman": np.blackman,
    "rectangular": np.ones,
    "none": np.ones,
}


def is_power_of_two(n: int) -> bool:
    return n > 0 and n & (n - 1) == 0


def fft(signal) -> np.ndarray:
    """Recursive Cooley-Tukey FFT; the length must be a power of two."""
    x = np.asarray(signal, dtype=complex)
    n = x.shape[0]
    if n <= 1:
        return x.copy()
    if not is_power_of_two(n):
        raise ValidationError(f"FFT length must be a power of two, got {n}")

    even = fft(x[0::2])
    odd = fft(x[1::2])
    twiddled = np.exp(-2j * np.pi * np.arange(n // 2) / n) * odd
    return np.concatenate([even + twiddled, even - twiddled])


def apply_window(samples, window: str = "hann") -> np.ndarray:
    """Multiply samples by the named symmetric window"""
    name = str(window or "none").lower()
    if name not in WINDOWS:
        raise ValidationError(f"Unknown window '{window}', expected one of: {', '.join(WINDOWS)}")
    samples = np.asarray(samples, dtype=float)
    return samples * WINDOWS[name](samples.shape[0])


class SpectrumAnalyzer:
    """Windowed FFT magnitude/phase spectrum"""

    analysis_type = AnalysisType.SPECTRUM

    def analyze(self, samples: Sequence[float], window: str = "hann", size: int = None,
                sample_rate: float = 1.0) -> SpectrumResult:
        logger.info("Starting SPECTRUM analysis...")
        try:
            result = self._run(samples, window, size, sample_rate)
        except CircuitError as e:
            logger.warning(f"SPECTRUM analysis failed: {e}")
            return SpectrumResult.failure(e, f"SPECTRUM analysis failed: {e}")
        logger.info(f"SPECTRUM analysis finished in {result.solve_time:.4f}s")
        return result

    def analyze_transient(self, transient: TransientResult, node: int, window: str = "hann",
                          size: int = None) -> SpectrumResult:
        """Spectrum of one node waveform; the sample rate follows from the time step."""
        if not transient.success:
            return SpectrumResult.failure(transient.error, "Transient result has no samples to analyze")
        if not transient.samples or node not in transient.samples[0].node_voltages:
            return SpectrumResult.failure(f"Node {node} is not part of the transient result")

        waveform = transient.waveform(node)
        if size is None:
            # Largest power of two that fits in the record
            size = 1 << (len(waveform).bit_length() - 1)
        return self.analyze(waveform, window=window, size=size, sample_rate=1.0 / transient.time_step)

    def _run(self, samples, window, size, sample_rate) -> SpectrumResult:
        start_time = time.perf_counter()
        try:
            samples = np.asarray(samples, dtype=float)
            sample_rate = float(sample_rate)
            size = None if size is None else int(size)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Spectrum input must be numeric: {e}") from None
        if samples.ndim != 1 or samples.shape[0] == 0:
            raise ValidationError("Spectrum analysis needs a non-empty one-dimensional sample sequence")
        if not sample_rate > 0:
            raise ValidationError(f"Sample rate must be positive, got {sample_rate}")

        if size is None:
            size = samples.shape[0]
        if not is_power_of_two(size):
            raise ValidationError(f"Transform size must be a power of two, got {size}")

        # Window the retained samples, then zero-pad up to the transform size
        windowed = apply_window(samples[:size], window)
        padded = np.zeros(size)
        padded[:windowed.shape[0]] = windowed
        logger.debug(f"FFT of {windowed.shape[0]} samples padded to {size}, window '{window}'")

        spectrum = fft(padded)[:size // 2 + 1]
        magnitudes = np.abs(spectrum)
        with np.errstate(divide="ignore"):
            magnitudes_db = 20 * np.log10(magnitudes)
        phases = np.degrees(np.angle(spectrum))

        bins = [
            SpectrumBin(
                frequency=k * sample_rate / size,
                magnitude=float(magnitudes[k]),
                magnitude_db=float(magnitudes_db[k]),
                phase_degrees=float(phases[k]),
            )
            for k in range(spectrum.shape[0])
        ]
        return SpectrumResult(
            success=True,
            message=f"Spectrum computed: {len(bins)} bins at {sample_rate / size:g} Hz resolution.",
            bins=bins,
            sample_rate=float(sample_rate),
            size=size,
            window=str(window or "none").lower(),
            solve_time=time.perf_counter() - start_time,
        )
