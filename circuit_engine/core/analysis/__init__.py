"""
Analysis modules for circuit simulation.

One engine per analysis type, sharing validation, node mapping and the
linear solver through AnalysisEngine, plus the result containers and the
text formatter.
"""

from .ac_analysis import ACAnalysisEngine, sweep_frequencies
from .base import AnalysisEngine
from .dc_analysis import DCAnalysisEngine
from .results import (
    ACResult, AnalysisResults, BodePoint, ComponentData, DCResult, SpectrumBin, SpectrumResult,
    SweepPoint, TransientResult, TransientSample,
)
from .results_formatter import ResultsFormatter
from .spectrum_analysis import WINDOWS, SpectrumAnalyzer, apply_window, fft
from .transient_analysis import TransientAnalysisEngine

__all__ = [
    'AnalysisEngine', 'DCAnalysisEngine', 'ACAnalysisEngine', 'TransientAnalysisEngine',
    'SpectrumAnalyzer', 'ResultsFormatter', 'sweep_frequencies', 'fft', 'apply_window', 'WINDOWS',
    'AnalysisResults', 'DCResult', 'ACResult', 'TransientResult', 'SpectrumResult',
    'ComponentData', 'BodePoint', 'SweepPoint', 'TransientSample', 'SpectrumBin',
]
