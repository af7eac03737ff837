"""
Circuit Engine - Modified Nodal Analysis simulator for schematic editors.

DC operating point, AC frequency sweep, fixed-step transient and FFT
spectrum analysis of linear circuits built from voltage and current sources,
resistors, capacitors, inductors, LEDs and ground.
"""

from .config import AnalysisType, IntegrationMethod, SimulationSettings
from .core import CircuitNetlist, CircuitSimulator, analyze_spectrum, simulate_circuit
from .exceptions import (
    AnalysisCancelled, CircuitError, SingularMatrixError, UnsupportedComponentError, ValidationError,
)

__version__ = "1.0.0"

__all__ = [
    'AnalysisType', 'IntegrationMethod', 'SimulationSettings',
    'CircuitNetlist', 'CircuitSimulator', 'analyze_spectrum', 'simulate_circuit',
    'AnalysisCancelled', 'CircuitError', 'SingularMatrixError', 'UnsupportedComponentError', 'ValidationError',
]
