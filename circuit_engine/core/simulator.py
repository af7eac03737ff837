"""
Circuit simulator facade.

Entry point used by the editor and the command line: parses the raw
component/connection records once and dispatches to the analysis engines.
No exception leaves this layer; failures come back as results with
success=False.
"""

import logging
from typing import Any, Dict, Iterable, Optional

from ..config import AnalysisType, SimulationSettings
from ..exceptions import ValidationError
from .analysis import (
    ACAnalysisEngine, AnalysisResults, DCAnalysisEngine, DCResult, ResultsFormatter, SpectrumAnalyzer,
    SpectrumResult, TransientAnalysisEngine,
)
from .netlist import CircuitNetlist

logger = logging.getLogger(__name__)


class CircuitSimulator:
    """
    Circuit simulator with DC, AC, transient and spectrum analysis.

    Every run builds its own matrices and transient history, so one simulator
    can run any sequence of analyses; the latest result of each type is kept
    in last_results.
    """

    def __init__(self, components: Iterable[Any], connections: Iterable[Any] = None,
                 settings: SimulationSettings = None):
        self.settings = settings or SimulationSettings()
        self.last_results: Dict[AnalysisType, AnalysisResults] = {}

        self.netlist: Optional[CircuitNetlist] = None
        self.netlist_error: Optional[ValidationError] = None
        try:
            self.netlist = CircuitNetlist(components, connections)
        except ValidationError as e:
            logger.warning(f"Invalid circuit description: {e}")
            self.netlist_error = e
        except (TypeError, AttributeError) as e:
            logger.warning(f"Malformed circuit description: {e}")
            self.netlist_error = ValidationError(f"Malformed circuit description: {e}")

    def run_dc_analysis(self) -> DCResult:
        """Run DC operating-point analysis"""
        return self._run(AnalysisType.DC, DCAnalysisEngine)

    def run_ac_analysis(self, start_freq: float = 1.0, end_freq: float = 1e6, points_per_decade: int = 10,
                        input_node: int = None, output_node: int = None,
                        progress_callback=None, cancel_check=None):
        """Run an AC sweep; Bode data needs both input_node and output_node"""
        return self._run(
            AnalysisType.AC, ACAnalysisEngine,
            start_freq=start_freq, end_freq=end_freq, points_per_decade=points_per_decade,
            input_node=input_node, output_node=output_node,
            progress_callback=progress_callback, cancel_check=cancel_check,
        )

    def run_transient_analysis(self, duration: float = 1e-3, time_step: float = 1e-6, method="trapezoidal",
                               progress_callback=None, cancel_check=None):
        """Run transient analysis from zero initial conditions"""
        return self._run(
            AnalysisType.TRANSIENT, TransientAnalysisEngine,
            duration=duration, time_step=time_step, method=method,
            progress_callback=progress_callback, cancel_check=cancel_check,
        )

    def run_spectrum_analysis(self, node: int, window: str = "hann", size: int = None) -> SpectrumResult:
        """Spectrum of a node waveform from the last transient run"""
        transient = self.last_results.get(AnalysisType.TRANSIENT)
        if transient is None:
            result = SpectrumResult.failure("No transient results", "Run a transient analysis before spectrum analysis")
        else:
            try:
                result = SpectrumAnalyzer().analyze_transient(transient, node, window=window, size=size)
            except Exception as e:
                logger.exception("SPECTRUM analysis crashed")
                result = SpectrumResult.failure(e, f"Analysis crashed: {e}")

        self.last_results[AnalysisType.SPECTRUM] = result
        return result

    def _run(self, analysis_type: AnalysisType, engine_class, **kwargs):
        if self.netlist is None:
            result = engine_class.result_class.failure(self.netlist_error, f"Invalid circuit: {self.netlist_error}")
            self.last_results[analysis_type] = result
            return result

        try:
            result = engine_class(self.netlist, self.settings).analyze(**kwargs)
        except Exception as e:
            logger.exception(f"{analysis_type.value.upper()} analysis crashed")
            result = engine_class.result_class.failure(e, f"Analysis crashed: {e}")

        if result.success:
            logger.info(f"{analysis_type.value.upper()} analysis completed: {result.message}")
        else:
            logger.warning(f"{analysis_type.value.upper()} analysis failed: {result.message}")

        self.last_results[analysis_type] = result
        return result

    def get_results_description(self, analysis_type: AnalysisType = AnalysisType.DC) -> str:
        """Get formatted description of analysis results"""
        if analysis_type not in self.last_results:
            return f"No {analysis_type.value} analysis results available."
        return ResultsFormatter(self.last_results[analysis_type]).get_results_description()

    def get_node_voltage(self, node_id: int) -> Optional[float]:
        """Voltage of a node in the last DC result"""
        result = self.last_results.get(AnalysisType.DC)
        if result is None or not result.success:
            return None
        return result.node_voltages.get(node_id)

    def get_component_current(self, component_id) -> Optional[float]:
        """Current through a component in the last DC result"""
        result = self.last_results.get(AnalysisType.DC)
        if result is None or not result.success or component_id not in result.component_data:
            return None
        return result.component_data[component_id].current


def simulate_circuit(components, connections, **options) -> Dict[str, Any]:
    """DC analysis of an editor circuit, returned as a plain dict.

    options are SimulationSettings fields (gmin, pivot_policy, solver, ...).
    """
    try:
        settings = SimulationSettings.from_dict(options)
    except (TypeError, ValueError) as e:
        return DCResult.failure(e, f"Invalid simulation settings: {e}").to_dict()
    return CircuitSimulator(components, connections, settings).run_dc_analysis().to_dict()


def analyze_spectrum(samples, window: str = "hann", size: int = None, sample_rate: float = 1.0) -> SpectrumResult:
    """Windowed FFT spectrum of a real sample sequence"""
    return SpectrumAnalyzer().analyze(samples, window=window, size=size, sample_rate=sample_rate)
