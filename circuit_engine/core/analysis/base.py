import logging
from abc import ABC, abstractmethod
from typing import List, Tuple

from ...components import ComponentModel, create_model
from ...config import AnalysisType, SimulationSettings
from ...exceptions import AnalysisCancelled, CircuitError
from ..mna import MNASolution, MNASystem
from ..netlist import CircuitNetlist, NodeMap, NodeMapper
from ..solver import LinearSolver
from ..validation import CircuitValidator
from .results import AnalysisResults

logger = logging.getLogger(__name__)


class AnalysisEngine(ABC):
    """Abstract base class for analysis engines"""

    analysis_type: AnalysisType = None
    result_class = AnalysisResults

    def __init__(self, netlist: CircuitNetlist, settings: SimulationSettings = None):
        self.netlist = netlist
        self.settings = settings or SimulationSettings()
        self.solver = LinearSolver(self.settings)

    def analyze(self, **kwargs) -> AnalysisResults:
        """Run the analysis; engine errors come back as a failed result"""
        name = self.analysis_type.value.upper()
        logger.info(f"Starting {name} analysis...")
        try:
            result = self._run(**kwargs)
        except CircuitError as e:
            logger.warning(f"{name} analysis failed: {e}")
            return self.result_class.failure(e, f"{name} analysis failed: {e}")

        logger.info(f"{name} analysis finished in {result.solve_time:.4f}s")
        return result

    @abstractmethod
    def _run(self, **kwargs) -> AnalysisResults:
        """Perform the analysis"""
        pass

    def _prepare(self) -> Tuple[NodeMap, List[ComponentModel], List[str]]:
        """Validate the circuit, resolve nodes and create one model per component"""
        validator = CircuitValidator(self.netlist)
        warnings = validator.validate_circuit()

        node_map = NodeMapper(self.netlist).map_nodes()
        warnings.extend(validator.connectivity_warnings(node_map))

        models = [create_model(comp, node_map, self.settings) for comp in self.netlist.components]
        return node_map, models, warnings

    def _solve(self, system: MNASystem) -> Tuple[MNASolution, float]:
        linear = self.solver.solve(system.matrix(), system.rhs)
        return system.unpack(linear.x, linear.regularized_pivots), linear.solve_time

    def _clean(self, value):
        """Report numerical dust below settings.zero_tolerance as exact zero"""
        if abs(value) < self.settings.zero_tolerance:
            return type(value)(0)
        return value

    @staticmethod
    def _check_cancel(cancel_check):
        if cancel_check is not None and cancel_check():
            raise AnalysisCancelled("cancelled")

    @staticmethod
    def _report_progress(progress_callback, done: int, total: int):
        if progress_callback is not None:
            progress_callback(int(done / total * 100) if total else 100)
