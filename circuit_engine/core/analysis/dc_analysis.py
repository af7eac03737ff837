"""
DC Analysis Engine - operating point of the circuit.

Validation, node mapping, DC stamping, solve, then per-component voltage,
current and power extraction.
"""

import logging

from ...components import StampMode
from ...config import AnalysisType
from ..mna import SystemBuilder
from .base import AnalysisEngine
from .results import ComponentData, DCResult

logger = logging.getLogger(__name__)


class DCAnalysisEngine(AnalysisEngine):
    """
    DC operating point.

    Capacitors are open, inductors are exact shorts carrying a branch
    current, voltage sources report their branch current. For every
    two-terminal element V = V(node1) - V(node2), I flows node1 -> node2
    through the element and P = V * I, so a source delivering energy shows a
    negative power.
    """

    analysis_type = AnalysisType.DC
    result_class = DCResult

    def _run(self) -> DCResult:
        node_map, models, warnings = self._prepare()

        system = SystemBuilder(models, node_map, self.settings).build(StampMode.DC)
        logger.debug(f"DC system: {node_map.num_nodes} nodes, {system.size} unknowns")

        solution, solve_time = self._solve(system)

        result = DCResult(
            success=True,
            warnings=warnings,
            regularized_pivots=len(solution.regularized_pivots),
            solve_time=solve_time,
            node_map=node_map.to_dict(self.netlist.components),
            num_nodes=node_map.num_nodes,
        )
        self._extract_dc_results(models, solution, result)

        result.message = "DC analysis completed successfully."
        if solution.regularized_pivots:
            result.message += f" {len(solution.regularized_pivots)} near-singular pivot(s) were regularized; results may be inaccurate."
        return result

    def _extract_dc_results(self, models, solution, result: DCResult):
        """Extract DC analysis results from the solved system"""
        for node_id, voltage in solution.node_voltages.items():
            result.node_voltages[node_id] = self._clean(voltage)

        for model in models:
            voltage, current = model.post_solve(solution)
            voltage = self._clean(voltage)
            current = self._clean(current)
            result.component_data[model.id] = ComponentData(
                type=model.component.type,
                label=model.component.display_name,
                voltage=voltage,
                current=current,
                power=voltage * current,
                nodes=model.nodes,
            )
