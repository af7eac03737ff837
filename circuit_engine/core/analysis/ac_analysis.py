"""
AC Analysis Engine - small-signal frequency sweep.
"""

import logging
import math
from typing import List

import numpy as np

from ...components import StampMode
from ...config import GROUND_NODE, AnalysisType
from ...exceptions import ValidationError
from ..mna import SystemBuilder
from .base import AnalysisEngine
from .results import ACResult, BodePoint, SweepPoint

logger = logging.getLogger(__name__)


def sweep_frequencies(start_freq: float, end_freq: float, points_per_decade: int) -> List[float]:
    """
    Logarithmically spaced frequencies from start_freq to end_freq inclusive.

    n = ceil(log10(end/start) * points_per_decade) intervals give n + 1
    points; a degenerate range collapses to the single start frequency.
    """
    if start_freq <= 0:
        raise ValidationError(f"Start frequency must be positive, got {start_freq}")
    if end_freq < start_freq:
        raise ValidationError(f"End frequency {end_freq} is below start frequency {start_freq}")
    if points_per_decade < 1:
        raise ValidationError(f"Points per decade must be at least 1, got {points_per_decade}")

    decades = math.log10(end_freq / start_freq)
    intervals = math.ceil(decades * points_per_decade - 1e-9)
    if intervals <= 0:
        return [float(start_freq)]
    return [start_freq * 10 ** (i * decades / intervals) for i in range(intervals + 1)]


def bode_point(frequency: float, v_in: complex, v_out: complex) -> BodePoint:
    """Gain and phase of V(out)/V(in)"""
    with np.errstate(divide="ignore", invalid="ignore"):
        gain = np.complex128(v_out) / np.complex128(v_in)
        magnitude_db = float(20 * np.log10(np.abs(gain)))
    phase_degrees = math.degrees(math.atan2(gain.imag, gain.real))
    return BodePoint(frequency=frequency, magnitude_db=magnitude_db, phase_degrees=phase_degrees)


class ACAnalysisEngine(AnalysisEngine):
    """
    AC small-signal analysis.

    Every frequency point rebuilds and solves the complex system with the
    sources driven at their AC magnitudes. Bode data is produced when both an
    input and an output node are given; the raw sweep is always kept.
    """

    analysis_type = AnalysisType.AC
    result_class = ACResult

    def _run(self, start_freq: float = 1.0, end_freq: float = 1e6, points_per_decade: int = 10,
             input_node: int = None, output_node: int = None,
             progress_callback=None, cancel_check=None) -> ACResult:
        frequencies = sweep_frequencies(start_freq, end_freq, points_per_decade)
        node_map, models, warnings = self._prepare()
        self._check_nodes(node_map.num_nodes, input_node, output_node)

        builder = SystemBuilder(models, node_map, self.settings)
        result = ACResult(
            success=True,
            warnings=warnings,
            input_node=input_node,
            output_node=output_node,
            num_nodes=node_map.num_nodes,
        )

        logger.debug(f"AC sweep: {len(frequencies)} points from {frequencies[0]:g} Hz to {frequencies[-1]:g} Hz")
        undriven = 0
        for i, freq in enumerate(frequencies):
            self._check_cancel(cancel_check)

            omega = 2 * math.pi * freq
            solution, solve_time = self._solve(builder.build(StampMode.AC, omega=omega))
            result.solve_time += solve_time
            result.regularized_pivots += len(solution.regularized_pivots)

            node_voltages = {node: self._clean(v) for node, v in solution.node_voltages.items()}
            result.sweep.append(SweepPoint(frequency=freq, omega=omega, node_voltages=node_voltages))
            if input_node is not None and output_node is not None:
                if node_voltages[input_node] == 0:
                    undriven += 1
                result.points.append(bode_point(freq, node_voltages[input_node], node_voltages[output_node]))

            self._report_progress(progress_callback, i + 1, len(frequencies))

        if undriven:
            msg = (f"Input node {input_node} has zero voltage at {undriven} frequency point(s); "
                   "the gain there is undefined (inf/nan)")
            logger.warning(msg)
            result.warnings.append(msg)

        result.message = f"AC analysis completed: {len(frequencies)} frequency points."
        if result.regularized_pivots:
            result.message += f" {result.regularized_pivots} near-singular pivot(s) were regularized; results may be inaccurate."
        return result

    @staticmethod
    def _check_nodes(num_nodes: int, input_node, output_node):
        for name, node in (("Input", input_node), ("Output", output_node)):
            if node is not None and not 0 <= node < num_nodes:
                raise ValidationError(f"{name} node {node} does not exist (circuit has {num_nodes} nodes)")
        if input_node == GROUND_NODE:
            raise ValidationError("Input node cannot be the reference node")
