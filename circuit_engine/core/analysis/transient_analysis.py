"""
Transient Analysis Engine - fixed-step time-domain simulation.

Run sequence: zero history -> zero-time solve (repeated once from the
post-jump voltages when a capacitor is forced to jump) -> repeat {build
companion system -> solve -> extract -> update history} until the duration
is covered.
History lives in one TransientStep per run and is never shared.
"""

import logging
import math
from typing import Dict, Hashable

from ...components import History, StampMode, TransientStep
from ...config import INITIAL_JUMP_TOLERANCE, AnalysisType, IntegrationMethod
from ...exceptions import ValidationError
from ..mna import MNASolution, SystemBuilder
from .base import AnalysisEngine
from .results import TransientResult, TransientSample

logger = logging.getLogger(__name__)


def parse_method(method) -> IntegrationMethod:
    if isinstance(method, IntegrationMethod):
        return method
    try:
        return IntegrationMethod(str(method).lower())
    except ValueError:
        choices = ", ".join(m.value for m in IntegrationMethod)
        raise ValidationError(f"Unknown integration method '{method}', expected one of: {choices}") from None


def step_count(duration: float, time_step: float) -> int:
    """Number of integration steps needed to cover the duration"""
    return max(math.ceil(duration / time_step - 1e-9), 0)


class TransientAnalysisEngine(AnalysisEngine):
    """Transient analysis with trapezoidal or backward Euler companion models"""

    analysis_type = AnalysisType.TRANSIENT
    result_class = TransientResult

    def _run(self, duration: float = 1e-3, time_step: float = 1e-6, method="trapezoidal",
             progress_callback=None, cancel_check=None) -> TransientResult:
        method = parse_method(method)
        if not duration > 0:
            raise ValidationError(f"Duration must be positive, got {duration}")
        if not time_step > 0:
            raise ValidationError(f"Time step must be positive, got {time_step}")

        node_map, models, warnings = self._prepare()
        builder = SystemBuilder(models, node_map, self.settings)
        dynamic = [model for model in models if model.dynamic]
        steps = step_count(duration, time_step)

        result = TransientResult(
            success=True,
            warnings=warnings,
            time_step=time_step,
            method=method.value,
            num_nodes=node_map.num_nodes,
        )
        step = TransientStep(dt=time_step, method=method, history={model.id: History() for model in dynamic})

        logger.debug(f"Transient run: {steps} steps of {time_step:g}s, {len(dynamic)} dynamic element(s)")

        # Zero-time state
        solution, solve_time = self._solve(builder.build(StampMode.TRANSIENT_INITIAL, step=step))
        result.solve_time += solve_time
        jumped = self._jumped(dynamic, solution, step)
        if jumped:
            # A capacitor forced to jump (e.g. across a source) has no consistent zero-time state
            names = ", ".join(str(model.id) for model in jumped)
            msg = f"Zero-time state is inconsistent: {names} jump at t=0; starting from the post-jump voltages"
            logger.warning(msg)
            result.warnings.append(msg)
            for model in jumped:
                step.history[model.id] = History(voltage=solution.voltage_across(model.nodes))
            solution, solve_time = self._solve(builder.build(StampMode.TRANSIENT_INITIAL, step=step))
            result.solve_time += solve_time
        result.regularized_pivots += len(solution.regularized_pivots)
        step.history = {model.id: model.initial_history(solution, step) for model in dynamic}
        result.samples.append(self._sample(0.0, models, solution, step.history))

        for k in range(1, steps + 1):
            self._check_cancel(cancel_check)

            solution, solve_time = self._solve(builder.build(StampMode.TRANSIENT, step=step))
            result.solve_time += solve_time
            result.regularized_pivots += len(solution.regularized_pivots)

            # All companions must see the previous history before any of it is replaced
            history = {
                model.id: model.next_history(solution.voltage_across(model.nodes), step)
                for model in dynamic
            }
            step = TransientStep(dt=time_step, method=method, history=history)

            result.samples.append(self._sample(k * time_step, models, solution, history))
            self._report_progress(progress_callback, k, steps)

        result.message = f"Transient analysis completed: {len(result.samples)} samples ({method.value})."
        if result.regularized_pivots:
            result.message += f" {result.regularized_pivots} near-singular pivot(s) were regularized; results may be inaccurate."
        return result

    def _sample(self, time: float, models, solution: MNASolution,
                history: Dict[Hashable, History]) -> TransientSample:
        currents = {}
        for model in models:
            if model.component.is_ground:
                continue
            if model.dynamic:
                currents[model.id] = self._clean(history[model.id].current)
            else:
                _, current = model.post_solve(solution)
                currents[model.id] = self._clean(current)

        node_voltages = {node: self._clean(v) for node, v in solution.node_voltages.items()}
        return TransientSample(time=time, node_voltages=node_voltages, component_currents=currents)

    def _jumped(self, dynamic, solution: MNASolution, step: TransientStep):
        """Dynamic elements the zero-time solve moved off their history voltage"""
        scale = max(abs(v) for v in solution.node_voltages.values())
        if scale == 0:
            return []
        return [
            model for model in dynamic
            if abs(model.initial_jump(solution, step)) > INITIAL_JUMP_TOLERANCE * scale
        ]
