from typing import Tuple

from ..config import INITIAL_STEP_FRACTION, IntegrationMethod
from .base import ComponentModel, History, TransientStep


class CapacitorModel(ComponentModel):
    """
    Linear capacitor.

    DC: open circuit. AC: admittance jwC. Transient: companion conductance
    Geq in parallel with a history source, element current
    i = Geq * v - Ieq with

        trapezoidal     Geq = 2C/dt   Ieq = Geq * v_prev + i_prev
        backward Euler  Geq = C/dt    Ieq = Geq * v_prev

    At the start of a run the capacitor is a backward Euler companion of a
    vanishing step h = INITIAL_STEP_FRACTION * dt: a conductance C/h holding
    it at its history voltage. Parallel capacitors then share the initial
    current in proportion to C, as they do physically.
    """

    kind = "capacitor"
    dynamic = True

    @property
    def capacitance(self) -> float:
        return self.value

    def stamp_dc(self, system):
        pass

    def stamp_ac(self, system, omega):
        system.stamp_admittance(self.node1, self.node2, 1j * omega * self.capacitance)

    def companion(self, step: TransientStep) -> Tuple[float, float]:
        """Return (Geq, Ieq) for the given step"""
        history = step.history[self.id]
        if step.method is IntegrationMethod.TRAPEZOIDAL:
            geq = 2.0 * self.capacitance / step.dt
            ieq = geq * history.voltage + history.current
        else:
            geq = self.capacitance / step.dt
            ieq = geq * history.voltage
        return geq, ieq

    def initial_companion(self, step: TransientStep) -> Tuple[float, float]:
        geq = self.capacitance / (INITIAL_STEP_FRACTION * step.dt)
        return geq, geq * step.history[self.id].voltage

    def stamp_transient(self, system, step):
        geq, ieq = self.companion(step)
        system.stamp_admittance(self.node1, self.node2, geq)
        system.stamp_current(self.node1, self.node2, -ieq)

    def stamp_initial(self, system, step):
        geq, ieq = self.initial_companion(step)
        system.stamp_admittance(self.node1, self.node2, geq)
        system.stamp_current(self.node1, self.node2, -ieq)

    def current(self, voltage, solution):
        # Open circuit at DC
        return 0.0

    def initial_jump(self, solution, step) -> float:
        """How far the zero-time solve moved the capacitor off its history voltage"""
        return solution.voltage_across(self.nodes) - step.history[self.id].voltage

    def initial_history(self, solution, step) -> History:
        geq, ieq = self.initial_companion(step)
        voltage = solution.voltage_across(self.nodes)
        return History(voltage=step.history[self.id].voltage, current=geq * voltage - ieq)

    def next_history(self, voltage, step) -> History:
        geq, ieq = self.companion(step)
        return History(voltage=voltage, current=geq * voltage - ieq)
