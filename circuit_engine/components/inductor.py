from typing import Tuple

from ..config import IntegrationMethod
from .base import ComponentModel, History, StampMode, TransientStep


class InductorModel(ComponentModel):
    """
    Linear inductor.

    DC: a short through a branch unknown, the same treatment a 0 V source
    gets, with the row V(node1) - V(node2) - r * I = 0 where r is
    settings.inductor_dc_resistance. The branch unknown is the inductor
    current. r keeps inductor-only loops (inductors in parallel) solvable
    and shares their current evenly; the price is a voltage drop of
    r * I across every inductor. r = 0 gives an exact short, which is
    singular for such loops.

    AC: admittance -j/(wL). Transient: companion resistance Req with
    history voltage Veq, stamped as Geq = 1/Req and Ieq = Veq * Geq, element
    current i = Geq * v + Ieq with

        trapezoidal     Req = 2L/dt   Veq = Req * i_prev + v_prev
        backward Euler  Req = L/dt    Veq = Req * i_prev

    At the start of a run the inductor carries its history current.
    """

    kind = "inductor"
    dynamic = True

    @property
    def inductance(self) -> float:
        return self.value

    def branch_count(self, mode) -> int:
        return 1 if mode is StampMode.DC else 0

    def stamp_dc(self, system):
        system.stamp_branch(self.node1, self.node2, self.id, 0.0, self.settings.inductor_dc_resistance)

    def stamp_ac(self, system, omega):
        system.stamp_admittance(self.node1, self.node2, -1j / (omega * self.inductance))

    def companion(self, step: TransientStep) -> Tuple[float, float]:
        """Return (Geq, Ieq) for the given step"""
        history = step.history[self.id]
        if step.method is IntegrationMethod.TRAPEZOIDAL:
            req = 2.0 * self.inductance / step.dt
            veq = req * history.current + history.voltage
        else:
            req = self.inductance / step.dt
            veq = req * history.current
        geq = 1.0 / req
        return geq, veq * geq

    def stamp_transient(self, system, step):
        geq, ieq = self.companion(step)
        system.stamp_admittance(self.node1, self.node2, geq)
        system.stamp_current(self.node1, self.node2, ieq)

    def stamp_initial(self, system, step):
        system.stamp_current(self.node1, self.node2, step.history[self.id].current)

    def current(self, voltage, solution):
        return solution.branch_currents[self.id]

    def initial_history(self, solution, step) -> History:
        voltage = solution.voltage_across(self.nodes)
        return History(voltage=voltage, current=step.history[self.id].current)

    def next_history(self, voltage, step) -> History:
        geq, ieq = self.companion(step)
        return History(voltage=voltage, current=geq * voltage + ieq)
