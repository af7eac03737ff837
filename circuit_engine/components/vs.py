from .base import ComponentModel


class VoltageSourceModel(ComponentModel):
    """
    Ideal voltage source, node1 positive.

    Adds one branch unknown (the current flowing node1 -> node2 through the
    source) coupled to both node rows, with V(node1) - V(node2) = value.
    Transient runs evaluate the DC value at every step.
    """

    kind = "voltage_source"

    def branch_count(self, mode) -> int:
        return 1

    def stamp_dc(self, system):
        system.stamp_branch(self.node1, self.node2, self.id, self.value)

    def stamp_ac(self, system, omega):
        system.stamp_branch(self.node1, self.node2, self.id, self.component.ac_magnitude)

    def stamp_transient(self, system, step):
        system.stamp_branch(self.node1, self.node2, self.id, self.value)

    def current(self, voltage, solution):
        return solution.branch_currents[self.id]
