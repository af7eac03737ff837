from .base import ComponentModel


class CurrentSourceModel(ComponentModel):
    """Ideal current source driving its value from node1 to node2 through itself"""

    kind = "current_source"

    def stamp_dc(self, system):
        system.stamp_current(self.node1, self.node2, self.value)

    def stamp_ac(self, system, omega):
        system.stamp_current(self.node1, self.node2, self.component.ac_magnitude)

    def stamp_transient(self, system, step):
        system.stamp_current(self.node1, self.node2, self.value)

    def current(self, voltage, solution):
        return self.value
