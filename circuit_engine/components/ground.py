from .base import ComponentModel


class GroundModel(ComponentModel):
    """Reference terminal. Its terminal is pinned to node 0 during node mapping, so it stamps nothing."""

    kind = "ground"

    def stamp_dc(self, system):
        pass

    def stamp_ac(self, system, omega):
        pass

    def stamp_transient(self, system, step):
        pass

    def current(self, voltage, solution):
        return 0.0

    def post_solve(self, solution):
        return 0.0, 0.0
