from .base import ConductanceModel


class ResistorModel(ConductanceModel):
    """Linear resistor, G = 1/R stamped symmetrically between its nodes"""

    kind = "resistor"

    def resistance(self) -> float:
        return self.value
