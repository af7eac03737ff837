from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Hashable, Tuple

from ..config import GROUND_NODE, IntegrationMethod, SimulationSettings


class StampMode(Enum):
    """Ways a component can be asked to stamp itself"""
    DC = "dc"
    AC = "ac"
    TRANSIENT = "transient"
    TRANSIENT_INITIAL = "transient_initial"  # Zero-time state of a transient run


@dataclass
class History:
    """Previous-step terminal voltage and current of an energy-storage element"""
    voltage: float = 0.0
    current: float = 0.0


@dataclass
class TransientStep:
    """Everything a companion model needs for one timestep"""
    dt: float
    method: IntegrationMethod
    history: Dict[Hashable, History] = field(default_factory=dict)


class ComponentModel(ABC):
    """
    Per-kind physics of a component.

    A model is built for one analysis call from the input component and the
    nodes its terminals resolved to. Each kind states how many auxiliary
    branch unknowns it needs in a given stamping mode and how it stamps itself
    into the MNA system for DC, AC and transient analysis.
    """

    kind = None
    dynamic = False  # True for elements that keep transient history

    def __init__(self, component, nodes: Tuple[int, ...], settings: SimulationSettings):
        self.component = component
        self.nodes = nodes
        self.settings = settings

    @property
    def id(self):
        return self.component.id

    @property
    def value(self) -> float:
        return self.component.value

    @property
    def node1(self) -> int:
        return self.nodes[0]

    @property
    def node2(self) -> int:
        return self.nodes[1] if len(self.nodes) > 1 else GROUND_NODE

    def branch_count(self, mode) -> int:
        """Number of auxiliary branch unknowns (0 or 1) this element adds in the given stamping mode"""
        return 0

    @abstractmethod
    def stamp_dc(self, system):
        """Stamp the DC operating-point contribution"""
        pass

    @abstractmethod
    def stamp_ac(self, system, omega: float):
        """Stamp the small-signal admittance at angular frequency omega"""
        pass

    @abstractmethod
    def stamp_transient(self, system, step: TransientStep):
        """Stamp the contribution for one transient timestep"""
        pass

    def stamp_initial(self, system, step: TransientStep):
        """Stamp the zero-time state of a transient run; memoryless elements stamp as in any step"""
        self.stamp_transient(system, step)

    def initial_jump(self, solution, step) -> float:
        """Voltage change the zero-time solve forced on the element; only capacitors can jump"""
        return 0.0

    @abstractmethod
    def current(self, voltage, solution):
        """Element current flowing from node1 to node2"""
        pass

    def post_solve(self, solution) -> Tuple[float, float]:
        """Return (voltage, current) of the element from a solved system"""
        voltage = solution.voltage_across(self.nodes)
        return voltage, self.current(voltage, solution)

    def __repr__(self):
        return f"{type(self).__name__}({self.id!r}, nodes={self.nodes})"


class ConductanceModel(ComponentModel):
    """Base class for elements that behave as a plain conductance in every mode"""

    @abstractmethod
    def resistance(self) -> float:
        pass

    def conductance(self) -> float:
        return 1.0 / self.resistance()

    def stamp_dc(self, system):
        system.stamp_admittance(self.node1, self.node2, self.conductance())

    def stamp_ac(self, system, omega: float):
        system.stamp_admittance(self.node1, self.node2, self.conductance())

    def stamp_transient(self, system, step: TransientStep):
        system.stamp_admittance(self.node1, self.node2, self.conductance())

    def current(self, voltage, solution):
        return voltage / self.resistance()
