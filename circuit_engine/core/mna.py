"""
Modified Nodal Analysis system construction ("stamping").

Unknowns are ordered as the non-reference node voltages (node n lives at row
n - 1) followed by one branch current per auxiliary unknown requested by the
component models. Stamps are collected as COO triplets and compressed by
scipy, which sums duplicate entries.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Iterable, List, Optional

import numpy as np
from scipy import sparse

from ..components import ComponentModel, StampMode, TransientStep
from ..config import GROUND_NODE, SimulationSettings
from .netlist import NodeMap

logger = logging.getLogger(__name__)


@dataclass
class MNASolution:
    """Solved unknowns keyed by node id and by branch owner"""
    node_voltages: Dict[int, Any]
    branch_currents: Dict[Hashable, Any] = field(default_factory=dict)
    regularized_pivots: List[int] = field(default_factory=list)

    def voltage_across(self, nodes) -> Any:
        if len(nodes) < 2:
            return 0.0
        return self.node_voltages[nodes[0]] - self.node_voltages[nodes[1]]


class MNASystem:
    """Matrix/vector pair under construction for one analysis point."""

    def __init__(self, num_nodes: int, branch_owners: Iterable[Hashable] = (), dtype=float):
        self.num_nodes = num_nodes
        self.num_node_unknowns = max(num_nodes - 1, 0)
        self.branch_map = {
            owner: self.num_node_unknowns + i for i, owner in enumerate(branch_owners)
        }
        self.size = self.num_node_unknowns + len(self.branch_map)
        self.dtype = dtype

        self._rows: List[int] = []
        self._cols: List[int] = []
        self._values: List[Any] = []
        self.rhs = np.zeros(self.size, dtype=dtype)

    def index(self, node: int) -> Optional[int]:
        """Matrix row of a node, None for the reference node"""
        if node == GROUND_NODE:
            return None
        return node - 1

    def add(self, row: Optional[int], col: Optional[int], value):
        if row is None or col is None:
            return
        self._rows.append(row)
        self._cols.append(col)
        self._values.append(value)

    def add_rhs(self, row: Optional[int], value):
        if row is None:
            return
        self.rhs[row] += value

    def stamp_gmin(self, gmin: float):
        for row in range(self.num_node_unknowns):
            self.add(row, row, gmin)

    def stamp_admittance(self, node1: int, node2: int, admittance):
        """Symmetric 4-term stamp of an admittance between two nodes"""
        i, j = self.index(node1), self.index(node2)
        self.add(i, i, admittance)
        self.add(j, j, admittance)
        self.add(i, j, -admittance)
        self.add(j, i, -admittance)

    def stamp_current(self, node1: int, node2: int, current):
        """Constant current flowing from node1 to node2 through the element"""
        self.add_rhs(self.index(node1), -current)
        self.add_rhs(self.index(node2), current)

    def stamp_branch(self, node1: int, node2: int, owner: Hashable, voltage, resistance=0.0):
        """Voltage constraint V(node1) - V(node2) - resistance * I = voltage carried by the owner's branch unknown I"""
        k = self.branch_map[owner]
        i, j = self.index(node1), self.index(node2)
        self.add(i, k, 1.0)
        self.add(k, i, 1.0)
        self.add(j, k, -1.0)
        self.add(k, j, -1.0)
        if resistance:
            self.add(k, k, -resistance)
        self.rhs[k] = voltage

    def matrix(self) -> sparse.csr_matrix:
        """Compressed matrix; duplicate stamps are summed"""
        return sparse.coo_matrix(
            (np.array(self._values, dtype=self.dtype), (self._rows, self._cols)),
            shape=(self.size, self.size),
        ).tocsr()

    def to_dense(self) -> np.ndarray:
        return self.matrix().toarray()

    def unpack(self, x, regularized_pivots=()) -> MNASolution:
        """Split a solution vector into node voltages and branch currents"""
        node_voltages = {GROUND_NODE: self.dtype(0)}
        for node in range(1, self.num_nodes):
            node_voltages[node] = self.dtype(x[node - 1])
        branch_currents = {owner: self.dtype(x[k]) for owner, k in self.branch_map.items()}
        return MNASolution(node_voltages, branch_currents, list(regularized_pivots))


class SystemBuilder:
    """Turns component models and the node map into an MNASystem for one stamping mode."""

    def __init__(self, models: List[ComponentModel], node_map: NodeMap, settings: SimulationSettings):
        self.models = models
        self.node_map = node_map
        self.settings = settings

    def build(self, mode: StampMode, omega: float = None, step: TransientStep = None) -> MNASystem:
        owners = [model.id for model in self.models if model.branch_count(mode)]

        dtype = complex if mode is StampMode.AC else float
        system = MNASystem(self.node_map.num_nodes, owners, dtype=dtype)
        system.stamp_gmin(self.settings.gmin)

        for model in self.models:
            if mode is StampMode.DC:
                model.stamp_dc(system)
            elif mode is StampMode.AC:
                model.stamp_ac(system, omega)
            elif mode is StampMode.TRANSIENT:
                model.stamp_transient(system, step)
            else:
                model.stamp_initial(system, step)

        if self.settings.enable_debug:
            logger.debug(f"{mode.value} system ({system.size} unknowns):\n{system.to_dense()}\nrhs: {system.rhs}")

        return system
